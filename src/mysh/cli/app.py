"""CLI main module for mysh."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from mysh.cli.render import create_cli_renderer
from mysh.cli.repl import run_shell
from mysh.config import load_settings
from mysh.errors import ConfigurationError
from mysh.logging_utils import configure_logging
from mysh.shell import build_session

app = typer.Typer(
    name="mysh",
    help="A small interactive shell with process tracking and command replay.",
    add_completion=False,
)


@app.command()
def shell(
    history_file: Path | None = typer.Option(  # noqa: B008
        None, "--history-file", help="History log, relative to the working directory"
    ),
    show_cwd: bool | None = typer.Option(None, "--show-cwd/--no-show-cwd", help="Show the working directory"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level for internal events"),
) -> None:
    """Start an interactive mysh session."""

    try:
        settings = load_settings(history_file=history_file, show_cwd=show_cwd, log_level=log_level)
    except (ConfigurationError, ValidationError) as exc:
        typer.echo(f"mysh: {exc}", err=True)
        raise typer.Exit(2) from exc

    renderer = create_cli_renderer()
    configure_logging(settings.log_level, profile="interactive" if renderer.interactive else "default")
    session = build_session(settings, renderer)
    raise typer.Exit(run_shell(session, renderer, settings))


if __name__ == "__main__":
    app()
