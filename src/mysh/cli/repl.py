"""Read-dispatch loop for an interactive session."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from mysh.cli.render import Renderer
from mysh.config import Settings
from mysh.core.types import diagnostic
from mysh.shell import ShellSession


def build_prompt(settings: Settings) -> str:
    if settings.show_cwd:
        return f"[{Path.cwd()}] {settings.prompt}"
    return settings.prompt


def run_shell(session: ShellSession, renderer: Renderer, settings: Settings) -> int:
    """Run until ``byebye`` or end of input and return the exit status."""

    while True:
        try:
            line = renderer.get_user_input(build_prompt(settings))
        except KeyboardInterrupt:
            renderer.info("")
            continue
        except EOFError:
            renderer.info("")
            return session.shutdown()

        try:
            result = session.submit(line)
        except KeyboardInterrupt:
            logger.debug("repl.interrupted line={!r}", line)
            renderer.info("")
            continue
        except Exception as exc:
            logger.opt(exception=exc).debug("repl.unexpected_error line={!r}", line)
            renderer.error(diagnostic(f"{exc!s}"))
            continue

        if result is not None and result.exit_status is not None:
            return result.exit_status
