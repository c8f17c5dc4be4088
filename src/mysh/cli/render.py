"""CLI renderer for mysh."""

from __future__ import annotations

import sys
import threading

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console


class Renderer:
    """Terminal output using Rich, input using prompt_toolkit on a TTY."""

    def __init__(
        self,
        console: Console | None = None,
        error_console: Console | None = None,
        *,
        interactive: bool | None = None,
    ) -> None:
        self.console: Console = console or Console(highlight=False)
        self.error_console: Console = error_console or Console(stderr=True, highlight=False)
        self._interactive = sys.stdin.isatty() if interactive is None else interactive
        self._prompt_session: PromptSession[str] | None = None
        self._print_lock = threading.Lock()

    @property
    def interactive(self) -> bool:
        return self._interactive

    def info(self, message: str) -> None:
        """Render a line on standard output."""
        self._print(self.console, message)

    def error(self, message: str) -> None:
        """Render a diagnostic on the error stream."""
        self._print(self.error_console, message, style="red")

    def get_user_input(self, prompt: str) -> str:
        """Prompt for one line. Raises EOFError at end of input."""
        if not self._interactive:
            return input(prompt)
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        with patch_stdout(raw=True):
            return self._prompt_session.prompt(prompt)

    def _print(self, console: Console, message: str, style: str | None = None) -> None:
        with self._print_lock:
            console.print(message, style=style, markup=False, highlight=False, soft_wrap=True)


def create_cli_renderer() -> Renderer:
    """Create and return a Renderer instance."""
    return Renderer()
