"""Shared core dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

SHELL_NAME = "mysh"
EXIT_VERB = "byebye"
REPLAY_VERB = "replay"


def diagnostic(text: str) -> str:
    """Prefix a message the way every shell diagnostic is printed."""

    return f"{SHELL_NAME}: {text}"


class ShellOutput(Protocol):
    """Where core components send user-facing text."""

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass(frozen=True)
class Command:
    """One parsed input line: verb plus argument tokens."""

    verb: str
    args: list[str] = field(default_factory=list)
    raw: str = ""


@dataclass(frozen=True)
class ParsedNumber:
    """Result of parsing a count, index or pid token."""

    value: int | None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of dispatching one command."""

    exit_status: int | None = None

    @property
    def exit_requested(self) -> bool:
        return self.exit_status is not None
