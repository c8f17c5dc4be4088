"""Session history and its on-disk log."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from mysh.core.types import EXIT_VERB

# Entries read from a terminal may carry undecodable bytes as surrogates.
_ENCODING_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class ReplayLookup:
    """Resolved replay target, or the reason it could not be resolved."""

    line: str | None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.line is not None


@dataclass(frozen=True)
class FlushResult:
    """Outcome of writing the history log."""

    path: Path
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_status(self) -> int:
        return 0 if self.ok else 1


class HistoryStore:
    """Ordered, append-only record of accepted input lines. Index 0 is the oldest."""

    def __init__(self, entries: list[str] | None = None) -> None:
        self._entries: list[str] = list(entries or [])

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def append(self, line: str) -> None:
        self._entries.append(line)

    def clear(self) -> None:
        self._entries.clear()

    def newest_first(self) -> list[tuple[int, str]]:
        """Entries paired with their display index, 0 being the most recent."""

        return list(enumerate(reversed(self._entries)))

    def lookup_replay(self, index: int) -> ReplayLookup:
        """Find the line a ``replay <index>`` invocation refers to.

        The replay line itself has already been appended, so index 0 names
        the entry just before it, at position ``n - index - 2``.
        """

        position = len(self._entries) - index - 2
        if index < 0 or position < 0 or position >= len(self._entries):
            return ReplayLookup(line=None, reason="Index out of range")
        return ReplayLookup(line=self._entries[position])


class HistoryFile:
    """Plain-text history log, one command per line."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the log, resolved against the current working directory."""

        if self._path.is_absolute():
            return self._path
        return Path.cwd() / self._path

    def load(self) -> list[str]:
        """Read the log; bytes that are not UTF-8 are kept as surrogates."""

        path = self.path
        try:
            with path.open("r", encoding="utf-8", errors=_ENCODING_ERRORS) as handle:
                lines = [raw_line.rstrip("\n") for raw_line in handle]
        except OSError as exc:
            logger.debug("history.load skipped path={} reason={}", path, exc)
            return []
        logger.debug("history.load path={} entries={}", path, len(lines))
        return lines

    def flush(self, entries: tuple[str, ...] | list[str]) -> FlushResult:
        """Overwrite the log with every entry except the exit command."""

        path = self.path
        kept = [line for line in entries if line.strip() != EXIT_VERB]
        try:
            # Encode before opening so a bad entry leaves the old log untouched.
            data = "".join(line + "\n" for line in kept).encode("utf-8", _ENCODING_ERRORS)
        except UnicodeError as exc:
            logger.debug("history.flush failed path={} error={}", path, exc)
            return FlushResult(path=path, error=str(exc))
        try:
            with path.open("wb") as handle:
                handle.write(data)
        except OSError as exc:
            logger.debug("history.flush failed path={} error={}", path, exc)
            return FlushResult(path=path, error=exc.strerror or str(exc))
        logger.debug("history.flush path={} entries={}", path, len(kept))
        return FlushResult(path=path)
