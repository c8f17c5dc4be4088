"""Shell session wiring."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from mysh.config import Settings
from mysh.core.commands import parse_line
from mysh.core.dispatcher import Dispatcher
from mysh.core.history import HistoryFile, HistoryStore
from mysh.core.processes import ProcessBackend, ProcessManager, ProcessRegistry
from mysh.core.types import DispatchResult, ShellOutput


@dataclass
class ShellSession:
    """State owned by one running shell, plus the entry point for input lines."""

    history: HistoryStore
    history_file: HistoryFile
    registry: ProcessRegistry
    processes: ProcessManager
    dispatcher: Dispatcher

    def submit(self, line: str) -> DispatchResult | None:
        """Record and run one input line. Blank lines return None."""

        command = parse_line(line)
        if command is None:
            return None
        self.history.append(line)
        return self.dispatcher.dispatch(command)

    def shutdown(self) -> int:
        """Flush history and return the status the process should exit with."""

        return self.dispatcher.flush_history().exit_status


def build_session(
    settings: Settings,
    output: ShellOutput,
    *,
    backend: ProcessBackend | None = None,
) -> ShellSession:
    """Create a session and seed its history from the log."""

    history_file = HistoryFile(settings.history_file)
    history = HistoryStore(history_file.load())
    registry = ProcessRegistry()
    processes = ProcessManager(
        registry,
        output,
        backend=backend,
        settle_seconds=settings.repeat_settle_seconds,
    )
    dispatcher = Dispatcher(history, history_file, processes, output)
    logger.debug("session.start history_file={} entries={}", history_file.path, len(history))
    return ShellSession(
        history=history,
        history_file=history_file,
        registry=registry,
        processes=processes,
        dispatcher=dispatcher,
    )
