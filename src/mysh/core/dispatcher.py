"""Verb dispatch for parsed command lines."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from mysh import fs
from mysh.core.commands import parse_line, parse_number
from mysh.core.history import FlushResult, HistoryFile, HistoryStore
from mysh.core.processes import ProcessManager
from mysh.core.types import EXIT_VERB, REPLAY_VERB, Command, DispatchResult, ShellOutput, diagnostic

_Handler = Callable[[Command], DispatchResult]

_CONTINUE = DispatchResult()
CLEAR_HISTORY_FLAG = "-c"


class Dispatcher:
    """Map verbs to handlers, check their arguments, and run them.

    Argument checks happen before any side effect, so a usage error never
    leaves partial work behind. Handlers report through the output surface
    and only ``byebye`` ends the session.
    """

    def __init__(
        self,
        history: HistoryStore,
        history_file: HistoryFile,
        processes: ProcessManager,
        output: ShellOutput,
    ) -> None:
        self._history = history
        self._history_file = history_file
        self._processes = processes
        self._output = output

        self._handlers: dict[str, _Handler] = {
            "start": self._cmd_start,
            "background": self._cmd_background,
            EXIT_VERB: self._cmd_exit,
            "history": self._cmd_history,
            "repeat": self._cmd_repeat,
            REPLAY_VERB: self._cmd_replay,
            "terminate": self._cmd_terminate,
            "terminateall": self._cmd_terminateall,
            "movetodir": self._cmd_movetodir,
            "dwelt": self._cmd_dwelt,
            "maik": self._cmd_maik,
            "coppy": self._cmd_coppy,
            "coppyabode": self._cmd_coppyabode,
        }

    @property
    def verbs(self) -> list[str]:
        return sorted(self._handlers)

    def dispatch(self, command: Command) -> DispatchResult:
        handler = self._handlers.get(command.verb)
        if handler is None:
            self._output.error(diagnostic(f"{command.verb}: command not found"))
            return _CONTINUE
        logger.debug("dispatch verb={} args={}", command.verb, command.args)
        return handler(command)

    def flush_history(self) -> FlushResult:
        result = self._history_file.flush(self._history.entries)
        if result.ok:
            self._output.info(diagnostic(f"History saved to {result.path}"))
        else:
            self._output.error(diagnostic(f"Couldn't save history file: {result.error}"))
        return result

    def _usage(self, text: str) -> DispatchResult:
        self._output.error(diagnostic(text))
        return _CONTINUE

    def _report(self, status: fs.FsStatus) -> DispatchResult:
        for source, dest in status.copied:
            self._output.info(diagnostic(f"{source} => {dest}"))
        for message in status.errors:
            self._output.error(diagnostic(message))
        return _CONTINUE

    # Processes

    def _cmd_start(self, command: Command) -> DispatchResult:
        return self._start(command, background=False)

    def _cmd_background(self, command: Command) -> DispatchResult:
        return self._start(command, background=True)

    def _start(self, command: Command, *, background: bool) -> DispatchResult:
        if not command.args:
            return self._usage("Missing argument [program]")
        self._processes.spawn(list(command.args), background=background)
        return _CONTINUE

    def _cmd_repeat(self, command: Command) -> DispatchResult:
        if len(command.args) < 2:
            return self._usage("Usage: repeat [repetitions] [command]")
        count = parse_number(command.args[0], "Argument [repetitions] must be a number")
        if not count.ok or count.value is None:
            return self._usage(count.reason)
        self._processes.repeat(count.value, list(command.args[1:]))
        return _CONTINUE

    def _cmd_terminate(self, command: Command) -> DispatchResult:
        if not command.args:
            return self._usage("Missing argument [pid]")
        pid = parse_number(command.args[0])
        if not pid.ok or pid.value is None:
            return self._usage(pid.reason)
        self._processes.terminate(pid.value)
        return _CONTINUE

    def _cmd_terminateall(self, command: Command) -> DispatchResult:
        self._processes.terminate_all()
        return _CONTINUE

    # History

    def _cmd_exit(self, command: Command) -> DispatchResult:
        return DispatchResult(exit_status=self.flush_history().exit_status)

    def _cmd_history(self, command: Command) -> DispatchResult:
        if not command.args:
            for index, line in self._history.newest_first():
                self._output.info(f"{index}: {line}")
            return _CONTINUE
        if command.args[0] != CLEAR_HISTORY_FLAG:
            return self._usage("Usage: history [-c]")
        self._history.clear()
        self._output.info(diagnostic("History cleared"))
        return _CONTINUE

    def _cmd_replay(self, command: Command) -> DispatchResult:
        if not command.args:
            return self._usage("Missing argument [index]")
        index = parse_number(command.args[0])
        if not index.ok or index.value is None:
            return self._usage(index.reason)

        lookup = self._history.lookup_replay(index.value)
        if not lookup.ok or lookup.line is None:
            return self._usage(lookup.reason)
        target = parse_line(lookup.line)
        if target is None:
            return self._usage("Cannot replay an empty command")
        if target.verb == REPLAY_VERB:
            return self._usage("Cannot replay a replay command")

        # The original line object is dispatched again; history is not appended twice.
        return self.dispatch(target)

    # Files and directories

    def _cmd_movetodir(self, command: Command) -> DispatchResult:
        if not command.args:
            return self._usage("Missing argument [directory]")
        return self._report(fs.change_working_directory(command.args[0]))

    def _cmd_dwelt(self, command: Command) -> DispatchResult:
        if not command.args:
            return self._usage("Missing argument [file | directory]")
        self._output.info(fs.describe_path(command.args[0]))
        return _CONTINUE

    def _cmd_maik(self, command: Command) -> DispatchResult:
        if not command.args:
            return self._usage("Missing argument [filename]")
        return self._report(fs.create_file_with_content(command.args[0]))

    def _cmd_coppy(self, command: Command) -> DispatchResult:
        if len(command.args) < 2:
            return self._usage("Usage: coppy [source] [destination]")
        status = fs.copy_file(command.args[0], command.args[1], overwrite=False)
        # A single-file copy reports only failures.
        return self._report(fs.FsStatus(errors=status.errors))

    def _cmd_coppyabode(self, command: Command) -> DispatchResult:
        if len(command.args) < 2:
            return self._usage("Usage: coppyabode [source-dir] [target-dir]")
        return self._report(fs.copy_directory(command.args[0], command.args[1]))
