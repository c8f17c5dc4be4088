from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from mysh.core.dispatcher import Dispatcher
from mysh.core.history import HistoryFile, HistoryStore
from mysh.core.processes import ProcessManager, ProcessRegistry
from mysh.errors import SignalError, SpawnError


@dataclass
class RecordingOutput:
    infos: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@dataclass
class FakeHandle:
    pid: int


class FakeBackend:
    def __init__(self, first_pid: int = 1000) -> None:
        self.spawned: list[list[str]] = []
        self.waited: list[int] = []
        self.signalled: list[int] = []
        self.dead: set[int] = set()
        self.running: set[int] = set()
        self.polled: list[int] = []
        self.spawn_error: str | None = None
        self._next_pid = first_pid

    def spawn(self, argv: list[str]) -> FakeHandle:
        if self.spawn_error is not None:
            raise SpawnError(self.spawn_error)
        self.spawned.append(list(argv))
        pid = self._next_pid
        self._next_pid += 1
        return FakeHandle(pid)

    def wait(self, handle: FakeHandle) -> int:
        self.waited.append(handle.pid)
        return 0

    def poll(self, handle: FakeHandle) -> int | None:
        self.polled.append(handle.pid)
        return None if handle.pid in self.running else 0

    def signal_terminate(self, pid: int) -> None:
        self.signalled.append(pid)
        if pid in self.dead:
            raise SignalError("No such process")


@dataclass
class CoreParts:
    output: RecordingOutput
    backend: FakeBackend
    history: HistoryStore
    history_file: HistoryFile
    registry: ProcessRegistry
    processes: ProcessManager
    dispatcher: Dispatcher


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def program(workspace: Path) -> str:
    path = workspace / "prog"
    path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    path.chmod(0o755)
    return "./prog"


@pytest.fixture
def core(workspace: Path) -> CoreParts:
    output = RecordingOutput()
    backend = FakeBackend()
    history = HistoryStore()
    history_file = HistoryFile("mysh.history")
    registry = ProcessRegistry()
    processes = ProcessManager(registry, output, backend=backend, settle_seconds=0)
    dispatcher = Dispatcher(history, history_file, processes, output)
    return CoreParts(output, backend, history, history_file, registry, processes, dispatcher)


@pytest.fixture
def recording_output() -> RecordingOutput:
    return RecordingOutput()


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()
