"""Child process tracking, spawning and termination."""

from __future__ import annotations

import os
import signal
import subprocess
import time
from collections.abc import Callable, Iterator
from typing import Protocol

from loguru import logger

from mysh import fs
from mysh.core.types import ShellOutput, diagnostic
from mysh.errors import SignalError, SpawnError


class ProcessHandle(Protocol):
    pid: int


class ProcessBackend(Protocol):
    """Platform process interface used by the manager."""

    def spawn(self, argv: list[str]) -> ProcessHandle: ...

    def wait(self, handle: ProcessHandle) -> int: ...

    def poll(self, handle: ProcessHandle) -> int | None: ...

    def signal_terminate(self, pid: int) -> None: ...


def _error_text(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc)


class OsProcessBackend:
    """Real child processes via subprocess and os.kill."""

    def spawn(self, argv: list[str]) -> subprocess.Popen[bytes]:
        # Pin the executable so a bare name is never looked up on PATH.
        executable = os.path.abspath(argv[0])
        try:
            return subprocess.Popen(argv, executable=executable)  # noqa: S603
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            raise SpawnError(_error_text(exc)) from exc

    def wait(self, handle: ProcessHandle) -> int:
        if not isinstance(handle, subprocess.Popen):
            raise TypeError(f"unsupported process handle: {handle!r}")
        return handle.wait()

    def poll(self, handle: ProcessHandle) -> int | None:
        if not isinstance(handle, subprocess.Popen):
            raise TypeError(f"unsupported process handle: {handle!r}")
        return handle.poll()

    def signal_terminate(self, pid: int) -> None:
        try:
            os.kill(pid, signal.SIGTERM)
        except (OSError, OverflowError) as exc:
            raise SignalError(_error_text(exc)) from exc


class ProcessRegistry:
    """Identifiers of live children spawned by this shell."""

    def __init__(self) -> None:
        self._pids: set[int] = set()

    def __contains__(self, pid: object) -> bool:
        return pid in self._pids

    def __len__(self) -> int:
        return len(self._pids)

    def __bool__(self) -> bool:
        return bool(self._pids)

    def __iter__(self) -> Iterator[int]:
        return iter(self.pids())

    def pids(self) -> list[int]:
        return sorted(self._pids)

    def add(self, pid: int) -> None:
        self._pids.add(pid)

    def discard(self, pid: int) -> None:
        self._pids.discard(pid)

    def clear(self) -> None:
        self._pids.clear()


class ProcessManager:
    """Spawn, wait for and terminate children, keeping the registry in step.

    Background children stay registered until they are terminated through
    this manager. Nothing reaps them in between. Their handles are held so the
    pid cannot be reused by an unrelated process, and a signalled child is
    collected once it has exited.
    """

    def __init__(
        self,
        registry: ProcessRegistry,
        output: ShellOutput,
        *,
        backend: ProcessBackend | None = None,
        settle_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._registry = registry
        self._output = output
        self._backend = backend or OsProcessBackend()
        self._settle_seconds = settle_seconds
        self._sleep = sleep
        self._handles: dict[int, ProcessHandle] = {}
        self._signalled: list[ProcessHandle] = []

    @property
    def registry(self) -> ProcessRegistry:
        return self._registry

    def spawn(self, argv: list[str], *, background: bool) -> int | None:
        """Start ``argv[0]`` with ``argv`` as its argument vector.

        Returns the child pid, or None when nothing was started. A foreground
        child is waited for and unregistered before this returns.
        """

        self.collect()
        program = argv[0]
        if not fs.exists(program):
            self._output.error(diagnostic(f"{program}: No such file or directory"))
            return None

        try:
            handle = self._backend.spawn(argv)
        except SpawnError as exc:
            logger.debug("process.spawn failed argv={} error={}", argv, exc)
            self._output.error(diagnostic(str(exc)))
            return None

        pid = handle.pid
        self._registry.add(pid)
        logger.debug("process.spawn pid={} argv={} background={}", pid, argv, background)
        if background:
            self._handles[pid] = handle
            self._output.info(diagnostic(f"Spawned process with pid {pid}"))
            return pid

        try:
            status = self._backend.wait(handle)
        finally:
            self._registry.discard(pid)
        logger.debug("process.wait pid={} status={}", pid, status)
        return pid

    def terminate(self, pid: int) -> bool:
        """Send a graceful termination signal to one pid."""

        if pid < 0:
            self._output.error(diagnostic("Argument [pid] must be >= 0"))
            return False
        if pid == 0:
            self._output.error(diagnostic("Argument [pid] 0 would signal the shell's own process group"))
            return False

        try:
            self._backend.signal_terminate(pid)
        except SignalError as exc:
            logger.debug("process.terminate failed pid={} error={}", pid, exc)
            self._output.error(diagnostic(str(exc)))
            return False

        self._registry.discard(pid)
        self._release(pid)
        logger.debug("process.terminate pid={}", pid)
        self._output.info(diagnostic(f"Terminated process with pid {pid}"))
        return True

    def terminate_all(self) -> int:
        """Signal every registered child, then forget all of them."""

        if not self._registry:
            self._output.info(diagnostic("No processes to terminate"))
            return 0

        pids = self._registry.pids()
        for pid in pids:
            self.terminate(pid)
            self._release(pid)
        self._registry.clear()
        self.collect()

        noun = "process" if len(pids) == 1 else "processes"
        self._output.info(diagnostic(f"Terminated {len(pids)} {noun}"))
        return len(pids)

    def repeat(self, count: int, argv: list[str]) -> list[int]:
        """Start ``count`` background copies of ``argv``, one after another."""

        spawned: list[int] = []
        for _ in range(count):
            pid = self.spawn(argv, background=True)
            if pid is not None:
                spawned.append(pid)
        if count > 0 and self._settle_seconds > 0:
            # Let the children print their start-up output before the next prompt.
            self._sleep(self._settle_seconds)
        return spawned

    def collect(self) -> list[int]:
        """Reap signalled children that have exited and return their pids."""

        pending: list[ProcessHandle] = []
        reaped: list[int] = []
        for handle in self._signalled:
            if self._backend.poll(handle) is None:
                pending.append(handle)
            else:
                reaped.append(handle.pid)
        self._signalled = pending
        if reaped:
            logger.debug("process.collect pids={}", reaped)
        return reaped

    def _release(self, pid: int) -> None:
        handle = self._handles.pop(pid, None)
        if handle is not None:
            self._signalled.append(handle)
