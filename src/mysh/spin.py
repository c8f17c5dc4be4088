"""Long-running demo child that logs a heartbeat until it is signalled."""

from __future__ import annotations

import os
import signal
import sys
import time
from pathlib import Path
from types import FrameType
from typing import TextIO

LOG_PATH = Path("tmp.log")
BEAT_SECONDS = 1.0


def _stop(log: TextIO, pid: int) -> None:
    log.write(f"[{pid}] Stopped\n")
    log.close()
    sys.exit(0)


def main(log_path: Path = LOG_PATH, beat_seconds: float = BEAT_SECONDS) -> None:
    pid = os.getpid()
    try:
        log = log_path.open("a", encoding="utf-8", buffering=1)
    except OSError:
        print("Failed to open log, exiting...", file=sys.stderr)
        sys.exit(1)

    def _handle(signum: int, frame: FrameType | None) -> None:
        _stop(log, pid)

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)

    count = 0
    while True:
        count += 1
        log.write(f"[{pid}] Running : {count}\n")
        time.sleep(beat_seconds)


if __name__ == "__main__":
    main()
