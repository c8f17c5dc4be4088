"""Core shell components: parsing, history, processes and dispatch."""

from .commands import parse_line, parse_number, tokenize
from .dispatcher import Dispatcher
from .history import FlushResult, HistoryFile, HistoryStore, ReplayLookup
from .processes import OsProcessBackend, ProcessManager, ProcessRegistry
from .types import Command, DispatchResult, ParsedNumber, ShellOutput

__all__ = [
    "Command",
    "DispatchResult",
    "Dispatcher",
    "FlushResult",
    "HistoryFile",
    "HistoryStore",
    "OsProcessBackend",
    "ParsedNumber",
    "ProcessManager",
    "ProcessRegistry",
    "ReplayLookup",
    "ShellOutput",
    "parse_line",
    "parse_number",
    "tokenize",
]
