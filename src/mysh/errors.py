"""Application-level exception types for mysh."""

from __future__ import annotations


class MyshError(Exception):
    """Base exception for mysh."""


class ConfigurationError(MyshError):
    """Raised when settings cannot be used to start a shell."""


class ProcessError(MyshError):
    """Base exception for child process operations."""


class SpawnError(ProcessError):
    """Raised when a child process could not be created or could not exec."""


class SignalError(ProcessError):
    """Raised when a termination signal could not be delivered."""
