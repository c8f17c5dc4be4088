"""mysh - a small shell that tracks its children and replays its history."""

__version__ = "0.1.0"
