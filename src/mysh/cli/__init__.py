"""Command-line entry points for mysh."""

from .app import app
from .render import Renderer

__all__ = [
    "Renderer",
    "app",
]
