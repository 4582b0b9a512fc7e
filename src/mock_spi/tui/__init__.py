"""Interactive bus console."""

from .app import run_console

__all__ = ["run_console"]
