"""CLI commands for openpixel."""

from .layout import layout
from .run import run

__all__ = ["layout", "run"]
