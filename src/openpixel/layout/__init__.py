"""LED layout registration."""

from .registry import LedLayout, strip_positions

__all__ = ["LedLayout", "strip_positions"]
