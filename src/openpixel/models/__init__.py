"""Data models for the OPC client."""

from .color import Color
from .config import ClientConfig
from .enums import ConnectionState

__all__ = [
    "ClientConfig",
    "Color",
    # Enums
    "ConnectionState",
]
