"""openpixel: Open Pixel Control client for addressable LED arrays."""

__version__ = "0.1.0"

# Client
from .core import OPCClient

# Building blocks
from .layout import LedLayout
from .models import ClientConfig, Color, ConnectionState
from .protocol import FrameEncoder, encode_frame, new_pixel_buffer

__all__ = [
    "ClientConfig",
    "Color",
    "ConnectionState",
    "FrameEncoder",
    "LedLayout",
    "OPCClient",
    "encode_frame",
    "new_pixel_buffer",
]
