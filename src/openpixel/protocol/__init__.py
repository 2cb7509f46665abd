"""Open Pixel Control wire format."""

from .encoder import (
    BROADCAST_CHANNEL,
    CMD_SET_PIXEL_COLORS,
    HEADER_SIZE,
    MAX_PIXELS,
    FrameEncoder,
    OPCHeader,
    encode_frame,
    pack_header,
    parse_header,
)
from .pixels import PixelBuffer, as_pixel_array, new_pixel_buffer

__all__ = [
    "BROADCAST_CHANNEL",
    "CMD_SET_PIXEL_COLORS",
    "FrameEncoder",
    "HEADER_SIZE",
    "MAX_PIXELS",
    "OPCHeader",
    "PixelBuffer",
    "as_pixel_array",
    "encode_frame",
    "new_pixel_buffer",
    "pack_header",
    "parse_header",
]
