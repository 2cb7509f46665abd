"""Pixel buffer helpers.

A pixel buffer holds one color per framebuffer offset (x + width*y).
Internally it is a numpy array of shape (n, 3) or (n, 4): RGB, or RGBA
with the alpha column kept for the application but never sent.
"""

from collections.abc import Sequence
from typing import Optional, Union

import numpy as np

from openpixel.models import Color

PixelLike = Union[Color, Sequence[int]]
PixelBuffer = Union[np.ndarray, Sequence[PixelLike]]


def new_pixel_buffer(width: int, height: int, color: Optional[Color] = None) -> np.ndarray:
    """
    Create an RGBA pixel buffer for a width x height framebuffer.

    Args:
        width: Framebuffer width
        height: Framebuffer height
        color: Fill color (default: off, fully opaque)

    Returns:
        uint8 array of shape (width*height, 4)
    """
    fill = (color or Color.off()).to_rgba_tuple()
    buffer = np.empty((width * height, 4), dtype=np.uint8)
    buffer[:] = fill
    return buffer


def as_pixel_array(pixels: PixelBuffer) -> np.ndarray:
    """
    View any accepted pixel buffer as a 2-D uint8 numpy array.

    Accepts a numpy array of shape (n, 3) or (n, 4), or a sequence whose
    items are Color objects or RGB(A) tuples. Sequences are converted
    to an (n, 3) array; alpha is dropped since it is never sent.

    uint8 arrays are returned as they are. Other integer arrays are
    converted when every value fits in 0-255.

    Raises:
        ValueError: If the buffer does not have 3 or 4 channels, is not
            integer-valued, or holds values outside 0-255
    """
    if isinstance(pixels, np.ndarray):
        array = pixels
    else:
        rows = [
            p.to_rgb_tuple() if isinstance(p, Color) else tuple(p)[:3]
            for p in pixels
        ]
        if not rows:
            return np.zeros((0, 3), dtype=np.uint8)
        array = np.asarray(rows)

    if array.ndim != 2 or array.shape[1] not in (3, 4):
        raise ValueError(
            f"Pixel buffer must have shape (n, 3) or (n, 4), got {array.shape}"
        )

    if array.dtype == np.uint8:
        return array

    if not np.issubdtype(array.dtype, np.integer):
        raise ValueError(f"Pixel buffer must hold integers 0-255, got dtype {array.dtype}")

    if array.size and (array.min() < 0 or array.max() > 255):
        raise ValueError(
            f"Pixel values must be 0-255, got range {array.min()}..{array.max()}"
        )
    return array.astype(np.uint8)
