"""Mapping from logical LED index to framebuffer offset."""

import logging
import math
from threading import Lock

import numpy as np

from openpixel.exceptions import LayoutIndexError

logger = logging.getLogger(__name__)


def strip_positions(
    count: int,
    center_x: float,
    center_y: float,
    spacing: float,
    angle: float = 0.0
) -> list[tuple[int, int]]:
    """
    Compute framebuffer coordinates for LEDs spaced along a line.

    LED i sits (i - (count-1)//2) * spacing away from (center_x, center_y)
    along `angle` (radians, 0 = +x). The half-length is an integer, so
    odd strips are centred and even strips extend one LED further past
    the centre on the +angle side. Coordinates are rounded with
    int(v + 0.5), i.e. half-up for non-negative values.

    Example:
        >>> strip_positions(3, 10, 5, 2)
        [(8, 5), (10, 5), (12, 5)]
    """
    s = math.sin(angle)
    c = math.cos(angle)
    half = (count - 1) // 2
    return [
        (
            int(center_x + (i - half) * spacing * c + 0.5),
            int(center_y + (i - half) * spacing * s + 0.5),
        )
        for i in range(count)
    ]


class LedLayout:
    """
    Dense table of framebuffer offsets indexed by logical LED index.

    The table grows on demand: registering index k makes it k+1 long,
    keeps every earlier entry and fills new gaps with offset 0 (so an
    unregistered LED shows whatever pixel sits at the framebuffer origin).
    It never shrinks.

    Storage is a numpy array with spare capacity that doubles when
    exhausted, so lookups stay O(1) and the encoder can gather all pixels
    with one fancy-indexing operation.

    Registration may happen while a client is streaming; a lock keeps
    readers from seeing a half-grown table.
    """

    INITIAL_CAPACITY = 64

    def __init__(self, width: int, height: int):
        """
        Initialize an empty layout.

        Args:
            width: Framebuffer width, used to flatten (x, y) into x + width*y
            height: Framebuffer height
        """
        self.width = width
        self.height = height
        self._offsets = np.zeros(self.INITIAL_CAPACITY, dtype=np.int64)
        self._size = 0
        self._lock = Lock()

    def register_led(self, index: int, x: int, y: int) -> None:
        """
        Map a logical LED to framebuffer coordinate (x, y).

        Args:
            index: Logical LED index (>= 0)
            x: Column in the framebuffer
            y: Row in the framebuffer

        Raises:
            LayoutIndexError: If index is negative
        """
        if index < 0:
            raise LayoutIndexError(index)

        offset = x + self.width * y
        with self._lock:
            self._ensure_size(index + 1)
            self._offsets[index] = offset

    def register_strip(
        self,
        start_index: int,
        count: int,
        center_x: float,
        center_y: float,
        spacing: float,
        angle: float = 0.0,
        reversed: bool = False
    ) -> None:
        """
        Register `count` LEDs spaced evenly along a line.

        LED i of the strip is placed at strip_positions(...)[i] and gets
        logical index start_index + i, or start_index + count - 1 - i
        when `reversed` is set (the strip is wired from the far end).

        Args:
            start_index: First logical index used by the strip
            count: Number of LEDs on the strip
            center_x: X coordinate of the strip's centre
            center_y: Y coordinate of the strip's centre
            spacing: Distance between neighbouring LEDs, in pixels
            angle: Direction of the strip in radians (0 = +x)
            reversed: Assign indices from the far end
        """
        positions = strip_positions(count, center_x, center_y, spacing, angle)
        for i, (x, y) in enumerate(positions):
            index = start_index + count - 1 - i if reversed else start_index + i
            self.register_led(index, x, y)

        logger.debug(
            f"Registered strip of {count} LEDs at indices "
            f"{start_index}-{start_index + count - 1} (reversed={reversed})"
        )

    def snapshot(self) -> np.ndarray:
        """Copy of the current offsets, safe to use from another thread."""
        with self._lock:
            return self._offsets[:self._size].copy()

    @property
    def offsets(self) -> np.ndarray:
        """Read-only copy of the offsets, one per logical LED."""
        offsets = self.snapshot()
        offsets.flags.writeable = False
        return offsets

    def __len__(self) -> int:
        """Number of logical LEDs (highest registered index + 1)."""
        with self._lock:
            return self._size

    def __getitem__(self, index: int) -> int:
        """Framebuffer offset of a logical LED."""
        with self._lock:
            if not 0 <= index < self._size:
                raise IndexError(f"LED index {index} out of range (0-{self._size - 1})")
            return int(self._offsets[index])

    def __repr__(self) -> str:
        return f"LedLayout(width={self.width}, height={self.height}, leds={len(self)})"

    def _ensure_size(self, size: int) -> None:
        """
        Grow the logical size to at least `size`.

        Note: Should be called with _lock held.
        """
        if size > len(self._offsets):
            capacity = max(size, 2 * len(self._offsets))
            grown = np.zeros(capacity, dtype=np.int64)
            grown[:self._size] = self._offsets[:self._size]
            self._offsets = grown

        if size > self._size:
            self._size = size
