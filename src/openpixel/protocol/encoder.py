"""Open Pixel Control packet encoding.

An OPC message is a 4-byte header followed by the payload:

    byte 0   channel   (0 = broadcast to every output)
    byte 1   command   (0 = set pixel colors)
    byte 2-3 length    payload size in bytes, big-endian
    byte 4.. payload   red, green, blue for each LED in logical-index order
"""

import logging
import struct
from collections.abc import Sequence
from typing import NamedTuple, Optional, Union

import numpy as np

from openpixel.exceptions import PacketTooLargeError, PixelAddressError
from openpixel.models import Color

from .pixels import PixelBuffer, as_pixel_array

logger = logging.getLogger(__name__)

HEADER_SIZE = 4
BROADCAST_CHANNEL = 0
CMD_SET_PIXEL_COLORS = 0
MAX_PAYLOAD_SIZE = 0xFFFF
MAX_PIXELS = MAX_PAYLOAD_SIZE // 3

_HEADER = struct.Struct(">BBH")


class OPCHeader(NamedTuple):
    """Decoded OPC message header."""

    channel: int
    command: int
    length: int


def pack_header(channel: int, command: int, length: int) -> bytes:
    """Pack an OPC header."""
    return _HEADER.pack(channel, command, length)


def parse_header(data: Union[bytes, bytearray, memoryview]) -> OPCHeader:
    """
    Decode the header at the start of an OPC message.

    Raises:
        ValueError: If fewer than 4 bytes are given
    """
    if len(data) < HEADER_SIZE:
        raise ValueError(f"OPC header needs {HEADER_SIZE} bytes, got {len(data)}")
    return OPCHeader(*_HEADER.unpack_from(data))


class FrameEncoder:
    """
    Builds "set pixel colors" packets from a pixel buffer and a layout.

    The packet buffer is reused between frames and only reallocated when
    the number of LEDs changes, so steady-state encoding does not
    allocate. The returned bytearray is overwritten by the next call.
    """

    def __init__(self, channel: int = BROADCAST_CHANNEL):
        """
        Initialize the encoder.

        Args:
            channel: OPC channel written into every header (0 = broadcast)
        """
        self.channel = channel
        self._packet: Optional[bytearray] = None

    @property
    def packet(self) -> Optional[bytearray]:
        """The current packet buffer (None until the first encode)."""
        return self._packet

    @property
    def pixel_count(self) -> int:
        """Number of LEDs the current packet carries."""
        if self._packet is None:
            return 0
        return (len(self._packet) - HEADER_SIZE) // 3

    def set_pixel_count(self, num_pixels: int) -> bytearray:
        """
        Size the packet for `num_pixels` LEDs.

        A no-op when the size already matches. When it changes, a new
        buffer is allocated, the header rewritten and the overlapping
        part of the old payload carried over.

        Raises:
            PacketTooLargeError: If the payload would not fit the 16-bit length
        """
        if num_pixels > MAX_PIXELS:
            raise PacketTooLargeError(num_pixels, MAX_PIXELS)

        num_bytes = 3 * num_pixels
        packet_len = HEADER_SIZE + num_bytes
        if self._packet is None or len(self._packet) != packet_len:
            packet = bytearray(packet_len)
            packet[:HEADER_SIZE] = pack_header(self.channel, CMD_SET_PIXEL_COLORS, num_bytes)
            if self._packet is not None:
                keep = min(len(self._packet), packet_len)
                packet[HEADER_SIZE:keep] = self._packet[HEADER_SIZE:keep]
            self._packet = packet
            logger.debug(f"Packet resized for {num_pixels} LEDs ({packet_len} bytes)")

        return self._packet

    def set_pixel(self, number: int, color: Union[Color, Sequence[int]]) -> None:
        """
        Write one LED's color straight into the packet.

        Grows the packet if `number` is beyond its current size.

        Args:
            number: Logical LED index
            color: Color or (r, g, b) tuple; alpha is ignored
        """
        if number < 0:
            raise PixelAddressError(number, number, self.pixel_count)

        rgb = color.to_rgb_tuple() if isinstance(color, Color) else tuple(color)[:3]
        # bytes() rejects values outside 0-255
        rgb_bytes = bytes(rgb)

        offset = HEADER_SIZE + 3 * number
        if self._packet is None or len(self._packet) < offset + 3:
            self.set_pixel_count(number + 1)

        self._packet[offset:offset + 3] = rgb_bytes

    def encode(self, pixels: PixelBuffer, offsets: Union[np.ndarray, Sequence[int]]) -> bytearray:
        """
        Encode one frame.

        LED i gets the color of pixels[offsets[i]], written at byte
        4 + 3*i. Alpha, if present, is not sent.

        Args:
            pixels: Pixel buffer indexed by framebuffer offset
            offsets: Framebuffer offset of each logical LED

        Returns:
            The packet (header + 3 bytes per LED)

        Raises:
            PixelAddressError: If an offset falls outside the pixel buffer
            PacketTooLargeError: If too many LEDs are registered
            ValueError: If the pixel buffer is malformed or not 8-bit
        """
        array = as_pixel_array(pixels)
        offsets = np.asarray(offsets, dtype=np.int64)

        out_of_range = np.flatnonzero((offsets < 0) | (offsets >= len(array)))
        if out_of_range.size:
            led_index = int(out_of_range[0])
            raise PixelAddressError(led_index, int(offsets[led_index]), len(array))

        packet = self.set_pixel_count(len(offsets))
        if len(offsets):
            packet[HEADER_SIZE:] = array[offsets, :3].tobytes()
        return packet


def encode_frame(pixels: PixelBuffer, offsets: Union[np.ndarray, Sequence[int]]) -> bytes:
    """
    Encode one frame without keeping a reusable buffer.

    Example:
        >>> encode_frame([(255, 0, 0), (0, 0, 255)], [1, 0])
        b'\\x00\\x00\\x00\\x06\\x00\\x00\\xff\\xff\\x00\\x00'
    """
    return bytes(FrameEncoder().encode(pixels, offsets))
