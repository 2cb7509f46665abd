"""Addressing exceptions.

These are programming errors: the layout and the pixel buffer disagree,
or an index is out of range. They are never retried.
"""

from .base import OpenPixelError


class AddressingError(OpenPixelError, IndexError):
    """An LED index or framebuffer offset is out of range."""
    pass


class LayoutIndexError(AddressingError):
    """A logical LED index passed to the layout registry is invalid."""

    def __init__(self, index: int):
        """
        Initialize layout index error.

        Args:
            index: The rejected logical LED index
        """
        super().__init__(
            user_message=f"Invalid LED index: {index}",
            technical_message=f"Logical LED index must be >= 0, got {index}",
            recovery_hint="LED indices start at 0",
        )
        self.index = index


class PixelAddressError(AddressingError):
    """A registered LED points outside the pixel buffer."""

    def __init__(self, led_index: int, offset: int, buffer_size: int):
        """
        Initialize pixel address error.

        Args:
            led_index: Logical index of the offending LED
            offset: Framebuffer offset registered for that LED
            buffer_size: Number of pixels in the submitted buffer
        """
        super().__init__(
            user_message=(
                f"LED {led_index} maps to framebuffer offset {offset}, "
                f"outside a pixel buffer of {buffer_size} pixels"
            ),
            technical_message=(
                f"Layout/buffer mismatch: layout[{led_index}]={offset}, "
                f"len(pixels)={buffer_size}"
            ),
            recovery_hint=(
                "Submit frames sized width*height and register LEDs with "
                "coordinates inside the framebuffer"
            ),
        )
        self.led_index = led_index
        self.offset = offset
        self.buffer_size = buffer_size


class PacketTooLargeError(AddressingError):
    """Too many LEDs are registered to fit in one OPC message."""

    def __init__(self, num_pixels: int, max_pixels: int):
        """
        Initialize packet-too-large error.

        Args:
            num_pixels: Number of LEDs that were requested
            max_pixels: Largest LED count one message can carry
        """
        super().__init__(
            user_message=f"{num_pixels} LEDs do not fit in one OPC message (max {max_pixels})",
            technical_message=f"Payload of {3 * num_pixels} bytes exceeds the 16-bit length field",
        )
        self.num_pixels = num_pixels
        self.max_pixels = max_pixels
