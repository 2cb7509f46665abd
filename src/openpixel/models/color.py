"""Color model for LED frames."""

from pydantic import BaseModel, ConfigDict, Field


class Color(BaseModel):
    """Standard 8-bit RGB color with an optional alpha channel.

    Alpha is kept for the application's own compositing; the OPC wire
    format only carries red, green and blue, so the encoder never sends it.

    The model is frozen so colors are hashable and can be shared between
    frames without copying.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")
    a: int = Field(default=255, ge=0, le=255, description="Alpha (0-255), never transmitted")

    @classmethod
    def off(cls) -> "Color":
        """Opaque black, the color of an unlit LED."""
        return cls(r=0, g=0, b=0)

    @classmethod
    def from_argb(cls, value: int) -> "Color":
        """Create a color from a packed 0xAARRGGBB integer.

        Example:
            >>> Color.from_argb(0xFF102030).to_rgb_tuple()
            (16, 32, 48)
        """
        return cls(
            a=(value >> 24) & 0xFF,
            r=(value >> 16) & 0xFF,
            g=(value >> 8) & 0xFF,
            b=value & 0xFF,
        )

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse '#RRGGBB' or '#AARRGGBB' (the '#' is optional).

        Raises:
            ValueError: If the string is not 6 or 8 hex digits
        """
        digits = value.strip().lstrip("#")
        if len(digits) not in (6, 8):
            raise ValueError(f"Expected #RRGGBB or #AARRGGBB, got {value!r}")
        packed = int(digits, 16)
        if len(digits) == 6:
            packed |= 0xFF000000
        return cls.from_argb(packed)

    def to_argb(self) -> int:
        """Pack into a 0xAARRGGBB integer."""
        return (self.a << 24) | (self.r << 16) | (self.g << 8) | self.b

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """(r, g, b), the three bytes sent for one LED."""
        return (self.r, self.g, self.b)

    def to_rgba_tuple(self) -> tuple[int, int, int, int]:
        """Convert to RGBA tuple (the layout of pixel buffer rows)."""
        return (self.r, self.g, self.b, self.a)

    def to_hex(self) -> str:
        """Format as "#RRGGBB" (alpha is not included).

        Example:
            >>> Color(r=255, g=0, b=0).to_hex()
            '#FF0000'
        """
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"
