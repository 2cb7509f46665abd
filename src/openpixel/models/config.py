"""Client configuration model."""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from openpixel.exceptions import ConfigValidationError, wrap_pydantic_error

DEFAULT_PORT = 7890
DEFAULT_FLUSH_INTERVAL = 0.5
DEFAULT_QUEUE_CAPACITY = 25


class ClientConfig(BaseModel):
    """Connection and framebuffer settings for one OPC client.

    Configuration is in-memory only. Build it directly, or from a
    "host:port" string with `from_address`.
    """

    # Server
    host: str = Field(default="127.0.0.1", min_length=1, description="OPC server host")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="OPC server TCP port")

    # Framebuffer
    width: int = Field(gt=0, description="Framebuffer width in pixels")
    height: int = Field(gt=0, description="Framebuffer height in pixels")

    # Scheduling
    flush_interval: float = Field(
        default=DEFAULT_FLUSH_INTERVAL,
        description=(
            "Seconds between flushes. Each flush reconnects if needed and sends "
            "the latest frame. Zero or negative means the default (0.5s)."
        ),
    )
    queue_capacity: int = Field(
        default=DEFAULT_QUEUE_CAPACITY,
        ge=1,
        description="Frames that may wait for the scheduler; further submissions are dropped",
    )

    # Socket deadlines
    connect_timeout: float = Field(default=2.0, gt=0, description="Seconds allowed to open the TCP connection")
    write_timeout: Optional[Annotated[float, Field(gt=0)]] = Field(
        default=5.0,
        description="Seconds allowed for one packet write (None = block forever)",
    )

    @field_validator("flush_interval")
    @classmethod
    def default_flush_interval(cls, v: float) -> float:
        """Treat a non-positive interval as 'use the default'."""
        if v <= 0:
            return DEFAULT_FLUSH_INTERVAL
        return v

    @property
    def address(self) -> str:
        """The server address as "host:port"."""
        return f"{self.host}:{self.port}"

    @property
    def num_pixels(self) -> int:
        """Framebuffer size (width * height)."""
        return self.width * self.height

    @classmethod
    def from_address(cls, address: str, width: int, height: int, **options: Any) -> "ClientConfig":
        """
        Build a config from a "host:port" address.

        The port defaults to 7890 when omitted. IPv6 hosts may be
        bracketed ("[::1]:7890").

        Args:
            address: Server address
            width: Framebuffer width
            height: Framebuffer height
            **options: Any other ClientConfig field

        Raises:
            ConfigValidationError: If the address or any value is invalid
        """
        host, port = address.strip(), DEFAULT_PORT
        if host.startswith("["):
            bracket_end = host.find("]")
            if bracket_end == -1:
                raise ConfigValidationError("address", address, "unclosed '[' in IPv6 address")
            rest = host[bracket_end + 1:]
            host = host[1:bracket_end]
            if rest.startswith(":"):
                port = rest[1:]
        elif host.count(":") == 1:
            host, _, port = host.partition(":")

        try:
            port = int(port)
        except ValueError:
            raise ConfigValidationError("port", port, "port must be an integer") from None

        try:
            return cls(host=host, port=port, width=width, height=height, **options)
        except ValidationError as e:
            raise wrap_pydantic_error(e) from e
