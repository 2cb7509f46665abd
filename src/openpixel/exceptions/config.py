"""Errors for invalid ClientConfig values and CLI settings."""

from typing import Any, Optional

from .base import OpenPixelError


class ConfigurationError(OpenPixelError):
    """Configuration is invalid."""
    pass


class ConfigValidationError(ConfigurationError):
    """A single setting (or a group of them) was rejected."""

    def __init__(self, field: str, value: Any, error_msg: str, source: Optional[str] = None):
        """
        Args:
            field: The configuration field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            source: Where the value came from, e.g. a CLI option (optional)
        """
        user_msg = f"Invalid configuration value for '{field}': {error_msg}"

        recovery = f"Update the '{field}' value"
        if source:
            recovery += f" ({source})"

        # Field-specific hints
        if field in ("host", "port", "address"):
            recovery += "\nAddresses look like 'host:port', e.g. 127.0.0.1:7890"
        elif field in ("width", "height"):
            recovery += "\nFramebuffer dimensions must be positive integers"
        elif "interval" in field or "timeout" in field:
            recovery += "\nDurations are given in seconds, e.g. 0.5"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery
        )
        self.field = field
        self.value = value
        self.source = source
