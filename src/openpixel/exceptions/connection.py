"""Connection-related exceptions.

This module defines exceptions for errors talking to the OPC server:
- OPCConnectionError: Base class for network errors
- ServerUnreachableError: Opening the TCP connection failed
- ConnectionLostError: Writing a packet to an open connection failed

All of them are recoverable: the scheduler drops the connection and
tries again on its next tick.
"""

from typing import Optional

from .base import OpenPixelError


class OPCConnectionError(OpenPixelError):
    """Network operation against the OPC server failed."""

    def __init__(self, user_message: str, address: Optional[str] = None, **kwargs):
        """
        Initialize connection error.

        Args:
            user_message: User-friendly error message
            address: The "host:port" of the server (if applicable)
        """
        kwargs.setdefault("recoverable", True)
        super().__init__(user_message, **kwargs)
        self.address = address


class ServerUnreachableError(OPCConnectionError):
    """The OPC server could not be reached."""

    def __init__(self, address: str, original_error: Optional[str] = None):
        """
        Initialize server-unreachable error.

        Args:
            address: The "host:port" that was dialled
            original_error: The original socket error message
        """
        user_msg = f"Could not connect to OPC server at {address}"
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        recovery = (
            "Make sure the OPC server (e.g. fcserver or gl_server) is running "
            "and listening on this address. The client retries on every flush."
        )

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            address=address,
            recovery_hint=recovery,
        )
        self.original_error = original_error


class ConnectionLostError(OPCConnectionError):
    """The connection dropped while a packet was being written."""

    def __init__(self, address: str, original_error: Optional[str] = None):
        """
        Initialize connection-lost error.

        Args:
            address: The "host:port" of the server
            original_error: The original socket error message
        """
        user_msg = f"Lost connection to OPC server at {address}"
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            address=address,
            recovery_hint="The client reconnects on the next flush.",
        )
        self.original_error = original_error
