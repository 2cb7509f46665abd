"""Root of the openpixel exception hierarchy."""

from typing import Optional


class OpenPixelError(Exception):
    """
    Base class for errors raised by openpixel.

    Every error carries two messages: `user_message` for the CLI and
    `technical_message` for the log, which names the values involved.
    `recoverable` tells the caller whether retrying can help (connection
    errors) or not (addressing errors). `recovery_hint` is an optional
    suggestion shown under the message.
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, if there is one."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
