"""
Helpers that translate and report errors between layers.

```
CLI              format_error_for_display()  -> "ERROR: ..." + hint
OPCClient loop   ErrorContext(re_raise=False) -> log, skip this tick
translation      wrap_connection_error(), wrap_pydantic_error()
low level        OSError / socket.timeout, pydantic.ValidationError
```

Socket errors never reach the caller of `OPCClient.run()`: the loop wraps
them with `wrap_connection_error`, logs the user message and reconnects on
the next flush.

```python
try:
    sock = open_connection(config)
except OSError as e:
    error = wrap_connection_error(e, config.address, during="connect")
    logger.warning(f"{error.user_message}: {e}")
```
"""

import logging
from typing import Optional

from pydantic import ValidationError

from .base import OpenPixelError
from .config import ConfigurationError, ConfigValidationError
from .connection import ConnectionLostError, OPCConnectionError, ServerUnreachableError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Log any exception raised inside a block, optionally swallowing it.

    The exception (if any) is kept on `ctx.error` so the caller can
    decide what to skip.

    Example:
        ```python
        with ErrorContext("encode frame", logger_instance=logger, re_raise=False) as ctx:
            packet = encoder.encode(pixels, offsets)
        if ctx.error:
            return False
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Args:
            operation: What the block does, phrased to follow "Failed to"
            logger_instance: Logger to report to (default: this module's)
            re_raise: Propagate the exception after logging it
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[BaseException] = None

    def __enter__(self) -> "ErrorContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None:
            return False

        self.error = exc_val
        if isinstance(exc_val, OpenPixelError):
            # Our own errors already carry the useful detail
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=exc_val)

        return not self.re_raise


def wrap_connection_error(
    error: Exception,
    address: str,
    during: str = "connect"
) -> OPCConnectionError:
    """
    Turn a socket failure into an OPCConnectionError.

    Args:
        error: Usually an OSError from connect() or sendall()
        address: "host:port" of the OPC server
        during: "connect" for a failed dial, anything else for a failed write

    Returns:
        ServerUnreachableError or ConnectionLostError. Errors that are
        already OPCConnectionError are returned as they are.
    """
    if isinstance(error, OPCConnectionError):
        return error

    detail = str(error) or type(error).__name__
    if during == "connect":
        return ServerUnreachableError(address, original_error=detail)
    return ConnectionLostError(address, original_error=detail)


def wrap_pydantic_error(error: Exception, source: Optional[str] = None) -> ConfigurationError:
    """
    Turn a ClientConfig validation failure into a ConfigurationError.

    One failing field gives a ConfigValidationError naming that field;
    several are listed together under the field "multiple fields".

    Args:
        error: Usually a pydantic ValidationError
        source: Where the values came from (e.g. "--addr"), for the hint
    """
    if not isinstance(error, ValidationError) or not error.errors():
        return ConfigurationError(
            user_message=f"Invalid configuration: {error}",
            technical_message=f"Configuration error ({type(error).__name__}): {error}",
            recoverable=True
        )

    problems = [
        (".".join(str(part) for part in err.get("loc", ())) or "unknown", err)
        for err in error.errors()
    ]

    if len(problems) == 1:
        field, err = problems[0]
        return ConfigValidationError(
            field=field,
            value=err.get("input"),
            error_msg=err.get("msg", "validation failed"),
            source=source
        )

    listing = "\n".join(f"  - {field}: {err.get('msg', 'validation failed')}" for field, err in problems)
    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(problems)} validation errors:\n{listing}",
        source=source
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Split an error into the line to show and an optional hint.

    Returns:
        (message, recovery_hint or None)
    """
    if isinstance(error, OpenPixelError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None
