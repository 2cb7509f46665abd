"""
Custom exception hierarchy for openpixel.

## Exception Hierarchy

```
OpenPixelError (base)
├── OPCConnectionError
│   ├── ServerUnreachableError
│   └── ConnectionLostError
├── AddressingError
│   ├── LayoutIndexError
│   ├── PixelAddressError
│   └── PacketTooLargeError
└── ConfigurationError
    └── ConfigValidationError
```

## Usage

All custom exceptions inherit from `OpenPixelError`, which provides:

- `user_message`: Human-friendly message for display to users
- `technical_message`: Detailed message for logging
- `recoverable`: Whether the error can be recovered from
- `recovery_hint`: Optional suggestion for how to fix the issue

Connection errors are recoverable and never leave the scheduler loop: it
logs them and reconnects on the next flush. Addressing errors are
programming errors (the layout does not fit the pixel buffer) and are
raised to the caller of the registry or encoder. `AddressingError` is
also an `IndexError`.

### Example: Layout/buffer mismatch

```python
from openpixel.protocol import encode_frame

encode_frame(pixels=[(0, 0, 0)] * 4, offsets=[0, 9])
# PixelAddressError: LED 1 maps to framebuffer offset 9, outside a pixel buffer of 4 pixels
```
"""

from .addressing import AddressingError, LayoutIndexError, PacketTooLargeError, PixelAddressError
from .base import OpenPixelError
from .config import ConfigurationError, ConfigValidationError
from .connection import ConnectionLostError, OPCConnectionError, ServerUnreachableError
from .handlers import (
    ErrorContext,
    format_error_for_display,
    wrap_connection_error,
    wrap_pydantic_error,
)

__all__ = [
    # Addressing
    "AddressingError",
    "ConfigValidationError",
    # Config
    "ConfigurationError",
    "ConnectionLostError",
    "ErrorContext",
    "LayoutIndexError",
    # Connection
    "OPCConnectionError",
    # Base
    "OpenPixelError",
    "PacketTooLargeError",
    "PixelAddressError",
    "ServerUnreachableError",
    "format_error_for_display",
    "wrap_connection_error",
    "wrap_pydantic_error",
]
