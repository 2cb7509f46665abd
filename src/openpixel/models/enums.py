"""Enumerations for the OPC client."""

from enum import Enum


class ConnectionState(str, Enum):
    """Lifecycle of the client's connection to the OPC server."""

    IDLE = "idle"  # No live connection; the next tick dials
    CONNECTING = "connecting"  # Dial in progress
    CONNECTED = "connected"  # Packets are written every tick
    CLOSING = "closing"  # Stop observed, tearing down
    CLOSED = "closed"  # Loop exited; terminal
