"""Client core: scheduler loop and transport."""

from .client import OPCClient
from .transport import Connection, Connector, open_connection

__all__ = ["Connection", "Connector", "OPCClient", "open_connection"]
