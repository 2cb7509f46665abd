"""TCP transport to the OPC server."""

import logging
import socket
from typing import Callable, Protocol, Union, runtime_checkable

from openpixel.models import ClientConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class Connection(Protocol):
    """
    The part of a socket the scheduler uses.

    Anything with blocking `sendall` and `close` works, which lets tests
    substitute an in-memory connection.
    """

    def sendall(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """Write every byte or raise OSError."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...


Connector = Callable[[ClientConfig], Connection]


def open_connection(config: ClientConfig) -> socket.socket:
    """
    Open a TCP connection to the configured OPC server.

    The socket gets `connect_timeout` for the dial and `write_timeout`
    for every later write, so a stalled server cannot block the
    scheduler forever. Nagle is disabled since every packet is a
    complete frame.

    Raises:
        OSError: If the server cannot be reached
    """
    sock = socket.create_connection((config.host, config.port), timeout=config.connect_timeout)
    try:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(config.write_timeout)
    except OSError:
        sock.close()
        raise

    logger.debug(f"Socket open to {config.address} (write timeout: {config.write_timeout}s)")
    return sock
