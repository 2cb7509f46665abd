"""Pytest fixtures for tests."""

import socket
import struct
import threading
import time

import numpy as np
import pytest

from openpixel.core import OPCClient
from openpixel.layout import LedLayout
from openpixel.models import ClientConfig

WIDTH = 200
HEIGHT = 100


def wait_until(predicate, timeout: float = 2.0, interval: float = 0.005) -> bool:
    """Poll `predicate` until it is true or `timeout` passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def free_port() -> int:
    """Find a loopback port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class FakeConnection:
    """In-memory connection that records every packet written to it."""

    def __init__(self, fail_on_write: int | None = None):
        self.writes: list[bytes] = []
        self.closed = False
        self._fail_on_write = fail_on_write
        self._attempts = 0

    def sendall(self, data) -> None:
        self._attempts += 1
        if self.closed:
            raise OSError("write on closed connection")
        if self._fail_on_write is not None and self._attempts == self._fail_on_write:
            raise BrokenPipeError(32, "Broken pipe")
        self.writes.append(bytes(data))

    def close(self) -> None:
        self.closed = True


class OPCTestServer:
    """Loopback TCP server that collects OPC messages on a background thread."""

    def __init__(self, port: int = 0):
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", port))
        self._listener.listen(1)
        self._listener.settimeout(0.1)
        self.port = self._listener.getsockname()[1]
        self.messages: list[tuple[int, int, bytes]] = []
        self.connections = 0
        self._running = True
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    @property
    def address(self) -> str:
        return f"127.0.0.1:{self.port}"

    def received(self) -> list[tuple[int, int, bytes]]:
        with self._lock:
            return list(self.messages)

    def _serve(self) -> None:
        while self._running:
            try:
                conn, _ = self._listener.accept()
            except (socket.timeout, OSError):
                continue
            with self._lock:
                self.connections += 1
            conn.settimeout(0.1)
            buffer = b""
            with conn:
                while self._running:
                    try:
                        chunk = conn.recv(65536)
                    except socket.timeout:
                        continue
                    except OSError:
                        break
                    if not chunk:
                        break
                    buffer += chunk
                    while len(buffer) >= 4:
                        channel, command, length = struct.unpack(">BBH", buffer[:4])
                        if len(buffer) < 4 + length:
                            break
                        with self._lock:
                            self.messages.append((channel, command, buffer[4:4 + length]))
                        buffer = buffer[4 + length:]

    def close(self) -> None:
        self._running = False
        self._thread.join(timeout=1.0)
        self._listener.close()


@pytest.fixture
def layout():
    """Create an empty layout on a 200x100 framebuffer."""
    return LedLayout(WIDTH, HEIGHT)


@pytest.fixture
def gradient_pixels():
    """RGBA buffer where every pixel's color encodes its own offset."""
    offsets = np.arange(WIDTH * HEIGHT)
    pixels = np.empty((WIDTH * HEIGHT, 4), dtype=np.uint8)
    pixels[:, 0] = offsets % 256
    pixels[:, 1] = (offsets // 256) % 256
    pixels[:, 2] = 7
    pixels[:, 3] = 128
    return pixels


@pytest.fixture
def config():
    """Client config with a short flush interval for loop tests."""
    return ClientConfig(width=WIDTH, height=HEIGHT, flush_interval=0.01)


@pytest.fixture
def fake_connection():
    """A recording in-memory connection."""
    return FakeConnection()


@pytest.fixture
def client(config, fake_connection):
    """Client whose connector always returns the fake connection."""
    opc = OPCClient(config, connector=lambda cfg: fake_connection)
    yield opc
    opc.stop()


@pytest.fixture
def opc_server():
    """A loopback OPC server."""
    server = OPCTestServer()
    yield server
    server.close()
