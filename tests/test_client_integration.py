"""End-to-end tests against a loopback OPC server.

These run the real TCP transport and scheduler thread, so they are
marked as integration tests.
"""

import socket
import time

import pytest

from openpixel.core import OPCClient, open_connection
from openpixel.models import ClientConfig

from conftest import HEIGHT, WIDTH, OPCTestServer, free_port, wait_until


def make_config(port: int) -> ClientConfig:
    return ClientConfig(
        host="127.0.0.1",
        port=port,
        width=WIDTH,
        height=HEIGHT,
        flush_interval=0.01,
    )


@pytest.mark.integration
class TestTransport:
    """Test the TCP connector."""

    def test_open_connection_sets_socket_options(self, opc_server):
        """Sockets have Nagle disabled and the write deadline applied."""
        sock = open_connection(make_config(opc_server.port))
        try:
            assert sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY) != 0
            assert sock.gettimeout() == 5.0
        finally:
            sock.close()

    def test_open_connection_refused(self):
        """Nothing listening raises OSError."""
        with pytest.raises(OSError):
            open_connection(make_config(free_port()))


@pytest.mark.integration
class TestStreaming:
    """Test streaming frames to a real server."""

    def test_server_receives_frames(self, opc_server, gradient_pixels):
        """The server sees broadcast set-pixel-colors messages in layout order."""
        client = OPCClient(make_config(opc_server.port))
        client.register_strip(0, 3, 100, 50, 10, reversed=True)
        client.submit_frame(gradient_pixels)

        client.start()
        try:
            assert wait_until(lambda: len(opc_server.received()) >= 2)
        finally:
            client.stop()

        channel, command, payload = opc_server.received()[0]
        expected = b"".join(bytes(gradient_pixels[x + WIDTH * 50, :3]) for x in (110, 100, 90))
        assert channel == 0
        assert command == 0
        assert payload == expected
        assert opc_server.connections == 1

    def test_connects_when_server_starts_later(self, gradient_pixels):
        """A client started before its server connects once the server is up."""
        port = free_port()
        client = OPCClient(make_config(port))
        client.register_led(0, 0, 0)
        client.submit_frame(gradient_pixels)
        client.start()

        server = None
        try:
            time.sleep(0.05)
            assert not client.is_connected
            server = OPCTestServer(port=port)
            assert wait_until(lambda: len(server.received()) >= 1)
        finally:
            client.stop()
            if server:
                server.close()

        assert server.received()[0][2] == bytes(gradient_pixels[0, :3])
