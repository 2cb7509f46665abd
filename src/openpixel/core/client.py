"""Open Pixel Control client with a reconnecting flush loop."""

import logging
import threading
import time
from queue import Empty, Full, Queue
from typing import Any, Callable, Optional

from openpixel.exceptions import ErrorContext, OPCConnectionError, wrap_connection_error
from openpixel.layout import LedLayout
from openpixel.models import ClientConfig, ConnectionState
from openpixel.protocol import FrameEncoder, PixelBuffer

from .transport import Connection, Connector, open_connection

logger = logging.getLogger(__name__)

# Queued by stop() to wake a loop blocked on an empty queue
_WAKE = object()


class OPCClient:
    """
    Streams frames to an OPC server at a fixed rate.

    The client owns three things:

    - an LED layout (logical LED index -> framebuffer offset),
    - a frame encoder that turns a pixel buffer into an OPC packet,
    - a scheduler loop that, every `flush_interval`, connects if needed
      and sends the latest frame.

    `run()` is the loop; it blocks and is meant for its own thread
    (`start()` does that for you). The loop is the only code touching the
    connection, the current frame and the packet buffer. Other threads
    talk to it through `submit_frame()` (a bounded queue) and `stop()`
    (an event). A small lock orders those two against the final drain, so
    nothing is left queued once the client is CLOSED.

    Connection failures never escape the loop: a failed dial or write is
    logged, the connection is dropped and the next tick tries again.
    """

    def __init__(self, config: ClientConfig, connector: Optional[Connector] = None):
        """
        Initialize the client. Nothing connects until the loop runs.

        Args:
            config: Server address, framebuffer size and timing
            connector: Opens a connection for a config (default: TCP socket)
        """
        self.config = config
        self.layout = LedLayout(config.width, config.height)
        self._connector = connector or open_connection
        self._encoder = FrameEncoder()

        # Cross-thread entry points
        self._frames: Queue[Any] = Queue(maxsize=config.queue_capacity)
        self._stop_event = threading.Event()
        # Held while checking the stop flag and enqueueing, and during the shutdown drain
        self._queue_lock = threading.Lock()

        # Owned by the loop thread
        self._connection: Optional[Connection] = None
        self._pixels: Optional[PixelBuffer] = None
        self._state = ConnectionState.IDLE
        self._frames_sent = 0

        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._on_connection_changed: Optional[Callable[[bool, str], None]] = None

    @classmethod
    def create(
        cls,
        address: str,
        width: int,
        height: int,
        flush_interval: float = 0.0,
        connector: Optional[Connector] = None,
        **options: Any
    ) -> "OPCClient":
        """
        Create a client for a "host:port" address.

        Args:
            address: OPC server address (port defaults to 7890)
            width: Framebuffer width
            height: Framebuffer height
            flush_interval: Seconds between flushes (<= 0 means 0.5s)
            connector: Optional connection factory
            **options: Other ClientConfig fields (queue_capacity, timeouts)

        Raises:
            ConfigValidationError: If any setting is invalid
        """
        config = ClientConfig.from_address(
            address, width, height, flush_interval=flush_interval, **options
        )
        return cls(config, connector=connector)

    # =================================================================
    # Layout
    # =================================================================

    def register_led(self, index: int, x: int, y: int) -> None:
        """Map logical LED `index` to framebuffer coordinate (x, y)."""
        self.layout.register_led(index, x, y)

    def register_strip(
        self,
        start_index: int,
        count: int,
        center_x: float,
        center_y: float,
        spacing: float,
        angle: float = 0.0,
        reversed: bool = False
    ) -> None:
        """Register a straight strip of LEDs. See LedLayout.register_strip."""
        self.layout.register_strip(start_index, count, center_x, center_y, spacing, angle, reversed)

    # =================================================================
    # Cross-thread API
    # =================================================================

    def submit_frame(self, pixels: PixelBuffer) -> None:
        """
        Hand a new frame to the loop.

        Never blocks. The buffer replaces the previous frame when the loop
        picks it up; do not modify it afterwards. When the queue is full
        the frame is dropped without telling the caller.

        Args:
            pixels: One color per framebuffer offset (width*height entries)
        """
        with self._queue_lock:
            if self._stop_event.is_set():
                logger.debug("Client stopped, ignoring frame")
                return

            try:
                self._frames.put_nowait(pixels)
            except Full:
                dropped = True
            else:
                dropped = False

        if dropped:
            logger.debug(f"Frame queue full ({self.config.queue_capacity}), dropped frame")

    def stop(self, timeout: float = 1.0) -> None:
        """
        Ask the loop to exit and close the connection.

        Safe to call from any thread, any number of times. If the loop was
        started with start(), waits up to `timeout` seconds for it.
        """
        if not self._stop_event.is_set():
            logger.debug("Stop requested")

        with self._queue_lock:
            self._stop_event.set()
            if self._state != ConnectionState.CLOSED:
                try:
                    self._frames.put_nowait(_WAKE)
                except Full:
                    # The loop is not blocked on an empty queue; it sees the event next iteration
                    pass

        thread = self._thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def start(self) -> threading.Thread:
        """Run the loop on a daemon thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("OPCClient is already running")
            return self._thread

        self._thread = threading.Thread(target=self.run, name="opc-client", daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for a loop started with start() to exit."""
        if self._thread:
            self._thread.join(timeout=timeout)

    def on_connection_changed(self, callback: Callable[[bool, str], None]) -> None:
        """
        Register callback for connection state changes.

        Args:
            callback: Function that receives (is_connected: bool, address: str)
        """
        self._on_connection_changed = callback

    # =================================================================
    # Status
    # =================================================================

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if a connection to the server is open."""
        return self._state == ConnectionState.CONNECTED

    @property
    def is_running(self) -> bool:
        """Check if the loop is running."""
        return self._running

    @property
    def pending_frames(self) -> int:
        """Frames waiting in the queue."""
        return self._frames.qsize()

    @property
    def frames_sent(self) -> int:
        """Packets written since the client was created."""
        return self._frames_sent

    # =================================================================
    # Loop
    # =================================================================

    def run(self) -> None:
        """
        Run the scheduler loop until stop() is called.

        Each iteration handles one event: a flush when the deadline has
        passed, otherwise the next queued frame (waiting at most until the
        deadline). Flushes connect lazily and send the latest frame, so
        reconnect attempts happen at most once per flush interval.
        """
        if self._running:
            logger.warning("OPCClient is already running")
            return

        if self._stop_event.is_set():
            self._shutdown()
            return

        self._running = True
        interval = self.config.flush_interval
        logger.info(f"Streaming to OPC server at {self.config.address} every {interval}s")

        next_flush = time.monotonic()
        try:
            while not self._stop_event.is_set():
                remaining = next_flush - time.monotonic()
                if remaining <= 0:
                    self._flush()
                    next_flush += interval
                    now = time.monotonic()
                    if next_flush <= now:
                        # A slow dial or write ate the interval; don't burst to catch up
                        next_flush = now + interval
                    continue

                try:
                    item = self._frames.get(timeout=remaining)
                except Empty:
                    continue

                if item is not _WAKE:
                    self._pixels = item
        finally:
            self._shutdown()
            self._running = False

    def _flush(self) -> bool:
        """
        One scheduler tick: connect if needed, then send the latest frame.

        Returns:
            True if a packet was written
        """
        if self._connection is None and not self._connect():
            return False

        if self._pixels is None:
            return False

        offsets = self.layout.snapshot()
        if not len(offsets):
            logger.debug("No LEDs registered, nothing to send")
            return False

        with ErrorContext("encode frame", logger_instance=logger, re_raise=False) as ctx:
            packet = self._encoder.encode(self._pixels, offsets)
        if ctx.error:
            return False

        if self._stop_event.is_set():
            return False

        try:
            self._connection.sendall(packet)
        except (OSError, OPCConnectionError) as e:
            error = wrap_connection_error(e, self.config.address, during="write")
            logger.warning(f"{error.user_message}: {e}")
            self._drop_connection()
            return False

        self._frames_sent += 1
        return True

    def _connect(self) -> bool:
        """Open the connection. Returns False (and logs) on failure."""
        self._set_state(ConnectionState.CONNECTING)
        try:
            self._connection = self._connector(self.config)
        except (OSError, OPCConnectionError) as e:
            error = wrap_connection_error(e, self.config.address, during="connect")
            logger.warning(
                f"{error.user_message}: {e} (retrying in {self.config.flush_interval}s)"
            )
            self._connection = None
            self._set_state(ConnectionState.IDLE)
            return False

        logger.info(f"Connected to OPC server at {self.config.address}")
        self._set_state(ConnectionState.CONNECTED)
        self._fire_connection_changed(True)
        return True

    def _drop_connection(self) -> None:
        """Close the connection after an error; the next tick reconnects."""
        self._close_connection()
        self._set_state(ConnectionState.IDLE)
        self._fire_connection_changed(False)

    def _close_connection(self) -> None:
        if self._connection is None:
            return

        try:
            self._connection.close()
        except OSError as e:
            logger.debug(f"Error closing connection: {e}")
        self._connection = None

    def _shutdown(self) -> None:
        """Close the connection and discard queued frames. Idempotent."""
        if self._state == ConnectionState.CLOSED:
            return

        was_connected = self._connection is not None
        self._set_state(ConnectionState.CLOSING)
        if was_connected:
            logger.info("Disconnecting from OPC server")
        self._close_connection()

        with self._queue_lock:
            while True:
                try:
                    self._frames.get_nowait()
                except Empty:
                    break
            self._set_state(ConnectionState.CLOSED)

        self._pixels = None
        if was_connected:
            self._fire_connection_changed(False)
        logger.debug("OPCClient stopped")

    def _set_state(self, state: ConnectionState) -> None:
        if state != self._state:
            logger.debug(f"Connection state: {self._state.value} -> {state.value}")
            self._state = state

    def _fire_connection_changed(self, connected: bool) -> None:
        """Invoke the callback off the loop thread so it cannot stall a flush."""
        callback = self._on_connection_changed
        if not callback:
            return

        address = self.config.address

        def fire_callback():
            try:
                callback(connected, address)
            except Exception as e:
                logger.error(f"Error in connection callback: {e}")

        threading.Thread(target=fire_callback, daemon=True).start()

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
