"""Run command - stream a solid frame to the demo strips."""

import logging
import sys
import time
from typing import Optional, Protocol

import click

from openpixel.core import OPCClient
from openpixel.exceptions import OpenPixelError, format_error_for_display
from openpixel.models import Color
from openpixel.protocol import new_pixel_buffer

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 200
ROW_SPACING = 30


class StripTarget(Protocol):
    """Anything strips can be registered on (OPCClient or LedLayout)."""

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
        ...


def register_demo_strips(
    target: StripTarget,
    width: int,
    height: int,
    strips: int,
    leds_per_strip: int
) -> int:
    """
    Register horizontal strips stacked below the framebuffer centre.

    Strip n is centred at (width/2, height/2 - 30 + 30*n), spaced
    width/70 pixels per LED, and uses indices n*leds_per_strip onwards,
    so the strips occupy one contiguous index range.

    Returns:
        Total number of LEDs registered
    """
    center_x = width / 2
    spacing = width / 70.0
    for n in range(strips):
        center_y = height / 2 - ROW_SPACING + ROW_SPACING * n
        target.register_strip(n * leds_per_strip, leds_per_strip, center_x, center_y, spacing)
    return strips * leds_per_strip


def strip_options(func):
    """Options shared by the commands that build the demo layout."""
    func = click.option(
        '--leds-per-strip',
        type=click.IntRange(min=1),
        default=64,
        show_default=True,
        help='LEDs on each strip'
    )(func)
    func = click.option(
        '--strips',
        type=click.IntRange(min=1),
        default=4,
        show_default=True,
        help='Number of horizontal strips'
    )(func)
    func = click.option(
        '--height',
        type=click.IntRange(min=1),
        default=DEFAULT_HEIGHT,
        show_default=True,
        help='Framebuffer height'
    )(func)
    func = click.option(
        '--width',
        type=click.IntRange(min=1),
        default=DEFAULT_WIDTH,
        show_default=True,
        help='Framebuffer width'
    )(func)
    return func


@click.command()
@click.option(
    '--addr',
    '-a',
    default='127.0.0.1:7890',
    show_default=True,
    help='Address and port of the OPC server to connect to'
)
@click.option(
    '--color',
    '-c',
    default='#FFFFFF',
    show_default=True,
    help='Fill color as #RRGGBB'
)
@click.option(
    '--flush-interval',
    type=float,
    default=0.5,
    show_default=True,
    help='Seconds between flushes (also the reconnect interval)'
)
@click.option(
    '--duration',
    type=click.FloatRange(min=0),
    default=None,
    help='Stop after this many seconds (default: run until Ctrl+C)'
)
@strip_options
def run(
    addr: str,
    color: str,
    flush_interval: float,
    duration: Optional[float],
    width: int,
    height: int,
    strips: int,
    leds_per_strip: int
):
    """
    Stream a solid color to the demo strip layout.

    Connection failures are logged and retried on every flush, so the
    server may be started after the client.

    \b
    Examples:
      openpixel run
      openpixel run --addr 10.0.0.5:7890 --color '#00FF00' --strips 2
    """
    try:
        fill = Color.from_hex(color)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--color')

    try:
        client = OPCClient.create(addr, width, height, flush_interval=flush_interval)
    except OpenPixelError as e:
        logger.error(f"Invalid client settings: {e.technical_message}")
        user_message, recovery_hint = format_error_for_display(e)
        click.echo(f"ERROR: {user_message}", err=True)
        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)
        sys.exit(1)

    num_leds = register_demo_strips(client, width, height, strips, leds_per_strip)
    client.submit_frame(new_pixel_buffer(width, height, fill))

    def report(connected: bool, address: str) -> None:
        state = "connected to" if connected else "disconnected from"
        click.echo(f"{state} {address}", err=True)

    client.on_connection_changed(report)

    click.echo(f"Streaming {num_leds} LEDs ({fill.to_hex()}) to {client.config.address}. Ctrl+C to stop.")
    logger.info(f"Starting client: {num_leds} LEDs on a {width}x{height} framebuffer")

    deadline = None if duration is None else time.monotonic() + duration
    client.start()
    try:
        while deadline is None or time.monotonic() < deadline:
            time.sleep(0.1)
    except KeyboardInterrupt:
        click.echo("\nStopping...", err=True)
    finally:
        client.stop()

    logger.info(f"Client stopped after {client.frames_sent} frames")
