"""Layout command - print the demo strip layout without connecting."""

import click

from openpixel.layout import LedLayout

from .run import register_demo_strips, strip_options


@click.command()
@strip_options
def layout(width: int, height: int, strips: int, leds_per_strip: int):
    """
    Print the framebuffer position of every demo LED.

    One line per logical LED: index, x, y and framebuffer offset.
    """
    led_layout = LedLayout(width, height)
    register_demo_strips(led_layout, width, height, strips, leds_per_strip)

    click.echo(f"{len(led_layout)} LEDs on a {width}x{height} framebuffer\n")
    click.echo(f"{'index':>6} {'x':>5} {'y':>5} {'offset':>8}")
    for index, offset in enumerate(led_layout.offsets):
        x, y = int(offset) % width, int(offset) // width
        click.echo(f"{index:>6} {x:>5} {y:>5} {int(offset):>8}")
