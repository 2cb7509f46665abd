"""openpixel command line: the click group and logging setup."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from openpixel import __version__

from .commands import layout, run

logger = logging.getLogger(__name__)


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure the root logger for a CLI run.

    Console output goes to stderr. A rotating log file is added when
    `log_file` is given.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log everything at DEBUG
        log_file: Log file path (optional)
        log_level: Log level for the log file (DEBUG/INFO/WARNING/ERROR)
    """
    # Determine console level based on flags
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    root_level = level
    if log_file:
        file_level = logging.DEBUG if debug else getattr(logging, log_level.upper())

        # Rotating file handler (keeps last 5 files, max 10MB each)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
        root_level = min(level, file_level)

    # force=True replaces handlers from a previous call
    logging.basicConfig(level=root_level, handlers=handlers, force=True)

    logger.debug(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"file={log_file or 'none'}"
    )


@click.group()
@click.version_option(version=__version__, prog_name="openpixel")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug logging'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Also write logs to this file (rotated at 10MB)'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for the log file (default: INFO)'
)
def cli(verbose: int, debug: bool, log_file: Optional[Path], log_level: str):
    """
    Open Pixel Control client - stream frames to an OPC LED server.

    \b
    Examples:
      # Light the demo strips white on a local server
      openpixel run

      # Another server and color, logging connection events
      openpixel -v run --addr ledwall.local:7890 --color '#FF8000'

      # Show where the demo strips land in the framebuffer
      openpixel layout
    """
    setup_logging(verbose, debug, log_file, log_level)


cli.add_command(run)
cli.add_command(layout)

if __name__ == "__main__":
    cli()
