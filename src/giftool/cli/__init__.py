"""CLI module for giftool commands."""

import click

from .. import __version__
from ..io import setup_logging
from .compress_cmd import compress
from .doctor_cmd import doctor
from .first_frame_cmd import first_frame
from .info_cmd import info


@click.group()
@click.version_option(version=__version__, prog_name="giftool")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
def main(log_level: str) -> None:
    """🎞️ giftool: GIF compression, preview and inspection via gifsicle."""
    setup_logging(log_level)


main.add_command(compress)
main.add_command(first_frame)
main.add_command(info)
main.add_command(doctor)

__all__ = [
    "compress",
    "doctor",
    "first_frame",
    "info",
    "main",
]
