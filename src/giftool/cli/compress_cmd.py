"""Compress command: optimise a GIF file with gifsicle -O3."""

from pathlib import Path

import click

from .utils import get_service, handle_generic_error, write_output


@click.command()
@click.argument(
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--width", "-w", type=click.IntRange(min=1), default=None, help="Resize to this width")
@click.option("--height", "-h", type=click.IntRange(min=1), default=None, help="Resize to this height")
@click.option(
    "--colors",
    "-c",
    type=int,
    default=None,
    help="Palette size between 2 and 256 (other values mean 256)",
)
def compress(
    input_path: Path,
    output_path: Path,
    width: int | None,
    height: int | None,
    colors: int | None,
) -> None:
    """Compress INPUT_PATH and write the optimised GIF to OUTPUT_PATH.

    When only one of --width/--height is given the aspect ratio is kept.
    """
    service = get_service()
    try:
        data = input_path.read_bytes()
        result = service.compress(data, resize_width=width, resize_height=height, colors=colors)
        write_output(output_path, result, original_size=len(data))
    except Exception as e:
        handle_generic_error("Compression", e)
