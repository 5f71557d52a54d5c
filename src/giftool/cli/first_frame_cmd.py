"""First-frame command: write frame 0 of a GIF as a static preview."""

from pathlib import Path

import click

from .utils import get_service, handle_generic_error, write_output


@click.command("first-frame")
@click.argument(
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--width", "-w", type=click.IntRange(min=1), default=None, help="Resize to this width")
@click.option("--height", "-h", type=click.IntRange(min=1), default=None, help="Resize to this height")
def first_frame(input_path: Path, output_path: Path, width: int | None, height: int | None) -> None:
    """Extract the first frame of INPUT_PATH into OUTPUT_PATH."""
    service = get_service()
    try:
        result = service.extract_first_frame(
            input_path.read_bytes(), resize_width=width, resize_height=height
        )
        write_output(output_path, result)
    except Exception as e:
        handle_generic_error("First frame extraction", e)
