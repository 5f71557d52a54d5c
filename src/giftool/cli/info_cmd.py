"""Info command: report frame count, size and palette of a GIF."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .utils import get_service, handle_generic_error


@click.command()
@click.argument(
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--json", "output_json", is_flag=True, help="Output results in JSON format")
def info(input_path: Path, output_json: bool) -> None:
    """Show metadata of INPUT_PATH as reported by gifsicle."""
    service = get_service()
    try:
        image_info = service.get_metadata(input_path.read_bytes())
    except Exception as e:
        handle_generic_error("Metadata inspection", e)
        return

    if output_json:
        click.echo(json.dumps(image_info.as_dict(), indent=2))
        return

    table = Table(title=f"🎞️ {input_path.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Frames", str(image_info.frames_count))
    table.add_row("Width", str(image_info.image_width))
    table.add_row("Height", str(image_info.image_height))
    table.add_row("Colors", str(image_info.image_colors))
    table.add_row("File size", f"{image_info.file_size} bytes")
    Console().print(table)
