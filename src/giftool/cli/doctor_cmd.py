"""Doctor command: diagnose the gifsicle setup."""

import json

import click
from rich.console import Console
from rich.table import Table

from ..config import DEFAULT_ENGINE_CONFIG, DEFAULT_PATH_CONFIG
from ..error_handling import UnsupportedPlatformError
from ..system_tools import discover_gifsicle, resolve_platform_key


@click.command()
@click.option("--json", "output_json", is_flag=True, help="Output results in JSON format")
def doctor(output_json: bool) -> None:
    """Check platform support and gifsicle availability."""
    try:
        platform_key = resolve_platform_key()
    except UnsupportedPlatformError as e:
        click.echo(f"❌ {e}", err=True)
        raise SystemExit(1) from e

    tool = discover_gifsicle(platform_key, DEFAULT_ENGINE_CONFIG, with_version=True)
    report = {
        "platform": platform_key.value,
        "gifsicle": {
            "available": tool.available,
            "path": tool.name,
            "source": tool.source,
            "version": tool.version,
        },
        "work_dir": str(DEFAULT_PATH_CONFIG.work_dir),
        "cache_dir": str(DEFAULT_PATH_CONFIG.cache_dir),
    }

    if output_json:
        click.echo(json.dumps(report, indent=2))
    else:
        table = Table(title="🩺 giftool doctor")
        table.add_column("Check", style="cyan")
        table.add_column("Value")
        table.add_row("Platform", platform_key.value)
        status = "✅ available" if tool.available else "❌ missing"
        table.add_row("gifsicle", f"{status} ({tool.source or 'not found'})")
        table.add_row("Path", tool.name)
        table.add_row("Version", tool.version or "unknown")
        table.add_row("Working dir", report["work_dir"])
        Console().print(table)

    if not tool.available:
        raise SystemExit(1)
