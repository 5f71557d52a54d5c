"""Shared utilities for CLI commands."""

import sys
from pathlib import Path

import click

from ..error_handling import GifToolError, ImageOperationError
from ..io import atomic_write_bytes
from ..service import GifImageService


def handle_generic_error(command_name: str, error: Exception) -> None:
    """Handle generic command errors with consistent formatting."""
    if isinstance(error, ImageOperationError) and error.cause is not None:
        click.echo(f"❌ {command_name} failed ({error.kind}): {error.cause}", err=True)
    else:
        click.echo(f"❌ {command_name} failed: {error}", err=True)
    sys.exit(1)


def get_service() -> GifImageService:
    """Bootstrap gifsicle and return the image service, exiting on failure."""
    try:
        return GifImageService.create()
    except GifToolError as e:
        click.echo(f"❌ Cannot prepare gifsicle: {e}", err=True)
        click.echo("💡 Install gifsicle or set GIFTOOL_GIFSICLE_PATH", err=True)
        sys.exit(1)


def write_output(output_path: Path, data: bytes, original_size: int | None = None) -> None:
    """Write command output atomically and report its size."""
    atomic_write_bytes(output_path, data)
    if original_size:
        change = (1 - len(data) / original_size) * 100
        click.echo(f"✅ Wrote {output_path} ({original_size} → {len(data)} bytes, {change:.1f}% smaller)")
    else:
        click.echo(f"✅ Wrote {output_path} ({len(data)} bytes)")
