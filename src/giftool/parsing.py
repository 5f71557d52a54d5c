"""Parsing of the ``gifsicle -I`` report into typed image metadata.

This is the only module that knows the wording of gifsicle's text output.
The layout it expects (gifsicle 1.9x)::

    * /path/to/file.gif 10 images
      logical screen 800x600
      global color table [128]
      background 0
      loop forever
      + image #0 800x600
        delay 0.10s

Every field is required. A report that does not match raises
UnparseableOutputError rather than falling back to guessed values, since a
different layout usually means an unexpected gifsicle version.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any

from .error_handling import UnparseableOutputError

_FRAMES_RE = re.compile(r"\.gif\s+(\d+)\s+images?\b", re.IGNORECASE)
_SCREEN_RE = re.compile(r"logical screen\s+(\d+)x(\d+)")
_COLOR_TABLE_RE = re.compile(r"global color table\s+\[(\d+)\]")


@dataclass(frozen=True)
class ImageInfo:
    """Metadata of a GIF as reported by gifsicle."""

    frames_count: int
    image_width: int
    image_height: int
    image_colors: int
    file_size: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _first_match(pattern: re.Pattern[str], raw_text: str, field_name: str) -> re.Match[str]:
    """Return the first line match of *pattern*.

    gifsicle warnings share the stream with the report and may mention the
    file name, so lines that do not match are skipped rather than rejected.
    """
    for line in raw_text.splitlines():
        match = pattern.search(line)
        if match is not None:
            return match
    raise UnparseableOutputError(
        f"Cannot read {field_name} from gifsicle info output",
        context={"output": raw_text[:500]},
    )


def parse_frames_count(raw_text: str) -> int:
    return int(_first_match(_FRAMES_RE, raw_text, "frame count").group(1))


def parse_logical_screen(raw_text: str) -> tuple[int, int]:
    match = _first_match(_SCREEN_RE, raw_text, "logical screen size")
    return int(match.group(1)), int(match.group(2))


def parse_color_table_size(raw_text: str) -> int:
    return int(_first_match(_COLOR_TABLE_RE, raw_text, "global color table size").group(1))


def parse_info(raw_text: str, file_size: int = 0) -> ImageInfo:
    """Build ImageInfo from ``gifsicle -I`` output.

    Args:
        raw_text: Captured gifsicle output
        file_size: Size in bytes of the inspected file

    Returns:
        ImageInfo with frame count, logical screen size and colour table size

    Raises:
        UnparseableOutputError: If a field is missing or out of range
    """
    frames_count = parse_frames_count(raw_text)
    width, height = parse_logical_screen(raw_text)
    colors = parse_color_table_size(raw_text)

    if width <= 0 or height <= 0:
        raise UnparseableOutputError(f"Invalid logical screen size {width}x{height}")
    if not 2 <= colors <= 256:
        raise UnparseableOutputError(f"Global color table size {colors} outside [2, 256]")
    if file_size < 0:
        raise ValueError(f"file_size must be non-negative, got {file_size}")

    return ImageInfo(
        frames_count=frames_count,
        image_width=width,
        image_height=height,
        image_colors=colors,
        file_size=file_size,
    )
