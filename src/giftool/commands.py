"""gifsicle command construction.

Reference: https://www.lcdf.org/gifsicle/

Commands built here:
    compress:     gifsicle -O3 -o FILE FILE --colors=N [--resize-width=W] [--resize-height=H]
    first frame:  gifsicle INPUT #0 -o OUTPUT [--resize-width=W] [--resize-height=H]
    info:         gifsicle -I FILE

Arguments are always returned as lists so that omitted options never leave
empty tokens behind. ``#0`` is a frame selector and must follow the input
file; it is one argv entry and needs no shell quoting.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import DEFAULT_SERVICE_CONFIG, ServiceConfig

FIRST_FRAME_SUFFIX = ".png"


class OperationKind(Enum):
    """gifsicle invocations used by the image service."""

    COMPRESS = "compress"
    FIRST_FRAME = "first_frame"
    INFO = "info"


def normalize_colors(colors: int | None, config: ServiceConfig | None = None) -> int:
    """Coerce a requested palette size into the GIF range.

    Absent or out-of-range values fall back to the default (256).
    """
    if config is None:
        config = DEFAULT_SERVICE_CONFIG
    if colors is None or colors < config.MIN_COLORS or colors > config.MAX_COLORS:
        return config.DEFAULT_COLORS
    return int(colors)


@dataclass(frozen=True)
class CompressionRequest:
    """Parameters of one compress call, with colours already normalised."""

    image_bytes: bytes
    resize_width: int | None = None
    resize_height: int | None = None
    colors: int = 256

    @classmethod
    def create(
        cls,
        image_bytes: bytes,
        resize_width: int | None = None,
        resize_height: int | None = None,
        colors: int | None = None,
        config: ServiceConfig | None = None,
    ) -> CompressionRequest:
        return cls(
            image_bytes=image_bytes,
            resize_width=resize_width,
            resize_height=resize_height,
            colors=normalize_colors(colors, config),
        )


def resize_args(resize_width: int | None = None, resize_height: int | None = None) -> list[str]:
    """Build resize options; each is included only for a positive value.

    gifsicle keeps the aspect ratio when only one of the two is given.
    """
    args: list[str] = []
    if resize_width is not None and resize_width > 0:
        args.append(f"--resize-width={int(resize_width)}")
    if resize_height is not None and resize_height > 0:
        args.append(f"--resize-height={int(resize_height)}")
    return args


def shrink_only(
    resize_width: int | None,
    resize_height: int | None,
    current_width: int,
    current_height: int,
) -> tuple[int | None, int | None]:
    """Drop resize targets that are not smaller than the current size.

    gifsicle's ``--resize-width``/``--resize-height`` also enlarge, so a
    target at or above the image's own dimension is left out.
    """
    if resize_width is not None and resize_width >= current_width:
        resize_width = None
    if resize_height is not None and resize_height >= current_height:
        resize_height = None
    return resize_width, resize_height


def build_compress_args(
    path: str | os.PathLike[str],
    colors: int,
    resize_width: int | None = None,
    resize_height: int | None = None,
) -> list[str]:
    """Arguments for optimising *path* in place (output file == input file)."""
    file_arg = str(path)
    return [
        "-O3",
        "-o",
        file_arg,
        file_arg,
        f"--colors={colors}",
        *resize_args(resize_width, resize_height),
    ]


def build_first_frame_args(
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    resize_width: int | None = None,
    resize_height: int | None = None,
) -> list[str]:
    """Arguments for writing frame 0 of *input_path* to *output_path*."""
    return [
        str(input_path),
        "#0",
        "-o",
        str(output_path),
        *resize_args(resize_width, resize_height),
    ]


def build_info_args(path: str | os.PathLike[str]) -> list[str]:
    return ["-I", str(path)]


def first_frame_output_path(input_path: Path) -> Path:
    """Output path for an extracted frame: the input with its extension replaced."""
    return Path(input_path).with_suffix(FIRST_FRAME_SUFFIX)


def build_command(
    kind: OperationKind,
    executable: str | os.PathLike[str],
    input_path: Path,
    *,
    output_path: Path | None = None,
    resize_width: int | None = None,
    resize_height: int | None = None,
    colors: int | None = None,
) -> list[str]:
    """Build the full argv, executable first, for *kind*.

    Args:
        kind: Which gifsicle invocation to build
        executable: Path to the gifsicle binary
        input_path: Staged input file
        output_path: First-frame output; derived from *input_path* when None
        resize_width: Optional positive target width
        resize_height: Optional positive target height
        colors: Palette size for compression (normalised here)

    Returns:
        Command as a list of strings
    """
    if kind is OperationKind.COMPRESS:
        args = build_compress_args(
            input_path, normalize_colors(colors), resize_width, resize_height
        )
    elif kind is OperationKind.FIRST_FRAME:
        if output_path is None:
            output_path = first_frame_output_path(input_path)
        args = build_first_frame_args(input_path, output_path, resize_width, resize_height)
    elif kind is OperationKind.INFO:
        args = build_info_args(input_path)
    else:
        raise ValueError(f"Unknown operation kind: {kind}")
    return [str(executable), *args]
