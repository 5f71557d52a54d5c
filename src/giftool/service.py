"""Public image service: compress, extract the first frame, read metadata.

Usage:
    service = GifImageService.create()
    smaller = service.compress(gif_bytes, resize_width=540)
    preview = service.extract_first_frame(gif_bytes, resize_width=200)
    info = service.get_metadata(gif_bytes)
"""

from __future__ import annotations

import logging
from pathlib import Path

from .bootstrap import WorkingExecutable, ensure_ready
from .commands import (
    FIRST_FRAME_SUFFIX,
    CompressionRequest,
    OperationKind,
    build_command,
    shrink_only,
)
from .config import DEFAULT_SERVICE_CONFIG, EngineConfig, PathConfig, ServiceConfig
from .error_handling import ImageOperationError, ProcessExecutionError, error_context
from .parsing import ImageInfo, parse_info
from .process import ProcessResult, run_process
from .staging import TempFileManager
from .validation import require_gif

logger = logging.getLogger(__name__)


class GifImageService:
    """Runs gifsicle on caller-supplied GIF bytes.

    Every call validates its input before touching the filesystem, stages the
    bytes in the cache directory, and deletes every staged file before it
    returns or raises. Failures after validation are reported as
    ImageOperationError with the original error as ``cause``.

    Instances hold no mutable state and can be shared between threads.
    """

    def __init__(self, executable: WorkingExecutable, config: ServiceConfig | None = None):
        self.executable = executable
        self.config = config if config is not None else DEFAULT_SERVICE_CONFIG
        self.temp_files = TempFileManager(executable.cache_dir)

    @classmethod
    def create(
        cls,
        path_config: PathConfig | None = None,
        engine_config: EngineConfig | None = None,
        config: ServiceConfig | None = None,
    ) -> GifImageService:
        """Bootstrap gifsicle and return a service bound to it."""
        return cls(ensure_ready(path_config, engine_config), config)

    def _run(self, kind: OperationKind, input_path: Path, **options) -> ProcessResult:
        cmd = build_command(kind, self.executable.path, input_path, **options)
        result = run_process(cmd[0], cmd[1:], timeout=self.config.timeout)
        if result.output.strip():
            logger.debug(f"gifsicle {kind.value} output:\n{result.output.rstrip()}")
        return result.check()

    @staticmethod
    def _read_output(path: Path) -> bytes:
        if not path.is_file():
            raise ProcessExecutionError(f"gifsicle did not produce {path}")
        return path.read_bytes()

    def compress(
        self,
        image_bytes: bytes,
        resize_width: int | None = None,
        resize_height: int | None = None,
        colors: int | None = None,
    ) -> bytes:
        """Optimise a GIF with ``-O3``, optionally resizing and reducing colours.

        Args:
            image_bytes: GIF content
            resize_width: Target width, applied only when smaller than the current width;
                height follows the aspect ratio unless given
            resize_height: Target height, applied only when smaller than the current height
            colors: Palette size in [2, 256]; anything else means 256

        Returns:
            The optimised GIF bytes

        Raises:
            InvalidInputError: If *image_bytes* is empty or not a GIF
            ImageOperationError: If gifsicle fails
        """
        request = CompressionRequest.create(
            require_gif(image_bytes), resize_width, resize_height, colors, self.config
        )
        context = {
            "resize_width": request.resize_width,
            "resize_height": request.resize_height,
            "colors": request.colors,
        }
        with error_context("compress GIF", ImageOperationError, context=context, logger=logger):
            with self.temp_files.staged(request.image_bytes) as cache_file:
                resize_width, resize_height = request.resize_width, request.resize_height
                if resize_width or resize_height:
                    current = parse_info(self._run(OperationKind.INFO, cache_file.path).output)
                    resize_width, resize_height = shrink_only(
                        resize_width, resize_height, current.image_width, current.image_height
                    )
                self._run(
                    OperationKind.COMPRESS,
                    cache_file.path,
                    resize_width=resize_width,
                    resize_height=resize_height,
                    colors=request.colors,
                )
                result = self._read_output(cache_file.path)

        logger.info(f"Compressed GIF from {len(request.image_bytes)} to {len(result)} bytes")
        return result

    def extract_first_frame(
        self,
        image_bytes: bytes,
        resize_width: int | None = None,
        resize_height: int | None = None,
    ) -> bytes:
        """Return frame 0 of a GIF as a standalone image.

        Raises:
            InvalidInputError: If *image_bytes* is empty or not a GIF
            ImageOperationError: If gifsicle fails or writes no output
        """
        data = require_gif(image_bytes)
        context = {"resize_width": resize_width, "resize_height": resize_height}
        with error_context("extract first frame", ImageOperationError, context=context, logger=logger):
            with self.temp_files.staged(data) as cache_file:
                with self.temp_files.derived(cache_file, FIRST_FRAME_SUFFIX) as output_path:
                    self._run(
                        OperationKind.FIRST_FRAME,
                        cache_file.path,
                        output_path=output_path,
                        resize_width=resize_width,
                        resize_height=resize_height,
                    )
                    result = self._read_output(output_path)

        logger.info(f"Extracted first frame ({len(result)} bytes)")
        return result

    def get_metadata(self, image_bytes: bytes) -> ImageInfo:
        """Read frame count, logical screen size and colour table size.

        Raises:
            InvalidInputError: If *image_bytes* is empty or not a GIF
            ImageOperationError: If gifsicle fails or its report cannot be parsed
        """
        data = require_gif(image_bytes)
        with error_context("read GIF metadata", ImageOperationError, logger=logger):
            with self.temp_files.staged(data) as cache_file:
                result = self._run(OperationKind.INFO, cache_file.path)
            info = parse_info(result.output, file_size=len(data))

        logger.debug(f"GIF metadata: {info}")
        return info
