"""giftool - GIF compression, first-frame extraction and inspection via gifsicle."""

__version__: str = "0.1.0"

# Public re-exports for convenience ---------------------------------------------------

from .bootstrap import WorkingExecutable, ensure_ready
from .config import EngineConfig, PathConfig, ServiceConfig
from .error_handling import (
    DirectoryCreationError,
    GifToolError,
    ImageOperationError,
    InvalidInputError,
    ProcessExecutionError,
    ProcessTimeoutError,
    ToolNotFoundError,
    UnparseableOutputError,
    UnsupportedPlatformError,
)
from .parsing import ImageInfo
from .service import GifImageService
from .system_tools import PlatformKey

__all__ = [
    "DirectoryCreationError",
    "EngineConfig",
    "GifImageService",
    "GifToolError",
    "ImageInfo",
    "ImageOperationError",
    "InvalidInputError",
    "PathConfig",
    "PlatformKey",
    "ProcessExecutionError",
    "ProcessTimeoutError",
    "ServiceConfig",
    "ToolNotFoundError",
    "UnparseableOutputError",
    "UnsupportedPlatformError",
    "WorkingExecutable",
    "ensure_ready",
]
