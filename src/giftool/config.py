"""Configuration settings for giftool."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class EngineConfig:
    """Configuration for the gifsicle executable with environment variable overrides."""

    # Fallback gifsicle used as the bootstrap copy source when the package
    # does not bundle a binary for the current platform.
    # On Windows this may need to be a full path, e.g.
    # "C:/Program Files/gifsicle/gifsicle.exe"
    # Override with: GIFTOOL_GIFSICLE_PATH
    GIFSICLE_PATH: str = "gifsicle"

    # Prefer the binary shipped under giftool/bin/<platform_key>/ when present.
    USE_BUNDLED_BINARY: bool = True

    def __post_init__(self) -> None:
        """Apply environment variable overrides after initialization."""
        env_value = os.getenv("GIFTOOL_GIFSICLE_PATH")
        if env_value:
            self.GIFSICLE_PATH = env_value


@dataclass
class PathConfig:
    """Configuration for the private working directory layout.

    The working directory holds the copied gifsicle executable, and its
    cache subdirectory holds per-call staged files.
    """

    # Parent of the working directory. None means the process CWD at the
    # time the paths are first used.
    # Override with: GIFTOOL_WORK_ROOT
    WORK_ROOT: Path | None = None

    WORK_DIR_NAME: str = "gifsicle_tmp"
    CACHE_DIR_NAME: str = "data_cache"

    def __post_init__(self) -> None:
        env_value = os.getenv("GIFTOOL_WORK_ROOT")
        if env_value and self.WORK_ROOT is None:
            self.WORK_ROOT = Path(env_value)

        for name in (self.WORK_DIR_NAME, self.CACHE_DIR_NAME):
            if not name or Path(name).name != name:
                raise ValueError(f"Directory name must be a single path component, got {name!r}")

    @property
    def work_dir(self) -> Path:
        root = self.WORK_ROOT if self.WORK_ROOT is not None else Path.cwd()
        return Path(root).resolve() / self.WORK_DIR_NAME

    @property
    def cache_dir(self) -> Path:
        return self.work_dir / self.CACHE_DIR_NAME


@dataclass
class ServiceConfig:
    """Configuration for image service operations."""

    # Seconds before a gifsicle run is killed; 0 disables the limit.
    # Override with: GIFTOOL_RUN_TIMEOUT
    RUN_TIMEOUT: int = 60

    # GIF palette bounds; requested colour counts outside them fall back
    # to DEFAULT_COLORS.
    DEFAULT_COLORS: int = 256
    MIN_COLORS: int = 2
    MAX_COLORS: int = 256

    def __post_init__(self) -> None:
        env_value = os.getenv("GIFTOOL_RUN_TIMEOUT")
        if env_value:
            try:
                self.RUN_TIMEOUT = int(env_value)
            except ValueError as e:
                raise ValueError(
                    f"GIFTOOL_RUN_TIMEOUT must be an integer number of seconds, got {env_value!r}"
                ) from e

        if self.RUN_TIMEOUT < 0:
            raise ValueError(f"RUN_TIMEOUT must be non-negative, got {self.RUN_TIMEOUT}")

        if not 2 <= self.MIN_COLORS <= self.MAX_COLORS <= 256:
            raise ValueError(
                f"Colour bounds must satisfy 2 <= MIN_COLORS <= MAX_COLORS <= 256, "
                f"got MIN_COLORS={self.MIN_COLORS}, MAX_COLORS={self.MAX_COLORS}"
            )
        if not self.MIN_COLORS <= self.DEFAULT_COLORS <= self.MAX_COLORS:
            raise ValueError(
                f"DEFAULT_COLORS must lie within [{self.MIN_COLORS}, {self.MAX_COLORS}], "
                f"got {self.DEFAULT_COLORS}"
            )

    @property
    def timeout(self) -> float | None:
        """Timeout in seconds for subprocess calls, or None when disabled."""
        return float(self.RUN_TIMEOUT) if self.RUN_TIMEOUT > 0 else None


# Default configuration instances
DEFAULT_ENGINE_CONFIG = EngineConfig()
DEFAULT_PATH_CONFIG = PathConfig()
DEFAULT_SERVICE_CONFIG = ServiceConfig()
