"""One-time setup that makes gifsicle available as a local executable.

``ensure_ready`` creates the private working directory and its cache
subdirectory, then copies the platform's gifsicle binary into the working
directory. The returned :class:`WorkingExecutable` is immutable and is what
the image service is constructed from.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import threading
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_ENGINE_CONFIG, DEFAULT_PATH_CONFIG, EngineConfig, PathConfig
from .error_handling import DirectoryCreationError
from .system_tools import PlatformKey, discover_gifsicle, executable_name, resolve_platform_key

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class WorkingExecutable:
    """Handle to the gifsicle copy inside the private working directory."""

    path: Path
    platform_key: PlatformKey
    work_dir: Path
    cache_dir: Path


# Guards the whole check-directories / check-file / copy sequence.
_BOOTSTRAP_LOCK = threading.Lock()
_READY: dict[Path, WorkingExecutable] = {}


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(
            f"Failed to create directory {path}", cause=e, context={"path": str(path)}
        ) from e
    if not path.is_dir():
        raise DirectoryCreationError(
            f"Failed to create directory {path}: path exists and is not a directory",
            context={"path": str(path)},
        )


def _copy_executable(source: Path, target: Path) -> None:
    """Copy *source* to *target* through a sibling temp file and rename."""
    partial = target.with_name(f".{target.name}.{os.getpid()}.partial")
    try:
        with open(source, "rb") as src, open(partial, "wb") as dst:
            shutil.copyfileobj(src, dst, COPY_BUFFER_SIZE)
        mode = partial.stat().st_mode
        partial.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        os.replace(partial, target)
    finally:
        partial.unlink(missing_ok=True)


def ensure_ready(
    path_config: PathConfig | None = None,
    engine_config: EngineConfig | None = None,
    os_name: str | None = None,
) -> WorkingExecutable:
    """Create the working directories and copy gifsicle into place.

    Safe to call from several threads and any number of times: the first
    call for a working directory does the work, later calls return the same
    handle. An executable already present on disk is never overwritten.

    Args:
        path_config: Working directory layout (DEFAULT_PATH_CONFIG if None)
        engine_config: Fallback gifsicle location (DEFAULT_ENGINE_CONFIG if None)
        os_name: OS identifier override, mainly for tests

    Returns:
        WorkingExecutable pointing at the copied binary.

    Raises:
        UnsupportedPlatformError: If the host OS has no gifsicle build
        DirectoryCreationError: If a directory cannot be created
        ToolNotFoundError: If the binary is missing and no copy source exists
    """
    if path_config is None:
        path_config = DEFAULT_PATH_CONFIG
    if engine_config is None:
        engine_config = DEFAULT_ENGINE_CONFIG

    platform_key = resolve_platform_key(os_name)
    work_dir = path_config.work_dir
    cache_dir = path_config.cache_dir

    with _BOOTSTRAP_LOCK:
        ready = _READY.get(work_dir)
        if ready is not None and ready.path.is_file() and ready.cache_dir.is_dir():
            return ready

        _make_dir(work_dir)
        _make_dir(cache_dir)

        target = work_dir / executable_name(platform_key)
        if not target.exists():
            tool = discover_gifsicle(platform_key, engine_config)
            tool.require()
            logger.info(f"Copying {tool.source} gifsicle {tool.name} to {target}")
            _copy_executable(Path(tool.name), target)
        else:
            logger.debug(f"Reusing gifsicle already present at {target}")

        ready = WorkingExecutable(
            path=target,
            platform_key=platform_key,
            work_dir=work_dir,
            cache_dir=cache_dir,
        )
        _READY[work_dir] = ready
        return ready
