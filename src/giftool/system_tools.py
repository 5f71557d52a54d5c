"""Platform resolution and discovery of the gifsicle binary.

giftool ships (or expects) one gifsicle build per supported platform under
``giftool/bin/<platform_key>/``.  These helpers map the host OS onto one of
those keys and locate a binary that the bootstrap step can copy into its
private working directory.
"""

from __future__ import annotations

import logging
import os
import platform
import re
import subprocess
from dataclasses import dataclass
from enum import Enum
from importlib import resources
from pathlib import Path
from shutil import which

from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .error_handling import ToolNotFoundError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

TOOL_NAME = "gifsicle"

_VERSION_PATTERN = r"LCDF Gifsicle (\S+)"


class PlatformKey(str, Enum):
    """Supported gifsicle builds."""

    LINUX_X64 = "linux_x64"
    WINDOWS_X64 = "windows_x64"


@dataclass(frozen=True, slots=True)
class ToolInfo:
    """Metadata for a gifsicle binary discovered on the system."""

    name: str
    available: bool
    version: str | None = None
    source: str | None = None

    def require(self) -> None:
        """Raise ToolNotFoundError if the tool isn't available."""
        if not self.available:
            raise ToolNotFoundError(
                f"Required tool '{self.name}' not found. "
                "Bundle a binary under giftool/bin/<platform>/ or set GIFTOOL_GIFSICLE_PATH.",
                context={"tool": self.name},
            )


# ---------------------------------------------------------------------------
# Platform resolution
# ---------------------------------------------------------------------------


def resolve_platform_key(os_name: str | None = None) -> PlatformKey:
    """Map an operating-system identifier onto a supported platform key.

    Args:
        os_name: OS identifier such as ``"Linux"`` or ``"Windows 10"``.
            Defaults to ``platform.system()``.

    Returns:
        The matching PlatformKey.

    Raises:
        UnsupportedPlatformError: For any OS family without a gifsicle build.
    """
    if os_name is None:
        os_name = platform.system()
    name = os_name.strip().lower()

    # "darwin" contains "win", so it has to be excluded explicitly.
    if "win" in name and "darwin" not in name:
        return PlatformKey.WINDOWS_X64
    if "nix" in name or "nux" in name or "aix" in name:
        return PlatformKey.LINUX_X64

    raise UnsupportedPlatformError(
        f"No gifsicle build for operating system {os_name!r}",
        context={"os_name": os_name},
    )


def executable_suffix(platform_key: PlatformKey) -> str:
    """Return the executable filename suffix for *platform_key*."""
    return ".exe" if platform_key is PlatformKey.WINDOWS_X64 else ""


def executable_name(platform_key: PlatformKey) -> str:
    return TOOL_NAME + executable_suffix(platform_key)


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def _which(cmd: str) -> str | None:
    """Return full path if *cmd* is executable in $PATH, else *None*."""
    return which(cmd)


def _extract_version(output: str, pattern: str) -> str | None:
    match = re.search(pattern, output)
    if match:
        return match.group(1)
    return None


def _run_version_cmd(cmd: list[str], regex: str) -> str | None:
    try:
        completed = subprocess.run(cmd, capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Version check {cmd} failed: {e}")
        return None

    return _extract_version(completed.stdout, regex) or _extract_version(
        completed.stderr, regex
    )


def bundled_binary(platform_key: PlatformKey) -> Path | None:
    """Return the packaged gifsicle for *platform_key*, if one is shipped."""
    resource = resources.files("giftool") / "bin" / platform_key.value / executable_name(platform_key)
    if resource.is_file():
        return Path(str(resource))
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_gifsicle_version(path: str | os.PathLike[str]) -> str | None:
    """Return the version reported by ``gifsicle --version``, or None."""
    return _run_version_cmd([str(path), "--version"], _VERSION_PATTERN)


def discover_gifsicle(
    platform_key: PlatformKey | None = None,
    engine_config: EngineConfig | None = None,
    with_version: bool = False,
) -> ToolInfo:
    """Locate a gifsicle binary to bootstrap from.

    Tries, in order: the binary bundled for *platform_key*, the configured
    ``GIFSICLE_PATH``, then ``gifsicle`` on ``PATH``.

    Args:
        platform_key: Platform to look up; resolved from the host when None.
        engine_config: EngineConfig instance (uses DEFAULT_ENGINE_CONFIG if None)
        with_version: Also run ``--version`` on the binary found.

    Returns:
        ToolInfo whose ``name`` is the absolute path when available.
    """
    if engine_config is None:
        engine_config = DEFAULT_ENGINE_CONFIG
    if platform_key is None:
        platform_key = resolve_platform_key()

    candidates: list[tuple[str, str | None]] = []
    if engine_config.USE_BUNDLED_BINARY:
        bundled = bundled_binary(platform_key)
        candidates.append(("bundled", str(bundled) if bundled else None))
    candidates.append(("configured", _which(engine_config.GIFSICLE_PATH)))
    if engine_config.GIFSICLE_PATH != TOOL_NAME:
        candidates.append(("path", _which(TOOL_NAME)))

    for source, found in candidates:
        if found:
            version = get_gifsicle_version(found) if with_version else None
            logger.debug(f"Found {source} gifsicle at {found}")
            return ToolInfo(name=found, available=True, version=version, source=source)

    return ToolInfo(name=engine_config.GIFSICLE_PATH, available=False)
