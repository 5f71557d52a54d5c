"""Staged cache files for gifsicle input and output.

gifsicle works on file paths, so caller bytes are written to uniquely named
files in the cache directory for the duration of one call.
"""

import logging
import secrets
import string
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

NAME_LENGTH = 32
NAME_ALPHABET = string.ascii_lowercase + string.digits
STAGED_SUFFIX = ".gif"


@dataclass(frozen=True, slots=True)
class CacheFile:
    """A staged file owned by exactly one service call."""

    path: Path
    created_at: float = field(default_factory=time.time)


def random_name(length: int = NAME_LENGTH) -> str:
    """Return a random identifier of *length* lowercase letters and digits."""
    return "".join(secrets.choice(NAME_ALPHABET) for _ in range(length))


class TempFileManager:
    """Creates and deletes staged files inside *cache_dir*."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    def stage(self, data: bytes, suffix: str = STAGED_SUFFIX) -> CacheFile:
        """Write *data* to a new uniquely named file and return it.

        The file is opened in exclusive-create mode, so a name collision
        retries with a fresh name instead of overwriting another call's file.
        """
        while True:
            path = self.cache_dir / f"{random_name()}{suffix}"
            try:
                with open(path, "xb") as f:
                    f.write(data)
            except FileExistsError:
                continue
            except BaseException:
                self.release(path)
                raise
            logger.debug(f"Staged {len(data)} bytes at {path}")
            return CacheFile(path=path)

    def release(self, target: Path | CacheFile) -> None:
        """Delete a staged file; an already missing file is not an error."""
        path = target.path if isinstance(target, CacheFile) else Path(target)
        path.unlink(missing_ok=True)
        logger.debug(f"Released {path}")

    @contextmanager
    def staged(self, data: bytes) -> Iterator[CacheFile]:
        """Stage *data* for the duration of the ``with`` block."""
        cache_file = self.stage(data)
        try:
            yield cache_file
        finally:
            self.release(cache_file)

    @contextmanager
    def derived(self, cache_file: CacheFile, suffix: str) -> Iterator[Path]:
        """Yield a sibling path of *cache_file* with *suffix*, deleted on exit.

        The path is only reserved by name; the caller's tool creates it.
        """
        path = cache_file.path.with_suffix(suffix)
        try:
            yield path
        finally:
            self.release(path)
