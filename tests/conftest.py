import io
import shutil
from pathlib import Path

import pytest
from PIL import Image

from giftool.bootstrap import WorkingExecutable
from giftool.config import EngineConfig, PathConfig
from giftool.service import GifImageService
from giftool.system_tools import PlatformKey

# ---------------------------------------------------------------------------
# GIF fixtures generated in memory so the repo stays slim
# ---------------------------------------------------------------------------


def make_gif(frames: int = 4, size: tuple[int, int] = (40, 30), colors: int = 4) -> bytes:
    """Build an animated GIF with *frames* distinct frames and a *colors* palette.

    Each frame is vertical stripes using every palette entry, shifted by one
    stripe per frame so no two consecutive frames are identical.
    """
    width, height = size
    palette = []
    for i in range(colors):
        val = int(i * 255 / max(colors - 1, 1))
        palette.extend((val, (val * 7) % 256, 255 - val))

    images = []
    for f in range(frames):
        img = Image.new("P", size)
        img.putpalette(palette)
        stripe = max(width // colors, 1)
        img.putdata([((x // stripe + f) % colors) for _ in range(height) for x in range(width)])
        images.append(img)

    buf = io.BytesIO()
    images[0].save(
        buf,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=100,
        loop=0,
        optimize=False,
    )
    return buf.getvalue()


@pytest.fixture
def gif_factory():
    return make_gif


@pytest.fixture
def gif_bytes() -> bytes:
    """Small 4-frame, 40x30, 4-colour animated GIF."""
    return make_gif()


@pytest.fixture
def jpeg_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (255, 0, 0)).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def working_executable(tmp_path: Path) -> WorkingExecutable:
    """A handle with real directories but a placeholder binary."""
    work_dir = tmp_path / "gifsicle_tmp"
    cache_dir = work_dir / "data_cache"
    cache_dir.mkdir(parents=True)
    exe = work_dir / "gifsicle"
    exe.write_bytes(b"")
    return WorkingExecutable(
        path=exe,
        platform_key=PlatformKey.LINUX_X64,
        work_dir=work_dir,
        cache_dir=cache_dir,
    )


# ---------------------------------------------------------------------------
# Real gifsicle
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def gifsicle_path() -> str:
    path = shutil.which("gifsicle")
    if path is None:
        pytest.skip("gifsicle is not installed")
    return path


@pytest.fixture
def service(gifsicle_path: str, tmp_path: Path) -> GifImageService:
    """Service bootstrapped from the system gifsicle into *tmp_path*."""
    return GifImageService.create(
        path_config=PathConfig(WORK_ROOT=tmp_path),
        engine_config=EngineConfig(GIFSICLE_PATH=gifsicle_path, USE_BUNDLED_BINARY=False),
    )
