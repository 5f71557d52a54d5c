"""Tests for giftool.bootstrap module."""

import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from giftool.bootstrap import WorkingExecutable, ensure_ready
from giftool.config import EngineConfig, PathConfig
from giftool.error_handling import (
    DirectoryCreationError,
    ToolNotFoundError,
    UnsupportedPlatformError,
)
from giftool.system_tools import PlatformKey, ToolInfo


@pytest.fixture
def source_binary(tmp_path: Path) -> Path:
    """A stand-in gifsicle binary with recognisable content."""
    source = tmp_path / "src" / "gifsicle"
    source.parent.mkdir()
    source.write_bytes(b"#!/bin/sh\necho gifsicle\n" + bytes(range(256)) * 512)
    return source


@pytest.fixture
def discovered(source_binary: Path):
    info = ToolInfo(name=str(source_binary), available=True, source="configured")
    with patch("giftool.bootstrap.discover_gifsicle", return_value=info) as mock_discover:
        yield mock_discover


class TestEnsureReady:
    """Tests for ensure_ready function."""

    @pytest.mark.fast
    def test_creates_directories_and_copies_binary(self, tmp_path, source_binary, discovered):
        config = PathConfig(WORK_ROOT=tmp_path / "root")

        ready = ensure_ready(config, os_name="Linux")

        assert isinstance(ready, WorkingExecutable)
        assert ready.platform_key is PlatformKey.LINUX_X64
        assert ready.work_dir == config.work_dir
        assert ready.cache_dir.is_dir()
        assert ready.path == config.work_dir / "gifsicle"
        assert ready.path.read_bytes() == source_binary.read_bytes()
        if os.name == "posix":
            assert os.access(ready.path, os.X_OK)

    @pytest.mark.fast
    def test_windows_copy_uses_exe_suffix(self, tmp_path, discovered):
        ready = ensure_ready(PathConfig(WORK_ROOT=tmp_path / "win"), os_name="Windows 10")

        assert ready.platform_key is PlatformKey.WINDOWS_X64
        assert ready.path.name == "gifsicle.exe"

    @pytest.mark.fast
    def test_repeated_calls_are_idempotent(self, tmp_path, discovered):
        config = PathConfig(WORK_ROOT=tmp_path / "root")

        first = ensure_ready(config, os_name="Linux")
        second = ensure_ready(config, os_name="Linux")

        assert first is second
        assert discovered.call_count == 1

    @pytest.mark.fast
    def test_existing_executable_is_not_overwritten(self, tmp_path, discovered):
        config = PathConfig(WORK_ROOT=tmp_path / "root")
        config.work_dir.mkdir(parents=True)
        existing = config.work_dir / "gifsicle"
        existing.write_bytes(b"already here")

        ready = ensure_ready(config, os_name="Linux")

        assert ready.path.read_bytes() == b"already here"
        discovered.assert_not_called()

    @pytest.mark.fast
    def test_concurrent_first_calls_copy_once(self, tmp_path, discovered):
        config = PathConfig(WORK_ROOT=tmp_path / "root")
        results: list[WorkingExecutable] = []
        errors: list[Exception] = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            try:
                results.append(ensure_ready(config, os_name="Linux"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(results) == 8
        assert all(r is results[0] for r in results)
        assert discovered.call_count == 1
        leftovers = [p.name for p in config.work_dir.iterdir() if p.name.endswith(".partial")]
        assert leftovers == []

    @pytest.mark.fast
    def test_directory_creation_failure(self, tmp_path, discovered):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        config = PathConfig(WORK_ROOT=blocker)

        with pytest.raises(DirectoryCreationError):
            ensure_ready(config, os_name="Linux")

    @pytest.mark.fast
    def test_mkdir_oserror_is_wrapped(self, tmp_path, discovered):
        config = PathConfig(WORK_ROOT=tmp_path / "root")

        with patch("giftool.bootstrap.Path.mkdir", side_effect=PermissionError("denied")):
            with pytest.raises(DirectoryCreationError) as exc_info:
                ensure_ready(config, os_name="Linux")

        assert isinstance(exc_info.value.cause, PermissionError)

    @pytest.mark.fast
    def test_unsupported_platform(self, tmp_path, discovered):
        with pytest.raises(UnsupportedPlatformError):
            ensure_ready(PathConfig(WORK_ROOT=tmp_path), os_name="Darwin")
        assert not (tmp_path / "gifsicle_tmp").exists()

    @pytest.mark.fast
    def test_missing_tool(self, tmp_path):
        missing = ToolInfo(name="gifsicle", available=False)
        with patch("giftool.bootstrap.discover_gifsicle", return_value=missing):
            with pytest.raises(ToolNotFoundError, match="Required tool 'gifsicle' not found"):
                ensure_ready(PathConfig(WORK_ROOT=tmp_path / "root"), os_name="Linux")

        assert not (tmp_path / "root" / "gifsicle_tmp" / "gifsicle").exists()

    @pytest.mark.external
    def test_bootstrap_from_system_gifsicle(self, tmp_path, gifsicle_path):
        engine = EngineConfig(GIFSICLE_PATH=gifsicle_path, USE_BUNDLED_BINARY=False)

        ready = ensure_ready(PathConfig(WORK_ROOT=tmp_path), engine)

        assert ready.path.is_file()
        assert ready.path.stat().st_size == Path(gifsicle_path).stat().st_size
