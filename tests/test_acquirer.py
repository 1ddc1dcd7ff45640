"""
Tests for the binary acquisition pipeline against a local release server.
"""

import os
import stat
import time
from pathlib import Path

import pytest

from phantom_cli.core.acquirer import BinaryAcquirer
from phantom_cli.core.paths import staging_path
from phantom_cli.exceptions import (
    DownloadFailedError,
    DownloadTimeoutError,
    PermissionFailedError,
    UnsupportedPlatformError,
    VerificationFailedError,
    WriteFailedError,
)
from tests.conftest import (
    BROKEN_BINARY,
    HANGING_BINARY,
    RELEASE_VERSION,
    WORKING_BINARY,
    posix_only,
)

pytestmark = posix_only

TARGET = "linux-x64"
ASSET = "phantom-linux-amd64"
ASSET_PATH = f"/gitvault-tech/gitvault/releases/download/v{RELEASE_VERSION}/{ASSET}"


def assert_nothing_installed(path: Path) -> None:
    assert not path.exists()
    assert not staging_path(path).exists()


class TestSuccessfulAcquisition:
    @pytest.mark.asyncio
    async def test_installs_verified_executable(self, release_server, make_config):
        release_server.assets[ASSET] = WORKING_BINARY
        config = make_config(release_server.base_url)

        result = await BinaryAcquirer(config).acquire(TARGET)

        assert result.path == config.executable_path
        assert result.asset_name == ASSET
        assert result.url == release_server.base_url + ASSET_PATH
        assert result.size == len(WORKING_BINARY)
        assert result.path.read_bytes() == WORKING_BINARY
        assert stat.S_IMODE(result.path.stat().st_mode) == 0o755
        assert not staging_path(result.path).exists()
        assert release_server.requests == [ASSET_PATH]

    @pytest.mark.asyncio
    async def test_creates_missing_bin_directory(self, release_server, make_config):
        release_server.assets[ASSET] = WORKING_BINARY
        config = make_config(release_server.base_url)
        assert not config.executable_path.parent.exists()

        await BinaryAcquirer(config).acquire(TARGET)

        assert config.executable_path.parent.is_dir()

    @pytest.mark.asyncio
    async def test_second_run_overwrites_first(self, release_server, make_config):
        config = make_config(release_server.base_url)
        release_server.assets[ASSET] = WORKING_BINARY
        await BinaryAcquirer(config).acquire(TARGET)

        newer = b"#!/bin/sh\n# rebuilt\nexit 0\n"
        release_server.assets[ASSET] = newer
        result = await BinaryAcquirer(config).acquire(TARGET)

        assert result.path.read_bytes() == newer
        assert os.access(result.path, os.X_OK)
        assert sorted(p.name for p in result.path.parent.iterdir()) == [
            result.path.name
        ]

    @pytest.mark.asyncio
    async def test_reports_progress(self, release_server, make_config):
        release_server.assets[ASSET] = WORKING_BINARY
        config = make_config(release_server.base_url)
        updates = []

        await BinaryAcquirer(config).acquire(
            TARGET, on_progress=lambda done, total: updates.append((done, total))
        )

        assert updates
        assert updates[-1] == (len(WORKING_BINARY), len(WORKING_BINARY))


class TestDownloadFailures:
    @pytest.mark.asyncio
    async def test_http_404_is_download_failure(self, release_server, make_config):
        config = make_config(release_server.base_url)

        with pytest.raises(DownloadFailedError) as exc_info:
            await BinaryAcquirer(config).acquire(TARGET)

        assert exc_info.value.status == 404
        assert ASSET_PATH in str(exc_info.value)
        assert_nothing_installed(config.executable_path)

    @pytest.mark.asyncio
    async def test_connection_error_is_download_failure(self, make_config):
        config = make_config("http://127.0.0.1:1")

        with pytest.raises(DownloadFailedError) as exc_info:
            await BinaryAcquirer(config).acquire(TARGET)

        assert exc_info.value.status is None
        assert_nothing_installed(config.executable_path)

    @pytest.mark.asyncio
    async def test_stalled_download_times_out(self, release_server, make_config):
        release_server.assets[ASSET] = WORKING_BINARY
        release_server.stall = True
        config = make_config(release_server.base_url, download_timeout=0.3)

        started = time.monotonic()
        with pytest.raises(DownloadTimeoutError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert time.monotonic() - started < 5
        assert_nothing_installed(config.executable_path)

    @pytest.mark.asyncio
    async def test_failed_run_removes_previous_binary(
        self, release_server, make_config
    ):
        config = make_config(release_server.base_url)
        release_server.assets[ASSET] = WORKING_BINARY
        await BinaryAcquirer(config).acquire(TARGET)

        del release_server.assets[ASSET]
        with pytest.raises(DownloadFailedError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert_nothing_installed(config.executable_path)


class TestVerification:
    @pytest.mark.asyncio
    async def test_non_zero_exit_fails_verification(self, release_server, make_config):
        release_server.assets[ASSET] = BROKEN_BINARY
        config = make_config(release_server.base_url)

        with pytest.raises(VerificationFailedError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert_nothing_installed(config.executable_path)

    @pytest.mark.asyncio
    async def test_hanging_binary_is_killed(self, release_server, make_config):
        release_server.assets[ASSET] = HANGING_BINARY
        config = make_config(release_server.base_url, verify_timeout=0.3)

        started = time.monotonic()
        with pytest.raises(VerificationFailedError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert time.monotonic() - started < 5
        assert_nothing_installed(config.executable_path)

    @pytest.mark.asyncio
    async def test_unexecutable_content_fails_verification(
        self, release_server, make_config
    ):
        release_server.assets[ASSET] = b"\x00\x01 definitely not an executable"
        config = make_config(release_server.base_url)

        with pytest.raises(VerificationFailedError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert_nothing_installed(config.executable_path)

    @pytest.mark.asyncio
    async def test_probe_passes_version_argument(
        self, release_server, make_config, tmp_path
    ):
        seen = tmp_path / "probe-args"
        release_server.assets[ASSET] = (
            f'#!/bin/sh\nprintf "%s" "$*" > "{seen}"\nexit 0\n'.encode()
        )
        config = make_config(release_server.base_url)

        await BinaryAcquirer(config).acquire(TARGET)

        assert seen.read_text() == "--version"


class TestPreconditions:
    @pytest.mark.asyncio
    async def test_unknown_target_makes_no_request(self, release_server, make_config):
        config = make_config(release_server.base_url)

        with pytest.raises(UnsupportedPlatformError):
            await BinaryAcquirer(config).acquire("win32-arm64")

        assert release_server.requests == []

    @pytest.mark.asyncio
    async def test_unwritable_install_root(self, release_server, make_config, tmp_path):
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("")
        release_server.assets[ASSET] = WORKING_BINARY
        config = make_config(release_server.base_url, install_root=blocker)

        with pytest.raises(WriteFailedError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert release_server.requests == []

    @pytest.mark.asyncio
    async def test_chmod_failure(self, release_server, make_config, monkeypatch):
        release_server.assets[ASSET] = WORKING_BINARY
        config = make_config(release_server.base_url)

        def refuse_chmod(self, mode, **kwargs):
            raise PermissionError("Operation not permitted")

        monkeypatch.setattr(Path, "chmod", refuse_chmod)

        with pytest.raises(PermissionFailedError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert_nothing_installed(config.executable_path)

    @pytest.mark.skipif(not os.path.exists("/dev/full"), reason="needs /dev/full")
    @pytest.mark.asyncio
    async def test_disk_full_is_write_failure(self, release_server, make_config):
        release_server.assets[ASSET] = WORKING_BINARY
        config = make_config(release_server.base_url)
        config.executable_path.parent.mkdir(parents=True)
        staging_path(config.executable_path).symlink_to("/dev/full")

        with pytest.raises(WriteFailedError):
            await BinaryAcquirer(config).acquire(TARGET)

        assert not staging_path(config.executable_path).is_symlink()
        assert_nothing_installed(config.executable_path)
