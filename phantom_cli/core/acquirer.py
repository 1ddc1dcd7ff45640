"""
Turns a resolved Target Key into a verified, executable Local Executable.

The pipeline is strictly sequential and every stage failure is terminal:
asset lookup, URL composition, destination preparation, streamed download,
permission fix-up, verification probe, and finally an atomic commit onto the
fixed path the launcher reads from.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from phantom_cli.core.paths import staging_path
from phantom_cli.core.verifier import ExecutableProbe
from phantom_cli.exceptions import (
    PermissionFailedError,
    UnsupportedPlatformError,
    VerificationFailedError,
    WriteFailedError,
)
from phantom_cli.models.config import InstallConfig
from phantom_cli.models.targets import ARTIFACT_NAMES, SUPPORTED_TARGETS
from phantom_cli.net.downloader import Downloader, ProgressCallback

log = logging.getLogger(__name__)

EXECUTABLE_PERMISSIONS = 0o755


@dataclass(frozen=True)
class AcquisitionResult:
    """Outcome of a successful acquisition run."""

    target_key: str
    asset_name: str
    url: str
    path: Path
    size: int


def resolve_asset_name(target_key: str) -> str:
    """Looks up the release asset for a Target Key."""
    asset_name = ARTIFACT_NAMES.get(target_key)
    if not asset_name:
        raise UnsupportedPlatformError(target_key, SUPPORTED_TARGETS)
    return asset_name


def build_download_url(config: InstallConfig, asset_name: str) -> str:
    """Composes ``<host>/<org>/<repo>/releases/download/v<version>/<asset>``."""
    return (
        f"{config.release_host}/{config.repository}/releases/download/"
        f"v{config.release_version}/{asset_name}"
    )


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        log.debug(f"Could not remove '{path}': {e}")


class BinaryAcquirer:
    """Downloads, permissions and verifies the executable for one Target Key."""

    def __init__(
        self,
        config: InstallConfig,
        downloader: Downloader | None = None,
        probe: ExecutableProbe | None = None,
    ):
        self.config = config
        self.downloader = downloader or Downloader(timeout=config.download_timeout)
        self.probe = probe or ExecutableProbe(timeout=config.verify_timeout)

    async def acquire(
        self, target_key: str, on_progress: ProgressCallback | None = None
    ) -> AcquisitionResult:
        """
        Runs the full acquisition pipeline for ``target_key``.

        The previous executable, if any, is removed before the download starts,
        and the new one only appears at the fixed path once it has passed
        verification. On failure nothing from this run is left on disk.

        Raises:
            UnsupportedPlatformError: No asset is published for the key.
            DownloadFailedError: Non-2xx status or network error.
            DownloadTimeoutError: The download exceeded its time budget.
            WriteFailedError: The destination could not be prepared or written.
            PermissionFailedError: The execute bits could not be set.
            VerificationFailedError: The downloaded file does not run.
        """
        asset_name = resolve_asset_name(target_key)
        url = build_download_url(self.config, asset_name)
        destination = self.config.executable_path
        staged = staging_path(destination)

        log.info(f"Downloading Phantom CLI for {target_key}...")
        log.debug(f"URL: {url}")

        self._prepare_destination(destination)

        try:
            size = await self.downloader.download_file(url, staged, on_progress)
            self._make_executable(staged)

            log.info("Verifying binary...")
            if not await self.probe.check(staged):
                raise VerificationFailedError(
                    f"Downloaded binary for {target_key} is not working properly "
                    f"(from {url})."
                )

            try:
                os.replace(staged, destination)
            except OSError as e:
                raise WriteFailedError(
                    f"Failed to move binary into place at '{destination}': {e}"
                ) from e
        except BaseException:
            _remove_quietly(staged)
            raise

        log.info(f"Installed {asset_name} to '{destination}'.")
        return AcquisitionResult(
            target_key=target_key,
            asset_name=asset_name,
            url=url,
            path=destination,
            size=size,
        )

    def _prepare_destination(self, destination: Path) -> None:
        """Creates the bin directory and drops any previously installed binary."""
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.unlink(missing_ok=True)
        except OSError as e:
            raise WriteFailedError(
                f"Failed to prepare install directory '{destination.parent}': {e}"
            ) from e

    def _make_executable(self, path: Path) -> None:
        try:
            path.chmod(EXECUTABLE_PERMISSIONS)
        except OSError as e:
            raise PermissionFailedError(
                f"Failed to set permissions on '{path}': {e}"
            ) from e
        log.debug(f"Set permissions to {oct(EXECUTABLE_PERMISSIONS)} for '{path}'.")
