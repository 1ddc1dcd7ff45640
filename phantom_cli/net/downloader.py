"""
Handles the low-level downloading of a release asset over HTTP, streaming the
response body straight to disk under a single overall timeout.
"""

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path

import aiofiles
import aiohttp

from phantom_cli.exceptions import (
    DownloadFailedError,
    DownloadTimeoutError,
    WriteFailedError,
)

log = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int | None], None]


class Downloader:
    """A single-attempt file downloader bounded by an overall request timeout."""

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(self, timeout: float = 30.0, chunk_size: int = CHUNK_SIZE):
        self.timeout = timeout
        self.chunk_size = chunk_size

    async def download_file(
        self,
        url: str,
        destination_path: Path,
        on_progress: ProgressCallback | None = None,
    ) -> int:
        """
        Downloads ``url`` into ``destination_path``.

        Redirects are followed. The whole exchange (connect, headers and body)
        must finish within ``self.timeout`` seconds, otherwise the transfer is
        aborted.

        Args:
            url: Asset URL.
            destination_path: File to create or truncate.
            on_progress: Called with (bytes_downloaded, total_or_None) per chunk.

        Returns:
            Number of bytes written.

        Raises:
            DownloadFailedError: On a non-2xx status or a network-level error.
            DownloadTimeoutError: When the overall timeout is exceeded.
            WriteFailedError: When the destination cannot be written.
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with (
                aiohttp.ClientSession(timeout=timeout) as session,
                session.get(url, allow_redirects=True) as response,
            ):
                if not 200 <= response.status < 300:
                    raise DownloadFailedError(
                        url, response.reason or "", status=response.status
                    )
                return await self._stream_to_file(
                    response, destination_path, on_progress
                )
        # aiohttp's timeout errors are also ClientErrors, so this must come first
        except asyncio.TimeoutError as e:
            raise DownloadTimeoutError(url, self.timeout) from e
        except aiohttp.ClientError as e:
            raise DownloadFailedError(url, str(e) or type(e).__name__) from e

    async def _stream_to_file(
        self,
        response: aiohttp.ClientResponse,
        destination_path: Path,
        on_progress: ProgressCallback | None,
    ) -> int:
        """Copies the response body to disk chunk by chunk."""
        total = response.content_length
        name = os.path.basename(destination_path)
        bytes_downloaded = 0
        try:
            async with aiofiles.open(destination_path, "wb") as f:
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    await f.write(chunk)
                    bytes_downloaded += len(chunk)
                    if on_progress:
                        on_progress(bytes_downloaded, total)
        except (asyncio.TimeoutError, aiohttp.ClientError):
            # Both are OSError subclasses; the caller maps them.
            raise
        except OSError as e:
            raise WriteFailedError(
                f"Failed to write binary file '{destination_path}': {e}"
            ) from e

        log.debug(f"Wrote {bytes_downloaded} bytes to '{name}'.")
        return bytes_downloaded
