"""
Shared fixtures: a local release server and executable test doubles.
"""

import asyncio
import os
import stat
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from phantom_cli.models.config import InstallConfig

RELEASE_VERSION = "1.0.0"
REPOSITORY = "gitvault-tech/gitvault"

WORKING_BINARY = b"#!/bin/sh\nexit 0\n"
BROKEN_BINARY = b"#!/bin/sh\nexit 1\n"
HANGING_BINARY = b"#!/bin/sh\nexec sleep 30\n"


class ReleaseServer:
    """Serves release assets from memory, GitHub style."""

    def __init__(self):
        self.assets: dict[str, bytes] = {}
        self.requests: list[str] = []
        self.stall = False
        self.base_url = ""
        self._released = asyncio.Event()

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(request.path)
        if self.stall:
            await self._released.wait()
        body = self.assets.get(request.match_info["asset"])
        if body is None:
            raise web.HTTPNotFound()
        return web.Response(body=body, content_type="application/octet-stream")

    def release_stalled(self) -> None:
        self._released.set()


@pytest_asyncio.fixture
async def release_server():
    releases = ReleaseServer()
    app = web.Application()
    app.router.add_get(
        "/{org}/{repo}/releases/download/{tag}/{asset}", releases.handle
    )
    server = TestServer(app)
    await server.start_server()
    releases.base_url = str(server.make_url("")).rstrip("/")
    yield releases
    releases.release_stalled()
    await server.close()


@pytest.fixture
def make_config(tmp_path):
    """Builds an InstallConfig rooted in a temporary install directory."""

    def _make(release_host: str, **overrides) -> InstallConfig:
        settings = {
            "release_version": RELEASE_VERSION,
            "release_host": release_host,
            "repository": REPOSITORY,
            "download_timeout": 5.0,
            "verify_timeout": 5.0,
            "install_root": tmp_path / "package",
        }
        settings.update(overrides)
        return InstallConfig(**settings)

    return _make


@pytest.fixture
def write_executable(tmp_path):
    """Writes a shell script into tmp_path and marks it executable."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _write


posix_only = pytest.mark.skipif(
    os.name == "nt", reason="uses POSIX shell scripts as executables"
)
