"""Path contract shared by the binary acquirer (writer) and the launcher (reader).

The Local Executable lives at ``<package-root>/bin/phantom`` (``phantom.exe``
on Windows). Its presence at that path is the only persisted install state.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

BIN_DIR_NAME = "bin"
EXECUTABLE_NAME = "phantom"


class ExecutableStatus(str, Enum):
    """State of the Local Executable as seen by the launcher."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


def package_root() -> Path:
    """Directory of the installed ``phantom_cli`` package."""
    return Path(__file__).resolve().parent.parent


def executable_name() -> str:
    """File name of the executable on the running host."""
    return f"{EXECUTABLE_NAME}.exe" if os.name == "nt" else EXECUTABLE_NAME


def local_executable_path(root: Path | None = None) -> Path:
    """Get the fixed path of the Local Executable.

    Args:
        root: Install root; defaults to the package directory.

    Returns:
        Path to ``<root>/bin/<executable>``.
    """
    return (root or package_root()) / BIN_DIR_NAME / executable_name()


def staging_path(destination: Path) -> Path:
    """Sibling file the download is streamed into before it is committed.

    The original suffix is preserved so Windows can still execute the staged
    file during verification.
    """
    return destination.with_name(
        f".{destination.stem}.partial{destination.suffix}"
    )


def executable_status(path: Path) -> ExecutableStatus:
    """Check whether the file at ``path`` exists and has its execute bit set."""
    if not path.is_file():
        return ExecutableStatus.MISSING
    if not os.access(path, os.X_OK):
        return ExecutableStatus.NOT_EXECUTABLE
    return ExecutableStatus.PRESENT
