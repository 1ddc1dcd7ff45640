"""
Entry point of the ``phantom`` console script.

Makes the installed package behave as if it were the downloaded binary: the
argument vector is forwarded untouched, the standard streams and working
directory are inherited, and the child's exit code becomes ours.
"""

import logging
import os
import signal
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from phantom_cli.core.paths import (
    ExecutableStatus,
    executable_status,
    local_executable_path,
)
from phantom_cli.exceptions import (
    NotInstalledError,
    PhantomCliError,
    SpawnFailedError,
)

log = logging.getLogger(__name__)

INTERNAL_FAILURE_EXIT_CODE = 1
INSTALL_HINT = "Please run: phantom-cli install"


def launch(argv: Sequence[str], executable: Path | None = None) -> int:
    """
    Runs the Local Executable with ``argv`` and waits for it.

    Args:
        argv: Arguments for the binary, without the launcher's own name.
        executable: Override for the Local Executable path.

    Returns:
        The child's exit code; a child killed by a signal maps to 128 + signum.

    Raises:
        NotInstalledError: The executable is absent or lacks its execute bit.
        SpawnFailedError: The executable exists but could not be started.
    """
    path = executable or local_executable_path()
    status = executable_status(path)
    if status is ExecutableStatus.MISSING:
        raise NotInstalledError(f"Phantom binary not found at '{path}'. {INSTALL_HINT}")
    if status is ExecutableStatus.NOT_EXECUTABLE:
        raise NotInstalledError(
            f"Phantom binary at '{path}' is not executable. {INSTALL_HINT}"
        )

    log.debug(f"Launching '{path}' with {len(argv)} argument(s).")
    try:
        process = subprocess.Popen([str(path), *argv], cwd=os.getcwd())
    except OSError as e:
        raise SpawnFailedError(f"Failed to start phantom: {e}") from e

    # Ctrl+C goes to the child too; its exit code is what gets reported.
    previous_handler = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        returncode = process.wait()
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if returncode < 0:
        return 128 - returncode
    return returncode


def main() -> None:
    """Relays ``sys.argv[1:]`` to the installed binary and exits with its status."""
    try:
        code = launch(sys.argv[1:])
    except PhantomCliError as e:
        Console(stderr=True).print(f"[red]✗ {escape(str(e))}[/red]", highlight=False)
        sys.exit(INTERNAL_FAILURE_EXIT_CODE)
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    main()
