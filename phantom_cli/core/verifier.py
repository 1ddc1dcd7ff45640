"""
Provides the post-download check that a fetched executable actually runs.
"""

import asyncio
import logging
import subprocess
from pathlib import Path

log = logging.getLogger(__name__)

VERSION_ARGUMENT = "--version"


class ExecutableProbe:
    """Runs a freshly downloaded executable with a version query under a time bound."""

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout

    async def check(self, executable_path: Path) -> bool:
        """
        Spawns ``<executable> --version`` with all stdio suppressed.

        The probe passes only if the process exits with status 0 within
        ``self.timeout`` seconds. A process still running at the deadline is
        killed.

        Args:
            executable_path: Path to the executable to probe.

        Returns:
            True if the executable appears to work, False otherwise.
        """
        try:
            process = await asyncio.create_subprocess_exec(
                str(executable_path),
                VERSION_ARGUMENT,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            log.warning(f"Verification probe could not start '{executable_path}': {e}")
            return False

        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=self.timeout)
        except asyncio.TimeoutError:
            log.warning(
                f"Verification probe of '{executable_path}' did not finish within "
                f"{self.timeout:g}s; killing it."
            )
            try:
                process.kill()
            except ProcessLookupError:
                pass  # exited right at the deadline
            await process.wait()
            return False

        if returncode != 0:
            log.warning(
                f"Verification probe of '{executable_path}' exited with status "
                f"{returncode}."
            )
            return False

        log.debug(f"Verification probe of '{executable_path}' succeeded.")
        return True
