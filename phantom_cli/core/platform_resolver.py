"""
Maps the running operating system and CPU architecture to a supported Target Key.

Target Keys use the npm vocabulary the release assets were originally published
under (``darwin``/``linux``/``win32`` and ``x64``/``arm64``), so Python's own
names are normalized first. Nothing here touches the network or the filesystem.
"""

import logging
import platform
import sys

from phantom_cli.exceptions import UnsupportedPlatformError
from phantom_cli.models.targets import SUPPORTED_TARGETS

log = logging.getLogger(__name__)

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "armv8": "arm64",
}


def normalize_os(name: str) -> str:
    """Translates a ``sys.platform`` style name into the Target Key vocabulary."""
    name = name.lower()
    if name.startswith("linux"):
        return "linux"
    if name in ("win32", "cygwin", "windows"):
        return "win32"
    return name


def normalize_arch(name: str) -> str:
    """
    Translates a ``platform.machine()`` name into the Target Key vocabulary.
    Unknown architectures pass through so error messages show the real host.
    """
    name = name.lower()
    return _ARCH_ALIASES.get(name, name)


def is_supported(target_key: str) -> bool:
    """Whether a release asset is published for ``target_key``."""
    return target_key in SUPPORTED_TARGETS


def resolve_target_key(system: str | None = None, machine: str | None = None) -> str:
    """
    Builds the Target Key for the host (or for the given identifiers).

    Args:
        system: OS identifier; defaults to ``sys.platform``.
        machine: CPU architecture; defaults to ``platform.machine()``.

    Returns:
        A Target Key such as ``linux-x64``.

    Raises:
        UnsupportedPlatformError: If the combination is not a supported target.
    """
    os_name = normalize_os(system if system is not None else sys.platform)
    arch = normalize_arch(machine if machine is not None else platform.machine())
    target_key = f"{os_name}-{arch}"

    if not is_supported(target_key):
        raise UnsupportedPlatformError(target_key, SUPPORTED_TARGETS)

    log.debug(f"Resolved platform target: {target_key}")
    return target_key
