"""
Pydantic model for installer configuration.
Provides robust validation for the release coordinate and the acquisition timeouts.
"""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from phantom_cli import __version__
from phantom_cli.core.paths import local_executable_path, package_root

DEFAULT_RELEASE_HOST = "https://github.com"
DEFAULT_REPOSITORY = "gitvault-tech/gitvault"
DEFAULT_DOWNLOAD_TIMEOUT = 30.0
DEFAULT_VERIFY_TIMEOUT = 5.0

_SEMVER_REGEX = re.compile(
    r"^v?(?P<version>\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?)$"
)
_REPOSITORY_REGEX = re.compile(r"^[\w.-]+/[\w.-]+$")


class InstallConfig(BaseModel):
    """A validated configuration model for binary acquisition."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Release coordinate; defaults to this distribution's own version so the
    # wrapper and the binary it fetches are released in lockstep.
    release_version: str = __version__
    release_host: str = DEFAULT_RELEASE_HOST
    repository: str = DEFAULT_REPOSITORY

    # Time budgets, in seconds
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    verify_timeout: float = DEFAULT_VERIFY_TIMEOUT

    install_root: Path = Field(default_factory=package_root)

    @field_validator("release_version")
    @classmethod
    def validate_release_version(cls, v: str) -> str:
        """Accepts 'X.Y.Z' or 'vX.Y.Z' and stores the bare semantic version."""
        match = _SEMVER_REGEX.match(v)
        if not match:
            raise ValueError(
                f"Release version must be a semantic version like 1.2.3, got: {v!r}"
            )
        return match.group("version")

    @field_validator("release_host")
    @classmethod
    def validate_release_host(cls, v: str) -> str:
        """Ensures the release host is an http(s) base URL without a trailing slash."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Release host must start with 'https://' or 'http://'.")
        return v.rstrip("/")

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Ensures the repository is given as 'org/repo'."""
        v = v.strip("/")
        if not _REPOSITORY_REGEX.match(v):
            raise ValueError(f"Repository must look like 'org/repo', got: {v!r}")
        return v

    @field_validator("download_timeout", "verify_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be greater than zero seconds.")
        return v

    @property
    def executable_path(self) -> Path:
        """Fixed location of the Local Executable under the install root."""
        return local_executable_path(self.install_root)

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that may appear in the INI file."""
        internal_fields = {"install_root"}
        return {key for key in cls.model_fields if key not in internal_fields}
