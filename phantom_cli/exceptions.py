"""
Defines custom exceptions for the application to allow for more specific error handling.

Every failure of the acquisition pipeline or the launcher is terminal for the
current process; the CLI entry points render these and exit non-zero.
"""


class PhantomCliError(Exception):
    """Base exception for all application-specific errors."""


class UnsupportedPlatformError(PhantomCliError):
    """Raised when the host OS/architecture has no published release asset."""

    def __init__(self, target_key: str, supported: tuple[str, ...] = ()):
        self.target_key = target_key
        self.supported = supported
        message = f"Unsupported platform: {target_key}"
        if supported:
            message += f" (supported platforms: {', '.join(supported)})"
        super().__init__(message)


class DownloadFailedError(PhantomCliError):
    """Raised when the release server rejects the request or the network fails."""

    def __init__(self, url: str, reason: str, status: int | None = None):
        self.url = url
        self.status = status
        if status is not None:
            message = f"HTTP {status} while downloading {url}"
        else:
            message = f"Failed to download {url}: {reason}"
        super().__init__(message)


class DownloadTimeoutError(PhantomCliError):
    """Raised when the download exceeds its overall time budget."""

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout
        super().__init__(f"Download of {url} timed out after {timeout:g}s")


class WriteFailedError(PhantomCliError):
    """Raised when the executable cannot be written to its destination."""


class PermissionFailedError(PhantomCliError):
    """Raised when the downloaded file cannot be marked executable."""


class VerificationFailedError(PhantomCliError):
    """
    Raised when the downloaded executable is present but does not run correctly.
    """


class NotInstalledError(PhantomCliError):
    """Raised by the launcher when no usable executable has been installed."""


class SpawnFailedError(PhantomCliError):
    """Raised by the launcher when the installed executable cannot be started."""


class ConfigurationError(PhantomCliError):
    """Raised for issues related to configuration loading or validation."""
