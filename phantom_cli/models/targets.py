"""
The canonical table of supported platforms and their release assets.

Both the platform resolver and the binary acquirer read from this table, so
the set of supported Target Keys cannot drift from the published assets.
"""

# Target Key ("{os}-{arch}", npm vocabulary) -> release asset filename
ARTIFACT_NAMES: dict[str, str] = {
    "darwin-x64": "phantom-darwin-amd64",
    "darwin-arm64": "phantom-darwin-arm64",
    "linux-x64": "phantom-linux-amd64",
    "linux-arm64": "phantom-linux-arm64",
    "win32-x64": "phantom-windows-amd64.exe",
}

SUPPORTED_TARGETS: tuple[str, ...] = tuple(ARTIFACT_NAMES)

ISSUES_URL = "https://github.com/gitvault-tech/gitvault/issues"
