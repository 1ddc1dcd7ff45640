"""
Data Models Layer.

This package contains the Pydantic configuration model and the static table
of supported platforms and release assets.
"""

from .config import InstallConfig
from .targets import ARTIFACT_NAMES, SUPPORTED_TARGETS

__all__ = ["ARTIFACT_NAMES", "InstallConfig", "SUPPORTED_TARGETS"]
