"""
Storage Layer.

This package handles loading the optional installer configuration file.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
