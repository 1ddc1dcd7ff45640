"""
Network Layer.

This package handles the HTTP transfer of release assets from the release server.
"""

from .downloader import Downloader

__all__ = ["Downloader"]
