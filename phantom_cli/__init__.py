"""
phantom-cli: installs and launches the prebuilt PhantomKit `phantom` executable.
"""

__version__ = "1.0.0"
