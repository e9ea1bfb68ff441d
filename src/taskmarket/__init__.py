"""Task marketplace reviews backend."""

__version__ = "0.1.0"
