"""menuctl — restaurant menu editing core with live preview and publishing."""

__version__ = "0.3.0"
