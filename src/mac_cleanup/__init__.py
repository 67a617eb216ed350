"""mac-cleanup: reclaim disk space on macOS."""

__version__ = "1.4.0"
