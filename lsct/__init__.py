"""lsct: list files recursively, grouped and sorted by content type."""

__version__ = "0.1.0"
