"""Spots API: place discovery, photo mirroring, and saved-list synchronization."""

__version__ = "0.1.0"
