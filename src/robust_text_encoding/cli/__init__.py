"""Command-line interface for detecting and repairing file encodings."""

from .main import main

__all__ = ["main"]
