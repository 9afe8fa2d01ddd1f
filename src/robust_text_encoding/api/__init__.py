"""Public API for encoding detection and repair."""

from .encoding import (
    EncodingFixer,
    detect_encoding,
    fix_encoding,
    fix_encoding_with_report,
)

__all__ = [
    "EncodingFixer",
    "detect_encoding",
    "fix_encoding",
    "fix_encoding_with_report",
]
