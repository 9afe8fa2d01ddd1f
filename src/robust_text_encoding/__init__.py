"""Robust Text Encoding.

Heuristic detection and repair of text that was written as UTF-8, Latin-1
(ISO-8859-1) or Windows-1252 but read back with the wrong assumption.

Progressive API Disclosure:
- Level 1: Simple functions - detect_encoding(), fix_encoding()
- Level 2: Repair with metadata - fix_encoding_with_report()
- Level 3: Configured fixer - EncodingFixer class, which can also force an encoding
"""

__version__ = "0.1.0"
__author__ = "Robust Text Encoding Team"

from .api import (
    EncodingFixer,
    detect_encoding,
    fix_encoding,
    fix_encoding_with_report,
)
from .character.encoding import EncodingError, EncodingTag
from .shared.config import ConfigError, ConfigValidationError, EncodingConfig
from .shared.result import FixResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "detect_encoding",
    "fix_encoding",

    # Level 2 and 3
    "fix_encoding_with_report",
    "EncodingFixer",

    # Types
    "EncodingConfig",
    "EncodingTag",
    "FixResult",

    # Exceptions
    "EncodingError",
    "ConfigError",
    "ConfigValidationError",
]
