"""Character layer: byte tables, decoding, UTF-8 salvage and classification."""

from .decoder import ReplacementLog, count_fallbacks, decode
from .encoding import (
    DETECTION_ORDER,
    EncodingError,
    EncodingTag,
    classify,
    detect,
    fix,
    repair,
    scan_bytes,
)
from .tables import LATIN1_MAP, WINDOWS1252_MAP
from .utf8 import is_valid_utf8, salvage_utf8, salvage_utf8_with_count

__all__ = [
    # Modules
    "tables",
    "decoder",
    "utf8",
    "encoding",
    # Tables
    "LATIN1_MAP",
    "WINDOWS1252_MAP",
    # Decoding and salvage
    "ReplacementLog",
    "decode",
    "count_fallbacks",
    "is_valid_utf8",
    "salvage_utf8",
    "salvage_utf8_with_count",
    # Classification
    "DETECTION_ORDER",
    "EncodingError",
    "EncodingTag",
    "classify",
    "detect",
    "fix",
    "repair",
    "scan_bytes",
]
