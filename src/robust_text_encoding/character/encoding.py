"""Priority-ordered classification of UTF-8, Windows-1252 and Latin-1 bytes.

Candidates are tried in order of confidence and the first match wins:

1. UTF-8, when the whole buffer is well-formed UTF-8
2. Windows-1252, when a byte in 0x80-0x9F that Windows-1252 defines is present
3. Latin-1, when bytes in 0xA0-0xFF are present without that evidence

Anything else is undetermined and classifies as None. Undetermined input is a
normal outcome, not an error; EncodingError is reserved for unexpected
failures while probing or translating.
"""

from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple

from robust_text_encoding.character.decoder import (
    ReplacementLog,
    count_fallbacks,
    decode,
)
from robust_text_encoding.character.tables import (
    C1_RANGE_END,
    C1_RANGE_START,
    LATIN1_MAP,
    WINDOWS1252_MAP,
    WINDOWS1252_SPECIFIC,
    is_latin1_range,
)
from robust_text_encoding.character.utf8 import is_valid_utf8, salvage_utf8_with_count
from robust_text_encoding.shared.config import EncodingConfig
from robust_text_encoding.shared.logging import get_logger, log_byte_scan, log_replacements
from robust_text_encoding.shared.result import ByteScan

logger = get_logger(__name__, component="encoding_classifier")


class EncodingTag(Enum):
    """The closed set of encodings this package can detect and repair."""

    UTF8 = "utf-8"
    LATIN1 = "latin-1"
    WINDOWS1252 = "cp1252"

    @property
    def codec(self) -> str:
        """Python codec name."""
        return self.value

    @property
    def label(self) -> str:
        """Human-readable encoding name."""
        return _LABELS[self]

    @classmethod
    def from_name(cls, name: str) -> "EncodingTag":
        """Resolve an encoding name or common alias to a tag."""
        normalized = name.strip().lower().replace("_", "-")
        try:
            return _ALIASES[normalized]
        except KeyError:
            raise EncodingError(
                f"Unsupported encoding: {name!r} "
                f"(expected one of {', '.join(t.label for t in cls)})"
            ) from None


_LABELS = {
    EncodingTag.UTF8: "UTF-8",
    EncodingTag.LATIN1: "Latin-1",
    EncodingTag.WINDOWS1252: "Windows-1252",
}

_ALIASES = {
    "utf-8": EncodingTag.UTF8,
    "utf8": EncodingTag.UTF8,
    "latin-1": EncodingTag.LATIN1,
    "latin1": EncodingTag.LATIN1,
    "iso-8859-1": EncodingTag.LATIN1,
    "iso8859-1": EncodingTag.LATIN1,
    "l1": EncodingTag.LATIN1,
    "cp1252": EncodingTag.WINDOWS1252,
    "windows-1252": EncodingTag.WINDOWS1252,
    "windows1252": EncodingTag.WINDOWS1252,
}


class EncodingError(Exception):
    """Unexpected failure while detecting or repairing an encoding.

    Attributes:
        encoding: Tag being evaluated when the failure happened, if any
    """

    def __init__(self, message: str, encoding: Optional[EncodingTag] = None):
        super().__init__(message)
        self.encoding = encoding


def scan_bytes(data: bytes) -> ByteScan:
    """Count the high bytes relevant to single-byte classification in one pass."""
    scan = ByteScan()
    for byte in data:
        if byte in WINDOWS1252_SPECIFIC:
            scan.windows1252_specific[byte] = scan.windows1252_specific.get(byte, 0) + 1
        elif is_latin1_range(byte):
            scan.latin1_range[byte] = scan.latin1_range.get(byte, 0) + 1
        elif C1_RANGE_START <= byte <= C1_RANGE_END:
            scan.undefined_c1[byte] = scan.undefined_c1.get(byte, 0) + 1
    return scan


def _table_for(tag: EncodingTag) -> Mapping[int, str]:
    return WINDOWS1252_MAP if tag is EncodingTag.WINDOWS1252 else LATIN1_MAP


# Detection
# ---------

def _detect_utf8(data: bytes, config: EncodingConfig) -> bool:
    return is_valid_utf8(data)


def _detect_windows1252(data: bytes, config: EncodingConfig) -> bool:
    scan = scan_bytes(data)
    if config.verbose and scan.has_windows1252_specific:
        log_byte_scan(logger, scan, WINDOWS1252_MAP, EncodingTag.WINDOWS1252.label)
    return scan.has_windows1252_specific


def _detect_latin1(data: bytes, config: EncodingConfig) -> bool:
    scan = scan_bytes(data)
    if scan.has_windows1252_specific:
        return False
    if config.verbose and scan.has_latin1_range:
        log_byte_scan(logger, scan, LATIN1_MAP, EncodingTag.LATIN1.label)
    return scan.has_latin1_range


_DETECTORS: Dict[EncodingTag, Callable[[bytes, EncodingConfig], bool]] = {
    EncodingTag.UTF8: _detect_utf8,
    EncodingTag.WINDOWS1252: _detect_windows1252,
    EncodingTag.LATIN1: _detect_latin1,
}


def _require_tag(tag: EncodingTag) -> None:
    if not isinstance(tag, EncodingTag):
        raise EncodingError(f"Unsupported encoding: {tag!r}")


# Highest confidence first
DETECTION_ORDER = (EncodingTag.UTF8, EncodingTag.WINDOWS1252, EncodingTag.LATIN1)


def detect(tag: EncodingTag, data: bytes, config: Optional[EncodingConfig] = None) -> bool:
    """Check whether data looks like it was produced with the given encoding.

    Raises:
        EncodingError: If probing fails unexpectedly
    """
    _require_tag(tag)
    config = config or EncodingConfig()
    try:
        return _DETECTORS[tag](data, config)
    except Exception as e:
        logger.error(
            f"Error detecting {tag.label} encoding",
            extra={"encoding": tag.label, "error": str(e)},
        )
        raise EncodingError(f"Error detecting {tag.label} encoding: {e}", tag) from e


def classify(data: bytes, config: Optional[EncodingConfig] = None) -> Optional[EncodingTag]:
    """Return the first encoding in DETECTION_ORDER that matches, or None."""
    config = config or EncodingConfig()
    for tag in DETECTION_ORDER:
        if detect(tag, data, config):
            return tag
    return None


# Repair
# ------

def _repair_utf8(data: bytes, config: EncodingConfig) -> Tuple[str, ReplacementLog, int]:
    text, substitutions = salvage_utf8_with_count(data, config.fallback_char)
    if config.verbose and substitutions:
        logger.info(
            f"Fixed {substitutions} invalid UTF-8 sequences",
            extra={"encoding": EncodingTag.UTF8.label, "substitutions": substitutions},
        )
    return text, {}, substitutions


def _repair_single_byte(tag: EncodingTag) -> Callable[..., Tuple[str, ReplacementLog, int]]:
    table = _table_for(tag)

    def repair_with_table(
        data: bytes, config: EncodingConfig
    ) -> Tuple[str, ReplacementLog, int]:
        text, replacements = decode(data, table, config.fallback_char)
        if config.verbose:
            log_replacements(logger, replacements, table, tag.label)
        return text, replacements, count_fallbacks(data, table)

    return repair_with_table


_REPAIRERS: Dict[EncodingTag, Callable[[bytes, EncodingConfig], Tuple[str, ReplacementLog, int]]] = {
    EncodingTag.UTF8: _repair_utf8,
    EncodingTag.WINDOWS1252: _repair_single_byte(EncodingTag.WINDOWS1252),
    EncodingTag.LATIN1: _repair_single_byte(EncodingTag.LATIN1),
}


def repair(
    tag: EncodingTag, data: bytes, config: Optional[EncodingConfig] = None
) -> Tuple[str, ReplacementLog, int]:
    """Decode data as the given encoding, keeping the repair bookkeeping.

    Returns:
        Tuple of (text, replacement log, number of fallback substitutions)

    Raises:
        EncodingError: If translation fails unexpectedly
    """
    _require_tag(tag)
    config = config or EncodingConfig()
    try:
        return _REPAIRERS[tag](data, config)
    except Exception as e:
        logger.error(
            f"Error fixing {tag.label} encoding",
            extra={"encoding": tag.label, "error": str(e)},
        )
        raise EncodingError(f"Error fixing {tag.label} encoding: {e}", tag) from e


def fix(tag: EncodingTag, data: bytes, config: Optional[EncodingConfig] = None) -> str:
    """Decode data as the given encoding and return UTF-8 text."""
    text, _, _ = repair(tag, data, config)
    return text
