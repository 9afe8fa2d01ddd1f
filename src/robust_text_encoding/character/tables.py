"""Byte-to-character tables for the single-byte encodings we can repair.

Latin-1 (ISO-8859-1) maps 0xA0-0xFF straight onto U+00A0-U+00FF and leaves
0x80-0x9F as C1 control codes. Windows-1252 agrees with Latin-1 on 0xA0-0xFF
and reassigns most of 0x80-0x9F to typographic and currency symbols.

Neither table carries entries below 0x80: ASCII passes through the decoder
untouched.
"""

from types import MappingProxyType
from typing import Dict, Mapping

ASCII_MAX = 0x80
C1_RANGE_START = 0x80
C1_RANGE_END = 0x9F
LATIN1_RANGE_START = 0xA0
LATIN1_RANGE_END = 0xFF

LATIN1_MAP: Mapping[int, str] = MappingProxyType(
    {byte: chr(byte) for byte in range(LATIN1_RANGE_START, LATIN1_RANGE_END + 1)}
)

_WINDOWS1252_REASSIGNED: Dict[int, str] = {
    0x80: "€",  # EURO SIGN
    0x82: "‚",  # SINGLE LOW-9 QUOTATION MARK
    0x83: "ƒ",  # LATIN SMALL LETTER F WITH HOOK
    0x84: "„",  # DOUBLE LOW-9 QUOTATION MARK
    0x85: "…",  # HORIZONTAL ELLIPSIS
    0x86: "†",  # DAGGER
    0x87: "‡",  # DOUBLE DAGGER
    0x88: "ˆ",  # MODIFIER LETTER CIRCUMFLEX ACCENT
    0x89: "‰",  # PER MILLE SIGN
    0x8A: "Š",  # LATIN CAPITAL LETTER S WITH CARON
    0x8B: "‹",  # SINGLE LEFT-POINTING ANGLE QUOTATION MARK
    0x8C: "Œ",  # LATIN CAPITAL LIGATURE OE
    0x8E: "Ž",  # LATIN CAPITAL LETTER Z WITH CARON
    0x91: "‘",  # LEFT SINGLE QUOTATION MARK
    0x92: "’",  # RIGHT SINGLE QUOTATION MARK
    0x93: "“",  # LEFT DOUBLE QUOTATION MARK
    0x94: "”",  # RIGHT DOUBLE QUOTATION MARK
    0x95: "•",  # BULLET
    0x96: "–",  # EN DASH
    0x97: "—",  # EM DASH
    0x98: "˜",  # SMALL TILDE
    0x99: "™",  # TRADE MARK SIGN
    0x9A: "š",  # LATIN SMALL LETTER S WITH CARON
    0x9B: "›",  # SINGLE RIGHT-POINTING ANGLE QUOTATION MARK
    0x9C: "œ",  # LATIN SMALL LIGATURE OE
    0x9E: "ž",  # LATIN SMALL LETTER Z WITH CARON
    0x9F: "Ÿ",  # LATIN CAPITAL LETTER Y WITH DIAERESIS
}


def _build_windows1252_map() -> Mapping[int, str]:
    """Seed with the 0x80-0x9F reassignments, then fill from Latin-1."""
    table = dict(_WINDOWS1252_REASSIGNED)
    for byte, char in LATIN1_MAP.items():
        table.setdefault(byte, char)
    return MappingProxyType(table)


WINDOWS1252_MAP: Mapping[int, str] = _build_windows1252_map()

# Bytes Windows-1252 defines but Latin-1 leaves as control codes
WINDOWS1252_SPECIFIC = frozenset(_WINDOWS1252_REASSIGNED)

# Holes in Windows-1252; these fall back like any unmapped byte
WINDOWS1252_UNDEFINED = frozenset(
    byte for byte in range(C1_RANGE_START, C1_RANGE_END + 1)
    if byte not in _WINDOWS1252_REASSIGNED
)


def is_windows1252_specific(byte: int) -> bool:
    """Return True if byte is one of Windows-1252's 0x80-0x9F reassignments."""
    return byte in WINDOWS1252_SPECIFIC


def is_latin1_range(byte: int) -> bool:
    """Return True if byte lies in the range shared by Latin-1 and Windows-1252."""
    return LATIN1_RANGE_START <= byte <= LATIN1_RANGE_END
