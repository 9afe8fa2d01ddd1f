"""UTF-8 validation and best-effort salvage of malformed UTF-8.

Validation relies on Python's strict ``utf-8`` codec, which already rejects
overlong forms, encoded surrogates and code points above U+10FFFF. Salvage
walks the buffer and keeps every decodable run, substituting a fallback
character for each byte that starts no valid sequence.
"""

from typing import List, Tuple

from robust_text_encoding.character.tables import ASCII_MAX
from robust_text_encoding.shared.config import DEFAULT_FALLBACK_CHAR

# UTF-8 lead byte boundaries
UTF8_CONTINUATION_MAX = 0xC0
UTF8_OVERLONG_LEAD_MAX = 0xC2
UTF8_2BYTE_MAX = 0xE0
UTF8_3BYTE_MAX = 0xF0
UTF8_4BYTE_MAX = 0xF5

MAX_SEQUENCE_LENGTH = 4


def is_valid_utf8(data: bytes) -> bool:
    """Check whether data is well-formed UTF-8."""
    try:
        data.decode("utf-8", errors="strict")
    except UnicodeDecodeError:
        return False
    return True


def utf8_sequence_length(lead: int) -> int:
    """Return the sequence length announced by a lead byte.

    Returns 0 for bytes that can never start a sequence: continuation bytes,
    the overlong leads 0xC0/0xC1 and anything from 0xF5 upward.
    """
    if lead < ASCII_MAX:
        return 1
    if lead < UTF8_OVERLONG_LEAD_MAX:
        return 0
    if lead < UTF8_2BYTE_MAX:
        return 2
    if lead < UTF8_3BYTE_MAX:
        return 3
    if lead < UTF8_4BYTE_MAX:
        return 4
    return 0


def _longest_valid_length(data: bytes, pos: int) -> int:
    """Length of the longest valid slice (1-4 bytes) starting at pos, or 0."""
    remaining = len(data) - pos
    for length in range(min(MAX_SEQUENCE_LENGTH, remaining), 0, -1):
        try:
            data[pos:pos + length].decode("utf-8", errors="strict")
        except UnicodeDecodeError:
            continue
        return length
    return 0


def salvage_utf8_with_count(
    data: bytes, fallback: str = DEFAULT_FALLBACK_CHAR
) -> Tuple[str, int]:
    """Decode possibly malformed UTF-8, counting fallback substitutions.

    Args:
        data: Byte data to salvage
        fallback: Character emitted for each byte that starts no valid sequence

    Returns:
        Tuple of (decoded text, number of substitutions)
    """
    if is_valid_utf8(data):
        return data.decode("utf-8"), 0

    pieces: List[str] = []
    substitutions = 0
    i = 0

    while i < len(data):
        length = _longest_valid_length(data, i)
        if length:
            pieces.append(data[i:i + length].decode("utf-8"))
            i += length
        else:
            # Advance a single byte so the next lead byte can resynchronize
            pieces.append(fallback)
            substitutions += 1
            i += 1

    return "".join(pieces), substitutions


def salvage_utf8(data: bytes, fallback: str = DEFAULT_FALLBACK_CHAR) -> str:
    """Decode possibly malformed UTF-8, replacing undecodable bytes."""
    text, _ = salvage_utf8_with_count(data, fallback)
    return text


def find_invalid_positions(data: bytes) -> List[int]:
    """Return the offsets where salvage_utf8() would emit the fallback."""
    if is_valid_utf8(data):
        return []

    positions = []
    i = 0
    while i < len(data):
        length = _longest_valid_length(data, i)
        if length:
            i += length
        else:
            positions.append(i)
            i += 1
    return positions
