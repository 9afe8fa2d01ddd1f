"""Table-driven decoding of single-byte encodings.

Every input byte produces exactly one output character, so the decoded text
always has the same length as the input buffer.
"""

from typing import Dict, Mapping, Tuple

from robust_text_encoding.character.tables import ASCII_MAX

# byte value -> number of times it was translated through the table
ReplacementLog = Dict[int, int]


def decode(
    data: bytes, table: Mapping[int, str], fallback: str
) -> Tuple[str, ReplacementLog]:
    """Decode bytes through a byte-to-character table.

    Args:
        data: Raw bytes to decode
        table: Mapping from byte value (0x80-0xFF) to character
        fallback: Character emitted for bytes missing from the table

    Returns:
        Tuple of (decoded text, replacement log). Only bytes found in the
        table are counted; fallback substitutions are not.
    """
    chars = []
    replacements: ReplacementLog = {}

    for byte in data:
        if byte < ASCII_MAX:
            chars.append(chr(byte))
        elif byte in table:
            chars.append(table[byte])
            replacements[byte] = replacements.get(byte, 0) + 1
        else:
            chars.append(fallback)

    return "".join(chars), replacements


def count_fallbacks(data: bytes, table: Mapping[int, str]) -> int:
    """Count bytes that decode() would replace with the fallback character."""
    return sum(1 for byte in data if byte >= ASCII_MAX and byte not in table)
