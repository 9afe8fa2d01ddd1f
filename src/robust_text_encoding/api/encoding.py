"""Public detection and repair API with progressive disclosure.

Level 1 is the pair of module functions ``detect_encoding`` and
``fix_encoding``; ``fix_encoding_with_report`` returns the same repair with its
bookkeeping; ``EncodingFixer`` holds one configuration for repeated use and
can force a specific encoding.
"""

import time
from typing import Any, Dict, Optional, Tuple, Union

from robust_text_encoding.character.encoding import (
    EncodingError,
    EncodingTag,
    classify,
    repair,
)
from robust_text_encoding.character.utf8 import find_invalid_positions, utf8_sequence_length
from robust_text_encoding.shared.config import EncodingConfig
from robust_text_encoding.shared.logging import get_logger
from robust_text_encoding.shared.result import DiagnosticSeverity, FixResult

InputType = Union[bytes, bytearray, memoryview, str]

MS_PER_SECOND = 1000
MAX_REPORTED_POSITIONS = 20


def _coerce_input(input_data: InputType) -> Tuple[bytes, str]:
    """Return the raw bytes behind the input and the input as text.

    Text is turned back into bytes with ``surrogateescape`` so strings decoded
    with that handler keep their original undecodable bytes.
    """
    if isinstance(input_data, str):
        try:
            return input_data.encode("utf-8", errors="surrogateescape"), input_data
        except UnicodeEncodeError as e:
            raise EncodingError(f"Cannot recover raw bytes from text input: {e}") from e
    if isinstance(input_data, (bytes, bytearray, memoryview)):
        data = bytes(input_data)
        return data, data.decode("utf-8", errors="surrogateescape")
    raise TypeError(
        f"Expected bytes or str input, got {type(input_data).__name__}"
    )


def detect_encoding(
    input_data: InputType,
    config: Optional[EncodingConfig] = None,
    correlation_id: Optional[str] = None
) -> Optional[EncodingTag]:
    """Detect the likely encoding of a byte buffer or string.

    Args:
        input_data: Raw bytes, or text whose raw bytes should be examined
        config: Detection options (defaults to EncodingConfig())
        correlation_id: Optional correlation ID for request tracking

    Returns:
        EncodingTag of the first matching encoding, or None if undetermined

    Examples:
        >>> detect_encoding(b"Se\\xf1or")
        <EncodingTag.LATIN1: 'latin-1'>
        >>> detect_encoding(b"Smart \\x93quotes\\x94")
        <EncodingTag.WINDOWS1252: 'cp1252'>
        >>> detect_encoding(b"\\x81") is None
        True
    """
    config = config or EncodingConfig()
    data, _ = _coerce_input(input_data)
    tag = classify(data, config)

    if config.verbose:
        logger = get_logger(__name__, correlation_id, "detect_encoding")
        logger.info(
            f"Detected encoding: {tag.label if tag else 'unknown'}",
            extra={"input_size": len(data)},
        )
    return tag


def _build_report(
    data: bytes,
    original: InputType,
    original_text: str,
    tag: Optional[EncodingTag],
    config: EncodingConfig,
    correlation_id: Optional[str],
    start_time: float,
    forced: bool = False
) -> FixResult:
    logger = get_logger(__name__, correlation_id, "fix_encoding")

    if tag is None:
        if config.verbose:
            logger.warning("Could not determine encoding, returning original content")
        result = FixResult(
            text=original if isinstance(original, str) else original_text,
            encoding=None,
            original_text=original_text,
        )
        result.add_diagnostic(
            DiagnosticSeverity.WARNING,
            "Could not determine encoding, returning original content",
            "fix_encoding",
            correlation_id=correlation_id,
        )
    else:
        if config.verbose:
            logger.info(f"{'Using' if forced else 'Detected'} encoding: {tag.label}")
        text, replacements, substitutions = repair(tag, data, config)
        result = FixResult(
            text=text,
            encoding=tag,
            replacements=replacements,
            substitutions=substitutions,
            original_text=original_text,
        )
        result.add_diagnostic(
            DiagnosticSeverity.INFO,
            f"{'Decoded as' if forced else 'Detected'} {tag.label}",
            "fix_encoding",
            details={"forced": forced, "replaced_bytes": result.replacement_count},
            correlation_id=correlation_id,
        )
        if substitutions:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"Substituted {substitutions} unmappable bytes with {config.fallback_char!r}",
                "fix_encoding",
                details=_substitution_details(data, tag),
                correlation_id=correlation_id,
            )

    result.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
    return result


def _substitution_details(data: bytes, tag: EncodingTag) -> Dict[str, Any]:
    if tag is not EncodingTag.UTF8:
        return {"encoding": tag.label}

    positions = find_invalid_positions(data)[:MAX_REPORTED_POSITIONS]
    return {
        "encoding": tag.label,
        "positions": positions,
        "invalid_lead_bytes": [
            pos for pos in positions if utf8_sequence_length(data[pos]) == 0
        ],
    }


def fix_encoding_with_report(
    input_data: InputType,
    config: Optional[EncodingConfig] = None,
    correlation_id: Optional[str] = None
) -> FixResult:
    """Repair the encoding of the input and describe what was done.

    Args:
        input_data: Raw bytes, or text whose raw bytes should be repaired
        config: Repair options (defaults to EncodingConfig())
        correlation_id: Optional correlation ID for request tracking

    Returns:
        FixResult with the repaired text and repair metadata

    Raises:
        EncodingError: On unexpected failures while probing or translating
    """
    start_time = time.time()
    config = config or EncodingConfig()
    data, original_text = _coerce_input(input_data)
    tag = classify(data, config)
    return _build_report(
        data, input_data, original_text, tag, config, correlation_id, start_time
    )


def fix_encoding(
    input_data: InputType,
    config: Optional[EncodingConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Repair the encoding of the input and return UTF-8 text.

    Undetermined input is returned unchanged: text input as the same string,
    byte input decoded with ``surrogateescape`` so it re-encodes to the
    original bytes.

    Examples:
        >>> fix_encoding(b"Se\\xf1or")
        'Señor'
        >>> fix_encoding(b"Smart \\x93quotes\\x94")
        'Smart “quotes”'
    """
    return fix_encoding_with_report(input_data, config, correlation_id).text


class EncodingFixer:
    """Reusable detector and repairer bound to one configuration.

    Examples:
        >>> fixer = EncodingFixer(EncodingConfig(fallback_char="?"))
        >>> fixer.fix(b"caf\\xe9")
        'café'
        >>> fixer.fix_as(EncodingTag.WINDOWS1252, b"\\x81")
        '?'
    """

    def __init__(
        self,
        config: Optional[EncodingConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or EncodingConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "encoding_fixer")

        self._fix_count = 0
        self._detections: Dict[str, int] = {}

    def detect(self, input_data: InputType) -> Optional[EncodingTag]:
        return detect_encoding(input_data, self.config, self.correlation_id)

    def fix_with_report(self, input_data: InputType) -> FixResult:
        result = fix_encoding_with_report(input_data, self.config, self.correlation_id)
        self._record(result)
        return result

    def fix(self, input_data: InputType) -> str:
        return self.fix_with_report(input_data).text

    def fix_as(self, tag: Union[EncodingTag, str], input_data: InputType) -> str:
        """Decode the input as a given encoding, skipping detection."""
        return self.fix_as_with_report(tag, input_data).text

    def fix_as_with_report(
        self, tag: Union[EncodingTag, str], input_data: InputType
    ) -> FixResult:
        start_time = time.time()
        if isinstance(tag, str):
            tag = EncodingTag.from_name(tag)
        data, original_text = _coerce_input(input_data)
        result = _build_report(
            data, input_data, original_text, tag, self.config,
            self.correlation_id, start_time, forced=True
        )
        self._record(result)
        return result

    def _record(self, result: FixResult) -> None:
        self._fix_count += 1
        key = result.encoding.label if result.encoding else "unknown"
        self._detections[key] = self._detections.get(key, 0) + 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Counts of repairs performed and encodings seen by this fixer."""
        return {
            "total_fixes": self._fix_count,
            "detections": dict(self._detections),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        self._fix_count = 0
        self._detections = {}
        self.logger.debug("Fixer statistics reset")
