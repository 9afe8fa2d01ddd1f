"""Result objects and diagnostic types for encoding detection and repair."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from robust_text_encoding.character.encoding import EncodingTag


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class ByteScan:
    """Counts of the high bytes that drive the Latin-1/Windows-1252 decision.

    Each mapping goes from byte value to number of occurrences.
    """

    windows1252_specific: Dict[int, int] = field(default_factory=dict)
    latin1_range: Dict[int, int] = field(default_factory=dict)
    undefined_c1: Dict[int, int] = field(default_factory=dict)

    @property
    def has_windows1252_specific(self) -> bool:
        return bool(self.windows1252_specific)

    @property
    def has_latin1_range(self) -> bool:
        return bool(self.latin1_range)

    @property
    def high_byte_count(self) -> int:
        """Total number of bytes at or above 0x80."""
        return (
            sum(self.windows1252_specific.values())
            + sum(self.latin1_range.values())
            + sum(self.undefined_c1.values())
        )


@dataclass
class FixResult:
    """Outcome of a repair with the metadata gathered along the way.

    Attributes:
        text: Repaired text, or the original content when nothing was detected
        encoding: Encoding the input was decoded as, None if undetermined
        replacements: Byte value -> count of table translations
        substitutions: Number of fallback characters emitted
        diagnostics: Diagnostic entries collected while repairing
        processing_time_ms: Wall-clock time spent detecting and repairing
        original_text: Input content as text, used to tell whether anything changed
    """

    text: str
    encoding: Optional["EncodingTag"]
    replacements: Dict[int, int] = field(default_factory=dict)
    substitutions: int = 0
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    processing_time_ms: float = 0.0
    original_text: Optional[str] = None

    @property
    def detected(self) -> bool:
        return self.encoding is not None

    @property
    def changed(self) -> bool:
        """True if the repaired text differs from the input content."""
        if self.original_text is None:
            return False
        return self.text != self.original_text

    @property
    def replacement_count(self) -> int:
        return sum(self.replacements.values())

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Append a diagnostic entry."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                details=details,
                correlation_id=correlation_id,
            )
        )
