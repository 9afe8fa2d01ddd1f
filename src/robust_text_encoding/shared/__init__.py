"""Shared configuration, logging and result types."""

from .config import (
    ConfigError,
    ConfigValidationError,
    EncodingConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    ByteScan,
    DiagnosticEntry,
    DiagnosticSeverity,
    FixResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EncodingConfig",
    "CorrelationLogger",
    "get_logger",
    "ByteScan",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "FixResult",
]
