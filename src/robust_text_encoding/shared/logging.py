"""Correlation-aware logging for encoding detection and repair.

Library code only emits records; handler setup is left to the application
(the CLI calls ``logging.basicConfig``).
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

if TYPE_CHECKING:
    from robust_text_encoding.shared.result import ByteScan


class CorrelationLogger:
    """Logger that attaches component and correlation ID to every record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional ID tying records to one request or file
            component: Component name, defaults to the last part of name
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def bind(self, correlation_id: Optional[str]) -> "CorrelationLogger":
        """Return a logger for the same component with another correlation ID."""
        return CorrelationLogger(self.logger.name, correlation_id, self.component)

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        combined = {"component": self.component, "correlation_id": self.correlation_id}
        if extra:
            combined.update(extra)
        self.logger.log(level, message, extra=combined, exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra, False)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra, False)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra, False)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        self._log(logging.ERROR, message, extra, exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an error with the active exception's traceback."""
        self._log(logging.ERROR, message, extra, True)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def log_replacements(
    logger: CorrelationLogger,
    replacements: Mapping[int, int],
    table: Mapping[int, str],
    encoding_label: str
) -> None:
    """Log which bytes were converted to Unicode and how often."""
    if not replacements:
        logger.info(f"No {encoding_label} characters needed conversion")
        return

    lines = [f"Converting {encoding_label} characters to Unicode:"]
    for byte, count in sorted(replacements.items()):
        lines.append(f"  0x{byte:02x} -> {table[byte]}: {count} replacements")
    logger.info(
        "\n".join(lines),
        extra={"encoding": encoding_label, "replaced_bytes": sum(replacements.values())},
    )


def log_byte_scan(
    logger: CorrelationLogger,
    scan: "ByteScan",
    table: Mapping[int, str],
    encoding_label: str
) -> None:
    """Log the high bytes that pointed detection at an encoding."""
    found = scan.windows1252_specific or scan.latin1_range
    if not found:
        return

    lines = [f"Found potential {encoding_label} encoded bytes:"]
    for byte, count in sorted(found.items()):
        char_desc = f" ({table[byte]})" if byte in table else ""
        lines.append(f"  0x{byte:02x}{char_desc}: {count} occurrences")
    if scan.windows1252_specific and scan.latin1_range:
        lines.append(
            f"Also found {len(scan.latin1_range)} distinct bytes in shared "
            "Latin-1 range (0xA0-0xFF)"
        )
    logger.info("\n".join(lines), extra={"encoding": encoding_label})
