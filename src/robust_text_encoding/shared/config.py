"""Configuration for encoding detection and repair.

EncodingConfig is an immutable value: create it once per call or share one
instance between threads, it is never mutated.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_FALLBACK_CHAR = "�"  # REPLACEMENT CHARACTER


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class EncodingConfig:
    """Options shared by detection and repair.

    Attributes:
        verbose: Emit diagnostic detail about the bytes found and replaced
        strict: Reserved; accepted but does not alter behavior
        fallback_char: Character substituted for unmappable or invalid bytes
    """

    verbose: bool = False
    strict: bool = False
    fallback_char: str = DEFAULT_FALLBACK_CHAR

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for flag in ("verbose", "strict"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigValidationError(
                    f"{flag} must be a bool, got {type(getattr(self, flag)).__name__}",
                    field_name=flag,
                )
        if not isinstance(self.fallback_char, str) or len(self.fallback_char) != 1:
            raise ConfigValidationError(
                f"fallback_char must be a single character, got {self.fallback_char!r}",
                field_name="fallback_char",
                suggestions=["Use '\\ufffd' (the default) or '?'"],
            )

    @classmethod
    def _field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def override(self, **kwargs: Any) -> "EncodingConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = EncodingConfig()
            >>> noisy = config.override(verbose=True, fallback_char="?")
        """
        unknown = sorted(set(kwargs) - set(self._field_names()))
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration option(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=self._field_names(),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EncodingConfig":
        """Create configuration from dictionary, rejecting unknown keys."""
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        return cls().override(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "EncodingConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Path) -> "EncodingConfig":
        """Load configuration from a JSON file."""
        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def default(cls) -> "EncodingConfig":
        """Quiet configuration substituting U+FFFD."""
        return cls()

    @classmethod
    def diagnostic(cls) -> "EncodingConfig":
        """Configuration that logs every detection and replacement."""
        return cls(verbose=True)
