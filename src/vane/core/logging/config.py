"""
Logging configuration for Vane.

Logging is opt-in: a client logs only when its ClientConfig carries a
LoggingConfig.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any

from ..exceptions import ConfigError


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


def _parse_enum(enum_cls, value, normalize, name):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(normalize(value))
    except (TypeError, ValueError) as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"Invalid log {name} {value!r}, expected one of: {allowed}") from e


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration for client logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (json, text, colored)
        enable_console: Enable console (stderr) logging
        enable_file: Enable file logging
        file_path: Path to log file (required if enable_file=True)
        max_bytes: Max log file size before rotation (default: 10MB)
        backup_count: Number of rotated files to keep
        enable_correlation_id: Attach the per-request id to every record
        extra_fields: Static fields added to every record

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json")
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Normalize plain-string level/format and validate."""
        object.__setattr__(self, 'level', _parse_enum(LogLevel, self.level, str.upper, "level"))
        object.__setattr__(self, 'format', _parse_enum(LogFormat, self.format, str.lower, "format"))

        if self.enable_file and not self.file_path:
            raise ConfigError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ConfigError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ConfigError("backup_count must be non-negative")

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        enable_console: bool = True,
        enable_file: bool = False,
        file_path: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        enable_correlation_id: bool = True,
        extra_fields: Optional[Dict[str, Any]] = None
    ) -> "LoggingConfig":
        """
        Create LoggingConfig from plain strings.

        Raises:
            ConfigError: Unknown level/format or inconsistent file settings

        Example:
            >>> LoggingConfig.create(level="debug", format="JSON")
        """
        return cls(
            level=level,
            format=format,
            enable_console=enable_console,
            enable_file=enable_file,
            file_path=file_path,
            max_bytes=max_bytes,
            backup_count=backup_count,
            enable_correlation_id=enable_correlation_id,
            extra_fields=dict(extra_fields or {})
        )
