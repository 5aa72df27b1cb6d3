"""
Logging system for Vane.

Structured logging with JSON/text/colored formats, console and rotating
file handlers, and a per-request scope (correlation id, method, url).

Example:
    >>> from vane import ConfigBuilder
    >>> from vane.core.logging import LoggingConfig
    >>>
    >>> config = (
    ...     ConfigBuilder()
    ...     .base_url("https://api.example.com")
    ...     .logging(LoggingConfig.create(level="DEBUG", format="json"))
    ...     .build()
    ... )
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import VaneLogger
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    ExtraFieldsFilter,
    RequestScope,
    RequestScopeFilter,
    get_request_scope,
    request_scope,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "VaneLogger",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "ExtraFieldsFilter",
    "RequestScope",
    "RequestScopeFilter",
    "get_request_scope",
    "request_scope",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
