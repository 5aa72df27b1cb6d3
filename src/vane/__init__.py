"""Vane - blocking, thread-safe HTTP client core."""

import logging

from .core.client import Client
from .core.request_builder import RequestBuilder
from .core.models import HTTPMethod, Request, Response
from .core.config import ClientConfig, ConfigBuilder, ConnectionPoolConfig, __version__
from .core.codec import Codec, JSONCodec
from .core.transport import Transport, RawResponse, RequestsTransport
from .core.logging import LoggingConfig
from .core.env_config import load_from_env
from .core.exceptions import (
    ErrorKind,
    VaneError,
    TemporaryError,
    FatalError,
    NetworkError,
    DNSError,
    ConnectionError,
    TLSError,
    TimeoutError,
    ConfigError,
    HttpError,
    SerializationError,
    DecodeError,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('vane')
logging.getLogger('vane').addHandler(logging.NullHandler())

__all__ = [
    # Core
    "Client",
    "RequestBuilder",
    "HTTPMethod",
    "Request",
    "Response",

    # Config
    "ClientConfig",
    "ConfigBuilder",
    "ConnectionPoolConfig",
    "LoggingConfig",
    "load_from_env",

    # Extension points
    "Codec",
    "JSONCodec",
    "Transport",
    "RawResponse",
    "RequestsTransport",

    # Exceptions
    "ErrorKind",
    "VaneError",
    "TemporaryError",
    "FatalError",
    "NetworkError",
    "DNSError",
    "ConnectionError",
    "TLSError",
    "TimeoutError",
    "ConfigError",
    "HttpError",
    "SerializationError",
    "DecodeError",

    # Version
    "__version__",
]
