"""Core Vane модули."""

from .config import (
    ClientConfig,
    ConfigBuilder,
    ConnectionPoolConfig,
    DEFAULT_USER_AGENT,
    DEFAULT_MAX_REDIRECTS,
)
from .exceptions import (
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
    classify_requests_exception,
    classify_transport_exception,
)
from .codec import Codec, JSONCodec, DEFAULT_CODEC
from .models import HTTPMethod, Request, Response
from .transport import Transport, RawResponse, RequestsTransport
from .request_builder import RequestBuilder
from .client import Client

__all__ = [
    # Config
    "ClientConfig",
    "ConfigBuilder",
    "ConnectionPoolConfig",
    "DEFAULT_USER_AGENT",
    "DEFAULT_MAX_REDIRECTS",
    # Core
    "Client",
    "RequestBuilder",
    "HTTPMethod",
    "Request",
    "Response",
    # Transport
    "Transport",
    "RawResponse",
    "RequestsTransport",
    # Codec
    "Codec",
    "JSONCodec",
    "DEFAULT_CODEC",
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
    "classify_requests_exception",
    "classify_transport_exception",
]
