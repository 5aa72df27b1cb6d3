"""
Request/Response data model.

Both are immutable snapshots: mappings are frozen with MappingProxyType
and bodies are plain ``bytes``.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from .codec import Codec, decode_body
from .exceptions import ConfigError, DecodeError


class HTTPMethod(str, Enum):
    """Supported HTTP methods."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: Union[str, "HTTPMethod"]) -> "HTTPMethod":
        """
        Normalize a method name.

        Raises:
            ConfigError: If the method is not supported
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ConfigError(f"Invalid method: {value}") from None


def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """Convert mapping to immutable MappingProxyType."""
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


def validate_timeout(timeout: Optional[float]) -> Optional[float]:
    """
    Validate a timeout value in seconds.

    Raises:
        ConfigError: If timeout is not a positive number
    """
    if timeout is None:
        return None
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ConfigError(f"timeout must be a number of seconds, got {type(timeout).__name__}")
    if timeout <= 0:
        raise ConfigError("timeout must be positive")
    return timeout


@dataclass(frozen=True)
class Request:
    """
    Immutable snapshot of one HTTP call.

    Args:
        url: Absolute URL or path relative to the client's base URL
        method: HTTP method
        headers: Request headers (overlay on the client's default headers)
        query_params: Query parameters appended to the URL
        body: Request body (str is encoded as UTF-8)
        timeout: Per-request timeout override (seconds)
        follow_redirects: Per-request redirect policy override

    Examples:
        >>> Request("/users")
        >>> Request("https://api.example.com/users", method="POST", body=b"{}")
    """
    url: str
    method: HTTPMethod = HTTPMethod.GET
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    query_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: Optional[bytes] = None
    timeout: Optional[float] = None
    follow_redirects: Optional[bool] = None

    def __post_init__(self):
        """Normalize method/body and freeze mutable dicts."""
        object.__setattr__(self, 'method', HTTPMethod.parse(self.method))
        object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        object.__setattr__(self, 'query_params', _freeze_dict(self.query_params))

        if isinstance(self.body, str):
            object.__setattr__(self, 'body', self.body.encode('utf-8'))
        elif isinstance(self.body, (bytearray, memoryview)):
            object.__setattr__(self, 'body', bytes(self.body))

        validate_timeout(self.timeout)

    def __hash__(self):
        return hash((
            self.url,
            self.method,
            frozenset(self.headers.items()),
            frozenset(self.query_params.items()),
            self.body,
            self.timeout,
            self.follow_redirects,
        ))


@dataclass(frozen=True)
class Response:
    """
    Immutable, fully buffered result of one exchange.

    A non-2xx status is still a valid Response; use ``success`` (or the
    decode helpers of RequestBuilder) to decide whether it is an error.

    Args:
        status_code: HTTP status code
        headers: Response headers (case-insensitive lookup)
        body: Complete response body
        url: Final URL after redirects
    """
    status_code: int
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: bytes = b""
    url: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'headers', MappingProxyType(CaseInsensitiveDict(self.headers)))
        object.__setattr__(self, 'body', bytes(self.body))

    def __hash__(self):
        # Равенство заголовков регистронезависимое - хеш тоже
        headers = frozenset((name.lower(), value) for name, value in self.headers.items())
        return hash((self.status_code, headers, self.body, self.url))

    @property
    def success(self) -> bool:
        """True if status is in [200, 300)."""
        return 200 <= self.status_code < 300

    @property
    def is_successful(self) -> bool:
        """Alias for ``success``."""
        return self.success

    def json(self, target: Optional[Any] = None, codec: Optional[Codec] = None) -> Any:
        """
        Decode the body regardless of status code.

        Args:
            target: Target type (dataclass, pydantic model, list[int], ...);
                None returns plain JSON data
            codec: Codec to use (JSONCodec by default)

        Raises:
            DecodeError: Malformed body, wrong text encoding or shape mismatch
        """
        return decode_body(self.body, target, codec)

    def text(self, encoding: str = "utf-8") -> str:
        """
        Body as text.

        Raises:
            DecodeError: If the body is not valid in ``encoding``
        """
        try:
            return self.body.decode(encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Response body is not valid {encoding}", cause=str(e)) from e

    def pretty_json(self) -> Optional[str]:
        """Reformatted JSON body for display, or None if the body is not JSON."""
        try:
            parsed = json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return None
        return json.dumps(parsed, indent=2, ensure_ascii=False)
