"""
URL and header helpers for the execution pipeline.

Includes:
- URL resolution against a base URL
- Query string appending
- Header merging and validation
"""

import re
from typing import Mapping, Optional
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from requests.structures import CaseInsensitiveDict

from .exceptions import ConfigError

# RFC 3986 scheme followed by an authority
_ABSOLUTE_URL_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')

# RFC 7230 token
_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_HEADER_VALUE_FORBIDDEN = ('\r', '\n', '\0')


def is_absolute_url(url: str) -> bool:
    """
    Check whether ``url`` carries its own scheme.

    Examples:
        >>> is_absolute_url("https://api.example.com/users")
        True
        >>> is_absolute_url("/users")
        False
    """
    return bool(_ABSOLUTE_URL_RE.match(url))


def join_url(base_url: Optional[str], url: str) -> str:
    """
    Resolve ``url`` against ``base_url``.

    Absolute URLs are returned unchanged. Otherwise exactly one slash
    separates base and path, whatever slashes either side carried.

    Raises:
        ConfigError: If ``url`` is relative and there is no base URL

    Examples:
        >>> join_url("http://h/api/", "/users")
        'http://h/api/users'
        >>> join_url("http://h/api", "https://other.com/x")
        'https://other.com/x'
    """
    if is_absolute_url(url):
        return url

    if not base_url:
        raise ConfigError(f"Relative URL '{url}' requires a base_url")

    if not url:
        return base_url

    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def append_query_params(url: str, params: Mapping[str, str]) -> str:
    """
    Append percent-encoded query parameters after any existing query.

    Examples:
        >>> append_query_params("http://h/items?sort=asc", {"page": "1"})
        'http://h/items?sort=asc&page=1'
        >>> append_query_params("http://h/search", {"q": "a b"})
        'http://h/search?q=a%20b'
    """
    if not params:
        return url

    parts = urlsplit(url)
    encoded = urlencode([(str(k), str(v)) for k, v in params.items()], quote_via=quote)
    query = f"{parts.query}&{encoded}" if parts.query else encoded
    return urlunsplit(parts._replace(query=query))


def merge_headers(
    defaults: Mapping[str, str],
    overrides: Mapping[str, str]
) -> CaseInsensitiveDict:
    """
    Overlay request headers on default headers.

    Keys compare case-insensitively; on conflict the override wins
    (including its spelling of the key). Defaults not overridden are kept.

    Example:
        >>> merged = merge_headers({"Authorization": "Bearer T"}, {"Accept": "application/json"})
        >>> dict(merged)
        {'Authorization': 'Bearer T', 'Accept': 'application/json'}
    """
    merged = CaseInsensitiveDict(defaults)
    for key, value in overrides.items():
        merged[key] = value
    return merged


def validate_headers(headers: Mapping[str, str]) -> None:
    """
    Validate header names and values.

    Raises:
        ConfigError: Name is not an RFC 7230 token, value contains CR/LF/NUL
            or cannot be sent as latin-1
    """
    for name, value in headers.items():
        if not isinstance(name, str) or not _HEADER_NAME_RE.match(name):
            raise ConfigError(f"Invalid header name: {name!r}")
        if not isinstance(value, str):
            raise ConfigError(f"Header {name!r} value must be str, got {type(value).__name__}")
        if any(ch in value for ch in _HEADER_VALUE_FORBIDDEN):
            raise ConfigError(f"Invalid value for header {name!r}: control characters are not allowed")
        try:
            value.encode('latin-1')
        except UnicodeEncodeError as e:
            raise ConfigError(
                f"Invalid value for header {name!r}: not encodable as latin-1 ({e.reason})"
            ) from e


def validate_base_url(base_url: Optional[str]) -> None:
    """
    Validate base URL: http(s) scheme and a host.

    Raises:
        ConfigError: If the base URL is malformed
    """
    if base_url is None:
        return

    try:
        parts = urlsplit(base_url)
    except ValueError as e:
        raise ConfigError(f"Invalid base URL '{base_url}': {e}") from e

    if parts.scheme not in ('http', 'https') or not parts.netloc:
        raise ConfigError(
            f"Invalid base URL '{base_url}': expected http(s)://host[/path]"
        )
