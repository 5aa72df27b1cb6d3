# src/vane/contrib/httpx_transport.py
"""
Transport on top of httpx.Client.

Requires the ``httpx`` extra::

    pip install vane[httpx]

Example:
    >>> from vane import Client
    >>> from vane.contrib.httpx_transport import HttpxTransport
    >>> client = Client.create(config, transport=HttpxTransport(config))
"""

import ssl
import time
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Mapping, Optional

try:
    import httpx
except ImportError:
    raise ImportError(
        "httpx is required for HttpxTransport. "
        "Install with: pip install vane[httpx]"
    )

from ..core.config import ClientConfig
from ..core.exceptions import (
    ConfigError,
    ConnectionError,
    DNSError,
    NetworkError,
    TimeoutError,
    TLSError,
    VaneError,
    _iter_causes,
    is_dns_failure,
)
from ..core.transport import RawResponse


def classify_httpx_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None
) -> VaneError:
    """
    Конвертировать исключения httpx в наши исключения.

    Examples:
        >>> our_exc = classify_httpx_exception(httpx.ReadTimeout("timed out"), "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
    """
    cause = str(exc) or type(exc).__name__

    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError("Request timeout", url, timeout)

    if isinstance(exc, (httpx.UnsupportedProtocol, httpx.InvalidURL, httpx.LocalProtocolError)):
        return ConfigError(f"Invalid request: {cause}")

    if isinstance(exc, httpx.ConnectError):
        if any(isinstance(c, ssl.SSLError) for c in _iter_causes(exc)):
            return TLSError("TLS error", url, cause)
        if is_dns_failure(exc):
            return DNSError("DNS resolution failed", url, cause)
        return ConnectionError("Connection error", url, cause)

    if isinstance(exc, httpx.TooManyRedirects):
        return NetworkError("Too many redirects", url, cause)

    return NetworkError("Request error", url, cause)


class HttpxTransport:
    """
    Alternate Transport built on a single shared httpx.Client.

    httpx.Client is safe for concurrent use, so one client serves all
    threads. Connection-level settings come from ClientConfig; timeout
    and redirect policy are applied per call.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self._config = config or ClientConfig()

        # Block every domain: no cookie jar shared between calls
        jar = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))

        self._client = httpx.Client(
            headers={"User-Agent": self._config.user_agent},
            cookies=jar,
            verify=self._config.verify_ssl,
            max_redirects=self._config.max_redirects,
            limits=httpx.Limits(
                max_connections=self._config.pool.pool_maxsize * self._config.pool.pool_connections,
                max_keepalive_connections=self._config.pool.pool_maxsize,
            ),
        )

    def perform(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: Optional[float],
        follow_redirects: bool,
    ) -> RawResponse:
        deadline = time.monotonic() + timeout if timeout is not None else None

        try:
            with self._client.stream(
                method,
                url,
                # http.client шлёт заголовки в latin-1, httpx по умолчанию - ascii
                headers={name: value.encode('latin-1') for name, value in headers.items()},
                content=body,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
                follow_redirects=follow_redirects,
            ) as response:
                chunks = []
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    if deadline is not None and time.monotonic() > deadline:
                        raise TimeoutError("Request timeout", url, timeout)
                content = b"".join(chunks)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise classify_httpx_exception(e, url, timeout) from e

        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=content,
            url=str(response.url),
        )

    def close(self) -> None:
        self._client.close()
