# src/vane/core/transport.py
"""
Transport capability and its default requests-based implementation.

The client hands the transport a fully resolved call (method, final URL,
merged headers, body, effective timeout and redirect policy) and gets
back the raw status, headers and buffered body. Failures are raised as
classified VaneError instances.
"""
import socket
import threading
import time
import weakref
from dataclasses import dataclass, field
from http.cookiejar import DefaultCookiePolicy
from typing import Callable, Mapping, Optional, Protocol, runtime_checkable

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .exceptions import TimeoutError, classify_requests_exception


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and complete body of one exchange."""
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""


@runtime_checkable
class Transport(Protocol):
    """
    Performs one blocking network exchange.

    Implementations must be safe for concurrent ``perform`` calls.

    ``timeout`` is a total deadline for the exchange, measured from the
    start of ``perform``: connect and each socket read are bounded by it,
    and the body must be fully buffered before it passes. When it passes,
    the in-flight exchange is aborted and TimeoutError is raised. A server
    trickling the status line and headers is bounded per read only, so
    the worst case there is one read timeout past the deadline.
    """

    def perform(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: Optional[float],
        follow_redirects: bool,
    ) -> RawResponse:
        ...

    def close(self) -> None:
        ...


class ThreadLocalSessions:
    """
    Hands out one requests.Session per thread.

    requests.Session is not guaranteed thread-safe, so each thread gets
    its own lazily created session. Sessions are tracked weakly so that
    ``close_all`` can release sockets from every thread.

    Example:
        >>> sessions = ThreadLocalSessions(factory)
        >>> session = sessions.get()  # session of the current thread
        >>> sessions.close_all()
    """

    def __init__(self, factory: Callable[[], requests.Session]):
        self._factory = factory
        self._local = threading.local()
        self._all: "weakref.WeakSet[requests.Session]" = weakref.WeakSet()
        self._lock = threading.Lock()

    def get(self) -> requests.Session:
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._factory()
            self._local.session = session
            with self._lock:
                self._all.add(session)
        return session

    def close_all(self) -> None:
        """Close sessions of all threads. Safe to call multiple times."""
        self._local.session = None
        with self._lock:
            sessions = list(self._all)
            self._all.clear()

        for session in sessions:
            session.close()

    def active_count(self) -> int:
        with self._lock:
            return len(self._all)


class _BodyDeadline:
    """
    Прерывает чтение тела ответа по истечении общего дедлайна.

    Таймаут requests действует на каждую операцию с сокетом, поэтому
    сервер, отдающий по байту, может тянуть ответ бесконечно. По таймеру
    сокет закрывается на чтение, и заблокированный read сразу возвращается.
    """

    def __init__(self, response: requests.Response, remaining: float):
        self._response = response
        self._expired = threading.Event()
        self._timer = threading.Timer(remaining, self._abort)
        self._timer.daemon = True

    @property
    def expired(self) -> bool:
        return self._expired.is_set()

    def _abort(self) -> None:
        self._expired.set()
        connection = getattr(self._response.raw, 'connection', None)
        sock = getattr(connection, 'sock', None)
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Сокет уже закрыт - чтение и так завершилось
            pass

    def __enter__(self) -> "_BodyDeadline":
        self._timer.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._timer.cancel()
        return False


class RequestsTransport:
    """
    Default transport on top of requests/urllib3.

    Connection-level defaults (User-Agent, pool size, redirect limit,
    SSL verification) come from ClientConfig; timeout and redirect policy
    are applied per call. Cookies are never stored between calls.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self._config = config or ClientConfig()
        self._sessions = ThreadLocalSessions(self._create_session)

    def _create_session(self) -> requests.Session:
        """Create configured session."""
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=self._config.pool.pool_connections,
            pool_maxsize=self._config.pool.pool_maxsize,
            pool_block=self._config.pool.pool_block,
            max_retries=0
        )
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        session.headers['User-Agent'] = self._config.user_agent
        session.max_redirects = self._config.max_redirects
        session.verify = self._config.verify_ssl

        # Block every domain: no cookie jar shared between calls
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

        return session

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

        session = self._sessions.get()
        try:
            response = session.request(
                method=method,
                url=url,
                headers=dict(headers),
                data=body,
                timeout=timeout,
                allow_redirects=follow_redirects,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, url, timeout) from e

        try:
            content = self._read_body(response, url, timeout, deadline)
        finally:
            response.close()

        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=content,
            url=response.url,
        )

    def _read_body(
        self,
        response: requests.Response,
        url: str,
        timeout: Optional[float],
        deadline: Optional[float],
    ) -> bytes:
        """Буферизовать тело, не выходя за общий дедлайн запроса."""
        if deadline is None:
            try:
                return response.content
            except requests.exceptions.RequestException as e:
                raise classify_requests_exception(e, url, timeout) from e

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TimeoutError("Request timeout", url, timeout)

        with _BodyDeadline(response, remaining) as guard:
            try:
                content = response.content
            except Exception as e:
                # После shutdown ошибка чтения зависит от ОС и TLS-слоя
                if guard.expired:
                    raise TimeoutError("Request timeout", url, timeout) from e
                if isinstance(e, requests.exceptions.RequestException):
                    raise classify_requests_exception(e, url, timeout) from e
                raise

        # Без Content-Length обрыв сокета выглядит как обычный конец тела
        if guard.expired:
            raise TimeoutError("Request timeout", url, timeout)
        return content

    def close(self) -> None:
        self._sessions.close_all()

    @property
    def active_sessions(self) -> int:
        """Number of live per-thread sessions."""
        return self._sessions.active_count()
