"""
Pytest configuration and fixtures for vane tests.
"""

import threading
from typing import List, Mapping, Optional

import pytest

from vane import Client, ConfigBuilder
from vane.core.logging.filters import clear_correlation_id
from vane.core.transport import RawResponse


class RecordedCall:
    """Arguments of one FakeTransport.perform call."""

    def __init__(self, method, url, headers, body, timeout, follow_redirects):
        self.method = method
        self.url = url
        self.headers = dict(headers)
        self.body = body
        self.timeout = timeout
        self.follow_redirects = follow_redirects


class FakeTransport:
    """
    Recording transport for pipeline tests.

    Returns ``response`` (or raises ``error``) for every call and keeps
    the resolved arguments the client handed over.
    """

    def __init__(self, response: Optional[RawResponse] = None, error: Optional[Exception] = None):
        self.response = response or RawResponse(status_code=200, headers={}, body=b"")
        self.error = error
        self.calls: List[RecordedCall] = []
        self.closed = False
        self._lock = threading.Lock()

    def perform(self, method: str, url: str, headers: Mapping[str, str], body: Optional[bytes],
                timeout: Optional[float], follow_redirects: bool) -> RawResponse:
        with self._lock:
            self.calls.append(RecordedCall(method, url, headers, body, timeout, follow_redirects))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> RecordedCall:
        return self.calls[-1]


_PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")


@pytest.fixture(autouse=True)
def _no_proxies(monkeypatch):
    """Local sockets must be reached directly."""
    for name in _PROXY_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    clear_correlation_id()
    yield
    clear_correlation_id()


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def fake_client(base_url, fake_transport):
    """Client over FakeTransport."""
    client = Client.create(ConfigBuilder().base_url(base_url).build(), transport=fake_transport)
    yield client
    client.close()

