"""
Log filters: the in-flight request scope and static extra fields.

Client.execute runs start-to-finish on one thread, so the scope of the
current request lives in a thread-local. Every record logged inside it
gets ``correlation_id``, ``method`` and ``url`` without passing them to
each log call.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from ...utils.sanitizer import mask_string


_scope_storage = threading.local()


@dataclass(frozen=True)
class RequestScope:
    """Поля запроса, который сейчас выполняется в этом потоке."""
    correlation_id: str
    method: Optional[str] = None
    url: Optional[str] = None


def get_request_scope() -> Optional[RequestScope]:
    return getattr(_scope_storage, 'value', None)


@contextmanager
def request_scope(
    method: str,
    url: str,
    correlation_id: Optional[str] = None
) -> Iterator[RequestScope]:
    """
    Привязать запрос к текущему потоку на время блока.

    URL маскируется сразу: токены из query string не попадают в записи.
    Вложенный scope восстанавливает внешний при выходе.

    Example:
        >>> with request_scope("GET", "https://api.example.com/users?token=abc") as scope:
        ...     logger.info("Request completed", status_code=200)
        >>> scope.url
        'https://api.example.com/users?token=***REDACTED***'
    """
    previous = get_request_scope()
    scope = RequestScope(
        correlation_id=correlation_id or str(uuid.uuid4()),
        method=method,
        url=mask_string(url),
    )
    _scope_storage.value = scope
    try:
        yield scope
    finally:
        _scope_storage.value = previous


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for current thread (scope without method/url)."""
    _scope_storage.value = RequestScope(correlation_id)


def get_correlation_id() -> Optional[str]:
    """
    Get correlation ID for current thread.

    Example:
        >>> set_correlation_id("req-12345")
        >>> get_correlation_id()
        'req-12345'
    """
    scope = get_request_scope()
    return scope.correlation_id if scope else None


def clear_correlation_id() -> None:
    """Drop the scope of the current thread."""
    _scope_storage.value = None


class RequestScopeFilter(logging.Filter):
    """
    Adds fields of the in-flight request to each record.

    ``method`` and ``url`` passed explicitly to a log call win over the
    scope. ``correlation_id`` is added only when ``include_correlation_id``.
    """

    def __init__(self, include_correlation_id: bool = True):
        super().__init__()
        self.include_correlation_id = include_correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        scope = get_request_scope()
        if scope is None:
            return True

        if self.include_correlation_id:
            record.correlation_id = scope.correlation_id
        if scope.method is not None and not hasattr(record, 'method'):
            record.method = scope.method
        if scope.url is not None and not hasattr(record, 'url'):
            record.url = scope.url
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service, environment, ...) to every record.

    Fields already present on the record are left untouched.
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
