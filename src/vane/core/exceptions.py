"""
Иерархия исключений Vane.

Классификация:
- TemporaryError (retryable=True) - сбой окружения, повтор имеет смысл
- FatalError (fatal=True) - ошибка входных данных или интерпретации ответа

Каждый класс несёт ErrorKind, поэтому вызывающий код может ветвиться
как через except, так и через ``err.kind``.
"""

import builtins
import socket
import ssl
from enum import Enum
from typing import TYPE_CHECKING, Optional

import requests
from urllib3.exceptions import (
    ConnectTimeoutError,
    NameResolutionError,
    NewConnectionError,
    ReadTimeoutError,
)

if TYPE_CHECKING:
    from .models import Response


class ErrorKind(str, Enum):
    """Тип ошибки (один на каждый вариант таксономии)."""
    CONFIG = "config"
    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP = "http"
    SERIALIZATION = "serialization"
    DECODE = "decode"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class VaneError(Exception):
    """Базовое исключение Vane."""

    kind: ErrorKind
    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ВРЕМЕННЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TemporaryError(VaneError):
    """
    Временная ошибка окружения.

    Примеры: таймауты, DNS, отказ в соединении.
    """
    retryable = True

class NetworkError(TemporaryError):
    """
    Сетевая ошибка.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        cause: Описание исходной причины
    """
    kind = ErrorKind.NETWORK

    def __init__(self, message: str, url: Optional[str] = None, cause: Optional[str] = None):
        self.url = url
        self.cause = cause

        msg = message
        if url:
            msg += f" (url: {url})"
        if cause:
            msg += f": {cause}"

        super().__init__(msg)

class DNSError(NetworkError):
    """DNS resolution failed."""
    pass

class ConnectionError(NetworkError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - Network unreachable
    """
    pass

class TLSError(NetworkError):
    """TLS handshake или проверка сертификата не удалась."""
    pass

class TimeoutError(TemporaryError):
    """
    Истёк эффективный таймаут запроса.

    Не наследуется от NetworkError: вызывающий код может повторять
    запрос именно при таймауте.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Эффективный таймаут (сек)
    """
    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = url
        self.timeout = timeout

        msg = message
        if timeout is not None:
            msg += f" (timeout: {timeout}s)"
        if url:
            msg += f" (url: {url})"

        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(VaneError):
    """
    Фатальная ошибка - повтор не поможет.

    Примеры: невалидная конфигурация, битый JSON.
    """
    fatal = True

class ConfigError(FatalError):
    """Невалидная конфигурация (base URL, заголовки, метод, таймаут)."""
    kind = ErrorKind.CONFIG

class HttpError(FatalError):
    """
    Запрос выполнен, но проверка статуса отклонила ответ.

    Args:
        status_code: HTTP статус
        response: Полный Response
        message: Сообщение
    """
    kind = ErrorKind.HTTP

    def __init__(self, status_code: int, response: "Response", message: str = ""):
        self.status_code = status_code
        self.response = response

        msg = f"Request failed with status {status_code}"
        if response is not None and response.url:
            msg += f" for {response.url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)

class SerializationError(FatalError):
    """Тело запроса не удалось закодировать."""
    kind = ErrorKind.SERIALIZATION

    def __init__(self, message: str, cause: Optional[str] = None):
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause else message)

class DecodeError(FatalError):
    """
    Тело ответа не удалось декодировать.

    Примеры:
    - Битый JSON
    - Невалидная кодировка (не UTF-8)
    - Данные не соответствуют целевому типу
    """
    kind = ErrorKind.DECODE

    def __init__(self, message: str, cause: Optional[str] = None):
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause else message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _iter_causes(exc: BaseException):
    """Обойти цепочку причин: args, .reason, __cause__, __context__."""
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current

        # UnicodeError, ssl.SSLError, URLError: reason - это строка
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            stack.append(reason)
        stack.append(current.__cause__)
        stack.append(current.__context__)
        for arg in getattr(current, "args", ()):
            if isinstance(arg, BaseException):
                stack.append(arg)


def is_dns_failure(exc: BaseException) -> bool:
    """
    Проверить, вызвана ли ошибка неудачным разрешением имени.

    Examples:
        >>> exc = requests.exceptions.ConnectionError(socket.gaierror(-2, "Name or service not known"))
        >>> is_dns_failure(exc)
        True
    """
    for cause in _iter_causes(exc):
        if isinstance(cause, (NameResolutionError, socket.gaierror)):
            return True
    return False


def is_timeout_failure(exc: BaseException) -> bool:
    """
    Проверить, истёк ли таймаут где-то в цепочке причин.

    requests оборачивает ReadTimeoutError при чтении тела в свой
    ConnectionError, поэтому isinstance(exc, Timeout) недостаточно.
    NewConnectionError наследует ConnectTimeoutError, но таймаутом не является.

    Examples:
        >>> inner = ReadTimeoutError(None, "https://example.com", "Read timed out.")
        >>> is_timeout_failure(requests.exceptions.ConnectionError(inner))
        True
    """
    for cause in _iter_causes(exc):
        if isinstance(cause, NewConnectionError):
            continue
        if isinstance(cause, (ReadTimeoutError, ConnectTimeoutError, socket.timeout)):
            return True
    return False


def classify_requests_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None
) -> VaneError:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса
        timeout: Эффективный таймаут запроса

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.Timeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.retryable == True
    """
    cause = str(exc) or type(exc).__name__

    # ConnectTimeout - это одновременно Timeout и ConnectionError
    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, timeout)

    # Таймаут при чтении тела приходит как ConnectionError/ChunkedEncodingError
    elif is_timeout_failure(exc):
        return TimeoutError("Request timeout", url, timeout)

    elif isinstance(exc, requests.exceptions.SSLError):
        return TLSError("TLS error", url, cause)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        if is_dns_failure(exc):
            return DNSError("DNS resolution failed", url, cause)
        return ConnectionError("Connection error", url, cause)

    elif isinstance(exc, (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
        requests.exceptions.InvalidHeader,
        requests.exceptions.URLRequired,
    )):
        return ConfigError(f"Invalid request: {cause}")

    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        return NetworkError("Too many redirects", url, cause)

    return NetworkError("Request error", url, cause)


def classify_transport_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None
) -> VaneError:
    """
    Классифицировать произвольное исключение стороннего Transport.

    Наши исключения возвращаются как есть, остальные оборачиваются,
    чтобы наружу не выходили неклассифицированные ошибки.
    """
    if isinstance(exc, VaneError):
        return exc

    if isinstance(exc, requests.exceptions.RequestException):
        return classify_requests_exception(exc, url, timeout)

    cause = str(exc) or type(exc).__name__

    if isinstance(exc, builtins.TimeoutError) or is_timeout_failure(exc):
        return TimeoutError("Request timeout", url, timeout)

    if isinstance(exc, ssl.SSLError):
        return TLSError("TLS error", url, cause)

    if is_dns_failure(exc):
        return DNSError("DNS resolution failed", url, cause)

    if isinstance(exc, builtins.ConnectionError):
        return ConnectionError("Connection error", url, cause)

    return NetworkError("Transport error", url, cause)
