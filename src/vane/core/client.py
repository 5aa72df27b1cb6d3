# src/vane/core/client.py
import time
from contextlib import nullcontext
from typing import Optional, Union
from urllib.parse import urlsplit

from .codec import Codec, DEFAULT_CODEC
from .config import ClientConfig
from .exceptions import classify_transport_exception
from .logging import VaneLogger, request_scope
from .models import HTTPMethod, Request, Response
from .request_builder import RequestBuilder
from .transport import RequestsTransport, Transport
from .utils import (
    append_query_params,
    join_url,
    merge_headers,
    validate_base_url,
    validate_headers,
)

Body = Optional[Union[bytes, str]]


class Client:
    """
    Long-lived HTTP client: the single entry point turning a Request into
    a Response or a typed VaneError.

    Features:
        - Immutable configuration, read without locks from any thread
        - Pluggable Transport (requests by default) and Codec (JSON by default)
        - Blocking ``execute`` safe for concurrent use from many threads
        - Context manager for releasing pooled connections

    Example:
        >>> with Client.create(ConfigBuilder().base_url("https://api.example.com").build()) as client:
        ...     response = client.get("/users")
        ...     users = response.json()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        codec: Optional[Codec] = None,
    ):
        """
        Initialize client.

        Args:
            config: ClientConfig instance (defaults if None)
            transport: Transport to use (RequestsTransport built from config if None)
            codec: Body codec for builders (JSONCodec if None)

        Raises:
            ConfigError: Malformed base URL or default headers
        """
        config = config or ClientConfig()

        # Eager validation: bad config never reaches the network
        validate_base_url(config.base_url)
        validate_headers(config.default_headers)

        object.__setattr__(self, '_config', config)
        object.__setattr__(self, '_transport', transport if transport is not None else RequestsTransport(config))
        object.__setattr__(self, '_codec', codec or DEFAULT_CODEC)

        logger_instance: Optional[VaneLogger] = None
        if config.logging:
            logger_name = "vane"
            if config.base_url:
                logger_name = f"vane.{urlsplit(config.base_url).netloc}"
            logger_instance = VaneLogger(config=config.logging, name=logger_name)
        object.__setattr__(self, '_logger', logger_instance)

        object.__setattr__(self, '_initialized', True)

    @classmethod
    def create(
        cls,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        codec: Optional[Codec] = None,
    ) -> "Client":
        """
        Создать готовый к работе клиент.

        Raises:
            ConfigError: Если конфигурация невалидна
        """
        return cls(config=config, transport=transport, codec=codec)

    def __setattr__(self, name, value):
        """Запретить изменение после init (immutability)."""
        if hasattr(self, '_initialized'):
            raise RuntimeError(
                f"Cannot modify '{name}' - Client is immutable. "
                f"Create new instance instead."
            )
        object.__setattr__(self, name, value)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """
        Освобождает соединения транспорта и файловые дескрипторы логгера.

        Безопасно вызывать несколько раз.
        """
        if self._logger is not None:
            self._logger.close()
        self._transport.close()

    # ==================== Execution ====================

    def execute(self, request: Request) -> Response:
        """
        Выполняет запрос.

        Порядок:
            1. URL: абсолютный как есть, иначе base_url + url
            2. Заголовки: дефолтные, поверх них заголовки запроса
            3. Query параметры дописываются к существующим
            4. Таймаут и редиректы: override запроса, иначе конфиг
            5. Вызов транспорта, ответ -> Response

        Статус ответа не проверяется: 404 - это валидный Response.

        Args:
            request: Снапшот запроса (не изменяется)

        Returns:
            Response

        Raises:
            ConfigError: Невалидный URL или заголовки (до сетевого I/O)
            NetworkError: DNS, соединение, TLS
            TimeoutError: Истёк эффективный таймаут
        """
        validate_headers(request.headers)

        url = append_query_params(join_url(self._config.base_url, request.url), request.query_params)
        headers = merge_headers(self._config.default_headers, request.headers)

        timeout = request.timeout if request.timeout is not None else self._config.timeout
        follow_redirects = (
            request.follow_redirects
            if request.follow_redirects is not None
            else self._config.follow_redirects
        )

        method = request.method.value
        start_time = time.monotonic()

        scope = request_scope(method, url) if self._logger else nullcontext()
        with scope:
            if self._logger:
                self._logger.debug(
                    "Request prepared",
                    headers=dict(headers),
                    timeout=timeout,
                    follow_redirects=follow_redirects,
                    body_size=len(request.body) if request.body is not None else 0,
                )

            try:
                raw = self._transport.perform(
                    method,
                    url,
                    headers,
                    request.body,
                    timeout,
                    follow_redirects,
                )
            except Exception as e:
                error = classify_transport_exception(e, url, timeout)
                if self._logger:
                    self._logger.error(
                        "Request failed",
                        error=str(error),
                        error_type=type(error).__name__,
                        duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                    )
                if error is e:
                    raise
                raise error from e

            response = Response(
                status_code=raw.status_code,
                headers=raw.headers,
                body=raw.body,
                url=raw.url or url,
            )

            if self._logger:
                self._logger.info(
                    "Request completed",
                    status_code=response.status_code,
                    duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                    response_size=len(response.body),
                )

            return response

    def request(self, url: str, method: Union[str, HTTPMethod] = HTTPMethod.GET) -> RequestBuilder:
        """
        Начать построение запроса.

        Example:
            >>> client.request("/users", "POST").json_body({"name": "John"}).execute()
        """
        return RequestBuilder(self, url, method, self._codec)

    # ==================== Shorthands ====================

    def get(self, url: str) -> Response:
        """Выполняет GET запрос."""
        return self.execute(Request(url, HTTPMethod.GET))

    def post(self, url: str, body: Body = None) -> Response:
        """Выполняет POST запрос."""
        return self.execute(Request(url, HTTPMethod.POST, body=body))

    def put(self, url: str, body: Body = None) -> Response:
        """Выполняет PUT запрос."""
        return self.execute(Request(url, HTTPMethod.PUT, body=body))

    def delete(self, url: str) -> Response:
        """Выполняет DELETE запрос."""
        return self.execute(Request(url, HTTPMethod.DELETE))

    def patch(self, url: str, body: Body = None) -> Response:
        """Выполняет PATCH запрос."""
        return self.execute(Request(url, HTTPMethod.PATCH, body=body))

    def head(self, url: str) -> Response:
        """Выполняет HEAD запрос."""
        return self.execute(Request(url, HTTPMethod.HEAD))

    def options(self, url: str) -> Response:
        """Выполняет OPTIONS запрос."""
        return self.execute(Request(url, HTTPMethod.OPTIONS))

    # ==================== Свойства ====================

    @property
    def config(self) -> ClientConfig:
        """Конфигурация (read-only)."""
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        """Base URL (read-only)."""
        return self._config.base_url

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def codec(self) -> Codec:
        return self._codec
