# src/vane/aio.py
"""
Асинхронный адаптер над блокирующим Client.

Каждый await отправляет блокирующий ``Client.execute`` в executor
(``loop.run_in_executor``) и возобновляется, когда он вернётся. Ядро
об этом адаптере не знает.

Отмена ожидающей задачи не прерывает рабочий поток: его ограничивает
эффективный таймаут запроса.
"""

import asyncio
import functools
from concurrent.futures import Executor
from typing import Any, Optional, Union

from .core.client import Client
from .core.models import HTTPMethod, Request, Response
from .core.request_builder import BaseRequestBuilder

Body = Optional[Union[bytes, str]]


class AsyncClient:
    """
    Async фасад над Client для asyncio приложений.

    Example:
        >>> async with AsyncClient(Client.create(config)) as client:
        ...     response = await client.get("/users")
        ...     users = await client.request("/users").response_json()

    Args:
        client: Блокирующий клиент, выполняющий запросы
        executor: Executor для блокирующих вызовов (None = default executor loop-а)
    """

    def __init__(self, client: Client, executor: Optional[Executor] = None):
        self._client = client
        self._executor = executor

    @classmethod
    def create(cls, config=None, transport=None, codec=None, executor: Optional[Executor] = None) -> "AsyncClient":
        """Создать AsyncClient вместе с внутренним Client."""
        return cls(Client.create(config=config, transport=transport, codec=codec), executor=executor)

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    async def execute(self, request: Request) -> Response:
        """
        Выполняет запрос в executor.

        Raises:
            Те же VaneError, что и Client.execute
        """
        return await self._run(self._client.execute, request)

    def request(self, url: str, method: Union[str, HTTPMethod] = HTTPMethod.GET) -> "AsyncRequestBuilder":
        return AsyncRequestBuilder(self, url, method)

    async def get(self, url: str) -> Response:
        return await self.execute(Request(url, HTTPMethod.GET))

    async def post(self, url: str, body: Body = None) -> Response:
        return await self.execute(Request(url, HTTPMethod.POST, body=body))

    async def put(self, url: str, body: Body = None) -> Response:
        return await self.execute(Request(url, HTTPMethod.PUT, body=body))

    async def delete(self, url: str) -> Response:
        return await self.execute(Request(url, HTTPMethod.DELETE))

    async def patch(self, url: str, body: Body = None) -> Response:
        return await self.execute(Request(url, HTTPMethod.PATCH, body=body))

    async def head(self, url: str) -> Response:
        return await self.execute(Request(url, HTTPMethod.HEAD))

    async def options(self, url: str) -> Response:
        return await self.execute(Request(url, HTTPMethod.OPTIONS))

    async def close(self) -> None:
        """Закрыть внутренний Client (соединения транспорта)."""
        await self._run(self._client.close)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    @property
    def client(self) -> Client:
        """Внутренний блокирующий клиент."""
        return self._client


class AsyncRequestBuilder(BaseRequestBuilder):
    """
    Async вариант RequestBuilder: терминальные операции - корутины.

    Example:
        >>> user = await client.request("/users/1").header("Accept", "application/json").response_json(User)
    """

    def __init__(
        self,
        client: AsyncClient,
        url: str,
        method: Union[str, HTTPMethod] = HTTPMethod.GET,
    ):
        super().__init__(url, method, client.client.codec)
        self._client = client

    async def execute(self) -> Response:
        return await self._client.execute(self.build())

    async def response_json(self, target: Optional[Any] = None) -> Any:
        """
        Raises:
            HttpError: Статус вне [200, 300); тело не декодируется
            DecodeError: Тело не соответствует ``target``
        """
        return self._decode_json(await self.execute(), target)

    async def response_string(self) -> str:
        """
        Raises:
            HttpError: Статус вне [200, 300)
            DecodeError: Тело не валидный UTF-8
        """
        return self._decode_string(await self.execute())
