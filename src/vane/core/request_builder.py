# src/vane/core/request_builder.py
"""
Fluent request building.

A builder is a mutable, single-use draft owned by one call site; its
terminal operations freeze it into exactly one Request snapshot.
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from .codec import Codec, DEFAULT_CODEC, decode_body, encode_body
from .exceptions import HttpError
from .models import HTTPMethod, Request, Response, validate_timeout

if TYPE_CHECKING:
    from .client import Client


class BaseRequestBuilder:
    """
    Accumulates request fields; shared by the blocking and async builders.

    Not thread-safe: meant for one call on one thread.
    """

    def __init__(
        self,
        url: str,
        method: Union[str, HTTPMethod] = HTTPMethod.GET,
        codec: Optional[Codec] = None,
    ):
        self._url = url
        self._method = HTTPMethod.parse(method)
        self._codec = codec or DEFAULT_CODEC
        self._headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self._query_params: Dict[str, str] = {}
        self._body: Optional[bytes] = None
        self._timeout: Optional[float] = None
        self._follow_redirects: Optional[bool] = None
        self._consumed = False

    # ==================== Headers & query ====================

    def headers(self, headers: Mapping[str, str]):
        """Replace all headers of this request."""
        self._headers = CaseInsensitiveDict(headers)
        return self

    def header(self, key: str, value: str):
        """Set one header (case-insensitive upsert)."""
        self._headers[key] = value
        return self

    def query_params(self, params: Mapping[str, Any]):
        """Replace all query parameters of this request."""
        self._query_params = {str(k): str(v) for k, v in params.items()}
        return self

    def query_param(self, key: str, value: Any):
        """Set one query parameter."""
        self._query_params[str(key)] = str(value)
        return self

    # ==================== Body ====================

    def body(self, body: Union[bytes, str]):
        """Raw body; str is encoded as UTF-8."""
        self._body = body.encode('utf-8') if isinstance(body, str) else bytes(body)
        return self

    def json_body(self, value: Any):
        """
        Serialize ``value`` with the codec and set Content-Type.

        Raises:
            SerializationError: If the value cannot be encoded
        """
        self._body = encode_body(value, self._codec)
        self._headers['Content-Type'] = getattr(self._codec, 'content_type', 'application/json')
        return self

    # ==================== Overrides ====================

    def timeout(self, seconds: float):
        """
        Per-request timeout, wins over the client's timeout.

        Raises:
            ConfigError: If seconds is not positive
        """
        self._timeout = validate_timeout(seconds)
        return self

    def follow_redirects(self, follow: bool):
        self._follow_redirects = follow
        return self

    # ==================== Snapshot ====================

    def build(self) -> Request:
        """
        Freeze the draft into a Request.

        Raises:
            RuntimeError: If this builder already produced its Request
        """
        if self._consumed:
            raise RuntimeError(
                "RequestBuilder has already been executed. "
                "Create a new builder for each request."
            )
        self._consumed = True

        return Request(
            url=self._url,
            method=self._method,
            headers=dict(self._headers),
            query_params=self._query_params,
            body=self._body,
            timeout=self._timeout,
            follow_redirects=self._follow_redirects,
        )

    def _decode_json(self, response: Response, target: Optional[Any]) -> Any:
        if not response.success:
            raise HttpError(response.status_code, response)
        return decode_body(response.body, target, self._codec)

    @staticmethod
    def _decode_string(response: Response) -> str:
        if not response.success:
            raise HttpError(response.status_code, response)
        return response.text()


class RequestBuilder(BaseRequestBuilder):
    """
    Blocking request builder.

    Example:
        >>> users = (
        ...     client.request("/users")
        ...     .header("Accept", "application/json")
        ...     .query_param("page", 1)
        ...     .response_json(list[User])
        ... )
    """

    def __init__(
        self,
        client: "Client",
        url: str,
        method: Union[str, HTTPMethod] = HTTPMethod.GET,
        codec: Optional[Codec] = None,
    ):
        super().__init__(url, method, codec)
        self._client = client

    def execute(self) -> Response:
        """Send the request; any status code yields a Response."""
        return self._client.execute(self.build())

    def response_json(self, target: Optional[Any] = None) -> Any:
        """
        Send the request and decode a successful JSON body.

        Raises:
            HttpError: Status outside [200, 300); the body is not decoded
            DecodeError: Body is not valid for ``target``
        """
        return self._decode_json(self.execute(), target)

    def response_string(self) -> str:
        """
        Send the request and return a successful body as text.

        Raises:
            HttpError: Status outside [200, 300)
            DecodeError: Body is not valid UTF-8
        """
        return self._decode_string(self.execute())
