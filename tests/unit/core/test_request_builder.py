"""Tests for the fluent RequestBuilder."""

import json
from dataclasses import dataclass
from typing import List

import pytest

from vane.core.exceptions import ConfigError, DecodeError, HttpError, SerializationError
from vane.core.models import HTTPMethod, Response
from vane.core.request_builder import BaseRequestBuilder
from vane.core.transport import RawResponse


@dataclass
class User:
    id: int
    name: str


class TestBuild:
    def test_collects_fields(self):
        request = (
            BaseRequestBuilder("/users", "post")
            .header("Accept", "application/json")
            .query_param("page", 2)
            .body("hello")
            .timeout(1.5)
            .follow_redirects(False)
            .build()
        )

        assert request.url == "/users"
        assert request.method is HTTPMethod.POST
        assert dict(request.headers) == {"Accept": "application/json"}
        assert dict(request.query_params) == {"page": "2"}
        assert request.body == b"hello"
        assert request.timeout == 1.5
        assert request.follow_redirects is False

    def test_header_upsert_case_insensitive(self):
        request = BaseRequestBuilder("/x").header("X-A", "1").header("x-a", "2").build()
        assert dict(request.headers) == {"x-a": "2"}

    def test_headers_replaces(self):
        request = BaseRequestBuilder("/x").header("X-A", "1").headers({"X-B": "2"}).build()
        assert dict(request.headers) == {"X-B": "2"}

    def test_query_params_replaces(self):
        request = BaseRequestBuilder("/x").query_param("a", 1).query_params({"b": True}).build()
        assert dict(request.query_params) == {"b": "True"}

    def test_json_body_sets_content_type(self):
        request = BaseRequestBuilder("/x", "POST").json_body({"name": "John"}).build()
        assert json.loads(request.body) == {"name": "John"}
        assert request.headers["Content-Type"] == "application/json"

    def test_json_body_unserializable(self):
        with pytest.raises(SerializationError):
            BaseRequestBuilder("/x", "POST").json_body({"x": object()})

    def test_invalid_method(self):
        with pytest.raises(ConfigError):
            BaseRequestBuilder("/x", "TRACE")

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ConfigError):
            BaseRequestBuilder("/x").timeout(timeout)

    def test_single_use(self):
        builder = BaseRequestBuilder("/x")
        builder.build()
        with pytest.raises(RuntimeError, match="already been executed"):
            builder.build()

    def test_request_does_not_change_after_build(self):
        builder = BaseRequestBuilder("/x").header("A", "1")
        request = builder.build()
        builder.header("A", "2")
        assert request.headers["A"] == "1"


class TestTerminalOperations:
    def test_execute_returns_any_status(self, fake_client, fake_transport):
        fake_transport.response = RawResponse(status_code=404, body=b"nope")

        response = fake_client.request("/missing").execute()

        assert isinstance(response, Response)
        assert response.status_code == 404
        assert response.success is False

    def test_response_json_typed(self, fake_client, fake_transport):
        fake_transport.response = RawResponse(200, body=b'[{"id": 1, "name": "John"}]')

        users = fake_client.request("/users").response_json(List[User])

        assert users == [User(1, "John")]

    def test_response_json_http_error_without_decode(self, fake_client, fake_transport):
        """Не-2xx даёт HttpError с полным Response, тело не декодируется."""
        fake_transport.response = RawResponse(500, body=b"<html>oops</html>")

        with pytest.raises(HttpError) as exc_info:
            fake_client.request("/users").response_json(List[User])

        assert exc_info.value.status_code == 500
        assert exc_info.value.response.body == b"<html>oops</html>"

    def test_response_json_decode_error(self, fake_client, fake_transport):
        fake_transport.response = RawResponse(200, body=b'{"id": "x"}')

        with pytest.raises(DecodeError):
            fake_client.request("/users/1").response_json(User)

    def test_response_string(self, fake_client, fake_transport):
        fake_transport.response = RawResponse(200, body="привет".encode("utf-8"))
        assert fake_client.request("/hello").response_string() == "привет"

    def test_response_string_http_error(self, fake_client, fake_transport):
        fake_transport.response = RawResponse(404, body=b"")
        with pytest.raises(HttpError):
            fake_client.request("/hello").response_string()

    def test_response_string_invalid_utf8(self, fake_client, fake_transport):
        fake_transport.response = RawResponse(200, body=b"\xff\xfe")
        with pytest.raises(DecodeError):
            fake_client.request("/hello").response_string()

    def test_builder_consumed_by_execute(self, fake_client):
        builder = fake_client.request("/x")
        builder.execute()
        with pytest.raises(RuntimeError):
            builder.execute()

    def test_builder_uses_client_codec(self, fake_transport, base_url):
        from vane import Client, ConfigBuilder

        class PlainCodec:
            content_type = "text/plain"

            def encode(self, value):
                return str(value).encode()

            def decode(self, data, target=None):
                return data.decode()

        client = Client.create(ConfigBuilder().base_url(base_url).build(), transport=fake_transport, codec=PlainCodec())
        fake_transport.response = RawResponse(200, body=b"raw")

        assert client.request("/x", "POST").json_body(42).response_json() == "raw"
        assert fake_transport.last.body == b"42"
        assert fake_transport.last.headers["Content-Type"] == "text/plain"
