"""Тесты Request/Response."""

from dataclasses import dataclass

import pytest

from vane.core.exceptions import ConfigError, DecodeError
from vane.core.models import HTTPMethod, Request, Response


@dataclass
class User:
    id: int
    name: str


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTPMethod
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@pytest.mark.parametrize("value", ["get", "GET", "Get", HTTPMethod.GET])
def test_method_parse_case_insensitive(value):
    assert HTTPMethod.parse(value) is HTTPMethod.GET

def test_method_parse_invalid():
    with pytest.raises(ConfigError, match="Invalid method"):
        HTTPMethod.parse("FETCH")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Request
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_request_defaults():
    request = Request("/users")
    assert request.method is HTTPMethod.GET
    assert dict(request.headers) == {}
    assert dict(request.query_params) == {}
    assert request.body is None
    assert request.timeout is None
    assert request.follow_redirects is None

def test_request_is_frozen():
    request = Request("/users", headers={"A": "1"})
    with pytest.raises(AttributeError):
        request.url = "/other"
    with pytest.raises(TypeError):
        request.headers["B"] = "2"

def test_request_copies_mappings():
    headers = {"A": "1"}
    request = Request("/users", headers=headers)
    headers["A"] = "2"
    assert request.headers["A"] == "1"

def test_request_str_body_encoded_utf8():
    request = Request("/users", "POST", body="привет")
    assert request.body == "привет".encode("utf-8")

def test_request_method_string_normalized():
    assert Request("/users", "post").method is HTTPMethod.POST

def test_request_rejects_bad_timeout():
    with pytest.raises(ConfigError):
        Request("/users", timeout=0)

def test_request_hashable():
    first = Request("/users", headers={"A": "1"}, query_params={"page": "2"})
    second = Request("/users", headers={"A": "1"}, query_params={"page": "2"})
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second, Request("/other")}) == 2

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Response
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@pytest.mark.parametrize("status,expected", [
    (199, False),
    (200, True),
    (204, True),
    (299, True),
    (300, False),
    (404, False),
    (500, False),
])
def test_response_success_boundaries(status, expected):
    response = Response(status_code=status)
    assert response.success is expected
    assert response.is_successful is expected

def test_response_headers_case_insensitive():
    response = Response(200, headers={"Content-Type": "application/json"})
    assert response.headers["content-type"] == "application/json"
    with pytest.raises(TypeError):
        response.headers["X-New"] = "1"

def test_response_hashable():
    first = Response(200, {"Content-Type": "text/plain"}, b"x")
    second = Response(200, {"content-type": "text/plain"}, b"x")
    assert first == second
    assert hash(first) == hash(second)
    assert {first: "cached"}[second] == "cached"

def test_response_json_plain():
    response = Response(200, body=b'{"a": [1, 2]}')
    assert response.json() == {"a": [1, 2]}

def test_response_json_typed():
    response = Response(200, body=b'{"id": 1, "name": "John"}')
    assert response.json(User) == User(id=1, name="John")

def test_response_json_ignores_status():
    """json() декодирует тело независимо от статуса."""
    response = Response(404, body=b'{"error": "not found"}')
    assert response.json() == {"error": "not found"}

def test_response_json_malformed():
    with pytest.raises(DecodeError):
        Response(200, body=b"{not json").json()

def test_response_json_shape_mismatch():
    with pytest.raises(DecodeError):
        Response(200, body=b'{"id": "abc"}').json(User)

def test_response_text():
    assert Response(200, body="тест".encode("utf-8")).text() == "тест"

def test_response_text_invalid_utf8():
    with pytest.raises(DecodeError):
        Response(200, body=b"\xff\xfe\xfa").text()

def test_response_pretty_json():
    response = Response(200, body=b'{"name":"\xd0\xb8\xd0\xbc\xd1\x8f"}')
    assert response.pretty_json() == '{\n  "name": "имя"\n}'

def test_response_pretty_json_not_json():
    assert Response(200, body=b"<html>").pretty_json() is None
