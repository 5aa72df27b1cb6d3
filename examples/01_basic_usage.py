"""
Basic Vane Usage Examples

Demonstrates shorthands, the fluent builder and typed decoding.
"""

from dataclasses import dataclass
from typing import List

from vane import Client, ConfigBuilder, HttpError


@dataclass
class Post:
    id: int
    title: str
    userId: int


def make_client() -> Client:
    config = (
        ConfigBuilder()
        .base_url("https://jsonplaceholder.typicode.com")
        .default_headers({"Accept": "application/json"})
        .timeout(10)
        .build()
    )
    return Client.create(config)


def basic_get_request(client: Client):
    """Simple GET request; any status yields a Response."""
    print("\n=== Basic GET Request ===")

    response = client.get("/posts/1")

    print(f"Status: {response.status_code}")
    print(f"Data: {response.pretty_json()}")


def typed_response(client: Client):
    """Decode a successful body straight into dataclasses."""
    print("\n=== Typed Response ===")

    posts = client.request("/posts").query_param("userId", 1).response_json(List[Post])

    print(f"Got {len(posts)} posts, first: {posts[0].title!r}")


def post_with_json(client: Client):
    """POST request with JSON body."""
    print("\n=== POST with JSON ===")

    created = (
        client.request("/posts", "POST")
        .json_body({"title": "My Post", "body": "This is the content", "userId": 1})
        .response_json()
    )

    print(f"Created: {created}")


def handle_http_error(client: Client):
    """Non-2xx becomes HttpError only when a decode helper is used."""
    print("\n=== HttpError ===")

    try:
        client.request("/posts/999999").response_json(Post)
    except HttpError as e:
        print(f"Status {e.status_code}, body: {e.response.body[:40]!r}")


if __name__ == "__main__":
    with make_client() as client:
        basic_get_request(client)
        typed_response(client)
        post_with_json(client)
        handle_http_error(client)
