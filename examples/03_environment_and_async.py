"""
Environment Configuration and asyncio Examples.

Configuration comes from VANE_* variables or a .env file; the async
adapter runs the blocking client on an executor.
"""

import asyncio
import os

from vane import Client
from vane.aio import AsyncClient
from vane.core.env_config import load_from_env, print_config_summary


def example_load_from_env():
    """Load ClientConfig from the environment."""
    print("\n=== Load from environment ===")

    os.environ.setdefault("VANE_BASE_URL", "https://jsonplaceholder.typicode.com")
    os.environ.setdefault("VANE_TIMEOUT", "10")
    os.environ.setdefault("VANE_DEFAULT_HEADERS", '{"Authorization": "Bearer secret"}')

    config = load_from_env(max_redirects=3)  # explicit override wins
    print_config_summary(config)
    return config


async def example_async(config):
    """Several requests in flight from one event loop."""
    print("\n=== asyncio ===")

    async with AsyncClient(Client.create(config)) as client:
        responses = await asyncio.gather(*(client.get(f"/posts/{i}") for i in range(1, 4)))
        for response in responses:
            print(response.status_code, response.json()["title"])


if __name__ == "__main__":
    asyncio.run(example_async(example_load_from_env()))
