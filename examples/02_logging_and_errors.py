"""
Logging and Error Taxonomy Examples.

Logging is opt-in; every failure is one typed VaneError.
"""

from vane import (
    Client,
    ConfigBuilder,
    LoggingConfig,
    NetworkError,
    TimeoutError,
    VaneError,
)


def example_structured_logging():
    """JSON logs with masked secrets and a per-request correlation id."""
    print("\n=== Structured Logging ===")

    config = (
        ConfigBuilder()
        .base_url("https://httpbin.org")
        .default_headers({"Authorization": "Bearer not-printed"})
        .logging(LoggingConfig.create(level="DEBUG", format="json"))
        .build()
    )

    with Client.create(config) as client:
        client.get("/get?token=also-not-printed")


def example_error_branches():
    """Branch on the error type or on err.kind / err.retryable."""
    print("\n=== Error Taxonomy ===")

    config = ConfigBuilder().timeout(2).build()

    with Client.create(config) as client:
        for url in ("http://nonexistent-host.invalid/", "https://httpbin.org/delay/5"):
            try:
                client.get(url)
            except TimeoutError as e:
                print(f"timeout after {e.timeout}s (retryable={e.retryable})")
            except NetworkError as e:
                print(f"{type(e).__name__}: {e.message}")
            except VaneError as e:
                print(f"{e.kind.value}: {e}")


if __name__ == "__main__":
    example_structured_logging()
    example_error_branches()
