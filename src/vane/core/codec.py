"""
Pluggable body codec.

A codec converts between structured values and the bytes carried by
Request/Response bodies. The core only ever calls ``encode`` and
``decode``; hosts may bind any implementation satisfying the protocol.
"""

from functools import lru_cache
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import TypeAdapter

from .exceptions import DecodeError, SerializationError


@runtime_checkable
class Codec(Protocol):
    """
    Capability interface for body serialization.

    Implementations may raise any exception on failure; the core maps
    encode failures to SerializationError and decode failures to
    DecodeError.
    """

    content_type: str

    def encode(self, value: Any) -> bytes:
        """Serialize ``value`` to bytes."""
        ...

    def decode(self, data: bytes, target: Optional[Any] = None) -> Any:
        """Deserialize ``data`` into an instance of ``target`` (or plain data when None)."""
        ...


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


class JSONCodec:
    """
    JSON codec backed by pydantic.

    Handles plain JSON data (dict, list, str, numbers), dataclasses,
    TypedDicts and pydantic models in both directions.

    Example:
        >>> codec = JSONCodec()
        >>> codec.encode({"name": "John"})
        b'{"name":"John"}'
        >>> codec.decode(b'[1, 2]', list[int])
        [1, 2]
    """

    content_type = "application/json"

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def encode(self, value: Any) -> bytes:
        return _adapter(type(value)).dump_json(value)

    def decode(self, data: bytes, target: Optional[Any] = None) -> Any:
        # Text encoding is checked separately so the error names the real problem
        text = data.decode(self.encoding)
        return _adapter(Any if target is None else target).validate_json(text)


DEFAULT_CODEC = JSONCodec()


def encode_body(value: Any, codec: Optional[Codec] = None) -> bytes:
    """
    Encode a request body, surfacing any codec failure as SerializationError.

    Args:
        value: Value to serialize
        codec: Codec to use (JSONCodec by default)

    Returns:
        Encoded bytes

    Raises:
        SerializationError: If the codec cannot encode the value
    """
    codec = codec or DEFAULT_CODEC
    try:
        return codec.encode(value)
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(
            f"Failed to encode {type(value).__name__} body",
            cause=str(e)
        ) from e


def decode_body(data: bytes, target: Optional[Any] = None, codec: Optional[Codec] = None) -> Any:
    """
    Decode a response body, surfacing any codec failure as DecodeError.

    Raises:
        DecodeError: On malformed bytes, wrong text encoding or shape mismatch
    """
    codec = codec or DEFAULT_CODEC
    try:
        return codec.decode(data, target)
    except DecodeError:
        raise
    except UnicodeDecodeError as e:
        raise DecodeError("Response body is not valid text", cause=str(e)) from e
    except Exception as e:
        target_name = getattr(target, "__name__", None) or repr(target)
        raise DecodeError(
            f"Failed to decode response body as {target_name}",
            cause=str(e)
        ) from e
