"""Utility modules for Vane."""

from .sanitizer import (
    mask_sensitive_data,
    mask_headers,
    mask_string,
    is_sensitive_key,
    add_sensitive_keys,
)

__all__ = [
    'mask_sensitive_data',
    'mask_headers',
    'mask_string',
    'is_sensitive_key',
    'add_sensitive_keys',
]
