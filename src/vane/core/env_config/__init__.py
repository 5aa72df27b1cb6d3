"""
Environment-based configuration for Vane.

Example:
    >>> from vane.core.env_config import load_from_env
    >>> config = load_from_env()  # reads VANE_* and ./.env
"""

from .loader import load_from_env, load_settings, print_config_summary
from .validator import VaneSettings

__all__ = [
    'load_from_env',
    'load_settings',
    'print_config_summary',
    'VaneSettings',
]
