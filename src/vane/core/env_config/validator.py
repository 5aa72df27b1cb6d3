"""
Pydantic validators for environment configuration.

Every ClientConfig option has a flat VANE_* counterpart.
"""

from typing import Dict, Literal, Optional
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_MAX_REDIRECTS, DEFAULT_USER_AGENT


class VaneSettings(BaseSettings):
    """
    Client configuration from environment variables.

    Reads from:
    1. Init arguments (explicit overrides)
    2. Environment variables (VANE_*)
    3. .env file
    4. Defaults

    Example .env file:
        VANE_BASE_URL=https://api.example.com
        VANE_DEFAULT_HEADERS={"Authorization": "Bearer token"}
        VANE_TIMEOUT=10
        VANE_MAX_REDIRECTS=5
        VANE_LOG_ENABLED=true
        VANE_LOG_LEVEL=DEBUG

    Usage:
        >>> settings = VaneSettings()
        >>> print(settings.base_url)
        'https://api.example.com'
    """

    model_config = SettingsConfigDict(
        env_prefix='VANE_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Base configuration
    base_url: Optional[str] = Field(default=None, description="Base URL for relative request URLs")
    default_headers: Dict[str, str] = Field(default_factory=dict, description="JSON object")
    timeout: Optional[float] = Field(default=None, gt=0, description="Default timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)

    # Redirects
    follow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=DEFAULT_MAX_REDIRECTS, ge=0)

    # Security
    verify_ssl: bool = Field(default=True)

    # Connection pool
    pool_connections: int = Field(default=10, ge=1)
    pool_maxsize: int = Field(default=16, ge=1)

    # Logging
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_file_path: Optional[str] = None

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> Optional[str]:
        """Empty means no base URL; otherwise http(s)://host is required."""
        if not v:
            return None
        parts = urlsplit(v)
        if parts.scheme not in ('http', 'https') or not parts.netloc:
            raise ValueError(f"base_url must look like http(s)://host[/path], got {v!r}")
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        return v.lower() if isinstance(v, str) else v
