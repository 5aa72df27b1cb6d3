"""
Configuration loader from environment variables and .env files.

Main entry point for loading configuration.
"""

from typing import Optional

from pydantic import ValidationError
from pydantic_settings import SettingsError

from ..config import ClientConfig, ConnectionPoolConfig
from ..exceptions import ConfigError
from ..logging.config import LoggingConfig
from ...utils.sanitizer import mask_headers, mask_string
from .validator import VaneSettings


def load_settings(env_file: Optional[str] = None, **overrides) -> VaneSettings:
    """
    Read and validate VANE_* settings.

    Raises:
        ConfigError: Any value fails validation
    """
    try:
        if env_file is None:
            return VaneSettings(**overrides)
        return VaneSettings(_env_file=env_file, **overrides)
    except (ValidationError, SettingsError) as e:
        raise ConfigError(f"Invalid environment configuration: {e}") from e


def load_from_env(env_file: Optional[str] = None, **overrides) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (VaneSettings field names)
    2. Environment variables (VANE_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path (default: ./.env)
        **overrides: Explicit config overrides

    Returns:
        ClientConfig instance

    Raises:
        ConfigError: Invalid value in any source

    Example:
        >>> config = load_from_env()

        >>> config = load_from_env(
        ...     env_file=".env.production",
        ...     base_url="https://custom.api.com"  # Override
        ... )
    """
    settings = load_settings(env_file, **overrides)

    logging_config = None
    if settings.log_enabled:
        logging_config = LoggingConfig(
            level=settings.log_level,
            format=settings.log_format,
            enable_file=settings.log_file_path is not None,
            file_path=settings.log_file_path,
        )

    return ClientConfig(
        base_url=settings.base_url,
        default_headers=settings.default_headers,
        timeout=settings.timeout,
        user_agent=settings.user_agent,
        follow_redirects=settings.follow_redirects,
        max_redirects=settings.max_redirects,
        verify_ssl=settings.verify_ssl,
        pool=ConnectionPoolConfig(
            pool_connections=settings.pool_connections,
            pool_maxsize=settings.pool_maxsize,
        ),
        logging=logging_config,
    )


def print_config_summary(config: ClientConfig, mask_secrets: bool = True):
    """
    Print configuration summary.

    Useful for debugging and verification.

    Args:
        config: Configuration to print
        mask_secrets: Mask sensitive values

    Example:
        >>> config = load_from_env()
        >>> print_config_summary(config)
        ClientConfig:
          base_url: https://api.example.com
          timeout: 10.0s
          ...
    """
    headers = dict(config.default_headers)
    base_url = config.base_url
    if mask_secrets:
        headers = mask_headers(headers)
        base_url = mask_string(base_url) if base_url else base_url

    timeout = f"{config.timeout}s" if config.timeout is not None else "transport default"

    print("ClientConfig:")
    print(f"  base_url: {base_url}")
    print(f"  default_headers: {headers}")
    print(f"  timeout: {timeout}")
    print(f"  user_agent: {config.user_agent}")
    print(f"  redirects: follow={config.follow_redirects}, max={config.max_redirects}")
    print(f"  verify_ssl: {config.verify_ssl}")
    print(f"  pool: connections={config.pool.pool_connections}, maxsize={config.pool.pool_maxsize}")

    if config.logging:
        print(f"  logging: level={config.logging.level.value}, format={config.logging.format.value}")
        if config.logging.enable_file:
            print(f"    file: {config.logging.file_path}")
