"""
Система конфигурации Vane.

ClientConfig - immutable снапшот (frozen dataclass), ConfigBuilder -
изменяемый черновик, который его производит.
"""

from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from types import MappingProxyType
from typing import Dict, Mapping, Optional, TYPE_CHECKING

from .exceptions import ConfigError
from .models import validate_timeout

if TYPE_CHECKING:
    from .logging import LoggingConfig

try:
    __version__ = version("vane")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

DEFAULT_USER_AGENT = f"Vane/{__version__}"
DEFAULT_MAX_REDIRECTS = 10

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONNECTION POOL CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ConnectionPoolConfig:
    """
    Конфигурация connection pool транспорта.

    Args:
        pool_connections: Количество connection pools для кеширования (по хостам)
        pool_maxsize: Максимум соединений в пуле на хост
        pool_block: Блокировать при достижении лимита

    Examples:
        >>> ConnectionPoolConfig(pool_maxsize=32)
    """
    pool_connections: int = 10
    pool_maxsize: int = 16
    pool_block: bool = False

    def __post_init__(self):
        """Валидация."""
        if self.pool_connections <= 0:
            raise ConfigError("pool_connections must be positive")
        if self.pool_maxsize <= 0:
            raise ConfigError("pool_maxsize must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация Client.

    Immutable конфигурация для потокобезопасности: Client читает её
    из любого потока без блокировок.

    Args:
        base_url: Базовый URL (опционально)
        default_headers: Дефолтные заголовки (ключи хранятся как переданы)
        timeout: Таймаут по умолчанию в секундах (None = дефолт транспорта)
        user_agent: User-Agent транспорта
        follow_redirects: Следовать редиректам
        max_redirects: Максимум редиректов
        verify_ssl: Проверять SSL сертификаты
        pool: Конфигурация connection pool
        logging: Конфигурация логирования (None = без логов)

    Examples:
        >>> config = ClientConfig(base_url="https://api.example.com")
        >>> config = ConfigBuilder().base_url("https://api.example.com").timeout(30).build()
    """
    base_url: Optional[str] = None
    default_headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    verify_ssl: bool = True
    pool: ConnectionPoolConfig = field(default_factory=ConnectionPoolConfig)
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Freeze mutable dicts and validate local invariants."""
        if not isinstance(self.default_headers, MappingProxyType):
            object.__setattr__(self, 'default_headers', MappingProxyType(dict(self.default_headers)))

        validate_timeout(self.timeout)
        if self.max_redirects < 0:
            raise ConfigError("max_redirects must be non-negative")

    def __hash__(self):
        # logging не участвует: LoggingConfig хранит dict extra_fields
        return hash((
            self.base_url,
            frozenset(self.default_headers.items()),
            self.timeout,
            self.user_agent,
            self.follow_redirects,
            self.max_redirects,
            self.verify_ssl,
            self.pool,
        ))

    def with_headers(self, headers: Dict[str, str]) -> 'ClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Args:
            headers: Заголовки для объединения с существующими

        Returns:
            Новый ClientConfig

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.default_headers)
        merged.update(headers)
        return self.to_builder().default_headers(merged).build()

    def to_builder(self) -> 'ConfigBuilder':
        """Черновик, заполненный значениями этого конфига."""
        builder = ConfigBuilder()
        builder._values.update(
            base_url=self.base_url,
            default_headers=dict(self.default_headers),
            timeout=self.timeout,
            user_agent=self.user_agent,
            follow_redirects=self.follow_redirects,
            max_redirects=self.max_redirects,
            verify_ssl=self.verify_ssl,
            pool=self.pool,
            logging=self.logging,
        )
        return builder

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BUILDER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigBuilder:
    """
    Изменяемый черновик ClientConfig.

    Каждый метод задаёт одно поле и возвращает self; ``build()`` никогда
    не падает на незаданных полях и возвращает frozen снапшот.

    Example:
        >>> config = (
        ...     ConfigBuilder()
        ...     .base_url("https://api.example.com")
        ...     .default_headers({"Authorization": "Bearer token"})
        ...     .timeout(30)
        ...     .build()
        ... )
    """

    def __init__(self):
        self._values: Dict[str, object] = {}

    def base_url(self, url: str) -> 'ConfigBuilder':
        self._values['base_url'] = url
        return self

    def default_headers(self, headers: Mapping[str, str]) -> 'ConfigBuilder':
        """Заменить весь набор дефолтных заголовков (не merge)."""
        self._values['default_headers'] = dict(headers)
        return self

    def timeout(self, seconds: float) -> 'ConfigBuilder':
        self._values['timeout'] = validate_timeout(seconds)
        return self

    def user_agent(self, agent: str) -> 'ConfigBuilder':
        self._values['user_agent'] = agent
        return self

    def follow_redirects(self, follow: bool) -> 'ConfigBuilder':
        self._values['follow_redirects'] = follow
        return self

    def max_redirects(self, count: int) -> 'ConfigBuilder':
        if count < 0:
            raise ConfigError("max_redirects must be non-negative")
        self._values['max_redirects'] = count
        return self

    def verify_ssl(self, verify: bool) -> 'ConfigBuilder':
        self._values['verify_ssl'] = verify
        return self

    def pool(self, pool: ConnectionPoolConfig) -> 'ConfigBuilder':
        self._values['pool'] = pool
        return self

    def logging(self, config: Optional['LoggingConfig']) -> 'ConfigBuilder':
        self._values['logging'] = config
        return self

    def build(self) -> ClientConfig:
        """Вернуть frozen снапшот; незаданные поля получают дефолты."""
        return ClientConfig(**self._values)
