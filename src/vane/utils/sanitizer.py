# src/vane/utils/sanitizer.py
"""
Маскирование чувствительных данных перед логированием.

Защищает токены, пароли и API ключи в заголовках, URL и структурных
полях логов.
"""

import re
from typing import Any, Dict, Mapping

DEFAULT_MASK = "***REDACTED***"

# Чувствительные ключи (case-insensitive, совпадение по подстроке)
SENSITIVE_KEYS = {
    # Пароли
    'password', 'passwd', 'pwd',
    # Токены
    'token', 'jwt', 'bearer',
    # Секреты и ключи
    'secret', 'api_key', 'apikey', 'api-key', 'private_key',
    # Аутентификация
    'authorization', 'auth', 'credentials',
    # Сессии и куки
    'cookie', 'session_id', 'sessionid', 'csrf', 'xsrf',
}

# Паттерны для значений внутри строк
SENSITIVE_PATTERNS = [
    # Bearer/Basic в заголовках
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    # key=value в query string
    (re.compile(r'((?:api[_-]?key|token|password|secret)[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    # user:password@host
    (re.compile(r'(://[^:/@\s]+:)([^@/\s]+)(@)'), r'\1' + DEFAULT_MASK + r'\3'),
]


def is_sensitive_key(key: str) -> bool:
    """
    Проверяет, является ли ключ чувствительным.

    Examples:
        >>> is_sensitive_key("X-Auth-Token")
        True
        >>> is_sensitive_key("Content-Type")
        False
    """
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def mask_string(text: str) -> str:
    """Маскирует чувствительные значения внутри строки (URL, заголовок)."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def mask_sensitive_data(data: Any, mask: str = DEFAULT_MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Args:
        data: Данные для маскирования
        mask: Строка-заменитель для значений чувствительных ключей

    Returns:
        Копия данных с замаскированными полями

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Accept": "*/*"})
        {'Authorization': '***REDACTED***', 'Accept': '*/*'}
        >>> mask_sensitive_data("https://h/api?token=abc&page=1")
        'https://h/api?token=***REDACTED***&page=1'
    """
    if isinstance(data, str):
        return mask_string(data)

    if isinstance(data, Mapping):
        return mask_headers(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # None, числа, bytes и прочие объекты возвращаем как есть
    return data


def mask_headers(headers: Mapping[str, Any], mask: str = DEFAULT_MASK) -> Dict[str, Any]:
    """
    Маскирует значения чувствительных заголовков.

    Examples:
        >>> mask_headers({"Authorization": "Bearer token123", "User-Agent": "Vane/1.0"})
        {'Authorization': '***REDACTED***', 'User-Agent': 'Vane/1.0'}
    """
    return {
        key: mask if is_sensitive_key(str(key)) else mask_sensitive_data(value, mask)
        for key, value in headers.items()
    }


def add_sensitive_keys(*keys: str) -> None:
    """
    Добавляет ключи в глобальный список SENSITIVE_KEYS.

    Example:
        >>> add_sensitive_keys('x-tenant-signature')
    """
    for key in keys:
        SENSITIVE_KEYS.add(key.lower())
