"""
Addresses — идентификаторы акторов, токенов и пулов

Адреса — строки вида 0x + 40 hex. Детерминированные адреса (пулы, токены)
выводятся через blake2b от составных частей: никаких uuid4, повторный
запуск симуляции даёт те же адреса.
"""

import hashlib
from typing import Final

from src.core.domain.errors import InvalidInput

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40


def validate_address(address: str, name: str = "address") -> str:
    """
    Валидация адреса.

    Raises:
        InvalidInput: Пустой адрес, не строка или нулевой адрес
    """
    if not isinstance(address, str) or not address:
        raise InvalidInput(f"{name} must be a non-empty string, got {address!r}")

    if address == ZERO_ADDRESS:
        raise InvalidInput(f"{name} must not be the zero address")

    return address


def derive_address(*parts: str) -> str:
    """
    Детерминированный адрес из составных частей.

    Examples:
        >>> derive_address("factory", "TUG") == derive_address("factory", "TUG")
        True
    """
    h = hashlib.blake2b(digest_size=20)
    for part in parts:
        h.update(part.encode("utf-8"))
        h.update(b"\x00")
    return "0x" + h.hexdigest()
