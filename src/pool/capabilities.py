"""Capabilities — внешние коллабораторы пула на уровне интерфейса.

Пул не знает, как устроены токен и валюта: он получает handle,
привязанный к своему адресу (bind), и вызывает только эти методы.
Возврат False или исключение из перевода — TransferFailed всей сделки.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenCapability(Protocol):
    """Handle токена, привязанный к вызывающему адресу."""

    def transfer(self, to: str, amount: int) -> bool: ...

    def transfer_from(self, owner: str, to: str, amount: int) -> bool: ...

    def balance_of(self, address: str) -> int: ...

    def total_supply(self) -> int: ...


@runtime_checkable
class CurrencyCapability(Protocol):
    """Handle базовой валюты; transfer_from(actor, pool, x) — value, приложенный к вызову."""

    def transfer(self, to: str, amount: int) -> bool: ...

    def transfer_from(self, owner: str, to: str, amount: int) -> bool: ...

    def balance_of(self, address: str) -> int: ...


@runtime_checkable
class Bindable(Protocol):
    """Реестр балансов, выдающий capability handle для вызывающего."""

    address: str

    def bind(self, caller: str) -> TokenCapability: ...
