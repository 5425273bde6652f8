"""Registry — in-memory токен, базовая валюта и фабрика пулов."""

from src.registry.factory import FactoryConfig, PoolFactory, TokenLaunch
from src.registry.ledger import BalanceLedger, BoundLedger, FixedSupplyToken, NativeCurrency

__all__ = [
    "BalanceLedger",
    "BoundLedger",
    "FixedSupplyToken",
    "NativeCurrency",
    "FactoryConfig",
    "PoolFactory",
    "TokenLaunch",
]
