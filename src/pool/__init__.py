"""Pool — конфигурация, резервы, lifecycle и композиция LiquidityPool."""

from src.pool.authority import Authority
from src.pool.capabilities import Bindable, CurrencyCapability, TokenCapability
from src.pool.config import PoolConfig, SeedPolicy
from src.pool.liquidity_pool import LiquidityPool
from src.pool.reserve_ledger import ReserveLedger, TradeResult, TradeSide
from src.pool.state_machine import (
    LifecycleAction,
    PoolLifecycleStateMachine,
    PoolTransitionResult,
)

__all__ = [
    "Authority",
    "Bindable",
    "CurrencyCapability",
    "TokenCapability",
    "PoolConfig",
    "SeedPolicy",
    "LiquidityPool",
    "ReserveLedger",
    "TradeResult",
    "TradeSide",
    "LifecycleAction",
    "PoolLifecycleStateMachine",
    "PoolTransitionResult",
]
