"""
Domain models and value objects.

Contains pool snapshot, vesting schedule, event models and the error taxonomy.
"""

from src.core.domain.errors import (
    AlreadyInitialized,
    AlreadyWithdrawn,
    ArithmeticOverflow,
    DegenerateTrade,
    InsufficientLiquidity,
    InvalidInput,
    NotInitialized,
    PoolError,
    PoolNotFound,
    RateLimited,
    ReentrantCall,
    SellingLocked,
    TradingPaused,
    TransferFailed,
    Unauthorized,
    VestingExceeded,
)
from src.core.domain.events import (
    AnyPoolEvent,
    AuthorityTransferred,
    Buy,
    EmergencyWithdraw,
    PoolEvent,
    PoolInitialized,
    Sell,
    SellingEnabled,
    TokenCreated,
    VestingInitialized,
)
from src.core.domain.events import TradingPaused as TradingPausedEvent
from src.core.domain.pool_state import PoolState, PoolStatus, Reserves, Timelock
from src.core.domain.vesting import VestingInfo, VestingSchedule, VestingStatus

__all__ = [
    # Errors
    "PoolError",
    "AlreadyInitialized",
    "NotInitialized",
    "InvalidInput",
    "ArithmeticOverflow",
    "InsufficientLiquidity",
    "DegenerateTrade",
    "RateLimited",
    "SellingLocked",
    "VestingExceeded",
    "TransferFailed",
    "Unauthorized",
    "AlreadyWithdrawn",
    "TradingPaused",
    "ReentrantCall",
    "PoolNotFound",
    # Events
    "PoolEvent",
    "AnyPoolEvent",
    "PoolInitialized",
    "Buy",
    "Sell",
    "SellingEnabled",
    "TradingPausedEvent",
    "EmergencyWithdraw",
    "VestingInitialized",
    "AuthorityTransferred",
    "TokenCreated",
    # Pool state
    "PoolState",
    "PoolStatus",
    "Reserves",
    "Timelock",
    # Vesting
    "VestingSchedule",
    "VestingInfo",
    "VestingStatus",
]
