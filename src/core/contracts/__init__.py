"""
Contract Validation Module

Модуль для валидации JSON контрактов пула (снапшоты и события).
"""

from .validators import (
    SCHEMA_DIR,
    PoolContract,
    PoolEventValidator,
    PoolStateValidator,
    dump_contract,
    load_schema,
    validate_pool_event,
    validate_pool_state,
)

__all__ = [
    # Classes
    "PoolContract",
    "PoolStateValidator",
    "PoolEventValidator",
    # Functions
    "SCHEMA_DIR",
    "load_schema",
    "validate_pool_state",
    "validate_pool_event",
    "dump_contract",
]
