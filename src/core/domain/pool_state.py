"""
PoolState — Модель снапшота пула

Immutable Pydantic модель, представляющая согласованный снапшот пула:
резервы, статус lifecycle, timelock, владелец.
Полная совместимость с JSON Schema (src/core/contracts/schema/pool_state.json).
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class PoolStatus(str, Enum):
    """
    Состояние lifecycle пула.

    UNINITIALIZED → ACTIVE ⇄ PAUSED → WITHDRAWN (терминальное)
    """

    UNINITIALIZED = "UNINITIALIZED"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    WITHDRAWN = "WITHDRAWN"


# =============================================================================
# NESTED MODELS
# =============================================================================


class Reserves(BaseModel):
    """Пара резервов пула (согласованный снапшот)."""

    currency_reserve: int = Field(..., ge=0, description="Резерв базовой валюты")
    token_reserve: int = Field(..., ge=0, description="Резерв токена")

    model_config = {"frozen": True}

    @property
    def k(self) -> int:
        """Произведение резервов."""
        return self.currency_reserve * self.token_reserve

    @property
    def is_empty(self) -> bool:
        return self.currency_reserve == 0 or self.token_reserve == 0


class Timelock(BaseModel):
    """Состояние timelock продаж."""

    selling_enabled: bool = Field(..., description="Продажи открыты (latched)")
    selling_enable_at: int = Field(
        ..., ge=0, description="Момент открытия продаж (unix seconds, 0 = не взведён)"
    )

    model_config = {"frozen": True}


# =============================================================================
# POOL STATE MODEL
# =============================================================================


class PoolState(BaseModel):
    """
    Снапшот пула.

    Immutable модель (frozen=True). Reads никогда не видят частично
    обновлённую пару резервов: снапшот собирается под lock пула.
    """

    pool_address: str = Field(..., min_length=1, description="Адрес пула")
    token_address: str | None = Field(None, description="Адрес токена (после initialize)")
    authority: str = Field(..., min_length=1, description="Текущий владелец пула")

    status: PoolStatus = Field(..., description="Состояние lifecycle")
    reserves: Reserves = Field(..., description="Резервы")
    timelock: Timelock = Field(..., description="Timelock продаж")

    fee_bps: int = Field(..., ge=0, lt=10_000, description="Комиссия (bps)")
    price_wad: int | None = Field(
        None, ge=0, description="Спот-цена токена (18 знаков), None если нет ликвидности"
    )

    model_config = {"frozen": True}

    @property
    def initialized(self) -> bool:
        return self.status != PoolStatus.UNINITIALIZED

    @property
    def paused(self) -> bool:
        return self.status == PoolStatus.PAUSED
