"""
Pool Events — события для внешней индексации

Immutable Pydantic модели. События не участвуют в логике ядра: пул
публикует их только после commit операции (отклонённая операция событий
не порождает). Формат сериализации описан контрактом
src/core/contracts/schema/pool_event.json.
"""

from typing import Literal, Union

from pydantic import BaseModel, Field


class PoolEvent(BaseModel):
    """Базовая модель события."""

    name: str
    emitter: str = Field(..., min_length=1, description="Адрес пула или фабрики")

    model_config = {"frozen": True}


class PoolInitialized(PoolEvent):
    name: Literal["PoolInitialized"] = "PoolInitialized"
    token: str = Field(..., min_length=1)
    seed_tokens: int = Field(..., gt=0)
    seed_currency: int = Field(..., gt=0)
    initial_price: int = Field(..., ge=0, description="Цена (18 знаков)")


class Buy(PoolEvent):
    name: Literal["Buy"] = "Buy"
    actor: str = Field(..., min_length=1)
    token_out: int = Field(..., gt=0, description="Токенов получено покупателем (net)")
    currency_in: int = Field(..., gt=0)
    fee: int = Field(..., ge=0, description="Комиссия в токенах, оставшаяся в пуле")


class Sell(PoolEvent):
    name: Literal["Sell"] = "Sell"
    actor: str = Field(..., min_length=1)
    token_in: int = Field(..., gt=0)
    currency_out: int = Field(..., gt=0, description="Валюты получено продавцом (net)")
    fee: int = Field(..., ge=0, description="Комиссия в валюте, оставшаяся в пуле")


class SellingEnabled(PoolEvent):
    name: Literal["SellingEnabled"] = "SellingEnabled"
    at: int = Field(..., ge=0)


class TradingPaused(PoolEvent):
    name: Literal["TradingPaused"] = "TradingPaused"
    paused: bool


class EmergencyWithdraw(PoolEvent):
    name: Literal["EmergencyWithdraw"] = "EmergencyWithdraw"
    actor: str = Field(..., min_length=1)
    currency: int = Field(..., ge=0)
    tokens: int = Field(..., ge=0)


class VestingInitialized(PoolEvent):
    name: Literal["VestingInitialized"] = "VestingInitialized"
    actor: str = Field(..., min_length=1)
    allotment: int = Field(..., gt=0)
    start: int = Field(..., ge=0)


class AuthorityTransferred(PoolEvent):
    name: Literal["AuthorityTransferred"] = "AuthorityTransferred"
    previous_owner: str = Field(..., min_length=1)
    new_owner: str = Field(..., min_length=1)


class TokenCreated(PoolEvent):
    name: Literal["TokenCreated"] = "TokenCreated"
    token: str = Field(..., min_length=1)
    pool: str = Field(..., min_length=1)
    creator: str = Field(..., min_length=1)
    token_name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    metadata_uri: str = ""


AnyPoolEvent = Union[
    PoolInitialized,
    Buy,
    Sell,
    SellingEnabled,
    TradingPaused,
    EmergencyWithdraw,
    VestingInitialized,
    AuthorityTransferred,
    TokenCreated,
]
