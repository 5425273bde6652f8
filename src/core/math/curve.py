"""
Constant-Product Curve — ценообразование пула

Инвариант кривой: currency_reserve * token_reserve = k

ФОРМУЛЫ:
    token_out    = token_reserve * currency_in / (currency_reserve + currency_in)
    currency_out = currency_reserve * token_in / (token_reserve + token_in)
    price        = currency_reserve * WAD / token_reserve

Эквивалентно token_reserve - k / (currency_reserve + currency_in), но
умножение выполняется до деления, чтобы минимизировать ошибку усечения.
Округление всегда вниз, в пользу пула.
"""

from typing import NamedTuple

from src.core.math.uint_math import (
    WAD,
    apply_bps,
    checked_add,
    checked_sub,
    mul_div,
    validate_positive_uint,
    validate_uint,
)


class FeeSplit(NamedTuple):
    """Разделение валового выхода на комиссию и сумму к выплате."""

    gross: int
    fee: int
    net: int


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Выход по constant-product кривой без комиссии.

    Возвращает 0 (не ошибку), если любой из резервов пуст: слой выше
    различает "нет ликвидности" и "вырожденная сделка".

    Args:
        amount_in: Сумма на входе (> 0)
        reserve_in: Резерв входной стороны
        reserve_out: Резерв выходной стороны

    Returns:
        floor(reserve_out * amount_in / (reserve_in + amount_in))

    Raises:
        InvalidInput: Если amount_in == 0 или значения вне uint256

    Examples:
        >>> get_amount_out(100, 1000, 1_000_000)
        90909
    """
    validate_positive_uint(amount_in, "amount_in")
    validate_uint(reserve_in, "reserve_in")
    validate_uint(reserve_out, "reserve_out")

    if reserve_in == 0 or reserve_out == 0:
        return 0

    return mul_div(reserve_out, amount_in, checked_add(reserve_in, amount_in))


def is_degenerate(amount_out: int, reserve_out: int) -> bool:
    """True если выход не удовлетворяет 0 < amount_out < reserve_out."""
    return amount_out <= 0 or amount_out >= reserve_out


def split_fee(gross: int, fee_bps: int) -> FeeSplit:
    """
    Комиссия берётся с выходной стороны.

    Examples:
        >>> split_fee(90909, 50)
        FeeSplit(gross=90909, fee=454, net=90455)
    """
    fee = apply_bps(gross, fee_bps)
    return FeeSplit(gross=gross, fee=fee, net=checked_sub(gross, fee))


def spot_price(currency_reserve: int, token_reserve: int) -> int:
    """
    Спот-цена одного токена в валюте, fixed-point с 18 знаками.

    Вызывающий обязан проверить token_reserve > 0.
    """
    return mul_div(currency_reserve, WAD, token_reserve)


def reserve_product(currency_reserve: int, token_reserve: int) -> int:
    """k = currency_reserve * token_reserve (без ограничения uint256)."""
    return currency_reserve * token_reserve
