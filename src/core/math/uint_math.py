"""
Uint Math — Checked Unsigned Integer Primitives

Все суммы пула (резервы, комиссии, vesting allotments) — целые числа без знака
фиксированной ширины (uint256), как в on-chain учёте.

Модуль обеспечивает:
- Проверку диапазона [0, UINT256_MAX] для каждого входа и результата
- Checked add / sub / mul без wrap-around
- mul_div: умножение строго до деления (минимизация truncation bias)
- Конверсию basis points в абсолютную долю суммы

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Overflow / underflow никогда не оборачиваются (ArithmeticOverflow)
2. Деление на ноль никогда не происходит (ArithmeticOverflow)
3. Все операции детерминированы, округление всегда вниз (floor)
"""

from typing import Final

from src.core.domain.errors import ArithmeticOverflow, InvalidInput

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Максимальное значение uint256
UINT256_MAX: Final[int] = 2**256 - 1

# Знаменатель basis points (1 bps = 0.01%)
BPS_DENOMINATOR: Final[int] = 10_000

# Fixed-point масштаб для цены (18 десятичных знаков)
WAD: Final[int] = 10**18


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_uint(value: int, name: str) -> int:
    """
    Валидация, что значение — uint256.

    bool отклоняется явно: True/False не являются суммами.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        То же значение

    Raises:
        InvalidInput: Если значение не int, отрицательное или > UINT256_MAX
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer amount, got {value!r}")

    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value}")

    if value > UINT256_MAX:
        raise ArithmeticOverflow(f"{name} exceeds uint256 range")

    return value


def validate_positive_uint(value: int, name: str) -> int:
    """
    Валидация, что значение — строго положительный uint256.

    Raises:
        InvalidInput: Если значение == 0 или невалидно
    """
    validate_uint(value, name)

    if value == 0:
        raise InvalidInput(f"{name} must be positive, got 0")

    return value


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


def _check_result(result: int, op: str) -> int:
    if result < 0:
        raise ArithmeticOverflow(f"uint256 underflow in {op}")
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"uint256 overflow in {op}")
    return result


def checked_add(a: int, b: int) -> int:
    """a + b с проверкой overflow."""
    return _check_result(validate_uint(a, "a") + validate_uint(b, "b"), "add")


def checked_sub(a: int, b: int) -> int:
    """a - b с проверкой underflow (результат никогда не отрицательный)."""
    return _check_result(validate_uint(a, "a") - validate_uint(b, "b"), "sub")


def checked_mul(a: int, b: int) -> int:
    """a * b с проверкой overflow."""
    return _check_result(validate_uint(a, "a") * validate_uint(b, "b"), "mul")


def checked_div(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с округлением вниз.

    Raises:
        ArithmeticOverflow: Если denominator == 0
    """
    validate_uint(numerator, "numerator")
    validate_uint(denominator, "denominator")

    if denominator == 0:
        raise ArithmeticOverflow("division by zero")

    return numerator // denominator


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) — умножение строго до деления.

    Промежуточное произведение тоже обязано помещаться в uint256:
    так же ведёт себя on-chain учёт без full-precision mulDiv.

    Examples:
        >>> mul_div(1_000_000, 100, 1100)
        90909
        >>> mul_div(7, 3, 2)
        10
    """
    return checked_div(checked_mul(a, b), denominator)


# =============================================================================
# BASIS POINTS
# =============================================================================


def validate_bps(bps: int, name: str, allow_full: bool = False) -> int:
    """
    Валидация значения в basis points.

    Args:
        bps: Значение в bps
        name: Имя параметра
        allow_full: Разрешить ровно 10000 bps (100%)

    Raises:
        ValueError: Если bps вне диапазона
    """
    if isinstance(bps, bool) or not isinstance(bps, int):
        raise ValueError(f"{name} must be an integer number of bps, got {bps!r}")

    upper = BPS_DENOMINATOR if allow_full else BPS_DENOMINATOR - 1
    if bps < 0 or bps > upper:
        raise ValueError(f"{name} must be in [0, {upper}] bps, got {bps}")

    return bps


def apply_bps(amount: int, bps: int) -> int:
    """
    Доля amount, выраженная в basis points (округление вниз).

    Examples:
        >>> apply_bps(90909, 50)
        454
    """
    return mul_div(amount, bps, BPS_DENOMINATOR)
