"""
Pool Errors — таксономия отказов пула

Каждый отказ — отдельный класс с устойчивым машинно-проверяемым `reason`.
Все ошибки, кроме TransferFailed, возникают ДО любой мутации состояния.
TransferFailed возникает после расчёта и приводит к полному откату.
"""


class PoolError(Exception):
    """Базовый класс всех отказов пула."""

    reason: str = "PoolError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.reason)
        self.message = message

    def __str__(self) -> str:
        if not self.message:
            return self.reason
        return f"{self.reason}: {self.message}"


class AlreadyInitialized(PoolError):
    """Повторный initialize (construction-once)."""

    reason = "AlreadyInitialized"


class NotInitialized(PoolError):
    """Операция над пулом до initialize."""

    reason = "NotInitialized"


class InvalidInput(PoolError):
    """Нулевые суммы, нулевые адреса, невалидные типы."""

    reason = "InvalidInput"


class ArithmeticOverflow(InvalidInput):
    """uint256 overflow / underflow / деление на ноль — отказ, не wrap."""

    reason = "ArithmeticOverflow"


class InsufficientLiquidity(PoolError):
    """Один из резервов равен нулю."""

    reason = "InsufficientLiquidity"


class DegenerateTrade(PoolError):
    """Выход усечён до нуля или исчерпал бы резерв."""

    reason = "DegenerateTrade"


class RateLimited(PoolError):
    """Anti-bot: превышен лимит сделок актора в текущем bucket."""

    reason = "RateLimited"


class SellingLocked(PoolError):
    """Продажи ещё закрыты timelock."""

    reason = "SellingLocked"


class VestingExceeded(PoolError):
    """Продажа превышает доступный по vesting объём."""

    reason = "VestingExceeded"


class TransferFailed(PoolError):
    """Внешний перевод (token или currency) не прошёл; сделка откатывается."""

    reason = "TransferFailed"


class Unauthorized(PoolError):
    """Привилегированная операция вызвана не владельцем."""

    reason = "Unauthorized"


class AlreadyWithdrawn(PoolError):
    """Пул в терминальном состоянии после emergency withdrawal."""

    reason = "AlreadyWithdrawn"


class TradingPaused(PoolError):
    """Торговля приостановлена владельцем."""

    reason = "TradingPaused"


class ReentrantCall(PoolError):
    """Мутирующая операция вызвана повторно до завершения текущей."""

    reason = "ReentrantCall"


class PoolNotFound(PoolError):
    """Для токена не зарегистрирован пул."""

    reason = "PoolNotFound"
