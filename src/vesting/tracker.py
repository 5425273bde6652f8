"""Vesting Tracker — линейный посуточный вестинг ранних покупателей

Правила:
- График создаётся при первой покупке актора ДО открытия продаж
  (start = now, initial_allotment = amount, total_sold = 0)
- Последующие такие покупки увеличивают initial_allotment, start не меняется
- Покупки после открытия продаж график не создают и не меняют
- Продажи при активном графике увеличивают total_sold

ФОРМУЛА (max_sellable):
    elapsed = now - start
    elapsed >= period            → initial_allotment - total_sold
    иначе:
        units_elapsed = min(floor(elapsed / unit) + 1, period_units)   # +1: доступ в день 0
        allowed = initial_allotment * daily_unlock_bps * units_elapsed / 10000
        sellable = max(0, allowed - total_sold)

График — чистая функция (initial_allotment, start, total_sold, now):
скрытого состояния нет, расчёт воспроизводим для аудита.
"""

from dataclasses import dataclass
from typing import Dict, Final

from src.core.domain.errors import InvalidInput, VestingExceeded
from src.core.domain.vesting import VestingInfo, VestingSchedule, VestingStatus
from src.core.math.uint_math import (
    BPS_DENOMINATOR,
    checked_add,
    validate_bps,
    validate_positive_uint,
    validate_uint,
)


# =============================================================================
# CONSTANTS
# =============================================================================

SECONDS_PER_DAY: Final[int] = 86_400
DEFAULT_PERIOD_UNITS: Final[int] = 7
# ~1/7 в день
DEFAULT_DAILY_UNLOCK_BPS: Final[int] = 1429


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class VestingConfig:
    """Параметры вестинга."""

    unit_sec: int = SECONDS_PER_DAY
    period_units: int = DEFAULT_PERIOD_UNITS
    daily_unlock_bps: int = DEFAULT_DAILY_UNLOCK_BPS

    def __post_init__(self):
        if self.unit_sec <= 0:
            raise ValueError(f"unit_sec must be positive, got {self.unit_sec}")
        if self.period_units <= 0:
            raise ValueError(f"period_units must be positive, got {self.period_units}")
        validate_bps(self.daily_unlock_bps, "daily_unlock_bps", allow_full=True)
        if self.daily_unlock_bps == 0:
            raise ValueError("daily_unlock_bps must be positive")

    @property
    def period_sec(self) -> int:
        return self.unit_sec * self.period_units


@dataclass(frozen=True)
class VestingPosition:
    """Статус вестинга актора и доступный по графику объём."""

    status: VestingStatus
    # Для NO_SCHEDULE всегда 0 — но это НЕ ограничение, см. restricts_selling
    sellable: int

    @property
    def restricts_selling(self) -> bool:
        return self.status == VestingStatus.ACTIVE


_NO_SCHEDULE = VestingSchedule(start=0, initial_allotment=0)


# =============================================================================
# TRACKER
# =============================================================================


class VestingTracker:
    """Per-actor графики вестинга."""

    def __init__(self, config: VestingConfig | None = None):
        self.config = config or VestingConfig()
        self._schedules: Dict[str, VestingSchedule] = {}

    def schedule(self, actor: str) -> VestingSchedule:
        """График актора (initial_allotment == 0 если графика нет)."""
        return self._schedules.get(actor, _NO_SCHEDULE)

    def on_buy(self, actor: str, amount_bought: int, now: int, vesting_eligible: bool) -> bool:
        """Учёт покупки.

        Args:
            actor: покупатель
            amount_bought: количество полученных токенов
            now: время покупки (unix seconds)
            vesting_eligible: покупка до открытия продаж

        Returns:
            True если график был создан этим вызовом
        """
        validate_positive_uint(amount_bought, "amount_bought")

        if not vesting_eligible:
            return False

        current = self.schedule(actor)

        if not current.exists:
            validate_uint(now, "now")
            self._schedules[actor] = VestingSchedule(
                start=now, initial_allotment=amount_bought, total_sold=0
            )
            return True

        self._schedules[actor] = current.model_copy(
            update={"initial_allotment": checked_add(current.initial_allotment, amount_bought)}
        )
        return False

    def max_sellable(self, actor: str, now: int) -> int:
        """Доступный по графику объём (литеральное правило, 0 при отсутствии графика)."""
        return self._sellable(self.schedule(actor), now)

    def position(self, actor: str, now: int) -> VestingPosition:
        """Явный статус: NO_SCHEDULE | ACTIVE(sellable) | COMPLETE(remaining)."""
        schedule = self.schedule(actor)

        if not schedule.exists:
            return VestingPosition(status=VestingStatus.NO_SCHEDULE, sellable=0)

        if self._elapsed(schedule, now) >= self.config.period_sec:
            return VestingPosition(status=VestingStatus.COMPLETE, sellable=schedule.remaining)

        return VestingPosition(status=VestingStatus.ACTIVE, sellable=self._sellable(schedule, now))

    def on_sell(self, actor: str, amount_sold: int) -> VestingSchedule:
        """Учёт продажи по активному графику.

        Вызывающий обязан проверить amount_sold <= max_sellable(...).

        Raises:
            InvalidInput: если у актора нет графика
            VestingExceeded: если total_sold превысил бы initial_allotment
        """
        validate_positive_uint(amount_sold, "amount_sold")
        current = self.schedule(actor)

        if not current.exists:
            raise InvalidInput(f"{actor} has no vesting schedule")

        total_sold = current.total_sold + amount_sold
        if total_sold > current.initial_allotment:
            raise VestingExceeded(
                f"{actor} would sell {total_sold} of {current.initial_allotment} vested tokens"
            )

        updated = current.model_copy(update={"total_sold": total_sold})
        self._schedules[actor] = updated
        return updated

    def info(self, actor: str, now: int) -> VestingInfo:
        schedule = self.schedule(actor)
        position = self.position(actor, now)
        return VestingInfo(
            actor=actor,
            status=position.status,
            start=schedule.start,
            initial_allotment=schedule.initial_allotment,
            total_sold=schedule.total_sold,
            sellable=position.sellable,
            fully_vested_at=(
                schedule.start + self.config.period_sec if schedule.exists else None
            ),
        )

    # -------------------------------------------------------------------------
    # internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _elapsed(schedule: VestingSchedule, now: int) -> int:
        # Время от окружения не доверенное: now < start трактуем как elapsed = 0
        return max(now - schedule.start, 0)

    def _sellable(self, schedule: VestingSchedule, now: int) -> int:
        if not schedule.exists:
            return 0

        elapsed = self._elapsed(schedule, now)
        if elapsed >= self.config.period_sec:
            return schedule.remaining

        units_elapsed = min(elapsed // self.config.unit_sec + 1, self.config.period_units)
        allowed = (
            schedule.initial_allotment * self.config.daily_unlock_bps * units_elapsed
        ) // BPS_DENOMINATOR
        # Не больше остатка: при daily_unlock_bps * period_units > 10000
        allowed = min(allowed, schedule.initial_allotment)

        return max(0, allowed - schedule.total_sold)

    def snapshot(self) -> Dict[str, VestingSchedule]:
        return dict(self._schedules)

    def restore(self, snapshot: Dict[str, VestingSchedule]) -> None:
        self._schedules = dict(snapshot)

    def __len__(self) -> int:
        return len(self._schedules)
