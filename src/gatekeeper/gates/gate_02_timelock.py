"""GATE 2: Selling Timelock — продажи закрыты до selling_enable_at

- arm_at(now): вызывается один раз при initialize пула,
  selling_enable_at = now + selling_delay_sec
- advance(now): явная функция перехода, вызывается в начале каждой продажи.
  При now >= selling_enable_at защёлкивает selling_enabled = True.
  Переход closed → open происходит не более одного раза, и opened_now == True
  наблюдается ровно один раз.
- is_open(now): чистое чтение без защёлкивания (для views)
"""

from dataclasses import dataclass
from typing import Final, NamedTuple

from src.core.domain.errors import AlreadyInitialized


# 2 часа
DEFAULT_SELLING_DELAY_SEC: Final[int] = 2 * 60 * 60


class TimelockSnapshot(NamedTuple):
    armed: bool
    selling_enabled: bool
    selling_enable_at: int


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    entry_allowed: bool
    block_reason: str

    # True только в вызове, который защёлкнул переход closed → open
    opened_now: bool
    selling_enable_at: int

    details: str


class TimelockGate:
    """GATE 2: глобальный флаг "продажи открыты" с однократным переходом."""

    def __init__(self, selling_delay_sec: int = DEFAULT_SELLING_DELAY_SEC):
        if selling_delay_sec < 0:
            raise ValueError(f"selling_delay_sec must be >= 0, got {selling_delay_sec}")

        self.selling_delay_sec = selling_delay_sec
        self._armed = False
        self._selling_enabled = False
        self._selling_enable_at = 0

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def selling_enabled(self) -> bool:
        return self._selling_enabled

    @property
    def selling_enable_at(self) -> int:
        return self._selling_enable_at

    def arm_at(self, now: int) -> int:
        """Взвести timelock.

        Returns:
            Момент открытия продаж

        Raises:
            AlreadyInitialized: если timelock уже взведён
        """
        if self._armed:
            raise AlreadyInitialized("Selling timelock is already armed")

        self._armed = True
        self._selling_enable_at = now + self.selling_delay_sec
        return self._selling_enable_at

    def is_open(self, now: int) -> bool:
        """Открыты ли продажи на момент now (без побочных эффектов)."""
        if self._selling_enabled:
            return True
        return self._armed and now >= self._selling_enable_at

    def advance(self, now: int) -> Gate02Result:
        """Переход состояния timelock на момент now.

        Args:
            now: текущее время (unix seconds)

        Returns:
            Gate02Result; opened_now=True ровно в том вызове, который открыл продажи
        """
        if self._selling_enabled:
            return Gate02Result(
                entry_allowed=True,
                block_reason="",
                opened_now=False,
                selling_enable_at=self._selling_enable_at,
                details="PASS: selling already enabled",
            )

        if not self._armed or now < self._selling_enable_at:
            remaining = self._selling_enable_at - now if self._armed else None
            return Gate02Result(
                entry_allowed=False,
                block_reason="SellingLocked",
                opened_now=False,
                selling_enable_at=self._selling_enable_at,
                details=(
                    f"Selling opens at {self._selling_enable_at} ({remaining}s remaining)"
                    if self._armed
                    else "Selling timelock is not armed"
                ),
            )

        self._selling_enabled = True

        return Gate02Result(
            entry_allowed=True,
            block_reason="",
            opened_now=True,
            selling_enable_at=self._selling_enable_at,
            details=f"PASS: selling enabled at {now}",
        )

    def snapshot(self) -> TimelockSnapshot:
        return TimelockSnapshot(self._armed, self._selling_enabled, self._selling_enable_at)

    def restore(self, snapshot: TimelockSnapshot) -> None:
        self._armed, self._selling_enabled, self._selling_enable_at = snapshot
