"""GATE 1: Anti-Bot Throttle — лимит сделок актора на bucket

Bucket — грубая монотонная единица времени, которую поставляет окружение
(например, высота блока). Throttle не использует wall-clock, только
идентичность bucket.

- count(actor, bucket) ≤ max_tx_per_bucket после любого успешного допуска
- Превышение отклоняется, не обрезается
- evaluate() не мутирует состояние; record() вызывается при commit сделки,
  поэтому отклонённая сделка счётчик не трогает
- Память ограничена: bucket'ы старше retention окна удаляются
"""

import logging
from dataclasses import dataclass
from typing import Dict, Final

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_MAX_TX_PER_BUCKET: Final[int] = 3
DEFAULT_RETENTION_BUCKETS: Final[int] = 16


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ThrottleConfig:
    """Конфигурация GATE 1."""

    max_tx_per_bucket: int = DEFAULT_MAX_TX_PER_BUCKET
    # Сколько последних bucket'ов хранить (текущий включительно)
    retention_buckets: int = DEFAULT_RETENTION_BUCKETS

    def __post_init__(self):
        if self.max_tx_per_bucket < 1:
            raise ValueError(
                f"max_tx_per_bucket must be >= 1, got {self.max_tx_per_bucket}"
            )
        if self.retention_buckets < 1:
            raise ValueError(
                f"retention_buckets must be >= 1, got {self.retention_buckets}"
            )


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    entry_allowed: bool
    block_reason: str

    actor: str
    bucket: int
    count: int  # сделок актора в bucket до текущей
    max_tx_per_bucket: int

    details: str


# =============================================================================
# GATE 1
# =============================================================================


class AntiBotThrottle:
    """GATE 1: per-actor, per-bucket счётчик сделок.

    Хранилище — разреженная карта bucket → {actor → count}; bucket'ы,
    которых никто не касался, имеют count = 0.
    """

    def __init__(self, config: ThrottleConfig | None = None):
        self.config = config or ThrottleConfig()
        self._buckets: Dict[int, Dict[str, int]] = {}

    def count(self, actor: str, bucket: int) -> int:
        return self._buckets.get(bucket, {}).get(actor, 0)

    def evaluate(self, actor: str, bucket: int) -> Gate01Result:
        """Проверка допуска без изменения состояния.

        Args:
            actor: адрес актора
            bucket: текущий bucket (высота блока)

        Returns:
            Gate01Result с решением о допуске
        """
        count = self.count(actor, bucket)
        limit = self.config.max_tx_per_bucket

        if count >= limit:
            return Gate01Result(
                entry_allowed=False,
                block_reason="RateLimited",
                actor=actor,
                bucket=bucket,
                count=count,
                max_tx_per_bucket=limit,
                details=f"{actor} already made {count}/{limit} trades in bucket {bucket}",
            )

        return Gate01Result(
            entry_allowed=True,
            block_reason="",
            actor=actor,
            bucket=bucket,
            count=count,
            max_tx_per_bucket=limit,
            details=f"PASS: {count + 1}/{limit} in bucket {bucket}",
        )

    def record(self, actor: str, bucket: int) -> int:
        """Учёт сделки в bucket. Вызывается только после успешного evaluate().

        Returns:
            Новое значение счётчика
        """
        counters = self._buckets.setdefault(bucket, {})
        counters[actor] = counters.get(actor, 0) + 1
        self._evict(bucket)
        return counters[actor]

    def admit(self, actor: str, bucket: int) -> bool:
        """evaluate() + record(): при отказе состояние не меняется."""
        result = self.evaluate(actor, bucket)
        if not result.entry_allowed:
            logger.debug("Throttle rejected %s: %s", actor, result.details)
            return False
        self.record(actor, bucket)
        return True

    def _evict(self, current_bucket: int) -> None:
        cutoff = current_bucket - self.config.retention_buckets + 1
        stale = [b for b in self._buckets if b < cutoff]
        for b in stale:
            del self._buckets[b]

    @property
    def tracked_buckets(self) -> int:
        return len(self._buckets)

    def snapshot(self) -> Dict[int, Dict[str, int]]:
        return {b: dict(counters) for b, counters in self._buckets.items()}

    def restore(self, snapshot: Dict[int, Dict[str, int]]) -> None:
        self._buckets = {b: dict(counters) for b, counters in snapshot.items()}
