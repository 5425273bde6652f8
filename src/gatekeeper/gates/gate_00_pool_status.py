"""GATE 0: Pool Status — допуск сделки по состоянию lifecycle пула

Первый gate в цепочке buy/sell:
- UNINITIALIZED → блокировка (NotInitialized)
- PAUSED → блокировка (TradingPaused)
- WITHDRAWN → блокировка (AlreadyWithdrawn), терминальное состояние
- ACTIVE → PASS

Stateless: состояние передаётся вызывающим.
"""

from dataclasses import dataclass

from src.core.domain.pool_state import PoolStatus


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    entry_allowed: bool
    block_reason: str

    status: PoolStatus

    details: str


class Gate00PoolStatus:
    """GATE 0: проверка статуса пула перед сделкой."""

    _BLOCKS = {
        PoolStatus.UNINITIALIZED: ("NotInitialized", "Pool has not been initialized"),
        PoolStatus.PAUSED: ("TradingPaused", "Trading is paused by the pool authority"),
        PoolStatus.WITHDRAWN: (
            "AlreadyWithdrawn",
            "Pool reserves were withdrawn; trading is permanently disabled",
        ),
    }

    def evaluate(self, status: PoolStatus) -> Gate00Result:
        """Оценка GATE 0.

        Args:
            status: текущее состояние lifecycle пула

        Returns:
            Gate00Result с решением о допуске
        """
        if status in self._BLOCKS:
            block_reason, details = self._BLOCKS[status]
            return Gate00Result(
                entry_allowed=False,
                block_reason=block_reason,
                status=status,
                details=details,
            )

        return Gate00Result(
            entry_allowed=True,
            block_reason="",
            status=status,
            details=f"PASS: status={status.value}",
        )
