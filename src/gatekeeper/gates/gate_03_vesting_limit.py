"""GATE 3: Vesting Limit — объём продажи против графика вестинга

- NO_SCHEDULE → PASS (актор не покупал в окне вестинга, продажа не ограничена)
- COMPLETE → PASS (окно вестинга прошло, весь остаток свободен)
- ACTIVE → PASS только если token_in <= sellable, иначе VestingExceeded

Stateless: позиция вестинга передаётся вызывающим.
"""

from dataclasses import dataclass

from src.core.domain.vesting import VestingStatus
from src.vesting.tracker import VestingPosition


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""

    entry_allowed: bool
    block_reason: str

    status: VestingStatus
    requested: int
    sellable: int

    details: str


class Gate03VestingLimit:
    """GATE 3: ограничение продажи графиком вестинга."""

    def evaluate(self, position: VestingPosition, token_in: int) -> Gate03Result:
        """Оценка GATE 3.

        Args:
            position: позиция вестинга продавца на текущий момент
            token_in: объём продажи

        Returns:
            Gate03Result с решением о допуске
        """
        if not position.restricts_selling:
            return Gate03Result(
                entry_allowed=True,
                block_reason="",
                status=position.status,
                requested=token_in,
                sellable=position.sellable,
                details=f"PASS: vesting status {position.status.value} does not restrict selling",
            )

        if token_in > position.sellable:
            return Gate03Result(
                entry_allowed=False,
                block_reason="VestingExceeded",
                status=position.status,
                requested=token_in,
                sellable=position.sellable,
                details=f"Requested {token_in} exceeds vested sellable amount {position.sellable}",
            )

        return Gate03Result(
            entry_allowed=True,
            block_reason="",
            status=position.status,
            requested=token_in,
            sellable=position.sellable,
            details=f"PASS: {token_in} <= sellable {position.sellable}",
        )
