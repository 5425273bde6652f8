"""Vesting — линейное посуточное высвобождение токенов ранних покупателей.

- Графики создаются покупками до открытия продаж
- Явный статус NO_SCHEDULE / ACTIVE / COMPLETE
"""

from .tracker import (
    VestingConfig,
    VestingPosition,
    VestingTracker,
)

__all__ = [
    "VestingConfig",
    "VestingPosition",
    "VestingTracker",
]
