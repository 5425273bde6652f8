"""Gates — индивидуальные гейты допуска сделки.

- GATE 0: Pool Status (UNINITIALIZED / PAUSED / WITHDRAWN блокируют)
- GATE 1: Anti-Bot Throttle (лимит сделок актора на bucket)
- GATE 2: Selling Timelock (только продажи)
- GATE 3: Vesting Limit (только продажи)
"""

from .gate_00_pool_status import Gate00PoolStatus, Gate00Result
from .gate_01_anti_bot import AntiBotThrottle, Gate01Result, ThrottleConfig
from .gate_02_timelock import Gate02Result, TimelockGate, TimelockSnapshot
from .gate_03_vesting_limit import Gate03Result, Gate03VestingLimit

__all__ = [
    "Gate00PoolStatus",
    "Gate00Result",
    "AntiBotThrottle",
    "Gate01Result",
    "ThrottleConfig",
    "TimelockGate",
    "Gate02Result",
    "TimelockSnapshot",
    "Gate03VestingLimit",
    "Gate03Result",
]
