"""Gatekeeper — цепочка гейтов допуска сделки к исполнению.

Порядок фиксирован и выполняется до любой мутации резервов:
- buy:  GATE 0 → GATE 1
- sell: GATE 0 → GATE 2 → GATE 1 → GATE 3
"""

from .gates.gate_00_pool_status import Gate00PoolStatus, Gate00Result

__all__ = [
    "Gate00PoolStatus",
    "Gate00Result",
]
