"""Pool Lifecycle State Machine — переходы состояний пула.

UNINITIALIZED → ACTIVE ⇄ PAUSED → WITHDRAWN (терминальное)

- INITIALIZE: только из UNINITIALIZED
- PAUSE / RESUME: ACTIVE ⇄ PAUSED; повтор в том же состоянии — без перехода
- EMERGENCY_WITHDRAW: из ACTIVE или PAUSED, дальше ничего не допускается

Недопустимый переход — PoolError с соответствующим reason.
Машина не хранит состояние: текущее состояние передаётся вызывающим.
"""

from dataclasses import dataclass
from enum import Enum

from src.core.domain.errors import (
    AlreadyInitialized,
    AlreadyWithdrawn,
    NotInitialized,
    PoolError,
)
from src.core.domain.pool_state import PoolStatus


class LifecycleAction(str, Enum):
    """Действие над lifecycle пула."""

    INITIALIZE = "INITIALIZE"
    PAUSE = "PAUSE"
    RESUME = "RESUME"
    EMERGENCY_WITHDRAW = "EMERGENCY_WITHDRAW"


@dataclass(frozen=True)
class PoolTransitionResult:
    """Результат перехода состояния пула."""

    new_state: PoolStatus
    previous_state: PoolStatus

    # Диагностика
    transition_occurred: bool
    transition_reason: str

    details: str


class PoolLifecycleStateMachine:
    """Таблица допустимых переходов lifecycle пула."""

    _TRANSITIONS = {
        (PoolStatus.UNINITIALIZED, LifecycleAction.INITIALIZE): PoolStatus.ACTIVE,
        (PoolStatus.ACTIVE, LifecycleAction.PAUSE): PoolStatus.PAUSED,
        (PoolStatus.PAUSED, LifecycleAction.RESUME): PoolStatus.ACTIVE,
        (PoolStatus.ACTIVE, LifecycleAction.EMERGENCY_WITHDRAW): PoolStatus.WITHDRAWN,
        (PoolStatus.PAUSED, LifecycleAction.EMERGENCY_WITHDRAW): PoolStatus.WITHDRAWN,
    }

    # Идемпотентные повторы: состояние не меняется, ошибки нет
    _NOOPS = {
        (PoolStatus.PAUSED, LifecycleAction.PAUSE),
        (PoolStatus.ACTIVE, LifecycleAction.RESUME),
    }

    def evaluate_transition(
        self, current_state: PoolStatus, action: LifecycleAction
    ) -> PoolTransitionResult:
        """Оценка перехода.

        Args:
            current_state: текущее состояние пула
            action: запрошенное действие

        Returns:
            PoolTransitionResult с новым состоянием

        Raises:
            AlreadyInitialized: INITIALIZE не из UNINITIALIZED
            NotInitialized: PAUSE / RESUME / EMERGENCY_WITHDRAW до initialize
            AlreadyWithdrawn: любое действие в WITHDRAWN
        """
        key = (current_state, action)

        if key in self._TRANSITIONS:
            new_state = self._TRANSITIONS[key]
            return PoolTransitionResult(
                new_state=new_state,
                previous_state=current_state,
                transition_occurred=True,
                transition_reason=f"{action.value.lower()}_{current_state.value}_to_{new_state.value}",
                details=f"Transition {current_state.value} → {new_state.value}",
            )

        if key in self._NOOPS:
            return PoolTransitionResult(
                new_state=current_state,
                previous_state=current_state,
                transition_occurred=False,
                transition_reason="no_transition",
                details=f"{action.value} in {current_state.value}: already there",
            )

        raise self._rejection(current_state, action)

    @staticmethod
    def _rejection(current_state: PoolStatus, action: LifecycleAction) -> PoolError:
        if action == LifecycleAction.INITIALIZE:
            return AlreadyInitialized(f"Pool is already {current_state.value}")
        if current_state == PoolStatus.WITHDRAWN:
            return AlreadyWithdrawn(f"{action.value} is not allowed after emergency withdrawal")
        return NotInitialized(f"{action.value} requires an initialized pool")
