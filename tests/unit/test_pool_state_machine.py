"""Тесты для Pool Lifecycle State Machine.

Coverage:
- UNINITIALIZED → ACTIVE ⇄ PAUSED → WITHDRAWN
- Идемпотентные pause / resume
- Недопустимые переходы и их ошибки
"""

import pytest

from src.core.domain.errors import AlreadyInitialized, AlreadyWithdrawn, NotInitialized
from src.core.domain.pool_state import PoolStatus
from src.pool.state_machine import LifecycleAction, PoolLifecycleStateMachine


@pytest.fixture
def sm():
    return PoolLifecycleStateMachine()


class TestPoolLifecycleStateMachine:
    """Тесты переходов lifecycle."""

    def test_initialize(self, sm):
        result = sm.evaluate_transition(PoolStatus.UNINITIALIZED, LifecycleAction.INITIALIZE)

        assert result.new_state == PoolStatus.ACTIVE
        assert result.previous_state == PoolStatus.UNINITIALIZED
        assert result.transition_occurred
        assert result.transition_reason == "initialize_UNINITIALIZED_to_ACTIVE"

    def test_pause_resume(self, sm):
        paused = sm.evaluate_transition(PoolStatus.ACTIVE, LifecycleAction.PAUSE)
        resumed = sm.evaluate_transition(paused.new_state, LifecycleAction.RESUME)

        assert paused.new_state == PoolStatus.PAUSED
        assert resumed.new_state == PoolStatus.ACTIVE

    @pytest.mark.parametrize(
        "state,action",
        [
            (PoolStatus.PAUSED, LifecycleAction.PAUSE),
            (PoolStatus.ACTIVE, LifecycleAction.RESUME),
        ],
    )
    def test_repeat_is_noop(self, sm, state, action):
        result = sm.evaluate_transition(state, action)

        assert result.new_state == state
        assert not result.transition_occurred
        assert result.transition_reason == "no_transition"

    @pytest.mark.parametrize("state", [PoolStatus.ACTIVE, PoolStatus.PAUSED])
    def test_emergency_withdraw(self, sm, state):
        result = sm.evaluate_transition(state, LifecycleAction.EMERGENCY_WITHDRAW)
        assert result.new_state == PoolStatus.WITHDRAWN

    @pytest.mark.parametrize(
        "state", [PoolStatus.ACTIVE, PoolStatus.PAUSED, PoolStatus.WITHDRAWN]
    )
    def test_initialize_twice(self, sm, state):
        with pytest.raises(AlreadyInitialized):
            sm.evaluate_transition(state, LifecycleAction.INITIALIZE)

    @pytest.mark.parametrize(
        "action",
        [LifecycleAction.PAUSE, LifecycleAction.RESUME, LifecycleAction.EMERGENCY_WITHDRAW],
    )
    def test_before_initialize(self, sm, action):
        with pytest.raises(NotInitialized):
            sm.evaluate_transition(PoolStatus.UNINITIALIZED, action)

    @pytest.mark.parametrize(
        "action",
        [LifecycleAction.PAUSE, LifecycleAction.RESUME, LifecycleAction.EMERGENCY_WITHDRAW],
    )
    def test_withdrawn_is_terminal(self, sm, action):
        with pytest.raises(AlreadyWithdrawn):
            sm.evaluate_transition(PoolStatus.WITHDRAWN, action)
