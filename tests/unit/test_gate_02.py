"""Unit тесты для GATE 2: Selling Timelock.

Coverage:
- До arm_at продажи закрыты
- Закрыто до selling_enable_at, открыто начиная с него (граница включительно)
- opened_now ровно один раз
- is_open без побочных эффектов
- Повторный arm_at → AlreadyInitialized
"""

import pytest

from src.core.domain.errors import AlreadyInitialized
from src.gatekeeper.gates.gate_02_timelock import DEFAULT_SELLING_DELAY_SEC, TimelockGate


T0 = 1_700_000_000


@pytest.fixture
def timelock():
    """Timelock, взведённый в T0 (default delay 2 часа)."""
    gate = TimelockGate()
    gate.arm_at(T0)
    return gate


def test_default_delay_is_two_hours():
    assert DEFAULT_SELLING_DELAY_SEC == 7200


def test_unarmed_is_closed():
    gate = TimelockGate()
    result = gate.advance(T0)

    assert not result.entry_allowed
    assert result.block_reason == "SellingLocked"
    assert not gate.is_open(T0 + 10**9)


def test_arm_returns_enable_at(timelock):
    assert timelock.selling_enable_at == T0 + 7200
    assert timelock.armed


def test_arm_twice_rejected(timelock):
    with pytest.raises(AlreadyInitialized):
        timelock.arm_at(T0 + 1)


def test_closed_before_enable_at(timelock):
    result = timelock.advance(T0 + 7199)

    assert not result.entry_allowed
    assert result.block_reason == "SellingLocked"
    assert "1s remaining" in result.details
    assert not timelock.selling_enabled


def test_opens_exactly_at_enable_at(timelock):
    result = timelock.advance(T0 + 7200)

    assert result.entry_allowed
    assert result.opened_now
    assert timelock.selling_enabled


def test_opened_now_observed_once(timelock):
    first = timelock.advance(T0 + 8000)
    second = timelock.advance(T0 + 9000)

    assert first.opened_now
    assert second.entry_allowed
    assert not second.opened_now


def test_latch_survives_clock_going_back(timelock):
    """После защёлкивания продажи открыты независимо от now."""
    timelock.advance(T0 + 8000)
    assert timelock.advance(T0).entry_allowed


def test_is_open_does_not_latch(timelock):
    assert timelock.is_open(T0 + 7200)
    assert not timelock.selling_enabled


def test_snapshot_restore_rolls_back_latch(timelock):
    snapshot = timelock.snapshot()
    timelock.advance(T0 + 7200)
    timelock.restore(snapshot)

    assert not timelock.selling_enabled
    assert timelock.advance(T0 + 7200).opened_now


def test_zero_delay_opens_immediately():
    gate = TimelockGate(selling_delay_sec=0)
    gate.arm_at(T0)
    assert gate.advance(T0).opened_now


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        TimelockGate(selling_delay_sec=-1)
