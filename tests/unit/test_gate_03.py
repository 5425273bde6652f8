"""Unit тесты для GATE 3: Vesting Limit.

Coverage:
- NO_SCHEDULE и COMPLETE не ограничивают
- ACTIVE: token_in <= sellable проходит, больше — VestingExceeded
"""

import pytest

from src.core.domain.vesting import VestingStatus
from src.gatekeeper.gates.gate_03_vesting_limit import Gate03VestingLimit
from src.vesting.tracker import VestingPosition


@pytest.fixture
def gate03():
    """Fixture для GATE 3."""
    return Gate03VestingLimit()


@pytest.mark.parametrize("status", [VestingStatus.NO_SCHEDULE, VestingStatus.COMPLETE])
def test_unrestricted_statuses_pass(gate03, status):
    result = gate03.evaluate(VestingPosition(status=status, sellable=0), 10**24)

    assert result.entry_allowed
    assert result.status == status


def test_active_within_sellable_passes(gate03):
    result = gate03.evaluate(VestingPosition(status=VestingStatus.ACTIVE, sellable=12990), 12990)

    assert result.entry_allowed
    assert result.requested == 12990


def test_active_above_sellable_blocks(gate03):
    result = gate03.evaluate(VestingPosition(status=VestingStatus.ACTIVE, sellable=12990), 20000)

    assert not result.entry_allowed
    assert result.block_reason == "VestingExceeded"
    assert result.sellable == 12990
    assert result.requested == 20000


def test_active_with_nothing_sellable_blocks(gate03):
    result = gate03.evaluate(VestingPosition(status=VestingStatus.ACTIVE, sellable=0), 1)

    assert not result.entry_allowed
