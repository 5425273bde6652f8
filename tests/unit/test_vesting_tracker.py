"""Unit тесты для Vesting Tracker.

Coverage:
- Создание графика только покупками до открытия продаж
- Повторные покупки увеличивают allotment, start не меняется
- Литеральная формула units_elapsed (+1: доступ в день 0)
- Cap на allotment при daily_unlock_bps * period_units > 10000
- COMPLETE после периода, now < start
- Монотонность sellable по времени
- on_sell ошибки
"""

import pytest

from src.core.domain.errors import InvalidInput, VestingExceeded
from src.core.domain.vesting import VestingStatus
from src.vesting.tracker import SECONDS_PER_DAY, VestingConfig, VestingTracker


ALICE = "0x" + "a" * 40
BOB = "0x" + "b" * 40
T0 = 1_700_000_000
DAY = SECONDS_PER_DAY


@pytest.fixture
def tracker():
    """Tracker с графиком ALICE: 90909 токенов с T0."""
    tracker = VestingTracker()
    tracker.on_buy(ALICE, 90909, T0, vesting_eligible=True)
    return tracker


# =============================================================================
# SCHEDULE CREATION
# =============================================================================


class TestOnBuy:
    """Тесты on_buy."""

    def test_creates_schedule(self):
        tracker = VestingTracker()
        created = tracker.on_buy(ALICE, 1000, T0, vesting_eligible=True)

        schedule = tracker.schedule(ALICE)
        assert created
        assert schedule.start == T0
        assert schedule.initial_allotment == 1000
        assert schedule.total_sold == 0

    def test_later_buy_accumulates(self, tracker):
        created = tracker.on_buy(ALICE, 10, T0 + 600, vesting_eligible=True)

        schedule = tracker.schedule(ALICE)
        assert not created
        assert schedule.start == T0
        assert schedule.initial_allotment == 90919

    def test_ineligible_buy_ignored(self, tracker):
        tracker.on_buy(BOB, 1000, T0, vesting_eligible=False)
        tracker.on_buy(ALICE, 1000, T0, vesting_eligible=False)

        assert not tracker.schedule(BOB).exists
        assert tracker.schedule(ALICE).initial_allotment == 90909
        assert len(tracker) == 1

    def test_zero_amount_rejected(self):
        with pytest.raises(InvalidInput):
            VestingTracker().on_buy(ALICE, 0, T0, vesting_eligible=True)

    def test_start_zero_is_a_schedule(self):
        """now = 0 допустим как начало графика."""
        tracker = VestingTracker()

        assert tracker.on_buy(ALICE, 100, 0, vesting_eligible=True)
        assert tracker.schedule(ALICE).exists
        assert tracker.max_sellable(ALICE, 0) == 100 * 1429 // 10000
        assert tracker.info(ALICE, 0).fully_vested_at == 7 * DAY


# =============================================================================
# SELLABLE
# =============================================================================


class TestMaxSellable:
    """Тесты формулы max_sellable."""

    def test_day_zero_unlocks_first_tranche(self, tracker):
        assert tracker.max_sellable(ALICE, T0) == 90909 * 1429 // 10000 == 12990

    def test_still_day_zero_three_hours_later(self, tracker):
        assert tracker.max_sellable(ALICE, T0 + 3 * 3600) == 12990

    def test_one_full_day_unlocks_second_tranche(self, tracker):
        assert tracker.max_sellable(ALICE, T0 + DAY) == 90909 * 2858 // 10000

    def test_last_day_capped_at_allotment(self, tracker):
        """1429 * 7 = 10003 bps > 100%: cap на allotment."""
        assert tracker.max_sellable(ALICE, T0 + 6 * DAY) == 90909

    def test_complete_after_period(self, tracker):
        position = tracker.position(ALICE, T0 + 7 * DAY)

        assert position.status == VestingStatus.COMPLETE
        assert position.sellable == 90909
        assert not position.restricts_selling

    def test_now_before_start_is_day_zero(self, tracker):
        assert tracker.max_sellable(ALICE, T0 - 10 * DAY) == 12990

    def test_no_schedule_is_zero_and_unrestricted(self, tracker):
        position = tracker.position(BOB, T0)

        assert tracker.max_sellable(BOB, T0) == 0
        assert position.status == VestingStatus.NO_SCHEDULE
        assert not position.restricts_selling

    def test_monotonic_in_time(self, tracker):
        previous = 0
        for hours in range(0, 8 * 24, 5):
            current = tracker.max_sellable(ALICE, T0 + hours * 3600)
            assert current >= previous
            previous = current

    def test_sold_amount_reduces_sellable(self, tracker):
        tracker.on_sell(ALICE, 12990)

        assert tracker.max_sellable(ALICE, T0) == 0
        assert tracker.max_sellable(ALICE, T0 + DAY) == 90909 * 2858 // 10000 - 12990

    def test_custom_config(self):
        tracker = VestingTracker(VestingConfig(unit_sec=60, period_units=2, daily_unlock_bps=5000))
        tracker.on_buy(ALICE, 1000, T0, vesting_eligible=True)

        assert tracker.max_sellable(ALICE, T0) == 500
        assert tracker.max_sellable(ALICE, T0 + 60) == 1000
        assert tracker.position(ALICE, T0 + 120).status == VestingStatus.COMPLETE


# =============================================================================
# SELL / INFO
# =============================================================================


class TestOnSell:
    """Тесты on_sell и info."""

    def test_on_sell_records(self, tracker):
        schedule = tracker.on_sell(ALICE, 1000)

        assert schedule.total_sold == 1000
        assert tracker.schedule(ALICE).total_sold == 1000

    def test_on_sell_without_schedule(self, tracker):
        with pytest.raises(InvalidInput):
            tracker.on_sell(BOB, 1)

    def test_oversell_rejected(self, tracker):
        with pytest.raises(VestingExceeded):
            tracker.on_sell(ALICE, 90910)
        assert tracker.schedule(ALICE).total_sold == 0

    def test_info(self, tracker):
        info = tracker.info(ALICE, T0 + 3600)

        assert info.status == VestingStatus.ACTIVE
        assert info.start == T0
        assert info.initial_allotment == 90909
        assert info.sellable == 12990
        assert info.fully_vested_at == T0 + 7 * DAY

    def test_info_without_schedule(self, tracker):
        info = tracker.info(BOB, T0)

        assert info.status == VestingStatus.NO_SCHEDULE
        assert info.fully_vested_at is None

    def test_snapshot_restore(self, tracker):
        snapshot = tracker.snapshot()
        tracker.on_sell(ALICE, 100)
        tracker.on_buy(BOB, 5, T0, vesting_eligible=True)
        tracker.restore(snapshot)

        assert tracker.schedule(ALICE).total_sold == 0
        assert not tracker.schedule(BOB).exists


@pytest.mark.parametrize(
    "kwargs",
    [
        {"unit_sec": 0},
        {"period_units": 0},
        {"daily_unlock_bps": 0},
        {"daily_unlock_bps": 10_001},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        VestingConfig(**kwargs)
