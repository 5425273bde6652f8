"""
Тесты для доменных моделей: PoolState, VestingSchedule, события, ошибки, адреса

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Immutability (frozen=True)
3. Производные свойства (k, initialized, remaining)
4. Стабильные reason у ошибок
5. Детерминированные адреса
"""

import pytest
from pydantic import ValidationError

from src.core.domain import (
    ArithmeticOverflow,
    Buy,
    InvalidInput,
    PoolError,
    PoolState,
    PoolStatus,
    RateLimited,
    Reserves,
    Timelock,
    VestingSchedule,
)
from src.core.domain.address import ZERO_ADDRESS, derive_address, validate_address


# =============================================================================
# POOL STATE
# =============================================================================


class TestPoolStateModels:
    """PoolState / Reserves / Timelock."""

    def test_reserves_k(self):
        reserves = Reserves(currency_reserve=1000, token_reserve=1_000_000)

        assert reserves.k == 10**9
        assert not reserves.is_empty
        assert Reserves(currency_reserve=0, token_reserve=5).is_empty

    def test_negative_reserve_rejected(self):
        with pytest.raises(ValidationError):
            Reserves(currency_reserve=-1, token_reserve=0)

    def test_reserves_frozen(self):
        reserves = Reserves(currency_reserve=1, token_reserve=1)
        with pytest.raises(ValidationError):
            reserves.currency_reserve = 2

    def test_derived_flags(self):
        state = PoolState(
            pool_address="0xpool",
            authority="0xowner",
            status=PoolStatus.PAUSED,
            reserves=Reserves(currency_reserve=1, token_reserve=1),
            timelock=Timelock(selling_enabled=False, selling_enable_at=0),
            fee_bps=50,
        )

        assert state.initialized
        assert state.paused
        assert state.token_address is None

    def test_fee_must_be_below_full(self):
        with pytest.raises(ValidationError):
            PoolState(
                pool_address="0xpool",
                authority="0xowner",
                status=PoolStatus.ACTIVE,
                reserves=Reserves(currency_reserve=1, token_reserve=1),
                timelock=Timelock(selling_enabled=False, selling_enable_at=0),
                fee_bps=10_000,
            )


# =============================================================================
# VESTING SCHEDULE
# =============================================================================


class TestVestingSchedule:
    """VestingSchedule."""

    def test_no_schedule_sentinel(self):
        assert not VestingSchedule(start=0, initial_allotment=0).exists

    def test_start_zero_schedule_exists(self):
        assert VestingSchedule(start=0, initial_allotment=5).exists

    def test_remaining(self):
        schedule = VestingSchedule(start=10, initial_allotment=100, total_sold=30)
        assert schedule.exists
        assert schedule.remaining == 70

    def test_sold_above_allotment_rejected(self):
        with pytest.raises(ValidationError):
            VestingSchedule(start=10, initial_allotment=100, total_sold=101)

    def test_copy_on_update(self):
        schedule = VestingSchedule(start=10, initial_allotment=100)
        updated = schedule.model_copy(update={"total_sold": 5})

        assert schedule.total_sold == 0
        assert updated.total_sold == 5


# =============================================================================
# EVENTS
# =============================================================================


def test_event_name_is_fixed():
    event = Buy(emitter="0xpool", actor="0xalice", token_out=1, currency_in=1, fee=0)
    assert event.name == "Buy"


def test_event_rejects_zero_output():
    with pytest.raises(ValidationError):
        Buy(emitter="0xpool", actor="0xalice", token_out=0, currency_in=1, fee=0)


# =============================================================================
# ERRORS AND ADDRESSES
# =============================================================================


class TestErrors:
    """Таксономия ошибок."""

    def test_reason_in_message(self):
        error = RateLimited("3/3 in bucket 7")

        assert error.reason == "RateLimited"
        assert str(error) == "RateLimited: 3/3 in bucket 7"
        assert isinstance(error, PoolError)

    def test_reason_without_message(self):
        assert str(RateLimited()) == "RateLimited"

    def test_overflow_is_invalid_input(self):
        assert issubclass(ArithmeticOverflow, InvalidInput)
        assert ArithmeticOverflow.reason == "ArithmeticOverflow"


class TestAddresses:
    """Адреса."""

    def test_zero_address_rejected(self):
        with pytest.raises(InvalidInput):
            validate_address(ZERO_ADDRESS)

    @pytest.mark.parametrize("value", ["", None, 42])
    def test_malformed_rejected(self, value):
        with pytest.raises(InvalidInput):
            validate_address(value, "owner")

    def test_derive_is_deterministic(self):
        address = derive_address("factory", "pool", "0xtoken")

        assert address == derive_address("factory", "pool", "0xtoken")
        assert address != derive_address("factory", "pool", "0xother")
        assert address.startswith("0x")
        assert len(address) == 42

    def test_derive_separates_parts(self):
        assert derive_address("ab", "c") != derive_address("a", "bc")
