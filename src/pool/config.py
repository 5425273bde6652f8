"""Pool Config — параметры пула

Политика начального наполнения пула токенами задаётся явно:
- SUPPLY_FRACTION: initial_token_fraction_bps от total_supply токена
- FIXED_AMOUNT: ровно fixed_seed_amount токенов
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from src.core.math.uint_math import BPS_DENOMINATOR, mul_div, validate_bps
from src.gatekeeper.gates.gate_01_anti_bot import ThrottleConfig
from src.gatekeeper.gates.gate_02_timelock import DEFAULT_SELLING_DELAY_SEC
from src.vesting.tracker import VestingConfig


DEFAULT_FEE_BPS: Final[int] = 50
DEFAULT_INITIAL_TOKEN_FRACTION_BPS: Final[int] = 8000
# 1 млрд токенов с 18 знаками
DEFAULT_FIXED_SEED_AMOUNT: Final[int] = 1_000_000_000 * 10**18


class SeedPolicy(str, Enum):
    """Политика начального наполнения пула токенами."""

    SUPPLY_FRACTION = "supply_fraction"
    FIXED_AMOUNT = "fixed_amount"


@dataclass(frozen=True)
class PoolConfig:
    """Конфигурация пула."""

    # Комиссия с выходной стороны сделки
    fee_bps: int = DEFAULT_FEE_BPS

    # Timelock продаж после initialize
    selling_delay_sec: int = DEFAULT_SELLING_DELAY_SEC

    # Начальное наполнение
    seed_policy: SeedPolicy = SeedPolicy.SUPPLY_FRACTION
    initial_token_fraction_bps: int = DEFAULT_INITIAL_TOKEN_FRACTION_BPS
    fixed_seed_amount: int = DEFAULT_FIXED_SEED_AMOUNT

    throttle: ThrottleConfig = field(default_factory=ThrottleConfig)
    vesting: VestingConfig = field(default_factory=VestingConfig)

    def __post_init__(self):
        validate_bps(self.fee_bps, "fee_bps")
        validate_bps(self.initial_token_fraction_bps, "initial_token_fraction_bps", allow_full=True)
        if self.selling_delay_sec < 0:
            raise ValueError(f"selling_delay_sec must be >= 0, got {self.selling_delay_sec}")
        if self.fixed_seed_amount <= 0:
            raise ValueError(f"fixed_seed_amount must be positive, got {self.fixed_seed_amount}")
        if self.seed_policy == SeedPolicy.SUPPLY_FRACTION and self.initial_token_fraction_bps == 0:
            raise ValueError("initial_token_fraction_bps must be positive")

    def seed_tokens(self, total_supply: int) -> int:
        """Сколько токенов пул забирает у создателя при initialize."""
        if self.seed_policy == SeedPolicy.FIXED_AMOUNT:
            return self.fixed_seed_amount
        return mul_div(total_supply, self.initial_token_fraction_bps, BPS_DENOMINATOR)
