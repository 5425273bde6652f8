"""Reserve Ledger — резервы пула и ценообразование по кривой

Держит два резерва (валюта, токен) и применяет constant-product кривую
и комиссию к каждой сделке.

Комиссия:
- buy:  берётся в токенах с выхода; покупатель получает net = gross - fee,
        резерв токена уменьшается на net (fee остаётся в резерве)
- sell: берётся в валюте с выхода; продавец получает net, резерв валюты
        уменьшается на net (fee остаётся в резерве)

Поэтому currency_reserve * token_reserve не убывает ни в одной сделке.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Резервы всегда >= 0 (checked uint256)
2. После seed резервы не равны нулю одновременно, кроме drain (терминально)
3. 0 < gross_out < reserve_out, иначе DegenerateTrade
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from src.core.domain.errors import (
    AlreadyInitialized,
    DegenerateTrade,
    InsufficientLiquidity,
)
from src.core.domain.pool_state import Reserves
from src.core.math.curve import (
    get_amount_out,
    is_degenerate,
    reserve_product,
    split_fee,
    spot_price,
)
from src.core.math.uint_math import (
    checked_add,
    checked_sub,
    validate_bps,
    validate_positive_uint,
)


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class TradeResult:
    """Результат применённой сделки."""

    side: TradeSide
    amount_in: int
    gross_out: int  # выход по кривой до комиссии
    fee: int
    net_out: int  # выплачено трейдеру

    reserves_before: Reserves
    reserves_after: Reserves


class LedgerSnapshot(NamedTuple):
    currency_reserve: int
    token_reserve: int
    seeded: bool


class ReserveLedger:
    """Резервы пула и применение сделок."""

    def __init__(self, fee_bps: int):
        self.fee_bps = validate_bps(fee_bps, "fee_bps")
        self._currency_reserve = 0
        self._token_reserve = 0
        self._seeded = False

    # -------------------------------------------------------------------------
    # state
    # -------------------------------------------------------------------------

    @property
    def currency_reserve(self) -> int:
        return self._currency_reserve

    @property
    def token_reserve(self) -> int:
        return self._token_reserve

    @property
    def reserves(self) -> Reserves:
        return Reserves(
            currency_reserve=self._currency_reserve, token_reserve=self._token_reserve
        )

    @property
    def k(self) -> int:
        return reserve_product(self._currency_reserve, self._token_reserve)

    @property
    def has_liquidity(self) -> bool:
        return self._currency_reserve > 0 and self._token_reserve > 0

    def seed(self, currency_amount: int, token_amount: int) -> Reserves:
        """Начальные резервы (ровно один раз)."""
        if self._seeded:
            raise AlreadyInitialized("Reserves are already seeded")

        self._currency_reserve = validate_positive_uint(currency_amount, "currency_amount")
        self._token_reserve = validate_positive_uint(token_amount, "token_amount")
        self._seeded = True
        return self.reserves

    def drain(self) -> Reserves:
        """Обнулить резервы; возвращает изъятые суммы."""
        drained = self.reserves
        self._currency_reserve = 0
        self._token_reserve = 0
        return drained

    # -------------------------------------------------------------------------
    # quotes
    # -------------------------------------------------------------------------

    def quote_buy(self, currency_in: int) -> int:
        """Токенов по кривой за currency_in (0 если резервы пусты)."""
        return get_amount_out(currency_in, self._currency_reserve, self._token_reserve)

    def quote_sell(self, token_in: int) -> int:
        """Валюты по кривой за token_in (0 если резервы пусты)."""
        return get_amount_out(token_in, self._token_reserve, self._currency_reserve)

    def price(self) -> int:
        """Спот-цена токена в валюте, 18 знаков.

        Raises:
            InsufficientLiquidity: если token_reserve == 0
        """
        if self._token_reserve == 0:
            raise InsufficientLiquidity("No token liquidity to price against")
        return spot_price(self._currency_reserve, self._token_reserve)

    # -------------------------------------------------------------------------
    # trades
    # -------------------------------------------------------------------------

    def apply_buy(self, currency_in: int) -> TradeResult:
        """Применить покупку: +currency_in в валюту, -net_out из токенов."""
        validate_positive_uint(currency_in, "currency_in")
        self._require_liquidity()

        gross = self.quote_buy(currency_in)
        if is_degenerate(gross, self._token_reserve):
            raise DegenerateTrade(
                f"Buy of {currency_in} yields {gross} tokens against reserve {self._token_reserve}"
            )

        split = split_fee(gross, self.fee_bps)
        before = self.reserves
        new_currency = checked_add(self._currency_reserve, currency_in)
        new_token = checked_sub(self._token_reserve, split.net)

        self._currency_reserve, self._token_reserve = new_currency, new_token

        return TradeResult(
            side=TradeSide.BUY,
            amount_in=currency_in,
            gross_out=split.gross,
            fee=split.fee,
            net_out=split.net,
            reserves_before=before,
            reserves_after=self.reserves,
        )

    def apply_sell(self, token_in: int) -> TradeResult:
        """Применить продажу: +token_in в токены, -net_out из валюты."""
        validate_positive_uint(token_in, "token_in")
        self._require_liquidity()

        gross = self.quote_sell(token_in)
        if is_degenerate(gross, self._currency_reserve):
            raise DegenerateTrade(
                f"Sell of {token_in} yields {gross} currency against reserve {self._currency_reserve}"
            )

        split = split_fee(gross, self.fee_bps)
        before = self.reserves
        new_token = checked_add(self._token_reserve, token_in)
        new_currency = checked_sub(self._currency_reserve, split.net)

        self._currency_reserve, self._token_reserve = new_currency, new_token

        return TradeResult(
            side=TradeSide.SELL,
            amount_in=token_in,
            gross_out=split.gross,
            fee=split.fee,
            net_out=split.net,
            reserves_before=before,
            reserves_after=self.reserves,
        )

    def _require_liquidity(self) -> None:
        if not self.has_liquidity:
            raise InsufficientLiquidity(
                f"Reserves are empty (currency={self._currency_reserve}, token={self._token_reserve})"
            )

    # -------------------------------------------------------------------------
    # rollback
    # -------------------------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(self._currency_reserve, self._token_reserve, self._seeded)

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self._currency_reserve, self._token_reserve, self._seeded = snapshot
