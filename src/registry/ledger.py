"""In-memory Balances — токен с фиксированной эмиссией и базовая валюта

BalanceLedger — реестр балансов и allowances. Переводы атомарны:
недостаточный баланс или allowance → False, реестр не меняется.

Пул и фабрика не обращаются к реестру напрямую: bind(caller) возвращает
handle, в котором отправитель — вызывающий адрес (TokenCapability /
CurrencyCapability).

NativeCurrency моделирует value, приложенный к вызову: transfer_from
в пользу самого вызывающего (to == spender) не требует allowance.
"""

import logging
import threading
from typing import Dict, Tuple

from src.core.domain.address import validate_address
from src.core.domain.errors import AlreadyInitialized
from src.core.math.uint_math import checked_add, validate_positive_uint, validate_uint

logger = logging.getLogger(__name__)


class BalanceLedger:
    """Реестр балансов с allowances."""

    def __init__(self, address: str):
        self.address = validate_address(address, "address")
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._supply = 0
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # reads
    # -------------------------------------------------------------------------

    def balance_of(self, address: str) -> int:
        with self._lock:
            return self._balances.get(address, 0)

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self._allowances.get((owner, spender), 0)

    def total_supply(self) -> int:
        return self._supply

    # -------------------------------------------------------------------------
    # writes
    # -------------------------------------------------------------------------

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        validate_address(spender, "spender")
        validate_uint(amount, "amount")
        with self._lock:
            self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Перевод со счёта sender. False при недостаточном балансе."""
        validate_address(to, "to")
        validate_uint(amount, "amount")
        with self._lock:
            if self.balance_of(sender) < amount:
                logger.debug(
                    "%s: transfer of %d from %s rejected, balance %d",
                    self.address,
                    amount,
                    sender,
                    self.balance_of(sender),
                )
                return False
            self._move(sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Перевод со счёта owner по allowance, выданному spender."""
        validate_address(to, "to")
        validate_uint(amount, "amount")
        with self._lock:
            needs_allowance = self._requires_allowance(spender, owner, to)
            allowed = self.allowance(owner, spender)

            if needs_allowance and allowed < amount:
                logger.debug(
                    "%s: %s may spend %d of %s, requested %d",
                    self.address,
                    spender,
                    allowed,
                    owner,
                    amount,
                )
                return False
            if self.balance_of(owner) < amount:
                return False

            if needs_allowance:
                self._allowances[(owner, spender)] = allowed - amount
            self._move(owner, to, amount)
        return True

    def bind(self, caller: str) -> "BoundLedger":
        return BoundLedger(self, validate_address(caller, "caller"))

    # -------------------------------------------------------------------------
    # internals
    # -------------------------------------------------------------------------

    def _requires_allowance(self, spender: str, owner: str, to: str) -> bool:
        return spender != owner

    def _mint(self, to: str, amount: int) -> None:
        validate_address(to, "to")
        validate_positive_uint(amount, "amount")
        with self._lock:
            self._supply = checked_add(self._supply, amount)
            self._balances[to] = checked_add(self.balance_of(to), amount)

    def _move(self, sender: str, to: str, amount: int) -> None:
        if amount == 0 or sender == to:
            return
        self._balances[sender] = self._balances[sender] - amount
        self._balances[to] = checked_add(self._balances.get(to, 0), amount)


class BoundLedger:
    """Handle реестра от имени caller."""

    def __init__(self, ledger: BalanceLedger, caller: str):
        self.ledger = ledger
        self.caller = caller

    @property
    def address(self) -> str:
        return self.ledger.address

    def transfer(self, to: str, amount: int) -> bool:
        return self.ledger.transfer(self.caller, to, amount)

    def transfer_from(self, owner: str, to: str, amount: int) -> bool:
        return self.ledger.transfer_from(self.caller, owner, to, amount)

    def approve(self, spender: str, amount: int) -> bool:
        return self.ledger.approve(self.caller, spender, amount)

    def balance_of(self, address: str) -> int:
        return self.ledger.balance_of(address)

    def total_supply(self) -> int:
        return self.ledger.total_supply()


class FixedSupplyToken(BalanceLedger):
    """Токен: вся эмиссия выпускается один раз на issuer."""

    def __init__(
        self,
        address: str,
        name: str,
        symbol: str,
        total_supply: int,
        issuer: str,
        metadata_uri: str = "",
    ):
        super().__init__(address)
        if not name or not symbol:
            raise ValueError("Token name and symbol must be non-empty")

        self.name = name
        self.symbol = symbol
        self.metadata_uri = metadata_uri
        self._minted = False
        self._mint_once(issuer, total_supply)

    def _mint_once(self, issuer: str, total_supply: int) -> None:
        if self._minted:
            raise AlreadyInitialized(f"{self.symbol} supply is already minted")
        self._mint(issuer, total_supply)
        self._minted = True

    def __repr__(self) -> str:
        return f"FixedSupplyToken({self.symbol}, {self.address}, supply={self._supply})"


class NativeCurrency(BalanceLedger):
    """Базовая валюта ("ETH"): выпуск через mint, value приложенный к вызову."""

    def mint(self, to: str, amount: int) -> int:
        """Пополнить баланс (тестовое финансирование).

        Returns:
            Новый баланс
        """
        self._mint(to, amount)
        return self.balance_of(to)

    def _requires_allowance(self, spender: str, owner: str, to: str) -> bool:
        # value всегда отправляется вызываемому контракту
        return spender != owner and to != spender
