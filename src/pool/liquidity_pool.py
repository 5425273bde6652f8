"""Liquidity Pool — композиция ядра во внешние операции пула.

Операции:
- initialize / buy / sell / price и quotes
- pause / resume / emergency_withdraw / transfer_authority (владелец)
- check_and_enable_selling (явное открытие продаж по timelock)

Порядок buy:  GATE 0 status → GATE 1 throttle → ledger → vesting.on_buy → transfers
Порядок sell: GATE 0 status → GATE 1 throttle → GATE 2 timelock → GATE 3 vesting
              → ledger → vesting.on_sell → transfers

Конкурентность:
- Каждая мутирующая операция выполняется под единственным lock пула
- Повторный вход в пул из того же потока (например, из callback перевода)
  отклоняется ReentrantCall, а не deadlock
- Reads берут тот же lock и возвращают immutable снапшоты

Атомарность:
- Все проверки до мутации; отклонённая операция не меняет состояние
- TransferFailed после расчёта: состояние ledger / throttle / timelock /
  vesting восстанавливается, уже прошедшие переводы компенсируются
- События публикуются только после commit
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple

from src.core.contracts.validators import PoolEventValidator, dump_contract
from src.core.domain.address import validate_address
from src.core.domain.errors import (
    AlreadyWithdrawn,
    InsufficientLiquidity,
    InvalidInput,
    NotInitialized,
    PoolError,
    RateLimited,
    ReentrantCall,
    SellingLocked,
    TradingPaused,
    TransferFailed,
    VestingExceeded,
)
from src.core.domain.events import (
    AuthorityTransferred,
    Buy,
    EmergencyWithdraw,
    PoolEvent,
    PoolInitialized,
    Sell,
    SellingEnabled,
    TradingPaused as TradingPausedEvent,
    VestingInitialized,
)
from src.core.domain.pool_state import PoolState, PoolStatus, Reserves, Timelock
from src.core.domain.vesting import VestingInfo, VestingStatus
from src.core.math.uint_math import validate_positive_uint, validate_uint
from src.gatekeeper.gates.gate_00_pool_status import Gate00PoolStatus
from src.gatekeeper.gates.gate_01_anti_bot import AntiBotThrottle
from src.gatekeeper.gates.gate_02_timelock import TimelockGate
from src.gatekeeper.gates.gate_03_vesting_limit import Gate03VestingLimit
from src.pool.authority import Authority
from src.pool.capabilities import Bindable, CurrencyCapability, TokenCapability
from src.pool.config import PoolConfig
from src.pool.reserve_ledger import ReserveLedger, TradeResult
from src.pool.state_machine import (
    LifecycleAction,
    PoolLifecycleStateMachine,
    PoolTransitionResult,
)
from src.vesting.tracker import VestingTracker

logger = logging.getLogger(__name__)


# block_reason гейтов → ошибка пула
_GATE_ERRORS = {
    "NotInitialized": NotInitialized,
    "TradingPaused": TradingPaused,
    "AlreadyWithdrawn": AlreadyWithdrawn,
    "RateLimited": RateLimited,
    "SellingLocked": SellingLocked,
    "VestingExceeded": VestingExceeded,
}

# События, которые логируются на DEBUG; остальные на INFO
_TRADE_EVENTS = frozenset({"Buy", "Sell", "VestingInitialized"})


class _PoolSnapshot(NamedTuple):
    status: PoolStatus
    authority: Authority
    token_source: Optional[Bindable]
    token: Optional[TokenCapability]
    ledger: Any
    throttle: Any
    timelock: Any
    vesting: Any


@dataclass
class _AtomicUnit:
    """Одна атомарная операция: снапшот, компенсации, отложенные события."""

    snapshot: _PoolSnapshot
    compensations: List[Tuple[str, Callable[[], bool]]] = field(default_factory=list)
    events: List[PoolEvent] = field(default_factory=list)

    def emit(self, event: PoolEvent) -> None:
        self.events.append(event)

    def on_rollback(self, description: str, compensate: Callable[[], bool]) -> None:
        self.compensations.append((description, compensate))


class LiquidityPool:
    """Пул одного токена против базовой валюты по constant-product кривой."""

    def __init__(
        self,
        address: str,
        owner: str,
        currency: Bindable,
        config: PoolConfig | None = None,
    ):
        """
        Args:
            address: адрес пула
            owner: владелец (authority) пула
            currency: реестр базовой валюты; пул привязывает к нему свой адрес
            config: конфигурация пула (опционально, используется default)
        """
        self.address = validate_address(address, "address")
        self.config = config or PoolConfig()

        self._authority = Authority(owner=owner)
        self._currency: CurrencyCapability = currency.bind(self.address)
        self._token_source: Optional[Bindable] = None
        self._token: Optional[TokenCapability] = None
        self._status = PoolStatus.UNINITIALIZED

        self._ledger = ReserveLedger(self.config.fee_bps)
        self._throttle = AntiBotThrottle(self.config.throttle)
        self._timelock = TimelockGate(self.config.selling_delay_sec)
        self._vesting = VestingTracker(self.config.vesting)

        self._status_gate = Gate00PoolStatus()
        self._vesting_gate = Gate03VestingLimit()
        self._state_machine = PoolLifecycleStateMachine()

        self._events: List[PoolEvent] = []
        self._lock = threading.Lock()
        self._active_thread: Optional[int] = None

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self, token: Bindable, seed_currency: int, creator: str, now: int) -> Reserves:
        """Начальное наполнение пула (ровно один раз).

        Забирает у creator seed-токены (по PoolConfig.seed_policy) и
        seed_currency валюты, взводит timelock продаж, переводит пул в ACTIVE.

        Raises:
            AlreadyInitialized: повторный вызов
            InvalidInput: seed_currency == 0, нулевой адрес, seed токенов == 0
            TransferFailed: creator не смог передать токены или валюту
        """
        validate_positive_uint(seed_currency, "seed_currency")
        validate_address(creator, "creator")
        validate_address(token.address, "token")
        validate_uint(now, "now")

        with self._exclusive("initialize"), self._atomic() as tx:
            transition = self._state_machine.evaluate_transition(
                self._status, LifecycleAction.INITIALIZE
            )

            handle = token.bind(self.address)
            seed_tokens = validate_positive_uint(
                self.config.seed_tokens(handle.total_supply()), "seed_tokens"
            )

            self._token_source = token
            self._token = handle
            reserves = self._ledger.seed(seed_currency, seed_tokens)
            enable_at = self._timelock.arm_at(now)
            self._status = transition.new_state

            self._settle(
                tx,
                f"pull {seed_tokens} seed tokens from {creator}",
                lambda: handle.transfer_from(creator, self.address, seed_tokens),
                compensate=lambda: handle.transfer(creator, seed_tokens),
            )
            self._settle(
                tx,
                f"collect {seed_currency} seed currency from {creator}",
                lambda: self._currency.transfer_from(creator, self.address, seed_currency),
                compensate=lambda: self._currency.transfer(creator, seed_currency),
            )

            tx.emit(
                PoolInitialized(
                    emitter=self.address,
                    token=token.address,
                    seed_tokens=seed_tokens,
                    seed_currency=seed_currency,
                    initial_price=self._ledger.price(),
                )
            )

        logger.info(
            "Pool %s initialized for token %s, selling opens at %d",
            self.address,
            token.address,
            enable_at,
        )
        return reserves

    def pause(self, caller: str) -> PoolTransitionResult:
        """ACTIVE → PAUSED (владелец). Повторный pause — без перехода."""
        return self._toggle_pause(caller, LifecycleAction.PAUSE)

    def resume(self, caller: str) -> PoolTransitionResult:
        """PAUSED → ACTIVE (владелец). resume активного пула — без перехода."""
        return self._toggle_pause(caller, LifecycleAction.RESUME)

    def _toggle_pause(self, caller: str, action: LifecycleAction) -> PoolTransitionResult:
        with self._exclusive(action.value.lower()), self._atomic() as tx:
            self._authority.require(caller, action.value.lower())
            result = self._state_machine.evaluate_transition(self._status, action)

            if result.transition_occurred:
                self._status = result.new_state
                tx.emit(
                    TradingPausedEvent(
                        emitter=self.address,
                        paused=result.new_state == PoolStatus.PAUSED,
                    )
                )

        return result

    def emergency_withdraw(self, caller: str) -> Reserves:
        """Изъять все резервы владельцу; пул переходит в терминальный WITHDRAWN.

        Валюта выплачивается первой: если затем не пройдёт перевод токенов,
        валюта возвращается через transfer_from как value обратно в пул.

        Returns:
            Изъятые резервы
        """
        with self._exclusive("emergency_withdraw"), self._atomic() as tx:
            self._authority.require(caller, "emergency_withdraw")
            transition = self._state_machine.evaluate_transition(
                self._status, LifecycleAction.EMERGENCY_WITHDRAW
            )

            drained = self._ledger.drain()
            self._status = transition.new_state
            owner = self._authority.owner
            token = self._require_token()

            if drained.currency_reserve > 0:
                self._settle(
                    tx,
                    f"withdraw {drained.currency_reserve} currency to {owner}",
                    lambda: self._currency.transfer(owner, drained.currency_reserve),
                    compensate=lambda: self._currency.transfer_from(
                        owner, self.address, drained.currency_reserve
                    ),
                )
            if drained.token_reserve > 0:
                self._settle(
                    tx,
                    f"withdraw {drained.token_reserve} tokens to {owner}",
                    lambda: token.transfer(owner, drained.token_reserve),
                )

            tx.emit(
                EmergencyWithdraw(
                    emitter=self.address,
                    actor=owner,
                    currency=drained.currency_reserve,
                    tokens=drained.token_reserve,
                )
            )

        logger.warning(
            "Emergency withdrawal from pool %s: currency=%d tokens=%d",
            self.address,
            drained.currency_reserve,
            drained.token_reserve,
        )
        return drained

    def transfer_authority(self, caller: str, new_owner: str) -> str:
        """Передать владение пулом.

        Returns:
            Новый владелец
        """
        with self._exclusive("transfer_authority"), self._atomic() as tx:
            self._authority.require(caller, "transfer_authority")
            previous = self._authority
            self._authority = previous.transferred_to(new_owner)
            tx.emit(
                AuthorityTransferred(
                    emitter=self.address,
                    previous_owner=previous.owner,
                    new_owner=self._authority.owner,
                )
            )

        return self._authority.owner

    def check_and_enable_selling(self, now: int) -> bool:
        """Явно продвинуть timelock. SellingEnabled публикуется один раз.

        Returns:
            True если продажи открыты
        """
        validate_uint(now, "now")

        with self._exclusive("check_and_enable_selling"), self._atomic() as tx:
            if self._status == PoolStatus.UNINITIALIZED:
                raise NotInitialized("Selling timelock is armed by initialize")

            result = self._timelock.advance(now)
            if result.opened_now:
                tx.emit(SellingEnabled(emitter=self.address, at=now))

        return result.entry_allowed

    # =========================================================================
    # TRADES
    # =========================================================================

    def buy(self, actor: str, currency_in: int, bucket: int, now: int) -> TradeResult:
        """Купить токены за currency_in.

        Args:
            actor: покупатель
            currency_in: сумма валюты (приложенный value)
            bucket: текущий bucket anti-bot (высота блока)
            now: текущее время (unix seconds)

        Returns:
            TradeResult; net_out — токены, полученные покупателем

        Raises:
            NotInitialized / TradingPaused / AlreadyWithdrawn: статус пула
            InvalidInput: нулевые суммы или адрес
            RateLimited: превышен лимит сделок в bucket
            InsufficientLiquidity / DegenerateTrade: ledger
            TransferFailed: перевод не прошёл, сделка откатана
        """
        validate_address(actor, "actor")
        validate_positive_uint(currency_in, "currency_in")
        validate_uint(bucket, "bucket")
        validate_uint(now, "now")

        with self._exclusive("buy"), self._atomic() as tx:
            self._require_tradable()
            self._admit(actor, bucket)

            vesting_eligible = not self._timelock.is_open(now)
            trade = self._ledger.apply_buy(currency_in)
            self._throttle.record(actor, bucket)

            if self._vesting.on_buy(actor, trade.net_out, now, vesting_eligible):
                tx.emit(
                    VestingInitialized(
                        emitter=self.address,
                        actor=actor,
                        allotment=trade.net_out,
                        start=now,
                    )
                )

            token = self._require_token()
            self._settle(
                tx,
                f"collect {currency_in} currency from {actor}",
                lambda: self._currency.transfer_from(actor, self.address, currency_in),
                compensate=lambda: self._currency.transfer(actor, currency_in),
            )
            self._settle(
                tx,
                f"send {trade.net_out} tokens to {actor}",
                lambda: token.transfer(actor, trade.net_out),
            )

            tx.emit(
                Buy(
                    emitter=self.address,
                    actor=actor,
                    token_out=trade.net_out,
                    currency_in=currency_in,
                    fee=trade.fee,
                )
            )

        return trade

    def sell(self, actor: str, token_in: int, bucket: int, now: int) -> TradeResult:
        """Продать token_in токенов за валюту.

        Returns:
            TradeResult; net_out — валюта, полученная продавцом

        Raises:
            всё, что buy, плюс
            SellingLocked: timelock ещё не открылся
            VestingExceeded: token_in больше доступного по активному графику
        """
        validate_address(actor, "actor")
        validate_positive_uint(token_in, "token_in")
        validate_uint(bucket, "bucket")
        validate_uint(now, "now")

        with self._exclusive("sell"), self._atomic() as tx:
            self._require_tradable()
            self._admit(actor, bucket)

            timelock = self._timelock.advance(now)
            self._raise_if_blocked(timelock)
            if timelock.opened_now:
                tx.emit(SellingEnabled(emitter=self.address, at=now))

            position = self._vesting.position(actor, now)
            self._raise_if_blocked(self._vesting_gate.evaluate(position, token_in))

            trade = self._ledger.apply_sell(token_in)
            self._throttle.record(actor, bucket)
            if position.status == VestingStatus.ACTIVE:
                self._vesting.on_sell(actor, token_in)

            token = self._require_token()
            self._settle(
                tx,
                f"pull {token_in} tokens from {actor}",
                lambda: token.transfer_from(actor, self.address, token_in),
                compensate=lambda: token.transfer(actor, token_in),
            )
            self._settle(
                tx,
                f"send {trade.net_out} currency to {actor}",
                lambda: self._currency.transfer(actor, trade.net_out),
            )

            tx.emit(
                Sell(
                    emitter=self.address,
                    actor=actor,
                    token_in=token_in,
                    currency_out=trade.net_out,
                    fee=trade.fee,
                )
            )

        return trade

    # =========================================================================
    # VIEWS
    # =========================================================================

    @property
    def status(self) -> PoolStatus:
        return self._status

    @property
    def owner(self) -> str:
        return self._authority.owner

    @property
    def token_address(self) -> Optional[str]:
        return self._token_source.address if self._token_source is not None else None

    @property
    def events(self) -> Tuple[PoolEvent, ...]:
        with self._shared():
            return tuple(self._events)

    def reserves(self) -> Reserves:
        with self._shared():
            return self._ledger.reserves

    def price(self) -> int:
        """Спот-цена (18 знаков); InsufficientLiquidity без ликвидности."""
        with self._shared():
            return self._ledger.price()

    def quote_buy(self, currency_in: int) -> int:
        """Выход по кривой до комиссии; 0 если пул пуст."""
        with self._shared():
            return self._ledger.quote_buy(currency_in)

    def quote_sell(self, token_in: int) -> int:
        with self._shared():
            return self._ledger.quote_sell(token_in)

    def selling_open(self, now: int) -> bool:
        with self._shared():
            return self._timelock.is_open(now)

    def max_sellable(self, actor: str, now: int) -> int:
        with self._shared():
            return self._vesting.max_sellable(actor, now)

    def vesting_info(self, actor: str, now: int) -> VestingInfo:
        with self._shared():
            return self._vesting.info(actor, now)

    def state(self) -> PoolState:
        """Согласованный снапшот пула."""
        with self._shared():
            reserves = self._ledger.reserves
            return PoolState(
                pool_address=self.address,
                token_address=self.token_address,
                authority=self._authority.owner,
                status=self._status,
                reserves=reserves,
                timelock=Timelock(
                    selling_enabled=self._timelock.selling_enabled,
                    selling_enable_at=self._timelock.selling_enable_at,
                ),
                fee_bps=self._ledger.fee_bps,
                price_wad=None if reserves.token_reserve == 0 else self._ledger.price(),
            )

    def export_events(self) -> List[Dict[str, Any]]:
        """События в JSON-совместимом виде, проверенные по pool_event контракту."""
        contract = PoolEventValidator()
        return [dump_contract(event, contract) for event in self.events]

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        me = threading.get_ident()
        if self._active_thread == me:
            raise ReentrantCall(f"{operation} re-entered pool {self.address} during another operation")

        with self._lock:
            self._active_thread = me
            try:
                yield
            finally:
                self._active_thread = None

    @contextmanager
    def _shared(self) -> Iterator[None]:
        if self._active_thread == threading.get_ident():
            raise ReentrantCall(f"Read of pool {self.address} during its own mutation")

        with self._lock:
            yield

    @contextmanager
    def _atomic(self) -> Iterator[_AtomicUnit]:
        unit = _AtomicUnit(snapshot=self._snapshot())
        try:
            yield unit
        except Exception:
            self._rollback(unit)
            raise
        self._commit(unit.events)

    def _snapshot(self) -> _PoolSnapshot:
        return _PoolSnapshot(
            status=self._status,
            authority=self._authority,
            token_source=self._token_source,
            token=self._token,
            ledger=self._ledger.snapshot(),
            throttle=self._throttle.snapshot(),
            timelock=self._timelock.snapshot(),
            vesting=self._vesting.snapshot(),
        )

    def _rollback(self, unit: _AtomicUnit) -> None:
        snap = unit.snapshot
        self._status = snap.status
        self._authority = snap.authority
        self._token_source = snap.token_source
        self._token = snap.token
        self._ledger.restore(snap.ledger)
        self._throttle.restore(snap.throttle)
        self._timelock.restore(snap.timelock)
        self._vesting.restore(snap.vesting)

        for description, compensate in reversed(unit.compensations):
            logger.warning("Compensating settled transfer: %s", description)
            if not compensate():
                raise TransferFailed(f"Compensation failed: {description}")

    def _commit(self, events: List[PoolEvent]) -> None:
        for event in events:
            self._events.append(event)
            level = logging.DEBUG if event.name in _TRADE_EVENTS else logging.INFO
            logger.log(
                level,
                "%s %s %s",
                self.address,
                event.name,
                event.model_dump(exclude={"name", "emitter"}),
            )

    def _settle(
        self,
        tx: _AtomicUnit,
        description: str,
        transfer: Callable[[], bool],
        compensate: Optional[Callable[[], bool]] = None,
    ) -> None:
        """Внешний перевод; False или исключение коллаборатора → TransferFailed."""
        try:
            ok = transfer()
        except PoolError:
            raise
        except Exception as e:
            logger.warning("Transfer raised (%s): %s", description, e)
            raise TransferFailed(f"{description}: {e}") from e

        if not ok:
            logger.warning("Transfer rejected: %s", description)
            raise TransferFailed(description)

        if compensate is not None:
            tx.on_rollback(description, compensate)

    def _require_tradable(self) -> None:
        self._raise_if_blocked(self._status_gate.evaluate(self._status))

    def _admit(self, actor: str, bucket: int) -> None:
        result = self._throttle.evaluate(actor, bucket)
        if not result.entry_allowed:
            logger.debug("Throttle rejected %s: %s", actor, result.details)
        self._raise_if_blocked(result)

    @staticmethod
    def _raise_if_blocked(result: Any) -> None:
        if result.entry_allowed:
            return
        error = _GATE_ERRORS.get(result.block_reason, InvalidInput)
        raise error(result.details)

    def _require_token(self) -> TokenCapability:
        if self._token is None:
            raise InsufficientLiquidity("Pool has no token bound")
        return self._token
