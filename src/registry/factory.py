"""Pool Factory — выпуск токена и создание его пула

create_token:
1. Выпуск всей эмиссии токена на адрес фабрики
2. Сбор seed-валюты с создателя (value, приложенный к вызову)
3. Пул по детерминированному адресу, approve пулу seed-токенов
4. pool.initialize(creator=фабрика): пул забирает seed-токены и валюту
5. Остаток эмиссии передаётся создателю, владелец пула — создатель

Реестр: token → pool, один пул на токен.
Ошибка на любом шаге откатывает уже проведённые переводы фабрики.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Final, List, Tuple

from src.core.domain.address import derive_address, validate_address
from src.core.domain.errors import (
    AlreadyInitialized,
    InvalidInput,
    PoolNotFound,
    TransferFailed,
)
from src.core.domain.events import TokenCreated
from src.core.math.uint_math import validate_positive_uint, validate_uint
from src.pool.config import PoolConfig
from src.pool.liquidity_pool import LiquidityPool
from src.registry.ledger import FixedSupplyToken, NativeCurrency

logger = logging.getLogger(__name__)


# 1 млрд токенов с 18 знаками
DEFAULT_TOTAL_SUPPLY: Final[int] = 1_000_000_000 * 10**18


@dataclass(frozen=True)
class FactoryConfig:
    """Конфигурация фабрики."""

    total_supply: int = DEFAULT_TOTAL_SUPPLY
    min_seed_currency: int = 1
    pool_config: PoolConfig = field(default_factory=PoolConfig)

    def __post_init__(self):
        if self.total_supply <= 0:
            raise ValueError(f"total_supply must be positive, got {self.total_supply}")
        if self.min_seed_currency <= 0:
            raise ValueError(
                f"min_seed_currency must be positive, got {self.min_seed_currency}"
            )


@dataclass(frozen=True)
class TokenLaunch:
    """Результат create_token."""

    token: FixedSupplyToken
    pool: LiquidityPool
    event: TokenCreated


class PoolFactory:
    """Фабрика токенов и реестр пулов."""

    def __init__(self, address: str, currency: NativeCurrency, config: FactoryConfig | None = None):
        self.address = validate_address(address, "address")
        self.config = config or FactoryConfig()

        self._currency = currency
        self._currency_handle = currency.bind(self.address)
        self._pools: Dict[str, LiquidityPool] = {}
        self._events: List[TokenCreated] = []
        self._nonce = 0
        self._lock = threading.Lock()

    # =========================================================================
    # ADDRESSES
    # =========================================================================

    def predict_pool_address(self, token_address: str) -> str:
        return derive_address(self.address, "pool", token_address)

    def predict_token_address(self, nonce: int | None = None) -> str:
        return derive_address(self.address, "token", str(self._nonce if nonce is None else nonce))

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def create_token(
        self,
        creator: str,
        name: str,
        symbol: str,
        metadata_uri: str,
        seed_currency: int,
        now: int,
    ) -> TokenLaunch:
        """Выпустить токен и запустить его пул.

        Args:
            creator: создатель; получает остаток эмиссии и владение пулом
            name, symbol, metadata_uri: метаданные токена
            seed_currency: seed-валюта пула, списывается с создателя
            now: время запуска (unix seconds)

        Raises:
            InvalidInput: seed_currency ниже min_seed_currency, пустые name/symbol
            TransferFailed: у создателя недостаточно валюты
        """
        validate_address(creator, "creator")
        self._validate_seed(seed_currency)
        if not name or not symbol:
            raise InvalidInput("Token name and symbol must be non-empty")

        with self._lock:
            token = FixedSupplyToken(
                address=self.predict_token_address(),
                name=name,
                symbol=symbol,
                total_supply=self.config.total_supply,
                issuer=self.address,
                metadata_uri=metadata_uri,
            )
            self._nonce += 1

            pool = self._launch(token, creator, seed_currency, now, compensations=[])

            remainder = token.balance_of(self.address)
            if remainder > 0 and not token.transfer(self.address, creator, remainder):
                raise TransferFailed(f"Could not hand {remainder} {symbol} to {creator}")

            event = TokenCreated(
                emitter=self.address,
                token=token.address,
                pool=pool.address,
                creator=creator,
                token_name=name,
                symbol=symbol,
                metadata_uri=metadata_uri,
            )
            self._events.append(event)

        logger.info(
            "Token %s (%s) created by %s with pool %s",
            symbol,
            token.address,
            creator,
            pool.address,
        )
        return TokenLaunch(token=token, pool=pool, event=event)

    def create_pool_for(
        self, token: FixedSupplyToken, seed_currency: int, creator: str, now: int
    ) -> LiquidityPool:
        """Пул для уже выпущенного токена.

        Создатель заранее делает approve фабрике на seed-токены
        (PoolConfig.seed_tokens(total_supply)).
        """
        validate_address(creator, "creator")
        self._validate_seed(seed_currency)

        with self._lock:
            self._require_unregistered(token.address)
            seed_tokens = self.config.pool_config.seed_tokens(token.total_supply())
            handle = token.bind(self.address)

            if not handle.transfer_from(creator, self.address, seed_tokens):
                raise TransferFailed(f"{creator} did not provide {seed_tokens} seed tokens")

            compensations: List[Tuple[str, Callable[[], bool]]] = [
                ("return seed tokens", lambda: handle.transfer(creator, seed_tokens))
            ]
            pool = self._launch(token, creator, seed_currency, now, compensations)

        logger.info("Pool %s created for token %s by %s", pool.address, token.address, creator)
        return pool

    # =========================================================================
    # REGISTRY
    # =========================================================================

    def pool_for(self, token_address: str) -> LiquidityPool:
        """
        Raises:
            PoolNotFound: для токена нет пула
        """
        with self._lock:
            pool = self._pools.get(token_address)
        if pool is None:
            raise PoolNotFound(f"No pool registered for token {token_address}")
        return pool

    def all_pools(self) -> List[LiquidityPool]:
        with self._lock:
            return list(self._pools.values())

    @property
    def events(self) -> Tuple[TokenCreated, ...]:
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        return len(self._pools)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _validate_seed(self, seed_currency: int) -> None:
        validate_positive_uint(seed_currency, "seed_currency")
        if seed_currency < self.config.min_seed_currency:
            raise InvalidInput(
                f"seed_currency {seed_currency} is below the minimum {self.config.min_seed_currency}"
            )

    def _require_unregistered(self, token_address: str) -> None:
        if token_address in self._pools:
            raise AlreadyInitialized(f"Token {token_address} already has a pool")

    def _launch(
        self,
        token: FixedSupplyToken,
        creator: str,
        seed_currency: int,
        now: int,
        compensations: List[Tuple[str, Callable[[], bool]]],
    ) -> LiquidityPool:
        """Собрать seed-валюту, создать и инициализировать пул, зарегистрировать."""
        validate_uint(now, "now")
        self._require_unregistered(token.address)

        pool_address = self.predict_pool_address(token.address)
        seed_tokens = self.config.pool_config.seed_tokens(token.total_supply())
        token_handle = token.bind(self.address)

        try:
            if not self._currency_handle.transfer_from(creator, self.address, seed_currency):
                raise TransferFailed(f"{creator} did not attach {seed_currency} seed currency")
            compensations.append(
                (
                    "refund seed currency",
                    lambda: self._currency_handle.transfer(creator, seed_currency),
                )
            )

            token_handle.approve(pool_address, seed_tokens)
            pool = LiquidityPool(
                address=pool_address,
                owner=creator,
                currency=self._currency,
                config=self.config.pool_config,
            )
            pool.initialize(token, seed_currency, creator=self.address, now=now)
        except Exception:
            token_handle.approve(pool_address, 0)
            for description, compensate in reversed(compensations):
                logger.warning("Pool launch for %s failed, %s", token.address, description)
                if not compensate():
                    raise TransferFailed(f"Compensation failed: {description}")
            raise

        self._pools[token.address] = pool
        return pool
