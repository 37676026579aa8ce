"""TransferOrchestrator — авторизация перевода, комиссия и учёт как одна операция.

Шаги операции:
1. Classify: null account → MINT_OR_BURN; exempt с любой стороны → EXEMPT;
   источник market venue → BUY; получатель market venue → SELL;
   иначе → PEER_TRANSFER
2. MINT_OR_BURN / EXEMPT: перемещение полной суммы, без лимитов и комиссии
3. BUY / SELL / PEER_TRANSFER:
   - упорядоченные проверки допуска (TransferChecks)
   - fee = fee_for_context(amount, context), net = amount - fee
   - move(source → destination, net)
   - если fee > 0: move(source → fee_collector, fee) и allocate(fee)
   - BUY / PEER_TRANSFER: wallet cap получателя ПОСЛЕ зачисления
   - record_trade: BUY → destination; SELL → source; PEER → source и destination

Любой отказ на любом шаге откатывает все мутации текущей операции
(ledger, накопители, last_fee, окна частоты). Частичного применения нет.
"""

import logging
import time
from typing import Callable, Optional, Protocol, runtime_checkable

from src.core.contracts.validators import validate_engine_state, validate_transfer_receipt
from src.core.domain.engine_state import EngineStateSnapshot, FeeBuckets, RateWindowState
from src.core.domain.errors import TransferFailure, TransferRejected
from src.core.domain.transfer import (
    TransferContext,
    TransferQuote,
    TransferReceipt,
    TransferRequest,
)
from src.core.domain.units import FEE_COLLECTOR_ACCOUNT, NULL_ACCOUNT, StaticLimits
from src.fees.allocator import FeeAllocator, FeeConfig
from src.gatekeeper.transfer_checks import (
    POST_CREDIT_CHECK_CONTEXTS,
    TransferChecks,
    raise_for_result,
)
from src.ledger.adapter import LedgerAdapter
from src.limiter.rate_window import LimiterConfig, RateWindowLimiter
from src.orchestrator.unit_of_work import ReentrancyGuard, UnitOfWork
from src.registry.access_control import ContextRegistry

logger = logging.getLogger(__name__)

SNAPSHOT_SCHEMA_VERSION = "1"
INSUFFICIENT_BALANCE_REASON = "insufficient_balance"


@runtime_checkable
class AllowanceLedger(Protocol):
    """Ledger с поддержкой allowances (для transfer_from)."""

    def allowance(self, owner: str, spender: str) -> int:
        ...

    def approve(self, owner: str, spender: str, amount: int) -> None:
        ...

    def spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        ...


def _system_clock() -> int:
    return int(time.time())


class TransferOrchestrator:
    """Ядро: классификация, проверки, комиссия, перемещения и учёт.

    Операции выполняются по одной; каждая является атомарным UnitOfWork
    под ReentrancyGuard.

    Один RateWindowLimiter обслуживает ровно один оркестратор: при создании
    оркестратор забирает единственную recorder capability лимитера.
    """

    def __init__(
        self,
        ledger: LedgerAdapter,
        registry: ContextRegistry,
        limiter: Optional[RateWindowLimiter] = None,
        allocator: Optional[FeeAllocator] = None,
        fee_collector: str = FEE_COLLECTOR_ACCOUNT,
        limiter_config: Optional[LimiterConfig] = None,
        fee_config: Optional[FeeConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Args:
            ledger: внешний balance ledger
            registry: реестры market venues / exemptions (только чтение)
            limiter: RateWindowLimiter (default: создаётся из ledger; лимиты фиксируются сейчас)
            allocator: FeeAllocator (default: создаётся из fee_config)
            fee_collector: аккаунт сбора комиссий
            limiter_config: конфиг лимитера (только если limiter не передан)
            fee_config: конфиг комиссий (если allocator не передан)
            clock: источник времени в Unix seconds (default: time.time)

        Raises:
            ValueError: пустой fee_collector; limiter вместе с limiter_config;
                limiter уже привязан к другому оркестратору
        """
        if not fee_collector:
            raise ValueError("fee_collector must be a non-empty account")
        if limiter is not None and limiter_config is not None:
            raise ValueError("Pass either limiter or limiter_config, not both")
        if limiter is not None and limiter.recorder_bound:
            raise ValueError("Limiter is already bound to another orchestrator")

        self.ledger = ledger
        self.registry = registry
        self.limiter = limiter or RateWindowLimiter(ledger, config=limiter_config)
        self.allocator = allocator or FeeAllocator(config=fee_config)
        self.checks = TransferChecks(self.limiter)
        self.fee_collector = fee_collector
        self._clock = clock or _system_clock

        self._recorder = self.limiter.bind_recorder()
        self._guard = ReentrancyGuard()
        self._last_fee = 0
        self.last_receipt: Optional[TransferReceipt] = None

    # -------------------------------------------------------------------------
    # Инспекция
    # -------------------------------------------------------------------------

    @property
    def static_limits(self) -> StaticLimits:
        return self.limiter.static_limits

    @property
    def last_fee(self) -> int:
        return self._last_fee

    @property
    def fee_buckets(self) -> FeeBuckets:
        return self.allocator.buckets

    def rate_window(self, account: str) -> RateWindowState:
        return self.limiter.window_state(account)

    def snapshot(self, now: Optional[int] = None) -> EngineStateSnapshot:
        """Снапшот наблюдаемого состояния.

        Raises:
            jsonschema.ValidationError: снапшот не соответствует engine_state.json
        """
        snapshot = EngineStateSnapshot(
            schema_version=SNAPSHOT_SCHEMA_VERSION,
            ts=self._resolve_now(now),
            static_limits=self.static_limits,
            total_supply=self.ledger.total_supply(),
            last_fee=self._last_fee,
            fee_buckets=self.allocator.buckets,
            rate_windows=self.limiter.windows(),
        )
        validate_engine_state(snapshot.model_dump(mode="json"))
        return snapshot

    # -------------------------------------------------------------------------
    # Классификация
    # -------------------------------------------------------------------------

    def classify(self, source: str, destination: str) -> TransferContext:
        if source == NULL_ACCOUNT or destination == NULL_ACCOUNT:
            return TransferContext.MINT_OR_BURN
        if self.registry.is_exempt(source) or self.registry.is_exempt(destination):
            return TransferContext.EXEMPT
        if self.registry.is_market_venue(source):
            return TransferContext.BUY
        if self.registry.is_market_venue(destination):
            return TransferContext.SELL
        return TransferContext.PEER_TRANSFER

    # -------------------------------------------------------------------------
    # Операции
    # -------------------------------------------------------------------------

    def transfer(
        self,
        source: str,
        destination: str,
        amount: int,
        now: Optional[int] = None,
    ) -> TransferReceipt:
        """Атомарный перевод amount от source к destination.

        Returns:
            TransferReceipt

        Raises:
            pydantic.ValidationError: невалидный запрос
            TransferRejected: отказ проверки (TradeTooLarge, RecipientAboveThreshold,
                SenderRateLimited, RecipientRateLimited)
            LedgerError: недостаточный баланс источника
            ReentrantCallError: повторный вход
            RollbackError: откат выполнен не полностью (исходная ошибка в __cause__)
        """
        request = TransferRequest(source=source, destination=destination, amount=amount)
        ts = self._resolve_now(now)

        with self._guard:
            with UnitOfWork(f"transfer {source}->{destination}") as uow:
                receipt = self._execute(uow, request, ts)

        return self._commit(receipt)

    def transfer_from(
        self,
        spender: str,
        source: str,
        destination: str,
        amount: int,
        now: Optional[int] = None,
    ) -> TransferReceipt:
        """Перевод от имени source за счёт allowance spender'а.

        Списание allowance входит в ту же атомарную операцию.
        """
        if not isinstance(self.ledger, AllowanceLedger):
            raise TypeError("Ledger does not support allowances")
        request = TransferRequest(source=source, destination=destination, amount=amount)
        ts = self._resolve_now(now)
        ledger = self.ledger

        with self._guard:
            with UnitOfWork(f"transfer_from {source}->{destination} by {spender}") as uow:
                previous = ledger.allowance(source, spender)
                ledger.spend_allowance(source, spender, amount)
                uow.record(
                    f"allowance {source}/{spender}",
                    lambda: ledger.approve(source, spender, previous),
                )
                receipt = self._execute(uow, request, ts)

        return self._commit(receipt)

    def mint(self, account: str, amount: int, now: Optional[int] = None) -> TransferReceipt:
        """Выпуск amount на account (MINT_OR_BURN: без комиссии и лимитов)."""
        return self.transfer(NULL_ACCOUNT, account, amount, now=now)

    def burn(self, account: str, amount: int, now: Optional[int] = None) -> TransferReceipt:
        """Сжигание amount с account (MINT_OR_BURN)."""
        return self.transfer(account, NULL_ACCOUNT, amount, now=now)

    def quote(
        self,
        source: str,
        destination: str,
        amount: int,
        now: Optional[int] = None,
    ) -> TransferQuote:
        """Dry-run: контекст, комиссия и допуск без изменения состояния.

        Постусловие оценивается как balance(destination) + net < max_account_balance.
        Баланс источника проверяется после проверок допуска (insufficient_balance),
        как при выполнении перевода. Allowance для transfer_from не учитывается.
        """
        request = TransferRequest(source=source, destination=destination, amount=amount)
        ts = self._resolve_now(now)
        context = self.classify(request.source, request.destination)
        fee = self.allocator.fee_for_context(request.amount, context)
        net = request.amount - fee

        result = self.checks.evaluate(context, request.source, request.destination, request.amount, ts)
        entry_allowed = result.entry_allowed
        block_reason = result.block_reason
        details = result.details

        if entry_allowed and request.source != NULL_ACCOUNT:
            balance = self.ledger.balance_of(request.source)
            if balance < request.amount:
                entry_allowed = False
                block_reason = INSUFFICIENT_BALANCE_REASON
                details = f"source balance {balance} < amount {request.amount}"

        if entry_allowed and context in POST_CREDIT_CHECK_CONTEXTS:
            projected = self.ledger.balance_of(request.destination) + net
            if projected >= self.static_limits.max_account_balance:
                entry_allowed = False
                block_reason = TransferFailure.RECIPIENT_ABOVE_THRESHOLD_AFTER_CREDIT.value
                details = (
                    f"projected recipient balance {projected} >= "
                    f"max_account_balance {self.static_limits.max_account_balance}"
                )

        return TransferQuote(
            context=context,
            amount=request.amount,
            fee=fee,
            net_amount=net,
            entry_allowed=entry_allowed,
            block_reason=block_reason,
            details=details,
        )

    # -------------------------------------------------------------------------
    # Внутренние шаги
    # -------------------------------------------------------------------------

    def _execute(self, uow: UnitOfWork, request: TransferRequest, now: int) -> TransferReceipt:
        source, destination, amount = request.source, request.destination, request.amount
        context = self.classify(source, destination)

        if not context.is_fee_bearing:
            self._move(uow, source, destination, amount)
            return self._receipt(context, request, fee=0, now=now)

        result = self.checks.evaluate(context, source, destination, amount, now)
        if not result.entry_allowed:
            logger.warning(
                "transfer rejected: %s %s->%s amount=%d reason=%s",
                context.value, source, destination, amount, result.block_reason,
            )
            raise_for_result(result)

        fee = self.allocator.fee_for_context(amount, context)
        self._set_last_fee(uow, fee)

        self._move(uow, source, destination, amount - fee)
        if fee > 0:
            self._move(uow, source, self.fee_collector, fee)
            self._allocate(uow, fee)

        try:
            self.checks.check_post_credit(context, destination, amount)
        except TransferRejected:
            logger.warning(
                "transfer rejected after credit: %s %s->%s amount=%d",
                context.value, source, destination, amount,
            )
            raise

        if context == TransferContext.BUY:
            self._record_trade(uow, destination, now)
        elif context == TransferContext.SELL:
            self._record_trade(uow, source, now)
        else:
            self._record_trade(uow, source, now)
            self._record_trade(uow, destination, now)

        return self._receipt(context, request, fee=fee, now=now)

    def _move(self, uow: UnitOfWork, source: str, destination: str, amount: int) -> None:
        self.ledger.move(source, destination, amount)
        uow.record(
            f"move {source}->{destination} {amount}",
            lambda: self.ledger.move(destination, source, amount),
        )

    def _allocate(self, uow: UnitOfWork, fee: int) -> None:
        previous = self.allocator.buckets
        self.allocator.allocate(fee)
        uow.record(f"allocate {fee}", lambda: self.allocator.restore(previous))

    def _set_last_fee(self, uow: UnitOfWork, fee: int) -> None:
        previous = self._last_fee
        self._last_fee = fee

        def undo() -> None:
            self._last_fee = previous

        uow.record("last_fee", undo)

    def _record_trade(self, uow: UnitOfWork, account: str, now: int) -> None:
        previous = self.limiter.peek_window(account)
        self.limiter.record_trade(account, now, capability=self._recorder)
        uow.record(
            f"rate window {account}",
            lambda: self.limiter.restore_window(account, previous, capability=self._recorder),
        )

    def _receipt(
        self,
        context: TransferContext,
        request: TransferRequest,
        fee: int,
        now: int,
    ) -> TransferReceipt:
        receipt = TransferReceipt(
            context=context,
            source=request.source,
            destination=request.destination,
            amount=request.amount,
            fee=fee,
            net_amount=request.amount - fee,
            fee_collector=self.fee_collector,
            fee_buckets=self.allocator.buckets,
            executed_at=now,
        )
        validate_transfer_receipt(receipt.model_dump(mode="json"))
        return receipt

    def _commit(self, receipt: TransferReceipt) -> TransferReceipt:
        self.last_receipt = receipt
        logger.info(
            "transfer committed: %s %s->%s amount=%d fee=%d net=%d",
            receipt.context.value,
            receipt.source,
            receipt.destination,
            receipt.amount,
            receipt.fee,
            receipt.net_amount,
        )
        return receipt

    def _resolve_now(self, now: Optional[int]) -> int:
        return self._clock() if now is None else now
