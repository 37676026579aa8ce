"""Transfer Checks — упорядоченные проверки допуска перевода

Порядок проверок внутри контекста фиксирован и наблюдаем извне:
первая неуспешная проверка определяет причину отказа.

- BUY: trade_size → recipient_threshold → recipient_rate
- SELL: trade_size → sender_rate
- PEER_TRANSFER: trade_size → recipient_threshold → sender_rate → recipient_rate
- MINT_OR_BURN / EXEMPT: проверок нет

Постусловие (wallet cap получателя после зачисления net) проверяется
оркестратором отдельно через check_post_credit().
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from src.core.domain.errors import (
    RecipientAboveThreshold,
    RecipientRateLimited,
    SenderRateLimited,
    ThresholdPhase,
    TradeTooLarge,
    TransferFailure,
    TransferRejected,
)
from src.core.domain.transfer import TransferContext
from src.limiter.rate_window import RateWindowLimiter

logger = logging.getLogger(__name__)


class CheckStep(str, Enum):
    """Шаг проверки допуска."""

    TRADE_SIZE = "trade_size"
    RECIPIENT_THRESHOLD = "recipient_threshold"
    SENDER_RATE = "sender_rate"
    RECIPIENT_RATE = "recipient_rate"


CHECK_SEQUENCES: Dict[TransferContext, Tuple[CheckStep, ...]] = {
    TransferContext.MINT_OR_BURN: (),
    TransferContext.EXEMPT: (),
    TransferContext.BUY: (
        CheckStep.TRADE_SIZE,
        CheckStep.RECIPIENT_THRESHOLD,
        CheckStep.RECIPIENT_RATE,
    ),
    TransferContext.SELL: (
        CheckStep.TRADE_SIZE,
        CheckStep.SENDER_RATE,
    ),
    TransferContext.PEER_TRANSFER: (
        CheckStep.TRADE_SIZE,
        CheckStep.RECIPIENT_THRESHOLD,
        CheckStep.SENDER_RATE,
        CheckStep.RECIPIENT_RATE,
    ),
}

# Контексты с проверкой wallet cap после зачисления
POST_CREDIT_CHECK_CONTEXTS = frozenset({TransferContext.BUY, TransferContext.PEER_TRANSFER})


@dataclass(frozen=True)
class TransferCheckResult:
    """Результат проверок допуска."""

    entry_allowed: bool
    block_reason: str

    context: TransferContext
    failed_step: Optional[CheckStep]
    failure: Optional[TransferFailure]

    # Аккаунт, на котором сработала проверка
    account: Optional[str]
    amount: int

    details: str


class TransferChecks:
    """Проверки допуска перевода поверх RateWindowLimiter.

    Не изменяет состояние: только чтение лимитов, окон и балансов.
    """

    def __init__(self, limiter: RateWindowLimiter):
        self.limiter = limiter

    def evaluate(
        self,
        context: TransferContext,
        source: str,
        destination: str,
        amount: int,
        now: int,
    ) -> TransferCheckResult:
        """Прогон проверок контекста в фиксированном порядке.

        Args:
            context: контекст перевода
            source: аккаунт-источник
            destination: аккаунт-получатель
            amount: запрошенная сумма
            now: текущее время (Unix seconds)

        Returns:
            TransferCheckResult (первая неуспешная проверка или PASS)
        """
        for step in CHECK_SEQUENCES[context]:
            failure, account, details = self._run_step(step, source, destination, amount, now)
            logger.debug("check %s for %s: %s", step.value, context.value, "FAIL" if failure else "PASS")
            if failure is not None:
                return TransferCheckResult(
                    entry_allowed=False,
                    block_reason=failure.value,
                    context=context,
                    failed_step=step,
                    failure=failure,
                    account=account,
                    amount=amount,
                    details=details,
                )

        return TransferCheckResult(
            entry_allowed=True,
            block_reason="",
            context=context,
            failed_step=None,
            failure=None,
            account=None,
            amount=amount,
            details=f"PASS: context={context.value}, steps={len(CHECK_SEQUENCES[context])}",
        )

    def check_post_credit(
        self,
        context: TransferContext,
        destination: str,
        amount: Optional[int] = None,
    ) -> None:
        """Wallet cap получателя после зачисления net.

        Args:
            amount: сумма перевода (переносится в исключение)

        Raises:
            RecipientAboveThreshold: с фазой POST_CREDIT
        """
        if context not in POST_CREDIT_CHECK_CONTEXTS:
            return
        if not self.limiter.is_balance_below_threshold(destination):
            balance = self.limiter.ledger.balance_of(destination)
            raise RecipientAboveThreshold(
                f"Recipient {destination} balance {balance} reached wallet cap "
                f"{self.limiter.max_account_balance} after credit",
                account=destination,
                amount=amount,
                phase=ThresholdPhase.POST_CREDIT,
            )

    def _run_step(
        self,
        step: CheckStep,
        source: str,
        destination: str,
        amount: int,
        now: int,
    ) -> Tuple[Optional[TransferFailure], Optional[str], str]:
        limiter = self.limiter

        if step == CheckStep.TRADE_SIZE:
            if not limiter.is_trade_allowed(amount):
                return (
                    TransferFailure.TRADE_TOO_LARGE,
                    None,
                    f"amount {amount} exceeds max_trade_amount {limiter.max_trade_amount}",
                )
        elif step == CheckStep.RECIPIENT_THRESHOLD:
            if not limiter.is_balance_below_threshold(destination):
                return (
                    TransferFailure.RECIPIENT_ABOVE_THRESHOLD,
                    destination,
                    f"recipient {destination} balance {limiter.ledger.balance_of(destination)} "
                    f">= max_account_balance {limiter.max_account_balance}",
                )
        elif step == CheckStep.SENDER_RATE:
            if not limiter.can_trade(source, now):
                return (
                    TransferFailure.SENDER_RATE_LIMITED,
                    source,
                    f"sender {source} reached {limiter.config.max_trades_per_window} trades in window",
                )
        elif step == CheckStep.RECIPIENT_RATE:
            if not limiter.can_trade(destination, now):
                return (
                    TransferFailure.RECIPIENT_RATE_LIMITED,
                    destination,
                    f"recipient {destination} reached {limiter.config.max_trades_per_window} trades in window",
                )

        return None, None, ""


def raise_for_result(result: TransferCheckResult) -> None:
    """Преобразование отказа в исключение (PASS → no-op).

    Raises:
        TransferRejected: конкретный подкласс по failure
    """
    if result.entry_allowed:
        return

    message = f"{result.block_reason}: {result.details}"
    exc: TransferRejected
    if result.failure == TransferFailure.TRADE_TOO_LARGE:
        exc = TradeTooLarge(message, account=result.account, amount=result.amount)
    elif result.failure == TransferFailure.RECIPIENT_ABOVE_THRESHOLD:
        exc = RecipientAboveThreshold(
            message, account=result.account, amount=result.amount, phase=ThresholdPhase.PRE_CREDIT
        )
    elif result.failure == TransferFailure.SENDER_RATE_LIMITED:
        exc = SenderRateLimited(message, account=result.account, amount=result.amount)
    elif result.failure == TransferFailure.RECIPIENT_RATE_LIMITED:
        exc = RecipientRateLimited(message, account=result.account, amount=result.amount)
    else:
        raise ValueError(f"Unknown transfer failure: {result.failure}")
    raise exc
