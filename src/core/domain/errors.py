"""
Errors — причины отказа в переводе

Все отказы обнаруживаются синхронно и приводят к полному откату
текущей операции. Автоматических повторов нет: вызывающая сторона
должна изменить запрос (меньшая сумма, ожидание окна, exemption)
и отправить его как новую операцию.
"""

from enum import Enum
from typing import Optional


class TransferFailure(str, Enum):
    """Машиночитаемая причина отказа."""

    TRADE_TOO_LARGE = "trade_too_large"
    RECIPIENT_ABOVE_THRESHOLD = "recipient_above_threshold"
    RECIPIENT_ABOVE_THRESHOLD_AFTER_CREDIT = "recipient_above_threshold_after_credit"
    SENDER_RATE_LIMITED = "sender_rate_limited"
    RECIPIENT_RATE_LIMITED = "recipient_rate_limited"


class ThresholdPhase(str, Enum):
    """Фаза проверки wallet cap."""

    PRE_CREDIT = "PRE_CREDIT"
    POST_CREDIT = "POST_CREDIT"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class TransferRejected(Exception):
    """
    Базовый отказ в переводе.

    Attributes:
        reason: TransferFailure
        account: аккаунт, на котором сработала проверка (если применимо)
        amount: запрошенная сумма
    """

    reason: TransferFailure

    def __init__(self, message: str, account: Optional[str] = None, amount: Optional[int] = None):
        super().__init__(message)
        self.account = account
        self.amount = amount


class TradeTooLarge(TransferRejected):
    """amount превышает статический лимит одной сделки."""

    reason = TransferFailure.TRADE_TOO_LARGE


class RecipientAboveThreshold(TransferRejected):
    """
    Баланс получателя >= wallet cap.

    PRE_CREDIT и POST_CREDIT различаются по reason.
    """

    def __init__(
        self,
        message: str,
        account: Optional[str] = None,
        amount: Optional[int] = None,
        phase: ThresholdPhase = ThresholdPhase.PRE_CREDIT,
    ):
        super().__init__(message, account=account, amount=amount)
        self.phase = phase
        if phase == ThresholdPhase.POST_CREDIT:
            self.reason = TransferFailure.RECIPIENT_ABOVE_THRESHOLD_AFTER_CREDIT
        else:
            self.reason = TransferFailure.RECIPIENT_ABOVE_THRESHOLD


class SenderRateLimited(TransferRejected):
    """Источник исчерпал лимит сделок в текущем окне."""

    reason = TransferFailure.SENDER_RATE_LIMITED


class RecipientRateLimited(TransferRejected):
    """Получатель исчерпал лимит сделок в текущем окне."""

    reason = TransferFailure.RECIPIENT_RATE_LIMITED


class ReentrantCallError(RuntimeError):
    """Повторный вход в оркестратор во время выполняемой операции."""
    pass


class RollbackError(RuntimeError):
    """
    Откат операции выполнен не полностью.

    Все undo-действия были выполнены; часть из них завершилась ошибкой.
    Исходное исключение операции доступно через `original` и `__cause__`.

    Attributes:
        original: исключение, вызвавшее откат
        failures: список (описание undo, исключение)
    """

    def __init__(self, message: str, original: BaseException, failures):
        super().__init__(message)
        self.original = original
        self.failures = list(failures)
