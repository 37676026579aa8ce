"""Gatekeeper — упорядоченные проверки допуска перевода.

- Порядок проверок фиксирован для каждого контекста
- Первая неуспешная проверка определяет причину отказа
- Проверки только читают состояние
"""

from .transfer_checks import (
    CHECK_SEQUENCES,
    POST_CREDIT_CHECK_CONTEXTS,
    CheckStep,
    TransferCheckResult,
    TransferChecks,
    raise_for_result,
)

__all__ = [
    "CHECK_SEQUENCES",
    "POST_CREDIT_CHECK_CONTEXTS",
    "CheckStep",
    "TransferCheckResult",
    "TransferChecks",
    "raise_for_result",
]
