"""
Transfer — Модели запроса и результата перевода

Immutable Pydantic модели:
- TransferContext: производный контекст перевода (не хранится)
- TransferRequest: входной запрос с валидацией
- TransferReceipt: результат выполненного перевода

Полная совместимость с JSON Schema (contracts/schema/transfer_receipt.json).
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .engine_state import FeeBuckets


# =============================================================================
# ENUMS
# =============================================================================


class TransferContext(str, Enum):
    """
    Контекст перевода.

    Вычисляется заново для каждой операции по членству концов
    перевода в реестрах и по null account.
    """

    MINT_OR_BURN = "MINT_OR_BURN"
    EXEMPT = "EXEMPT"
    BUY = "BUY"  # источник: market venue
    SELL = "SELL"  # получатель: market venue
    PEER_TRANSFER = "PEER_TRANSFER"

    @property
    def is_fee_bearing(self) -> bool:
        """True для контекстов с комиссией и лимитами (BUY/SELL/PEER_TRANSFER)."""
        return self in (
            TransferContext.BUY,
            TransferContext.SELL,
            TransferContext.PEER_TRANSFER,
        )


# =============================================================================
# REQUEST
# =============================================================================


class TransferRequest(BaseModel):
    """Запрос на перевод amount от source к destination."""

    source: str = Field(..., min_length=1, description="Аккаунт-источник")
    destination: str = Field(..., min_length=1, description="Аккаунт-получатель")
    amount: int = Field(..., ge=0, description="Сумма (base units)")

    model_config = {"frozen": True, "strict": True}


# =============================================================================
# RECEIPT
# =============================================================================


class TransferReceipt(BaseModel):
    """
    Результат выполненного перевода.

    Immutable модель (frozen=True). Инвариант: net_amount + fee == amount,
    source списан ровно на amount.
    """

    context: TransferContext = Field(..., description="Контекст перевода")
    source: str = Field(..., min_length=1, description="Аккаунт-источник")
    destination: str = Field(..., min_length=1, description="Аккаунт-получатель")
    amount: int = Field(..., ge=0, description="Запрошенная сумма")
    fee: int = Field(..., ge=0, description="Комиссия")
    net_amount: int = Field(..., ge=0, description="Зачислено получателю")
    fee_collector: str = Field(..., min_length=1, description="Аккаунт сбора комиссий")
    fee_buckets: FeeBuckets = Field(..., description="Накопители после операции")
    executed_at: int = Field(..., ge=0, description="Время выполнения (Unix seconds)")

    model_config = {"frozen": True}

    @field_validator("net_amount")
    @classmethod
    def validate_net_plus_fee(cls, v: int, info) -> int:
        """Проверка, что net_amount + fee == amount"""
        if "amount" in info.data and "fee" in info.data:
            amount = info.data["amount"]
            fee = info.data["fee"]
            if v + fee != amount:
                raise ValueError(
                    f"net_amount {v} + fee {fee} must equal amount {amount}"
                )
        return v


class TransferQuote(BaseModel):
    """
    Dry-run оценка перевода без изменения состояния.

    Постусловие (баланс получателя после зачисления) оценивается
    по текущему балансу + net_amount.
    """

    context: TransferContext
    amount: int = Field(..., ge=0)
    fee: int = Field(..., ge=0)
    net_amount: int = Field(..., ge=0)
    entry_allowed: bool
    block_reason: str = Field(default="", description="Причина блокировки ('' если PASS)")
    details: str = ""

    model_config = {"frozen": True}
