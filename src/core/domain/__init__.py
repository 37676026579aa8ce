"""
Domain models and value objects.

Contains fundamental domain entities like StaticLimits, TransferContext,
TransferReceipt, RateWindowState, FeeBuckets and the rejection reasons.
"""

from src.core.domain.engine_state import (
    EngineStateSnapshot,
    FeeBuckets,
    RateWindowState,
)
from src.core.domain.errors import (
    RecipientAboveThreshold,
    RecipientRateLimited,
    ReentrantCallError,
    RollbackError,
    SenderRateLimited,
    ThresholdPhase,
    TradeTooLarge,
    TransferFailure,
    TransferRejected,
)
from src.core.domain.transfer import (
    TransferContext,
    TransferQuote,
    TransferReceipt,
    TransferRequest,
)
from src.core.domain.units import (
    FEE_COLLECTOR_ACCOUNT,
    MAX_BALANCE_PCT,
    MAX_TRADE_PCT,
    MAX_TRADES_PER_WINDOW,
    NULL_ACCOUNT,
    SECONDS_PER_DAY,
    StaticLimits,
)

__all__ = [
    # Units module
    "NULL_ACCOUNT",
    "FEE_COLLECTOR_ACCOUNT",
    "SECONDS_PER_DAY",
    "MAX_TRADES_PER_WINDOW",
    "MAX_TRADE_PCT",
    "MAX_BALANCE_PCT",
    "StaticLimits",
    # Engine state
    "RateWindowState",
    "FeeBuckets",
    "EngineStateSnapshot",
    # Transfer models
    "TransferContext",
    "TransferRequest",
    "TransferReceipt",
    "TransferQuote",
    # Errors
    "TransferFailure",
    "ThresholdPhase",
    "TransferRejected",
    "TradeTooLarge",
    "RecipientAboveThreshold",
    "SenderRateLimited",
    "RecipientRateLimited",
    "ReentrantCallError",
    "RollbackError",
]
