"""Fees — расчёт комиссии по контексту перевода и накопители комиссий."""

from .allocator import (
    BURN_PCT,
    BUY_FEE_PCT,
    DEVELOPMENT_PCT,
    LIQUIDITY_PCT,
    MARKETING_PCT,
    SELL_FEE_PCT,
    TRANSFER_FEE_PCT,
    FeeAllocator,
    FeeConfig,
)

__all__ = [
    "FeeAllocator",
    "FeeConfig",
    "BUY_FEE_PCT",
    "SELL_FEE_PCT",
    "TRANSFER_FEE_PCT",
    "MARKETING_PCT",
    "LIQUIDITY_PCT",
    "DEVELOPMENT_PCT",
    "BURN_PCT",
]
