"""Limiter — лимиты размера сделки, wallet cap и rolling window частоты сделок."""

from .rate_window import (
    LimiterConfig,
    RateWindowLimiter,
    RecorderCapability,
    UnauthorizedRecorder,
)

__all__ = [
    "LimiterConfig",
    "RateWindowLimiter",
    "RecorderCapability",
    "UnauthorizedRecorder",
]
