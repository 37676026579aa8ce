"""
Core math modules для Transfer Guard

Целочисленные примитивы для сумм, процентов и долей комиссий.
"""

from src.core.math.integer_math import (
    PCT_DENOMINATOR,
    pct_floor,
    split_shortfall,
    validate_amount,
    validate_pct,
)

__all__ = [
    "PCT_DENOMINATOR",
    "pct_floor",
    "split_shortfall",
    "validate_amount",
    "validate_pct",
]
