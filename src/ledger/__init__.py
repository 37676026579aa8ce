"""Ledger — внешний balance ledger (credit/debit, balance, total supply).

Движок обращается к ledger только через LedgerAdapter протокол.
InMemoryLedger — эталонная реализация для тестов и симуляций.
"""

from .adapter import (
    InMemoryLedger,
    InsufficientAllowance,
    InsufficientBalance,
    LedgerAdapter,
    LedgerError,
)

__all__ = [
    "LedgerAdapter",
    "InMemoryLedger",
    "LedgerError",
    "InsufficientBalance",
    "InsufficientAllowance",
]
