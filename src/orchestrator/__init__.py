"""Orchestrator — атомарная операция перевода: классификация, проверки,
комиссия, перемещения через ledger и учёт окон частоты и накопителей.
"""

from .transfer_orchestrator import AllowanceLedger, TransferOrchestrator
from .unit_of_work import ReentrancyGuard, UnitOfWork

__all__ = [
    "TransferOrchestrator",
    "AllowanceLedger",
    "UnitOfWork",
    "ReentrancyGuard",
]
