"""
Contract Validation Module

Модуль для валидации JSON контрактов наблюдаемого состояния и результатов переводов.
"""

from .validators import (
    ContractValidator,
    EngineStateValidator,
    SchemaLoader,
    TransferReceiptValidator,
    validate_engine_state,
    validate_transfer_receipt,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "EngineStateValidator",
    "TransferReceiptValidator",
    # Functions
    "validate_engine_state",
    "validate_transfer_receipt",
]
