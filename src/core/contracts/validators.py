"""
JSON Schema Contract Validators

Модуль для валидации JSON данных согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- engine_state.json (снапшот наблюдаемого состояния движка)
- transfer_receipt.json (результат выполненного перевода)

TransferOrchestrator проверяет каждый снапшот и каждый receipt при создании.
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self):
        # Корень проекта (4 уровня вверх от этого файла)
        self._schema_dir = Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'engine_state')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """
        Итератор по всем ошибкам валидации.

        Yields:
            ValidationError объекты для каждой найденной ошибки
        """
        return self.validator.iter_errors(data)


class EngineStateValidator(ContractValidator):
    """Валидатор для engine_state контракта."""

    def __init__(self):
        super().__init__("engine_state")


class TransferReceiptValidator(ContractValidator):
    """Валидатор для transfer_receipt контракта."""

    def __init__(self):
        super().__init__("transfer_receipt")


# Валидаторы для горячего пути (снапшоты и receipts каждой операции)
_ENGINE_STATE_VALIDATOR = EngineStateValidator()
_TRANSFER_RECEIPT_VALIDATOR = TransferReceiptValidator()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_engine_state(data: Dict[str, Any]) -> None:
    """
    Валидация engine_state данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    _ENGINE_STATE_VALIDATOR.validate(data)


def validate_transfer_receipt(data: Dict[str, Any]) -> None:
    """
    Валидация transfer_receipt данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    _TRANSFER_RECEIPT_VALIDATOR.validate(data)


__all__ = [
    "SchemaLoader",
    "ContractValidator",
    "EngineStateValidator",
    "TransferReceiptValidator",
    "ValidationError",
    "validate_engine_state",
    "validate_transfer_receipt",
]
