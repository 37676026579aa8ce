"""
Integer Math — целочисленные примитивы для сумм и процентов

Модуль обеспечивает детерминированную арифметику над суммами в базовых единицах:
- Процентная доля с округлением вниз (floor division)
- Валидация сумм (int, не bool, >= 0)
- Валидация процентов (0..100)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Float никогда не участвует в расчёте сумм и комиссий
2. pct_floor(amount, pct) <= amount для любого pct <= 100
3. Все операции детерминированы и воспроизводимы
"""

from typing import Final

# =============================================================================
# CONSTANTS
# =============================================================================

# Знаменатель для процентных долей (5 → 5/100)
PCT_DENOMINATOR: Final[int] = 100


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_amount(value: int, name: str = "amount") -> int:
    """
    Проверка суммы в базовых единицах.

    Args:
        value: Сумма для проверки
        name: Имя параметра для сообщения об ошибке

    Returns:
        value без изменений

    Raises:
        TypeError: если value не int (bool тоже отклоняется)
        ValueError: если value < 0

    Examples:
        >>> validate_amount(100)
        100
        >>> validate_amount(-1)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ValueError: amount must be non-negative, got -1
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def validate_pct(value: int, name: str = "pct") -> int:
    """
    Проверка процентной ставки (целое число в диапазоне [0, 100]).

    Raises:
        TypeError: если value не int
        ValueError: если value вне [0, PCT_DENOMINATOR]
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not (0 <= value <= PCT_DENOMINATOR):
        raise ValueError(f"{name} must be in [0, {PCT_DENOMINATOR}], got {value}")
    return value


# =============================================================================
# ПРОЦЕНТНЫЕ ДОЛИ
# =============================================================================


def pct_floor(amount: int, pct: int, denominator: int = PCT_DENOMINATOR) -> int:
    """
    Процентная доля суммы с округлением вниз.

    Формула: floor(amount * pct / denominator)

    Умножение выполняется до деления, поэтому для малых сумм
    результат может быть 0 (например, 2% от 49 = 0).

    Args:
        amount: Сумма в базовых единицах (>= 0)
        pct: Процент (0..denominator)
        denominator: Знаменатель (default: 100)

    Returns:
        Доля суммы (int)

    Examples:
        >>> pct_floor(9000, 5)
        450
        >>> pct_floor(49, 2)
        0
        >>> pct_floor(1_000_000, 1)
        10000
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    return amount * pct // denominator


def split_shortfall(total: int, parts: tuple[int, ...]) -> int:
    """
    Потеря на округлении при независимом разбиении суммы на доли.

    Returns:
        total - sum(parts); всегда >= 0 для долей, посчитанных через pct_floor
    """
    return total - sum(parts)
