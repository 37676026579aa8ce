"""
Units — статические лимиты и системные константы

Единственный допустимый способ вычисления лимитов из total supply:
- max_trade_amount (1% от supply на момент создания)
- max_account_balance (2% от supply на момент создания)

Лимиты вычисляются ОДИН раз и не пересчитываются при последующем
mint/burn. Для пересчёта нужно создать новый движок.
"""

from typing import Final

from pydantic import BaseModel, Field

from src.core.math.integer_math import pct_floor, validate_amount, validate_pct


# =============================================================================
# СИСТЕМНЫЕ АККАУНТЫ
# =============================================================================

# Null account: источник при mint, получатель при burn
NULL_ACCOUNT: Final[str] = "0x0000000000000000000000000000000000000000"

# Аккаунт сбора комиссий по умолчанию
FEE_COLLECTOR_ACCOUNT: Final[str] = "fee_collector"


# =============================================================================
# ЛИМИТЫ ПО УМОЛЧАНИЮ
# =============================================================================

# Размер rolling window (секунды)
SECONDS_PER_DAY: Final[int] = 86_400

# Максимум записанных сделок в окне
MAX_TRADES_PER_WINDOW: Final[int] = 20

# Доля supply для лимита одной сделки (%)
MAX_TRADE_PCT: Final[int] = 1

# Доля supply для лимита баланса аккаунта (%)
MAX_BALANCE_PCT: Final[int] = 2


# =============================================================================
# STATIC LIMITS
# =============================================================================


class StaticLimits(BaseModel):
    """
    Статические лимиты движка.

    Immutable модель (frozen=True). Значения фиксированы на всё время
    жизни движка независимо от изменений supply.
    """

    max_trade_amount: int = Field(..., ge=0, description="Лимит одной сделки (base units)")
    max_account_balance: int = Field(
        ..., ge=0, description="Лимит баланса аккаунта (base units)"
    )

    model_config = {"frozen": True}

    @classmethod
    def from_total_supply(
        cls,
        total_supply: int,
        max_trade_pct: int = MAX_TRADE_PCT,
        max_balance_pct: int = MAX_BALANCE_PCT,
    ) -> "StaticLimits":
        """
        Вычисление лимитов из total supply.

        Args:
            total_supply: Total supply на момент создания
            max_trade_pct: Процент supply для лимита сделки (default 1)
            max_balance_pct: Процент supply для лимита баланса (default 2)

        Returns:
            StaticLimits

        Examples:
            >>> StaticLimits.from_total_supply(1_000_000)
            StaticLimits(max_trade_amount=10000, max_account_balance=20000)
        """
        validate_amount(total_supply, "total_supply")
        validate_pct(max_trade_pct, "max_trade_pct")
        validate_pct(max_balance_pct, "max_balance_pct")
        return cls(
            max_trade_amount=pct_floor(total_supply, max_trade_pct),
            max_account_balance=pct_floor(total_supply, max_balance_pct),
        )
