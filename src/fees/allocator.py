"""FeeAllocator — расчёт комиссии по контексту и учёт по накопителям.

Комиссии (floor):
- BUY: amount * 5 / 100
- SELL: amount * 8 / 100
- PEER_TRANSFER: amount * 2 / 100
- MINT_OR_BURN / EXEMPT: 0

Распределение (каждая доля считается независимо через floor):
- marketing 40%, liquidity 30%, development 20%, burn 10%

Сумма долей может быть меньше комиссии (потеря < 4 единиц на allocation).
Allocator только ведёт учёт: средства не перемещаются. Проверки
exemption здесь нет, единственный источник exemption — реестр,
который читает оркестратор.
"""

from dataclasses import dataclass
from typing import Final, Optional

from src.core.domain.engine_state import FeeBuckets
from src.core.domain.transfer import TransferContext
from src.core.math.integer_math import PCT_DENOMINATOR, pct_floor, validate_amount, validate_pct


# =============================================================================
# CONSTANTS
# =============================================================================

BUY_FEE_PCT: Final[int] = 5
SELL_FEE_PCT: Final[int] = 8
TRANSFER_FEE_PCT: Final[int] = 2

MARKETING_PCT: Final[int] = 40
LIQUIDITY_PCT: Final[int] = 30
DEVELOPMENT_PCT: Final[int] = 20
BURN_PCT: Final[int] = 10


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class FeeConfig:
    """Конфигурация ставок и долей.

    Ставки статичны на всё время жизни движка.
    """

    buy_fee_pct: int = BUY_FEE_PCT
    sell_fee_pct: int = SELL_FEE_PCT
    transfer_fee_pct: int = TRANSFER_FEE_PCT

    marketing_pct: int = MARKETING_PCT
    liquidity_pct: int = LIQUIDITY_PCT
    development_pct: int = DEVELOPMENT_PCT
    burn_pct: int = BURN_PCT

    def __post_init__(self) -> None:
        for name in (
            "buy_fee_pct",
            "sell_fee_pct",
            "transfer_fee_pct",
            "marketing_pct",
            "liquidity_pct",
            "development_pct",
            "burn_pct",
        ):
            validate_pct(getattr(self, name), name)
        split = self.marketing_pct + self.liquidity_pct + self.development_pct + self.burn_pct
        if split != PCT_DENOMINATOR:
            raise ValueError(f"bucket split must sum to {PCT_DENOMINATOR}, got {split}")


# =============================================================================
# ALLOCATOR
# =============================================================================


class FeeAllocator:
    """Расчёт комиссии и четырёхсторонний пропорциональный накопитель."""

    def __init__(self, config: Optional[FeeConfig] = None):
        self.config = config or FeeConfig()
        self._buckets = FeeBuckets()

    @property
    def buckets(self) -> FeeBuckets:
        return self._buckets

    def fee_for_context(self, amount: int, context: TransferContext) -> int:
        """
        Комиссия для контекста (чистая функция).

        Args:
            amount: Сумма перевода
            context: Контекст перевода

        Returns:
            Комиссия (0 для MINT_OR_BURN и EXEMPT)

        Examples:
            >>> FeeAllocator().fee_for_context(9000, TransferContext.BUY)
            450
        """
        validate_amount(amount)
        if context == TransferContext.BUY:
            return pct_floor(amount, self.config.buy_fee_pct)
        if context == TransferContext.SELL:
            return pct_floor(amount, self.config.sell_fee_pct)
        if context == TransferContext.PEER_TRANSFER:
            return pct_floor(amount, self.config.transfer_fee_pct)
        return 0

    def split(self, fee_amount: int) -> FeeBuckets:
        """Доли одной комиссии без изменения накопителей."""
        validate_amount(fee_amount, "fee_amount")
        return FeeBuckets(
            marketing=pct_floor(fee_amount, self.config.marketing_pct),
            liquidity=pct_floor(fee_amount, self.config.liquidity_pct),
            development=pct_floor(fee_amount, self.config.development_pct),
            burn=pct_floor(fee_amount, self.config.burn_pct),
        )

    def allocate(self, fee_amount: int) -> FeeBuckets:
        """
        Добавление долей комиссии к накопителям.

        Returns:
            Обновлённые накопительные итоги (marketing, liquidity, development, burn)
        """
        part = self.split(fee_amount)
        current = self._buckets
        self._buckets = FeeBuckets(
            marketing=current.marketing + part.marketing,
            liquidity=current.liquidity + part.liquidity,
            development=current.development + part.development,
            burn=current.burn + part.burn,
        )
        return self._buckets

    def restore(self, buckets: FeeBuckets) -> None:
        """Восстановление накопителей при откате операции."""
        self._buckets = buckets
