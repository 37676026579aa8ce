"""
EngineState — Модели состояния движка для внешней инспекции

Immutable Pydantic модели, представляющие наблюдаемое состояние:
- RateWindowState: окно частоты сделок одного аккаунта
- FeeBuckets: четыре накопителя комиссий
- EngineStateSnapshot: полный снапшот (last_fee, buckets, окна, лимиты)

Полная совместимость с JSON Schema (contracts/schema/engine_state.json).
"""

from pydantic import BaseModel, Field

from .units import StaticLimits


# =============================================================================
# RATE WINDOW
# =============================================================================


class RateWindowState(BaseModel):
    """
    Состояние rolling window одного аккаунта.

    count имеет смысл только относительно window_start: если
    now - window_start >= window_seconds, аккаунт считается свободным,
    даже если count физически ещё не сброшен.

    Для аккаунта без сделок используется нулевое значение RateWindowState().
    """

    window_start: int = Field(default=0, ge=0, description="Начало окна (Unix seconds)")
    count: int = Field(default=0, ge=0, description="Сделок в окне")

    model_config = {"frozen": True}

    def is_expired(self, now: int, window_seconds: int) -> bool:
        """True если окно истекло к моменту now."""
        return now - self.window_start >= window_seconds


# =============================================================================
# FEE BUCKETS
# =============================================================================


class FeeBuckets(BaseModel):
    """
    Накопители комиссий (marketing/liquidity/development/burn).

    Монотонно возрастают. Только учёт: никакие средства через
    эту модель не перемещаются.
    """

    marketing: int = Field(default=0, ge=0, description="Накоплено на marketing")
    liquidity: int = Field(default=0, ge=0, description="Накоплено на liquidity")
    development: int = Field(default=0, ge=0, description="Накоплено на development")
    burn: int = Field(default=0, ge=0, description="Накоплено на burn")

    model_config = {"frozen": True}

    @property
    def total(self) -> int:
        """Сумма всех накопителей."""
        return self.marketing + self.liquidity + self.development + self.burn

    def as_tuple(self) -> tuple[int, int, int, int]:
        """(marketing, liquidity, development, burn)"""
        return (self.marketing, self.liquidity, self.development, self.burn)


# =============================================================================
# ENGINE STATE SNAPSHOT
# =============================================================================


class EngineStateSnapshot(BaseModel):
    """
    Снапшот наблюдаемого состояния движка.

    Immutable модель (frozen=True). Содержит:
    - Метаданные снапшота (schema_version, ts)
    - Статические лимиты
    - Последнюю вычисленную комиссию
    - Накопители комиссий
    - Окна частоты сделок по аккаунтам
    """

    schema_version: str = Field(
        ..., pattern="^1$", description="Версия схемы для tracking совместимости"
    )
    ts: int = Field(..., ge=0, description="Timestamp снапшота (Unix seconds)")

    static_limits: StaticLimits = Field(..., description="Статические лимиты")
    total_supply: int = Field(..., ge=0, description="Текущий total supply ledger")
    last_fee: int = Field(..., ge=0, description="Последняя вычисленная комиссия")
    fee_buckets: FeeBuckets = Field(..., description="Накопители комиссий")
    rate_windows: dict[str, RateWindowState] = Field(
        default_factory=dict, description="Окна частоты сделок по аккаунтам"
    )

    model_config = {"frozen": True}
