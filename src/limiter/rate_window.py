"""RateWindowLimiter — лимиты размера сделки, баланса и частоты сделок.

Три проверки:
- is_trade_allowed(amount): amount <= max_trade_amount (статический конфиг)
- is_balance_below_threshold(account): balance < max_account_balance (читает ledger)
- can_trade(account, now): окно истекло ИЛИ count < max_trades_per_window

Rolling window:
- Каждая записанная сделка обновляет window_start = now
- Окно истекает только после полного периода БЕЗ сделок
- Активный аккаунт никогда не сбрасывается естественно, но ограничен
  count-лимитом при допуске

record_trade по умолчанию разрешён любому вызывающему (воспроизводимое
поведение: сторонний вызов может исчерпать квоту чужого аккаунта).
При restrict_recorder=True записывать может только владелец capability,
выданной через bind_recorder().
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from src.core.domain.engine_state import RateWindowState
from src.core.domain.units import (
    MAX_BALANCE_PCT,
    MAX_TRADE_PCT,
    MAX_TRADES_PER_WINDOW,
    SECONDS_PER_DAY,
    StaticLimits,
)
from src.core.math.integer_math import validate_amount, validate_pct
from src.ledger.adapter import LedgerAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class LimiterConfig:
    """Конфигурация RateWindowLimiter.

    Фиксируется при создании и не меняется за время жизни движка.
    """

    max_trade_pct: int = MAX_TRADE_PCT
    max_balance_pct: int = MAX_BALANCE_PCT
    window_seconds: int = SECONDS_PER_DAY
    max_trades_per_window: int = MAX_TRADES_PER_WINDOW

    # False: record_trade доступен любому вызывающему
    restrict_recorder: bool = False

    def __post_init__(self) -> None:
        validate_pct(self.max_trade_pct, "max_trade_pct")
        validate_pct(self.max_balance_pct, "max_balance_pct")
        if self.window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {self.window_seconds}")
        if self.max_trades_per_window <= 0:
            raise ValueError(
                f"max_trades_per_window must be positive, got {self.max_trades_per_window}"
            )


class UnauthorizedRecorder(PermissionError):
    """Запись сделки без capability в restrict_recorder режиме."""
    pass


class RecorderCapability:
    """Непрозрачный токен права на запись сделок."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<RecorderCapability>"


# =============================================================================
# LIMITER
# =============================================================================


class RateWindowLimiter:
    """Per-account лимиты сделок и rolling window.

    Состояние окна создаётся неявно (нулевое) при первом обращении
    и никогда не удаляется.
    """

    def __init__(
        self,
        ledger: LedgerAdapter,
        config: Optional[LimiterConfig] = None,
        static_limits: Optional[StaticLimits] = None,
    ):
        """
        Args:
            ledger: источник балансов для проверки wallet cap
            config: конфигурация (default: LimiterConfig())
            static_limits: готовые лимиты (default: из ledger.total_supply() на момент создания)
        """
        self.ledger = ledger
        self.config = config or LimiterConfig()
        self.static_limits = static_limits or StaticLimits.from_total_supply(
            ledger.total_supply(),
            max_trade_pct=self.config.max_trade_pct,
            max_balance_pct=self.config.max_balance_pct,
        )
        self._windows: Dict[str, RateWindowState] = {}
        self._recorder: Optional[RecorderCapability] = None

    @property
    def max_trade_amount(self) -> int:
        return self.static_limits.max_trade_amount

    @property
    def max_account_balance(self) -> int:
        return self.static_limits.max_account_balance

    @property
    def recorder_bound(self) -> bool:
        """True если capability на запись сделок уже выдана."""
        return self._recorder is not None

    # -------------------------------------------------------------------------
    # Запросы допуска
    # -------------------------------------------------------------------------

    def is_trade_allowed(self, amount: int) -> bool:
        return amount <= self.static_limits.max_trade_amount

    def is_balance_below_threshold(self, account: str) -> bool:
        return self.ledger.balance_of(account) < self.static_limits.max_account_balance

    def can_trade(self, account: str, now: int) -> bool:
        """True если окно истекло, иначе count < max_trades_per_window.

        Истёкшее окно даёт допуск даже если count физически не сброшен.
        """
        state = self.window_state(account)
        if state.is_expired(now, self.config.window_seconds):
            return True
        return state.count < self.config.max_trades_per_window

    # -------------------------------------------------------------------------
    # Запись сделок
    # -------------------------------------------------------------------------

    def bind_recorder(self) -> RecorderCapability:
        """Выдача единственной capability на запись сделок.

        Raises:
            RuntimeError: если capability уже выдана
        """
        if self._recorder is not None:
            raise RuntimeError("Recorder capability already bound")
        self._recorder = RecorderCapability()
        return self._recorder

    def record_trade(
        self,
        account: str,
        now: int,
        capability: Optional[RecorderCapability] = None,
    ) -> RateWindowState:
        """Запись завершённой сделки.

        1. Если окно истекло: count = 0, window_start = now
        2. count += 1
        3. window_start = now (всегда)

        Returns:
            Новое состояние окна

        Raises:
            UnauthorizedRecorder: restrict_recorder и capability не совпадает
        """
        self._check_capability(capability)
        validate_amount(now, "now")

        state = self.window_state(account)
        count = state.count
        if state.is_expired(now, self.config.window_seconds):
            count = 0

        new_state = RateWindowState(window_start=now, count=count + 1)
        self._windows[account] = new_state

        if capability is None or capability is not self._recorder:
            logger.debug("trade recorded for %s by external caller", account)
        return new_state

    # -------------------------------------------------------------------------
    # Инспекция и откат
    # -------------------------------------------------------------------------

    def window_state(self, account: str) -> RateWindowState:
        return self._windows.get(account, RateWindowState())

    def peek_window(self, account: str) -> Optional[RateWindowState]:
        """Сырое состояние (None если аккаунт ещё не встречался)."""
        return self._windows.get(account)

    def restore_window(
        self,
        account: str,
        state: Optional[RateWindowState],
        capability: Optional[RecorderCapability] = None,
    ) -> None:
        """Восстановление состояния окна при откате операции."""
        self._check_capability(capability)
        if state is None:
            self._windows.pop(account, None)
        else:
            self._windows[account] = state

    def windows(self) -> Dict[str, RateWindowState]:
        return dict(self._windows)

    def _check_capability(self, capability: Optional[RecorderCapability]) -> None:
        if not self.config.restrict_recorder:
            return
        if self._recorder is None or capability is not self._recorder:
            logger.warning("rate window mutation rejected: missing recorder capability")
            raise UnauthorizedRecorder("Rate window mutation requires the bound recorder capability")
