"""Тесты для RateWindowLimiter.

Coverage:
- is_trade_allowed / is_balance_below_threshold (граница включительно/исключительно)
- can_trade: истечение окна на чтении без физического сброса
- record_trade: сброс, инкремент, обновление window_start
- Семантика окна 86399 / 86400
- Recorder capability (permissive / restricted)
- LimiterConfig валидация
"""

import pytest

from src.core.domain import RateWindowState, StaticLimits
from src.ledger import InMemoryLedger
from src.limiter import LimiterConfig, RateWindowLimiter, UnauthorizedRecorder


T0 = 1_700_000_000
DAY = 86_400


@pytest.fixture
def ledger():
    return InMemoryLedger({"whale": 1_000_000})


@pytest.fixture
def limiter(ledger):
    return RateWindowLimiter(ledger)


# =============================================================================
# СТАТИЧЕСКИЕ ПРОВЕРКИ
# =============================================================================


class TestStaticChecks:

    def test_limits_from_supply_at_construction(self, limiter):
        assert limiter.static_limits == StaticLimits(
            max_trade_amount=10_000, max_account_balance=20_000
        )

    def test_limits_fixed_after_supply_change(self, ledger, limiter):
        ledger.move("0x0000000000000000000000000000000000000000", "whale", 9_000_000)
        assert limiter.max_trade_amount == 10_000
        assert limiter.max_account_balance == 20_000

    def test_explicit_static_limits(self, ledger):
        limits = StaticLimits(max_trade_amount=5, max_account_balance=7)
        limiter = RateWindowLimiter(ledger, static_limits=limits)
        assert limiter.is_trade_allowed(5)
        assert not limiter.is_trade_allowed(6)

    def test_trade_cap_inclusive(self, limiter):
        assert limiter.is_trade_allowed(0)
        assert limiter.is_trade_allowed(10_000)
        assert not limiter.is_trade_allowed(10_001)

    def test_balance_threshold_exclusive(self, ledger, limiter):
        ledger.move("whale", "alice", 19_999)
        assert limiter.is_balance_below_threshold("alice")

        ledger.move("whale", "alice", 1)
        assert not limiter.is_balance_below_threshold("alice")

    def test_unknown_account_below_threshold(self, limiter):
        assert limiter.is_balance_below_threshold("nobody")


# =============================================================================
# ОКНО ЧАСТОТЫ
# =============================================================================


class TestRateWindow:

    def test_fresh_account_can_trade(self, limiter):
        assert limiter.can_trade("alice", T0)
        assert limiter.window_state("alice") == RateWindowState()
        assert limiter.peek_window("alice") is None

    def test_record_first_trade(self, limiter):
        state = limiter.record_trade("alice", T0)
        assert state == RateWindowState(window_start=T0, count=1)

    def test_every_trade_refreshes_window_start(self, limiter):
        limiter.record_trade("alice", T0)
        limiter.record_trade("alice", T0 + 100)
        assert limiter.window_state("alice") == RateWindowState(window_start=T0 + 100, count=2)

    def test_twentieth_trade_admitted_at_window_edge(self, limiter):
        """count=19, start=T0: сделка в T0+86399 допускается, count → 20."""
        limiter.restore_window("alice", RateWindowState(window_start=T0, count=19))

        assert limiter.can_trade("alice", T0 + DAY - 1)
        limiter.record_trade("alice", T0 + DAY - 1)
        assert limiter.window_state("alice").count == 20

        assert not limiter.can_trade("alice", T0 + DAY - 1)

    def test_expired_window_resets_on_record(self, limiter):
        """count=19, start=T0: сделка в T0+86400 сбрасывает count в 1."""
        limiter.restore_window("alice", RateWindowState(window_start=T0, count=19))

        assert limiter.can_trade("alice", T0 + DAY)
        state = limiter.record_trade("alice", T0 + DAY)
        assert state == RateWindowState(window_start=T0 + DAY, count=1)

    def test_expired_window_readable_without_physical_reset(self, limiter):
        limiter.restore_window("alice", RateWindowState(window_start=T0, count=20))

        assert not limiter.can_trade("alice", T0 + DAY - 1)
        assert limiter.can_trade("alice", T0 + DAY)
        # Чтение не мутирует
        assert limiter.window_state("alice").count == 20

    def test_active_account_never_resets_naturally(self, limiter):
        """Сделки с интервалом < суток продлевают окно бесконечно."""
        now = T0
        for _ in range(20):
            limiter.record_trade("alice", now)
            now += DAY - 1
        assert limiter.window_state("alice").count == 20
        assert not limiter.can_trade("alice", now - (DAY - 1) + 1)

    def test_custom_window_config(self, ledger):
        limiter = RateWindowLimiter(
            ledger, config=LimiterConfig(window_seconds=60, max_trades_per_window=2)
        )
        limiter.record_trade("alice", T0)
        limiter.record_trade("alice", T0 + 1)
        assert not limiter.can_trade("alice", T0 + 2)
        assert limiter.can_trade("alice", T0 + 61)

    def test_restore_none_removes_state(self, limiter):
        limiter.record_trade("alice", T0)
        limiter.restore_window("alice", None)
        assert limiter.peek_window("alice") is None


# =============================================================================
# RECORDER CAPABILITY
# =============================================================================


class TestRecorderCapability:

    def test_permissive_by_default(self, limiter):
        limiter.bind_recorder()
        limiter.record_trade("victim", T0)
        assert limiter.window_state("victim").count == 1

    def test_restricted_requires_capability(self, ledger):
        limiter = RateWindowLimiter(ledger, config=LimiterConfig(restrict_recorder=True))
        capability = limiter.bind_recorder()

        with pytest.raises(UnauthorizedRecorder):
            limiter.record_trade("victim", T0)
        with pytest.raises(UnauthorizedRecorder):
            limiter.restore_window("victim", None)

        limiter.record_trade("victim", T0, capability=capability)
        assert limiter.window_state("victim").count == 1

    def test_restricted_without_bound_capability(self, ledger):
        limiter = RateWindowLimiter(ledger, config=LimiterConfig(restrict_recorder=True))
        with pytest.raises(UnauthorizedRecorder):
            limiter.record_trade("victim", T0)

    def test_capability_bound_once(self, limiter):
        limiter.bind_recorder()
        with pytest.raises(RuntimeError):
            limiter.bind_recorder()


# =============================================================================
# CONFIG
# =============================================================================


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_trade_pct": 101},
        {"max_balance_pct": -1},
        {"window_seconds": 0},
        {"max_trades_per_window": 0},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        LimiterConfig(**kwargs)


def test_recorder_bound_flag(limiter):
    assert not limiter.recorder_bound
    limiter.bind_recorder()
    assert limiter.recorder_bound
