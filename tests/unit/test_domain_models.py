"""
Тесты для доменных моделей: TransferRequest, TransferReceipt, RateWindowState,
FeeBuckets, EngineStateSnapshot, ошибки отказа

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Инвариант net_amount + fee == amount
3. Immutability (frozen=True)
4. Сериализацию/десериализацию JSON
5. Причины отказа и фазы wallet cap
"""

import json

import pytest
from pydantic import ValidationError

from src.core.domain import (
    EngineStateSnapshot,
    FeeBuckets,
    RateWindowState,
    RecipientAboveThreshold,
    StaticLimits,
    ThresholdPhase,
    TradeTooLarge,
    TransferContext,
    TransferFailure,
    TransferReceipt,
    TransferRejected,
    TransferRequest,
)


# =============================================================================
# TRANSFER REQUEST
# =============================================================================


class TestTransferRequest:

    def test_valid(self):
        request = TransferRequest(source="alice", destination="bob", amount=10)
        assert request.amount == 10

    def test_negative_amount(self):
        with pytest.raises(ValidationError):
            TransferRequest(source="alice", destination="bob", amount=-1)

    def test_empty_account(self):
        with pytest.raises(ValidationError):
            TransferRequest(source="", destination="bob", amount=1)

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError):
            TransferRequest(source="alice", destination="bob", amount=1.5)

    def test_frozen(self):
        request = TransferRequest(source="alice", destination="bob", amount=1)
        with pytest.raises(ValidationError):
            request.amount = 2


# =============================================================================
# TRANSFER RECEIPT
# =============================================================================


class TestTransferReceipt:

    @pytest.fixture
    def receipt_data(self):
        return {
            "context": TransferContext.BUY,
            "source": "pair",
            "destination": "carol",
            "amount": 9_000,
            "fee": 450,
            "net_amount": 8_550,
            "fee_collector": "fee_collector",
            "fee_buckets": FeeBuckets(marketing=180, liquidity=135, development=90, burn=45),
            "executed_at": 1_700_000_000,
        }

    def test_valid(self, receipt_data):
        receipt = TransferReceipt(**receipt_data)
        assert receipt.net_amount + receipt.fee == receipt.amount

    def test_net_plus_fee_must_match(self, receipt_data):
        receipt_data["net_amount"] = 8_551
        with pytest.raises(ValidationError, match="must equal amount"):
            TransferReceipt(**receipt_data)

    def test_json_roundtrip(self, receipt_data):
        receipt = TransferReceipt(**receipt_data)
        payload = json.loads(receipt.model_dump_json())
        assert payload["context"] == "BUY"
        assert TransferReceipt.model_validate(payload) == receipt


# =============================================================================
# CONTEXT / STATE
# =============================================================================


def test_fee_bearing_contexts():
    assert TransferContext.BUY.is_fee_bearing
    assert TransferContext.SELL.is_fee_bearing
    assert TransferContext.PEER_TRANSFER.is_fee_bearing
    assert not TransferContext.EXEMPT.is_fee_bearing
    assert not TransferContext.MINT_OR_BURN.is_fee_bearing


class TestRateWindowState:

    def test_default_zero(self):
        state = RateWindowState()
        assert state.window_start == 0
        assert state.count == 0

    def test_expiry_boundary(self):
        state = RateWindowState(window_start=100, count=5)
        assert not state.is_expired(100 + 86_399, 86_400)
        assert state.is_expired(100 + 86_400, 86_400)

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            RateWindowState(window_start=0, count=-1)


def test_fee_buckets_total():
    buckets = FeeBuckets(marketing=4, liquidity=3, development=2, burn=1)
    assert buckets.total == 10
    assert buckets.as_tuple() == (4, 3, 2, 1)


def test_snapshot_schema_version_pattern():
    with pytest.raises(ValidationError):
        EngineStateSnapshot(
            schema_version="2",
            ts=0,
            static_limits=StaticLimits(max_trade_amount=1, max_account_balance=2),
            total_supply=100,
            last_fee=0,
            fee_buckets=FeeBuckets(),
        )


# =============================================================================
# ERRORS
# =============================================================================


class TestErrors:

    def test_reason_and_context(self):
        exc = TradeTooLarge("too large", amount=10_001)
        assert isinstance(exc, TransferRejected)
        assert exc.reason == TransferFailure.TRADE_TOO_LARGE
        assert exc.amount == 10_001

    def test_threshold_phases_have_distinct_reasons(self):
        pre = RecipientAboveThreshold("pre", account="bob")
        post = RecipientAboveThreshold("post", account="bob", phase=ThresholdPhase.POST_CREDIT)
        assert pre.reason == TransferFailure.RECIPIENT_ABOVE_THRESHOLD
        assert post.reason == TransferFailure.RECIPIENT_ABOVE_THRESHOLD_AFTER_CREDIT
        assert pre.reason != post.reason
