"""
Tests for the domain models: TransactionRecord, Account, holdings, ratios

Checks:
1. Creation and Pydantic validation
2. Derived properties (abs quantity, gross amount, cash accounts, gap)
3. Immutability (frozen=True)
4. JSON serialization (Decimal as strings, enums as values)
5. Edge cases and invalid data
"""

import json
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.domain import (
    CASH_ACCOUNT_TYPES,
    Account,
    AccountType,
    HoldingPnL,
    HoldingState,
    MoneyRatios,
    RatioKind,
    RatioProfile,
    RatioResult,
    RatioStatus,
    ReadinessScore,
    ReadinessAssessment,
    TransactionRecord,
    TransactionType,
)


# =============================================================================
# TRANSACTION TESTS
# =============================================================================


class TestTransactionRecord:
    @pytest.fixture
    def sell(self) -> TransactionRecord:
        return TransactionRecord(
            type=TransactionType.SELL,
            quantity=Decimal("-5"),
            unit_price=Decimal("210.50"),
            fee=Decimal("1.00"),
            date=date(2024, 3, 15),
            symbol=" aapl ",
            account_id="acct-1",
        )

    def test_symbol_normalized(self, sell):
        assert sell.symbol == "AAPL"

    def test_abs_quantity_and_gross_amount(self, sell):
        assert sell.abs_quantity == Decimal("5")
        assert sell.gross_amount == Decimal("1052.50")

    def test_affects_position(self, sell):
        assert sell.affects_position()
        dividend = sell.model_copy(update={"type": TransactionType.DIVIDEND})
        assert not dividend.affects_position()

    def test_type_from_string(self):
        tx = TransactionRecord(type="buy", quantity="1", date="2024-01-02")
        assert tx.type == TransactionType.BUY
        assert tx.date == date(2024, 1, 2)
        assert tx.unit_price == Decimal("0")

    def test_frozen(self, sell):
        with pytest.raises(ValidationError):
            sell.quantity = Decimal("1")

    @pytest.mark.parametrize("field", ["unit_price", "fee"])
    def test_negative_amounts_rejected(self, field):
        with pytest.raises(ValidationError):
            TransactionRecord(type="buy", quantity="1", date=date(2024, 1, 2), **{field: "-1"})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            TransactionRecord(type="split", quantity="2", date=date(2024, 1, 2))

    def test_json_round_trip(self, sell):
        payload = json.loads(sell.model_dump_json())
        assert payload["type"] == "sell"
        assert payload["quantity"] == "-5"
        assert TransactionRecord.model_validate(payload) == sell


# =============================================================================
# ACCOUNT TESTS
# =============================================================================


class TestAccount:
    def test_defaults(self):
        account = Account(id="acct-1")
        assert account.account_type == AccountType.INVESTMENT
        assert account.is_excluded is False
        assert not account.is_cash

    @pytest.mark.parametrize("kind", sorted(CASH_ACCOUNT_TYPES, key=lambda k: k.value))
    def test_cash_types(self, kind):
        assert Account(id="a", account_type=kind).is_cash

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Account(id="")


# =============================================================================
# HOLDING TESTS
# =============================================================================


class TestHoldings:
    def test_state_defaults(self):
        state = HoldingState()
        assert state.quantity == state.total_cost == state.average_cost == Decimal("0")
        assert state.oversold is False

    def test_price_error_not_serialized(self):
        pnl = HoldingPnL(
            symbol="AAPL",
            quantity=Decimal("1"),
            current_value=Decimal("0"),
            cost_basis=Decimal("10"),
            unrealized_pnl=Decimal("-10"),
            unrealized_pnl_pct=Decimal("-100"),
            price_error="timeout",
        )
        assert pnl.price_error == "timeout"
        assert "price_error" not in pnl.model_dump()
        assert not pnl.has_price


# =============================================================================
# RATIO TESTS
# =============================================================================


class TestRatioProfile:
    def test_none_balances_become_zero(self):
        profile = RatioProfile(
            gross_annual_income=Decimal("90000"),
            mortgage_balance=None,
            student_loan_balance=None,
            primary_residence_value=None,
        )
        assert profile.mortgage_balance == Decimal("0")
        assert profile.student_loan_balance == Decimal("0")
        assert profile.primary_residence_value == Decimal("0")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"gross_annual_income": Decimal("-1")},
            {"age": -1},
            {"age": 131},
            {"birth_year": 1800},
            {"mortgage_balance": Decimal("-5")},
        ],
    )
    def test_invalid_profiles(self, overrides):
        values = {"gross_annual_income": Decimal("1")}
        values.update(overrides)
        with pytest.raises(ValidationError):
            RatioProfile(**values)


class TestMoneyRatios:
    def test_gap(self):
        result = RatioResult(current_ratio=Decimal("1.2"), target_ratio=Decimal("3.0"), status=RatioStatus.BEHIND)
        assert result.gap == Decimal("1.8")

    def test_by_kind_skips_missing(self):
        behind = RatioResult(current_ratio=Decimal("0"), target_ratio=Decimal("1"), status=RatioStatus.BEHIND)
        ratios = MoneyRatios(savings_ratio=behind, education_ratio=behind)

        assert list(ratios.by_kind()) == [RatioKind.SAVINGS, RatioKind.EDUCATION]
        assert ratios.behind() == [RatioKind.SAVINGS, RatioKind.EDUCATION]

    def test_serialization(self):
        ratios = MoneyRatios(
            capital_ratio=RatioResult(
                current_ratio=Decimal("2.5"), target_ratio=Decimal("3.0"), status=RatioStatus.BEHIND
            )
        )
        payload = ratios.model_dump(mode="json")
        assert payload["capital_ratio"] == {"current_ratio": "2.5", "target_ratio": "3.0", "status": "behind"}
        assert payload["overall_status"] == "excellent"
        assert payload["savings_ratio"] is None

    def test_readiness_score_bounds(self):
        with pytest.raises(ValidationError):
            ReadinessScore(score=101, assessment=ReadinessAssessment.ON_TRACK, years_to_retirement=0)
