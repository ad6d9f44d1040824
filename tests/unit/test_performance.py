"""
Tests for time-weighted, money-weighted and rolling returns

Checked invariants:
1. TWR removes external flows, so flow timing never changes it
2. MWR is the annualized rate that zeroes the NPV of dated flows
3. Rolling windows are compounded, annualized and reported oldest first
4. Every failure comes back as Err(PerformanceError), never raised
"""

import logging
from datetime import date
from decimal import Decimal

import pytest

from src.cache.result_cache import ResultCache, cache_key
from src.core.result import Err, Ok, PerformanceError
from src.portfolio.performance import (
    CashFlow,
    MonthlyReturn,
    RollingReturn,
    ValuationPoint,
    analyze_rolling_returns,
    calculate_money_weighted_return,
    calculate_rolling_returns,
    calculate_time_weighted_return,
)


def monthly(returns, start_year=2023):
    """MonthlyReturn rows on the first of consecutive months."""
    return [
        MonthlyReturn(date=date(start_year + i // 12, i % 12 + 1, 1), return_pct=Decimal(str(r)))
        for i, r in enumerate(returns)
    ]


def rolling(*values):
    return [
        RollingReturn(
            period_start=date(2023, i + 1, 1),
            period_end=date(2024, i + 1, 1),
            annualized_return=Decimal(str(v)),
        )
        for i, v in enumerate(values)
    ]


# 10% then 20% market growth, with a 500 deposit mid-year
VALUATIONS = [
    {"date": "2024-01-01", "value": "1000"},
    {"date": "2024-06-30", "value": "1600", "cash_flow": "500"},
    {"date": "2024-12-31", "value": "1920"},
]


# =============================================================================
# TIME-WEIGHTED RETURN
# =============================================================================


class TestTimeWeightedReturn:
    def test_deposit_removed_from_growth(self):
        assert calculate_time_weighted_return(VALUATIONS) == Ok(Decimal("32"))

    def test_flow_timing_does_not_matter(self):
        no_flows = [
            ValuationPoint(date=date(2024, 1, 1), value=Decimal("1000")),
            ValuationPoint(date=date(2024, 6, 30), value=Decimal("1100")),
            ValuationPoint(date=date(2024, 12, 31), value=Decimal("1320")),
        ]
        withdrawal = [
            ValuationPoint(date=date(2024, 1, 1), value=Decimal("1000")),
            ValuationPoint(date=date(2024, 6, 30), value=Decimal("600"), cash_flow=Decimal("-500")),
            ValuationPoint(date=date(2024, 12, 31), value=Decimal("720")),
        ]

        assert calculate_time_weighted_return(no_flows).value == Decimal("32")
        assert calculate_time_weighted_return(withdrawal).value == Decimal("32")

    def test_loss(self):
        result = calculate_time_weighted_return(
            [{"date": "2024-01-01", "value": "1000"}, {"date": "2024-12-31", "value": "800"}]
        )
        assert result == Ok(Decimal("-20"))

    def test_points_sorted_by_date(self):
        assert calculate_time_weighted_return(list(reversed(VALUATIONS))) == Ok(Decimal("32"))

    def test_flow_on_first_point_is_part_of_start_value(self):
        points = [
            {"date": "2024-01-01", "value": "1000", "cash_flow": "1000"},
            {"date": "2024-12-31", "value": "1100"},
        ]
        assert calculate_time_weighted_return(points) == Ok(Decimal("10"))

    @pytest.mark.parametrize("points", [[], VALUATIONS[:1]])
    def test_insufficient_data(self, points):
        assert calculate_time_weighted_return(points) == Err(PerformanceError.INSUFFICIENT_DATA)

    def test_zero_start_value(self):
        points = [
            {"date": "2024-01-01", "value": "0"},
            {"date": "2024-12-31", "value": "100", "cash_flow": "100"},
        ]
        assert calculate_time_weighted_return(points) == Err(PerformanceError.ZERO_START_VALUE)

    @pytest.mark.parametrize(
        "points",
        [
            [{"date": "2024-01-01"}, {"date": "2024-12-31", "value": "1"}],
            [{"date": "2024-01-01", "value": "-1"}, {"date": "2024-12-31", "value": "1"}],
            [{"date": "not-a-date", "value": "1"}, {"date": "2024-12-31", "value": "1"}],
            {"date": "2024-01-01", "value": "1"},
            None,
        ],
    )
    def test_invalid_valuation_data(self, points):
        assert calculate_time_weighted_return(points) == Err(PerformanceError.INVALID_VALUATION_DATA)

    def test_failure_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            calculate_time_weighted_return([])
        assert "TWR failed: insufficient_data" in caplog.text


# =============================================================================
# MONEY-WEIGHTED RETURN
# =============================================================================


class TestMoneyWeightedReturn:
    def test_single_year(self):
        flows = [
            CashFlow(date=date(2023, 1, 1), amount=Decimal("-1000")),
            CashFlow(date=date(2024, 1, 1), amount=Decimal("1100")),
        ]
        assert calculate_money_weighted_return(flows) == Ok(Decimal("10.0000"))

    def test_two_contributions(self):
        # -1000 - 1000/1.1 + 2310/1.21 = 0
        flows = [
            {"date": "2023-01-01", "amount": "-1000"},
            {"date": "2024-01-01", "amount": "-1000"},
            {"date": "2024-12-31", "amount": "2310"},
        ]
        assert calculate_money_weighted_return(flows) == Ok(Decimal("10.0000"))

    def test_loss(self):
        flows = [
            {"date": "2023-01-01", "amount": "-1000"},
            {"date": "2024-01-01", "amount": "900"},
        ]
        assert calculate_money_weighted_return(flows) == Ok(Decimal("-10.0000"))

    def test_late_contribution_raises_rate_above_simple_return(self):
        # Simple return is 17000 / 15000 − 1 = 13.33%; the mid-year 5000 was
        # invested for only half the period
        flows = [
            {"date": "2023-01-01", "amount": "-10000"},
            {"date": "2023-07-02", "amount": "-5000"},
            {"date": "2024-01-01", "amount": "17000"},
        ]
        mwr = calculate_money_weighted_return(flows).value
        assert Decimal("16.0") < mwr < Decimal("16.3")

    def test_flow_order_irrelevant(self):
        flows = [
            {"date": "2024-01-01", "amount": "1100"},
            {"date": "2023-01-01", "amount": "-1000"},
        ]
        assert calculate_money_weighted_return(flows) == Ok(Decimal("10.0000"))

    def test_empty(self):
        assert calculate_money_weighted_return([]) == Err(PerformanceError.EMPTY_CASH_FLOW_LIST)

    @pytest.mark.parametrize(
        "flows",
        [
            [{"date": "2023-01-01"}],
            [{"amount": "-1000"}],
            [{"date": "2023-01-01", "amount": "lots"}],
            "not-a-list",
        ],
    )
    def test_invalid_structure(self, flows):
        assert calculate_money_weighted_return(flows) == Err(PerformanceError.INVALID_CASH_FLOW_STRUCTURE)

    def test_no_contribution(self):
        flows = [{"date": "2023-01-01", "amount": "1000"}]
        assert calculate_money_weighted_return(flows) == Err(PerformanceError.ZERO_INITIAL_INVESTMENT)

    @pytest.mark.parametrize("final", ["0", "-500"])
    def test_nothing_returned(self, final):
        flows = [
            {"date": "2023-01-01", "amount": "-1000"},
            {"date": "2024-01-01", "amount": final},
        ]
        assert calculate_money_weighted_return(flows) == Err(PerformanceError.NEGATIVE_IRR)

    def test_same_day_flows_have_no_rate(self):
        flows = [
            {"date": "2023-01-01", "amount": "-1000"},
            {"date": "2023-01-01", "amount": "1100"},
        ]
        assert calculate_money_weighted_return(flows) == Err(PerformanceError.IRR_NOT_FOUND)

    def test_rate_beyond_bracket(self):
        flows = [
            {"date": "2023-01-01", "amount": "-1"},
            {"date": "2023-01-02", "amount": "1000000000"},
        ]
        assert calculate_money_weighted_return(flows) == Err(PerformanceError.IRR_NOT_FOUND)


# =============================================================================
# ROLLING RETURNS
# =============================================================================


class TestRollingReturns:
    def test_single_twelve_month_window(self):
        result = calculate_rolling_returns(monthly([1] * 12), 12)

        assert isinstance(result, Ok)
        (window,) = result.value
        assert window.period_start == date(2023, 1, 1)
        assert window.period_end == date(2023, 12, 1)
        # 1.01^12 − 1
        assert window.annualized_return == Decimal("12.6825")

    def test_constant_returns_annualize_equally(self):
        windows = calculate_rolling_returns(monthly([1] * 13), 3).value

        assert len(windows) == 11
        assert {w.annualized_return for w in windows} == {Decimal("12.6825")}
        assert windows[0].period_start == date(2023, 1, 1)
        assert windows[-1].period_end == date(2024, 1, 1)

    def test_windows_are_compounded(self):
        # 1.1 × 0.9 = 0.99 over two months; 0.99^6 − 1 = −5.85198…%
        (window,) = calculate_rolling_returns(monthly([10, -10]), 2).value
        assert window.annualized_return == Decimal("-5.8520")

    def test_flat_months(self):
        windows = calculate_rolling_returns(monthly([0, 0, 0]), 1).value
        assert [w.annualized_return for w in windows] == [Decimal("0")] * 3

    def test_accepts_return_key(self):
        rows = [{"date": f"2023-0{m}-01", "return": "1"} for m in range(1, 4)]
        windows = calculate_rolling_returns(rows, 3).value
        assert windows[0].annualized_return == Decimal("12.6825")

    def test_oldest_window_first(self):
        windows = calculate_rolling_returns(list(reversed(monthly([1, 2, 3, 4]))), 2).value
        assert [w.period_start for w in windows] == [date(2023, 1, 1), date(2023, 2, 1), date(2023, 3, 1)]

    @pytest.mark.parametrize("period", [0, -3, True, "12", 1.5])
    def test_invalid_period(self, period):
        assert calculate_rolling_returns(monthly([1] * 12), period) == Err(PerformanceError.INVALID_PERIOD)

    def test_insufficient_periods(self):
        assert calculate_rolling_returns(monthly([1] * 5), 6) == Err(PerformanceError.INSUFFICIENT_PERIODS)

    @pytest.mark.parametrize(
        "rows",
        [
            [{"date": "2023-01-01", "return": "-150"}],
            [{"return": "1"}],
            42,
        ],
    )
    def test_invalid_return_data(self, rows):
        assert calculate_rolling_returns(rows, 1) == Err(PerformanceError.INVALID_RETURN_DATA)


class TestRollingReturnAnalysis:
    def test_spread(self):
        analysis = analyze_rolling_returns(rolling(10, 30, 20)).value

        assert analysis.best_period.annualized_return == Decimal("30")
        assert analysis.worst_period.annualized_return == Decimal("10")
        assert analysis.average_return == Decimal("20")
        # sqrt((100 + 100 + 0) / 2)
        assert analysis.volatility == Decimal("10")
        assert analysis.period_count == 3

    def test_single_window_has_no_volatility(self):
        analysis = analyze_rolling_returns(rolling(7.5)).value
        assert analysis.volatility == Decimal("0")
        assert analysis.best_period == analysis.worst_period

    def test_ties_go_to_earliest(self):
        periods = rolling(10, 10)
        analysis = analyze_rolling_returns(periods).value
        assert analysis.best_period is periods[0]
        assert analysis.worst_period is periods[0]

    def test_empty(self):
        assert analyze_rolling_returns([]) == Err(PerformanceError.INSUFFICIENT_PERIODS)

    def test_from_calculated_windows(self):
        windows = calculate_rolling_returns(monthly([1] * 14), 12).value
        analysis = analyze_rolling_returns(windows).value
        assert analysis.period_count == 3
        assert analysis.volatility == Decimal("0")


# =============================================================================
# CACHING
# =============================================================================


class TestCachedPerformance:
    def test_twr_cached_per_scope(self):
        cache = ResultCache()
        calls = []

        def compute():
            calls.append(1)
            return calculate_time_weighted_return(VALUATIONS)

        key = cache_key("twr", "acct-1", 12)
        first = cache.get_or_compute(key, compute)
        second = cache.get_or_compute(key, compute)

        assert first == second == Ok(Decimal("32"))
        assert len(calls) == 1

        cache.invalidate_scope("acct-1")
        cache.get_or_compute(key, compute)
        assert len(calls) == 2
