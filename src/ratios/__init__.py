"""Ratios — income-relative financial health ratios and age benchmarks.

- Capital, savings, mortgage and education ratios with zero-income errors
- Age-bracket targets and life stages
- Readiness score, catch-up advice and early-retirement estimate
"""

from .benchmarks import (
    CAPITAL_TARGET_BRACKETS,
    MORTGAGE_TARGET_BRACKETS,
    RatioConfig,
    accelerated_timeline,
    capital_target_for_age,
    catch_up_recommendations,
    life_stage_analysis,
    mortgage_target_for_age,
    resolve_age,
    retirement_readiness_score,
)
from .money_ratios import (
    calculate_all_ratios,
    calculate_capital_ratio,
    calculate_education_ratio,
    calculate_mortgage_ratio,
    calculate_savings_ratio,
    determine_overall_status,
    determine_status,
    get_recommendations,
)

__all__ = [
    # Benchmarks
    "CAPITAL_TARGET_BRACKETS",
    "MORTGAGE_TARGET_BRACKETS",
    "RatioConfig",
    "resolve_age",
    "capital_target_for_age",
    "mortgage_target_for_age",
    "life_stage_analysis",
    "retirement_readiness_score",
    "catch_up_recommendations",
    "accelerated_timeline",
    # Money ratios
    "calculate_capital_ratio",
    "calculate_savings_ratio",
    "calculate_mortgage_ratio",
    "calculate_education_ratio",
    "calculate_all_ratios",
    "determine_status",
    "determine_overall_status",
    "get_recommendations",
]
