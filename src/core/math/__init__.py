"""
Core math modules for the calculation engine

Exact Decimal helpers plus the float-boundary transcendental functions.
"""

# Decimal helpers
from src.core.math.decimal_helpers import (
    HUNDRED,
    ONE,
    TWELVE,
    ZERO,
    annual_to_monthly,
    average,
    clamp,
    decimal_max,
    decimal_min,
    decimal_sum,
    ensure_decimal,
    from_percentage,
    is_negative,
    is_positive,
    is_zero,
    monthly_to_annual,
    percentage_change,
    round_to,
    safe_divide,
    to_percentage,
)

# Decimal math (float path isolated here)
from src.core.math.decimal_math import (
    BINARY_SEARCH_ITERATIONS_DEFAULT,
    FLOAT_PATH_SIGNIFICANT_DIGITS,
    binary_search_nth_root,
    cagr,
    compound_growth,
    continuous_compound,
    effective_annual_rate,
    exp,
    future_value_annuity,
    ln,
    nth_root,
    power,
    present_value,
    rule_of_72,
)

__all__ = [
    # Decimal helpers: Constants
    "ZERO",
    "ONE",
    "HUNDRED",
    "TWELVE",
    # Decimal helpers: Functions
    "ensure_decimal",
    "is_positive",
    "is_negative",
    "is_zero",
    "safe_divide",
    "to_percentage",
    "from_percentage",
    "monthly_to_annual",
    "annual_to_monthly",
    "percentage_change",
    "decimal_sum",
    "average",
    "round_to",
    "decimal_max",
    "decimal_min",
    "clamp",
    # Decimal math: Constants
    "FLOAT_PATH_SIGNIFICANT_DIGITS",
    "BINARY_SEARCH_ITERATIONS_DEFAULT",
    # Decimal math: Functions
    "power",
    "nth_root",
    "binary_search_nth_root",
    "exp",
    "ln",
    "compound_growth",
    "future_value_annuity",
    "present_value",
    "continuous_compound",
    "effective_annual_rate",
    "cagr",
    "rule_of_72",
]
