"""
Ratio Benchmarks — Age-indexed targets, life stages and readiness scoring

Targets are multiples of gross annual income, stepping up with age
("Money Ratios" methodology).

CAPITAL-TO-INCOME TARGET (age < bound → target):
    <30 0.5 | <35 1.0 | <40 2.0 | <45 3.0 | <50 5.0 | <55 7.0 | <60 9.0 | <65 11.0 | else 12.0

MORTGAGE-TO-INCOME TARGET (lower is better):
    <30 2.5 | <40 2.0 | <50 1.5 | <60 1.0 | <65 0.5 | else 0

READINESS:
    score      = clamp(current_capital / target_capital × 100, 0, 100), rounded half up
    assessment = on_track ≥95 | slightly_behind ≥70 | behind ≥30 | critical
    years_to_retirement = max(retirement_age − age, 0)

ACCELERATION (capital ratio ahead of target):
    factor               = current / target
    years_ahead          = max(round((factor − 1) × 5), 0)
    early_retirement_age = max(age + 10, retirement_age − years_ahead)
"""

import logging
from dataclasses import dataclass
from datetime import date as Date
from decimal import Decimal
from typing import Final

from src.core.config import EngineSettings, get_settings
from src.core.domain.ratios import (
    AcceleratedTimeline,
    LifeStage,
    LifeStageAnalysis,
    MoneyRatios,
    RatioKind,
    RatioProfile,
    RatioStatus,
    ReadinessAssessment,
    ReadinessScore,
)
from src.core.math.decimal_helpers import HUNDRED, ONE, ZERO, clamp, round_to, safe_divide

logger = logging.getLogger(__name__)


# =============================================================================
# BRACKET TABLES
# =============================================================================

# (exclusive upper age bound, target); the final entry has no bound
CAPITAL_TARGET_BRACKETS: Final[tuple[tuple[int | None, Decimal], ...]] = (
    (30, Decimal("0.5")),
    (35, Decimal("1.0")),
    (40, Decimal("2.0")),
    (45, Decimal("3.0")),
    (50, Decimal("5.0")),
    (55, Decimal("7.0")),
    (60, Decimal("9.0")),
    (65, Decimal("11.0")),
    (None, Decimal("12.0")),
)

MORTGAGE_TARGET_BRACKETS: Final[tuple[tuple[int | None, Decimal], ...]] = (
    (30, Decimal("2.5")),
    (40, Decimal("2.0")),
    (50, Decimal("1.5")),
    (60, Decimal("1.0")),
    (65, Decimal("0.5")),
    (None, Decimal("0")),
)

READINESS_ON_TRACK: Final[int] = 95
READINESS_SLIGHTLY_BEHIND: Final[int] = 70
READINESS_BEHIND: Final[int] = 30

# Each full income multiple above target ≈ five years ahead of schedule
YEARS_PER_INCOME_MULTIPLE: Final[Decimal] = Decimal("5")
MIN_YEARS_BEFORE_EARLY_RETIREMENT: Final[int] = 10

CATCH_UP_HORIZON_YEARS: Final[int] = 15
CATCH_UP_CONTRIBUTION_RATE: Final[Decimal] = Decimal("0.05")

GENERIC_CATCH_UP_ADVICE: Final[tuple[str, ...]] = (
    "Consider reducing expenses to increase savings available",
    "Look into side income opportunities to boost savings capacity",
    "Review investment allocation for appropriate risk level",
)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class RatioConfig:
    """Targets and age defaults shared by ratio calculations."""

    retirement_age: int = 65
    default_age: int = 40
    savings_target: Decimal = Decimal("0.12")
    education_target: Decimal = Decimal("1.0")

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None) -> "RatioConfig":
        settings = settings or get_settings()
        return cls(
            retirement_age=settings.retirement_age,
            default_age=settings.default_profile_age,
            savings_target=settings.savings_target_ratio,
            education_target=settings.education_target_ratio,
        )


# =============================================================================
# AGE
# =============================================================================


def resolve_age(
    profile: RatioProfile,
    today: Date | None = None,
    config: RatioConfig | None = None,
) -> int:
    """
    Age of the profile owner.

    ``age`` wins over ``birth_year``; with neither, the configured default
    age (40) is used. ``birth_year`` ages are whole calendar years.
    """
    if profile.age is not None:
        return profile.age
    if profile.birth_year is not None:
        today = today or Date.today()
        return max(today.year - profile.birth_year, 0)
    return (config or RatioConfig()).default_age


def _bracket_lookup(age: int, brackets: tuple[tuple[int | None, Decimal], ...]) -> Decimal:
    for upper, target in brackets:
        if upper is None or age < upper:
            return target
    raise AssertionError("bracket table must end with an open bound")


def capital_target_for_age(age: int) -> Decimal:
    """
    Capital-to-income target for ``age``.

    Examples:
        >>> capital_target_for_age(29)
        Decimal('0.5')
        >>> capital_target_for_age(65)
        Decimal('12.0')
    """
    return _bracket_lookup(age, CAPITAL_TARGET_BRACKETS)


def mortgage_target_for_age(age: int) -> Decimal:
    """Mortgage-to-income ceiling for ``age`` (0 from 65: debt-free in retirement)."""
    return _bracket_lookup(age, MORTGAGE_TARGET_BRACKETS)


# =============================================================================
# LIFE STAGE
# =============================================================================


def life_stage_analysis(age: int) -> LifeStageAnalysis:
    """Life stage, its financial focus and the ratios that matter most."""
    if age < 35:
        return LifeStageAnalysis(
            stage=LifeStage.EARLY_CAREER,
            focus="Building emergency fund and starting retirement savings",
            priority_ratios=[RatioKind.SAVINGS, RatioKind.CAPITAL],
        )
    if age < 50:
        return LifeStageAnalysis(
            stage=LifeStage.MID_CAREER,
            focus="Accelerating wealth accumulation and managing debt",
            priority_ratios=[RatioKind.CAPITAL, RatioKind.MORTGAGE],
        )
    if age < 65:
        return LifeStageAnalysis(
            stage=LifeStage.PRE_RETIREMENT,
            focus="Maximizing retirement savings and reducing debt",
            priority_ratios=[RatioKind.CAPITAL, RatioKind.MORTGAGE],
        )
    return LifeStageAnalysis(
        stage=LifeStage.RETIREMENT,
        focus="Preserving wealth and managing withdrawals",
        priority_ratios=[RatioKind.CAPITAL],
    )


# =============================================================================
# READINESS
# =============================================================================


def _years_to_retirement(age: int, config: RatioConfig) -> int:
    return max(config.retirement_age - age, 0)


def _readiness_bucket(score: int) -> ReadinessAssessment:
    if score >= READINESS_ON_TRACK:
        return ReadinessAssessment.ON_TRACK
    if score >= READINESS_SLIGHTLY_BEHIND:
        return ReadinessAssessment.SLIGHTLY_BEHIND
    if score >= READINESS_BEHIND:
        return ReadinessAssessment.BEHIND
    return ReadinessAssessment.CRITICAL


def retirement_readiness_score(
    profile: RatioProfile,
    ratios: MoneyRatios,
    today: Date | None = None,
    config: RatioConfig | None = None,
) -> ReadinessScore:
    """
    0-100 readiness score from the capital ratio.

    Without a capital ratio the score is 0 with ``insufficient_data``.
    A zero target counts as fully ready (100).
    """
    config = config or RatioConfig()
    age = resolve_age(profile, today, config)
    years = _years_to_retirement(age, config)

    capital = ratios.capital_ratio
    if capital is None:
        return ReadinessScore(
            score=0,
            assessment=ReadinessAssessment.INSUFFICIENT_DATA,
            years_to_retirement=years,
        )

    if capital.target_ratio > ZERO:
        performance = clamp(capital.current_ratio / capital.target_ratio * HUNDRED, ZERO, HUNDRED)
        score = int(round_to(performance, 0))
    else:
        score = 100

    result = ReadinessScore(
        score=score,
        assessment=_readiness_bucket(score),
        years_to_retirement=years,
    )
    logger.debug("Readiness score for age %d: %d (%s)", age, result.score, result.assessment.value)
    return result


# =============================================================================
# ADVICE
# =============================================================================


def _fmt(value: Decimal) -> str:
    return str(round_to(value, 1))


def catch_up_recommendations(
    profile: RatioProfile,
    ratios: MoneyRatios,
    today: Date | None = None,
    config: RatioConfig | None = None,
) -> list[str]:
    """
    Concrete guidance for every ratio that is behind target.

    Capital advice depends on the horizon: more than 15 years to retirement
    gets a gradual contribution increase, 15 or fewer gets catch-up
    contribution advice. With two or more ratios behind, general strategies
    are appended.
    """
    config = config or RatioConfig()
    age = resolve_age(profile, today, config)
    years = _years_to_retirement(age, config)
    advice: list[str] = []

    capital = ratios.capital_ratio
    if capital is not None and capital.status == RatioStatus.BEHIND:
        gap = capital.target_ratio - capital.current_ratio
        if years > CATCH_UP_HORIZON_YEARS:
            advice.append(
                f"Increase retirement contributions by {_fmt(gap * CATCH_UP_CONTRIBUTION_RATE)}% "
                f"of income annually to catch-up over {years} years"
            )
        else:
            advice.append(
                "Consider maximum catch-up contributions (age 50+ allows additional $7,500 "
                f"to 401k) to bridge the {_fmt(gap)}x income gap"
            )

    savings = ratios.savings_ratio
    if savings is not None and savings.status == RatioStatus.BEHIND:
        current_pct = savings.current_ratio * HUNDRED
        target_pct = savings.target_ratio * HUNDRED
        advice.append(
            f"Increase savings rate by {_fmt(target_pct - current_pct)}% "
            f"to reach target of {_fmt(target_pct)}%"
        )

    mortgage = ratios.mortgage_ratio
    if mortgage is not None and mortgage.status == RatioStatus.BEHIND:
        advice.append(
            f"Accelerate mortgage payments to bring the balance from {_fmt(mortgage.current_ratio)}x "
            f"down to {_fmt(mortgage.target_ratio)}x income"
        )

    education = ratios.education_ratio
    if education is not None and education.status == RatioStatus.BEHIND:
        advice.append(
            f"Prioritize student loan payoff to bring the balance below "
            f"{_fmt(education.target_ratio)}x income"
        )

    if len(ratios.behind()) >= 2:
        advice.extend(GENERIC_CATCH_UP_ADVICE)

    return advice


def accelerated_timeline(
    profile: RatioProfile,
    ratios: MoneyRatios,
    today: Date | None = None,
    config: RatioConfig | None = None,
) -> AcceleratedTimeline:
    """
    Early-retirement estimate when the capital ratio is ahead of target.

    Anything but ``ahead`` returns the standard timeline (retirement age,
    0 years ahead, potential 1.0).
    """
    config = config or RatioConfig()
    capital = ratios.capital_ratio

    if capital is None or capital.status != RatioStatus.AHEAD or capital.target_ratio <= ZERO:
        return AcceleratedTimeline(
            early_retirement_age=config.retirement_age,
            years_ahead=0,
            financial_independence_potential=Decimal("1.0"),
        )

    age = resolve_age(profile, today, config)
    factor = safe_divide(capital.current_ratio, capital.target_ratio)
    years_ahead = max(int(round_to((factor - ONE) * YEARS_PER_INCOME_MULTIPLE, 0)), 0)

    timeline = AcceleratedTimeline(
        early_retirement_age=max(age + MIN_YEARS_BEFORE_EARLY_RETIREMENT, config.retirement_age - years_ahead),
        years_ahead=years_ahead,
        financial_independence_potential=round_to(factor, 1),
    )
    logger.debug(
        "Accelerated timeline for age %d: retire at %d (%d years ahead)",
        age,
        timeline.early_retirement_age,
        timeline.years_ahead,
    )
    return timeline
