"""
Money Ratios — Profile input and ratio/readiness output models

Immutable Pydantic models shared by the money-ratio calculators and the
age-indexed benchmarks. A ratio is always expressed as a multiple of gross
annual income (capital 2.0 = "two years of income saved").
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class RatioStatus(str, Enum):
    """Position of a ratio relative to its target"""

    AHEAD = "ahead"
    ON_TRACK = "on_track"
    BEHIND = "behind"


class RatioKind(str, Enum):
    CAPITAL = "capital"
    SAVINGS = "savings"
    MORTGAGE = "mortgage"
    EDUCATION = "education"


class OverallStatus(str, Enum):
    """Aggregate health derived from the number of ratios behind target"""

    EXCELLENT = "excellent"
    ON_TRACK = "on_track"
    NEEDS_ATTENTION = "needs_attention"
    CRITICAL = "critical"


class LifeStage(str, Enum):
    EARLY_CAREER = "early_career"
    MID_CAREER = "mid_career"
    PRE_RETIREMENT = "pre_retirement"
    RETIREMENT = "retirement"


class ReadinessAssessment(str, Enum):
    ON_TRACK = "on_track"
    SLIGHTLY_BEHIND = "slightly_behind"
    BEHIND = "behind"
    CRITICAL = "critical"
    INSUFFICIENT_DATA = "insufficient_data"


# =============================================================================
# INPUT PROFILE
# =============================================================================


class RatioProfile(BaseModel):
    """
    Financial profile used by every ratio calculation.

    Either ``age`` or ``birth_year`` may be given; when both are missing the
    configured default age applies (see ``resolve_age``).
    """

    gross_annual_income: Decimal = Field(..., ge=0, description="Gross yearly income")
    age: int | None = Field(default=None, ge=0, le=130, description="Age in years")
    birth_year: int | None = Field(default=None, ge=1850, description="Year of birth")
    mortgage_balance: Decimal = Field(default=Decimal("0"), ge=0)
    student_loan_balance: Decimal = Field(default=Decimal("0"), ge=0)
    primary_residence_value: Decimal = Field(default=Decimal("0"), ge=0)

    model_config = {"frozen": True}

    @field_validator("mortgage_balance", "student_loan_balance", "primary_residence_value", mode="before")
    @classmethod
    def none_as_zero(cls, v):
        """Optional balances arrive as None from sparse profiles."""
        return Decimal("0") if v is None else v


# =============================================================================
# RATIO RESULTS
# =============================================================================


class RatioResult(BaseModel):
    """One ratio against its age-appropriate target."""

    current_ratio: Decimal = Field(..., description="Observed multiple of income")
    target_ratio: Decimal = Field(..., ge=0, description="Benchmark multiple of income")
    status: RatioStatus

    model_config = {"frozen": True}

    @property
    def gap(self) -> Decimal:
        """target − current (positive when behind on a higher-is-better ratio)."""
        return self.target_ratio - self.current_ratio


class MoneyRatios(BaseModel):
    """All four ratios plus the aggregate status."""

    capital_ratio: RatioResult | None = None
    savings_ratio: RatioResult | None = None
    mortgage_ratio: RatioResult | None = None
    education_ratio: RatioResult | None = None
    overall_status: OverallStatus = OverallStatus.EXCELLENT

    model_config = {"frozen": True}

    def by_kind(self) -> dict[RatioKind, RatioResult]:
        """Present ratios keyed by kind, in capital/savings/mortgage/education order."""
        pairs = (
            (RatioKind.CAPITAL, self.capital_ratio),
            (RatioKind.SAVINGS, self.savings_ratio),
            (RatioKind.MORTGAGE, self.mortgage_ratio),
            (RatioKind.EDUCATION, self.education_ratio),
        )
        return {kind: result for kind, result in pairs if result is not None}

    def behind(self) -> list[RatioKind]:
        return [kind for kind, r in self.by_kind().items() if r.status == RatioStatus.BEHIND]


# =============================================================================
# BENCHMARK OUTPUTS
# =============================================================================


class LifeStageAnalysis(BaseModel):
    stage: LifeStage
    focus: str
    priority_ratios: list[RatioKind]

    model_config = {"frozen": True}


class ReadinessScore(BaseModel):
    """Retirement readiness as a 0-100 score with a qualitative bucket."""

    score: int = Field(..., ge=0, le=100)
    assessment: ReadinessAssessment
    years_to_retirement: int = Field(..., ge=0)

    model_config = {"frozen": True}


class AcceleratedTimeline(BaseModel):
    """Early-retirement estimate for a capital ratio ahead of target."""

    early_retirement_age: int
    years_ahead: int = Field(..., ge=0)
    financial_independence_potential: Decimal

    model_config = {"frozen": True}
