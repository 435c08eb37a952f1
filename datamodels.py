from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Tier(StrEnum):
    BAD = "bad"
    MEDIUM = "medium"
    GOOD = "good"


class ScoreRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int
    max: int


# Permitted success-score interval per tier. Ranges are at least 24 wide, so
# the +/-10 replacement in score enforcement cannot cross the opposite bound.
SCORE_RANGES: dict[Tier, ScoreRange] = {
    Tier.BAD: ScoreRange(min=5, max=29),
    Tier.MEDIUM: ScoreRange(min=30, max=69),
    Tier.GOOD: ScoreRange(min=70, max=95),
}


class BadFlags(BaseModel):
    health_legal_liability: bool
    shrinking_tam: bool
    low_gross_margin: bool
    cultural_revulsion: bool
    details: str = ""

    def any_raised(self) -> bool:
        return any(
            (
                self.health_legal_liability,
                self.shrinking_tam,
                self.low_gross_margin,
                self.cultural_revulsion,
            )
        )


class GoodFlags(BaseModel):
    tam_cagr_high: bool
    gross_margin_high: bool
    google_trends_up: bool
    low_competitor_density: bool
    esg_tailwind: bool
    details: str = ""

    def all_met(self) -> bool:
        return all(
            (
                self.tam_cagr_high,
                self.gross_margin_high,
                self.google_trends_up,
                self.low_competitor_density,
                self.esg_tailwind,
            )
        )


class RuleFlags(BaseModel):
    bad: BadFlags
    good: GoodFlags


class RuleEvaluation(BaseModel):
    """Response schema for the rubric call."""

    bad_flags: BadFlags
    good_flags: GoodFlags
    # Informational only; the tier is always derived from the flags.
    tier_classification: str | None = None
    reasoning: str = ""


class KeyFactor(BaseModel):
    factor: str
    impact: Literal["positive", "negative", "neutral"]
    weight: float
    description: str


class Competitor(BaseModel):
    name: str
    description: str
    threat_level: Literal["low", "medium", "high"]
    source: str | None = None


class Recommendation(BaseModel):
    action: str
    impact_on_score: float
    priority: Literal["low", "medium", "high"]


class DetailedAnalysis(BaseModel):
    """Response schema for the tier-constrained analysis call."""

    success_score: float = Field(allow_inf_nan=False)
    key_factors: list[KeyFactor]
    competitors: list[Competitor]
    recommendations: list[Recommendation]


class CompetitorResearch(BaseModel):
    """Response schema for the competitor research call."""

    competitors: list[Competitor] = Field(default_factory=list)
    market_status: str = ""
    recommendation: str = ""


class RevenueForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    year_1: int
    year_2: int
    year_3: int


class UnitSalesForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    year_1: int = Field(ge=0)
    year_2: int = Field(ge=0)
    year_3: int = Field(ge=0)


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class AnalysisRecord(BaseModel):
    """The finished analysis of one idea. Replaced, never edited."""

    model_config = ConfigDict(frozen=True)

    idea_description: str
    success_score: int
    revenue_forecast: RevenueForecast
    unit_sales_forecast: UnitSalesForecast
    key_factors: tuple[KeyFactor, ...]
    competitors: tuple[Competitor, ...]
    recommendations: tuple[Recommendation, ...]
    tier_classification: Tier
    rule_flags: RuleFlags
