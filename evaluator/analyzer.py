import logging
import math
import random
from collections.abc import Callable

from datamodels import DetailedAnalysis, ScoreRange, Tier
from evaluator.rules import RuleOutcome
from prompts import DETAILED_ANALYSIS, TIER_GUIDANCE, TIER_JUSTIFICATION_LABEL

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def enforce_score_range(
    score: float, score_range: ScoreRange, rand: Callable[[], float] = random.random
) -> int:
    """
    Pull an out-of-range score back inside the tier's range.

    A score below the range becomes min + up to 10, above it max - up to 10.
    In-range scores are only rounded. The replacement is not re-checked.
    """
    if score < score_range.min:
        score = score_range.min + rand() * 10
    if score > score_range.max:
        score = score_range.max - rand() * 10
    return round_half_up(score)


def _justification(outcome: RuleOutcome) -> str:
    if outcome.tier == Tier.BAD:
        return outcome.rule_flags.bad.details
    if outcome.tier == Tier.GOOD:
        return outcome.rule_flags.good.details
    return outcome.reasoning


def build_prompt(idea: str, outcome: RuleOutcome) -> str:
    tier = Tier(outcome.tier).value
    return DETAILED_ANALYSIS.format(
        idea=idea,
        tier=tier,
        tier_upper=tier.upper(),
        justification_label=TIER_JUSTIFICATION_LABEL[tier],
        justification=_justification(outcome),
        score_min=outcome.score_range.min,
        score_max=outcome.score_range.max,
        guidance=TIER_GUIDANCE[tier],
    )


async def analyze_with_tier(
    reasoner, idea: str, outcome: RuleOutcome, rng: random.Random | None = None
) -> DetailedAnalysis:
    """
    Run the detailed analysis constrained to the tier decided by the rules.

    The returned analysis carries the enforced integer score; factors,
    competitors and recommendations are passed through in order.

    Raises:
        IntegrationError: the call failed or returned an invalid analysis
    """
    analysis = await reasoner.structured(
        build_prompt(idea, outcome),
        DetailedAnalysis,
        ground_in_internet=True,
    )

    rand = (rng or random).random
    score = enforce_score_range(analysis.success_score, outcome.score_range, rand)
    if not outcome.score_range.min <= analysis.success_score <= outcome.score_range.max:
        logger.info(
            "Adjusted success score %s to %s for %s tier",
            analysis.success_score,
            score,
            outcome.tier,
        )
    return analysis.model_copy(update={"success_score": score})
