import logging
from dataclasses import dataclass

from datamodels import SCORE_RANGES, RuleEvaluation, RuleFlags, ScoreRange, Tier
from prompts import RULE_EVALUATION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleOutcome:
    tier: Tier
    score_range: ScoreRange
    rule_flags: RuleFlags
    reasoning: str


def derive_tier(flags: RuleFlags) -> Tier:
    """Bad if any bad flag is raised, good if every good flag is met, medium otherwise."""
    is_bad = flags.bad.any_raised()
    is_good = not is_bad and flags.good.all_met()
    if is_bad:
        return Tier.BAD
    if is_good:
        return Tier.GOOD
    return Tier.MEDIUM


def score_range_for(tier: Tier) -> ScoreRange:
    return SCORE_RANGES[Tier(tier)]


async def evaluate_rules(reasoner, idea: str) -> RuleOutcome:
    """
    Score the idea against the hard-rule rubric and derive its tier.

    The flags returned by the reasoning service are trusted as-is. Its own
    tier_classification is not: the tier comes from derive_tier alone.

    Raises:
        IntegrationError: the call failed or the flags were missing/malformed
    """
    evaluation = await reasoner.structured(
        RULE_EVALUATION.format(idea=idea),
        RuleEvaluation,
        ground_in_internet=True,
    )

    flags = RuleFlags(bad=evaluation.bad_flags, good=evaluation.good_flags)
    tier = derive_tier(flags)
    if evaluation.tier_classification is not None and evaluation.tier_classification != tier:
        logger.debug(
            "Ignoring service tier %s, rules give %s",
            evaluation.tier_classification,
            tier,
        )

    logger.info("Idea classified as %s tier", tier)
    return RuleOutcome(
        tier=tier,
        score_range=score_range_for(tier),
        rule_flags=flags,
        reasoning=evaluation.reasoning,
    )
