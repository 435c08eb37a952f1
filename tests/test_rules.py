"""Tests for the rule evaluator and tier derivation."""

import asyncio
import itertools

import pytest

from conftest import DOG_WALKING_IDEA, SYRINGE_IDEA, FakeReasoner, rule_evaluation
from datamodels import SCORE_RANGES, BadFlags, GoodFlags, RuleEvaluation, RuleFlags, Tier
from evaluator.rules import derive_tier, evaluate_rules, score_range_for
from structuredllm.llm_wrapper import IntegrationError

BAD_NAMES = ["health_legal_liability", "shrinking_tam", "low_gross_margin", "cultural_revulsion"]
GOOD_NAMES = [
    "tam_cagr_high",
    "gross_margin_high",
    "google_trends_up",
    "low_competitor_density",
    "esg_tailwind",
]


def flags(bad, good) -> RuleFlags:
    return RuleFlags(
        bad=BadFlags(**dict(zip(BAD_NAMES, bad))),
        good=GoodFlags(**dict(zip(GOOD_NAMES, good))),
    )


class TestDeriveTier:
    """Tests for derive_tier over the full flag truth table."""

    def test_any_bad_flag_is_bad(self) -> None:
        """Any raised bad flag gives bad, whatever the good flags say."""
        for bad in itertools.product([False, True], repeat=4):
            if not any(bad):
                continue
            for good in itertools.product([False, True], repeat=5):
                assert derive_tier(flags(bad, good)) == Tier.BAD

    def test_all_good_flags_without_bad_is_good(self) -> None:
        assert derive_tier(flags((False,) * 4, (True,) * 5)) == Tier.GOOD

    def test_everything_else_is_medium(self) -> None:
        for good in itertools.product([False, True], repeat=5):
            if all(good):
                continue
            assert derive_tier(flags((False,) * 4, good)) == Tier.MEDIUM


class TestScoreRanges:
    """Tests for the fixed per-tier score ranges."""

    def test_exact_values(self) -> None:
        assert (score_range_for(Tier.BAD).min, score_range_for(Tier.BAD).max) == (5, 29)
        assert (score_range_for(Tier.MEDIUM).min, score_range_for(Tier.MEDIUM).max) == (30, 69)
        assert (score_range_for(Tier.GOOD).min, score_range_for(Tier.GOOD).max) == (70, 95)

    def test_no_overlap(self) -> None:
        ordered = [SCORE_RANGES[Tier.BAD], SCORE_RANGES[Tier.MEDIUM], SCORE_RANGES[Tier.GOOD]]
        for lower, upper in zip(ordered, ordered[1:]):
            assert lower.max < upper.min

    def test_ranges_wide_enough_for_enforcement_offset(self) -> None:
        """The +/-10 replacement must stay inside every range."""
        for score_range in SCORE_RANGES.values():
            assert score_range.max - score_range.min >= 10

    def test_accepts_plain_string(self) -> None:
        assert score_range_for("medium") == SCORE_RANGES[Tier.MEDIUM]


class TestEvaluateRules:
    """Tests for evaluate_rules against a fake reasoning service."""

    def test_dog_walking_is_medium(self) -> None:
        reasoner = FakeReasoner(
            structured=[rule_evaluation(good=(True, True, True, False, False))]
        )

        outcome = asyncio.run(evaluate_rules(reasoner, DOG_WALKING_IDEA))

        assert outcome.tier == Tier.MEDIUM
        assert (outcome.score_range.min, outcome.score_range.max) == (30, 69)
        assert outcome.reasoning == "overall reasoning"

    def test_syringes_are_bad_regardless_of_good_flags(self) -> None:
        reasoner = FakeReasoner(
            structured=[rule_evaluation(bad=(True, False, False, False), good=(True,) * 5)]
        )

        outcome = asyncio.run(evaluate_rules(reasoner, SYRINGE_IDEA))

        assert outcome.tier == Tier.BAD
        assert outcome.rule_flags.bad.health_legal_liability is True
        assert (outcome.score_range.min, outcome.score_range.max) == (5, 29)

    def test_request_is_grounded_and_carries_idea(self) -> None:
        reasoner = FakeReasoner(structured=[rule_evaluation()])

        asyncio.run(evaluate_rules(reasoner, DOG_WALKING_IDEA))

        kind, prompt, model, grounded = reasoner.calls[0]
        assert kind == "structured"
        assert model is RuleEvaluation
        assert grounded is True
        assert DOG_WALKING_IDEA in prompt
        assert "Cultural Revulsion" in prompt
        assert "ESG/Regulatory Tailwind" in prompt

    def test_service_tier_is_ignored(self) -> None:
        """The tier the service claims never overrides the flags."""
        reasoner = FakeReasoner(
            structured=[
                rule_evaluation(bad=(False, False, True, False), tier_classification="good")
            ]
        )

        outcome = asyncio.run(evaluate_rules(reasoner, "Selling ice to penguins"))

        assert outcome.tier == Tier.BAD

    def test_unexpected_service_tier_does_not_fail(self) -> None:
        reasoner = FakeReasoner(structured=[rule_evaluation(tier_classification="Medium-High")])

        outcome = asyncio.run(evaluate_rules(reasoner, DOG_WALKING_IDEA))

        assert outcome.tier == Tier.MEDIUM

    def test_flags_are_kept_as_returned(self) -> None:
        reasoner = FakeReasoner(structured=[rule_evaluation(good=(True, False, True, False, True))])

        outcome = asyncio.run(evaluate_rules(reasoner, DOG_WALKING_IDEA))

        assert outcome.rule_flags.good.tam_cagr_high is True
        assert outcome.rule_flags.good.gross_margin_high is False
        assert outcome.rule_flags.good.details == "good details"

    def test_call_failure_raises_integration_error(self) -> None:
        reasoner = FakeReasoner(structured=[IntegrationError("quota exceeded")])

        with pytest.raises(IntegrationError, match="quota"):
            asyncio.run(evaluate_rules(reasoner, DOG_WALKING_IDEA))

    def test_missing_flags_raise_integration_error(self) -> None:
        malformed = rule_evaluation()
        del malformed["bad_flags"]["shrinking_tam"]
        reasoner = FakeReasoner(structured=[malformed])

        with pytest.raises(IntegrationError):
            asyncio.run(evaluate_rules(reasoner, DOG_WALKING_IDEA))
