"""Pytest configuration and fixtures."""

import pytest
from pydantic import ValidationError

from datamodels import AnalysisRecord
from structuredllm.llm_wrapper import IntegrationError

DOG_WALKING_IDEA = "A mobile app for dog walking with GPS tracking and 20% commission"
SYRINGE_IDEA = "Collecting used syringes from clinics for resale to budget buyers"


class FakeReasoner:
    """Stands in for Gemini: replays queued responses and records every call."""

    def __init__(self, structured=None, text=None):
        self.structured_responses = list(structured or [])
        self.text_responses = list(text or [])
        self.calls = []

    async def structured(self, prompt, response_model, ground_in_internet=False):
        self.calls.append(("structured", prompt, response_model, ground_in_internet))
        response = self.structured_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        try:
            return response_model.model_validate(response)
        except ValidationError as e:
            raise IntegrationError(str(e)) from e

    async def text(self, prompt):
        self.calls.append(("text", prompt, None, False))
        response = self.text_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def rule_evaluation(bad=(False, False, False, False), good=(False,) * 5, **extra) -> dict:
    """Rubric response with the given bad and good flag values, in rubric order."""
    result = {
        "bad_flags": dict(
            zip(
                ["health_legal_liability", "shrinking_tam", "low_gross_margin", "cultural_revulsion"],
                bad,
            ),
            details="bad details",
        ),
        "good_flags": dict(
            zip(
                [
                    "tam_cagr_high",
                    "gross_margin_high",
                    "google_trends_up",
                    "low_competitor_density",
                    "esg_tailwind",
                ],
                good,
            ),
            details="good details",
        ),
        "reasoning": "overall reasoning",
    }
    result.update(extra)
    return result


def detailed_analysis(score: float = 50) -> dict:
    return {
        "success_score": score,
        "key_factors": [
            {
                "factor": "Market growth",
                "impact": "positive",
                "weight": 8,
                "description": "Pet care spending keeps rising",
            },
            {
                "factor": "Competition",
                "impact": "negative",
                "weight": -6,
                "description": "Rover and Wag dominate",
            },
        ],
        "competitors": [
            {"name": "Rover", "description": "Pet sitting marketplace", "threat_level": "high"},
            {"name": "Wag", "description": "On-demand dog walking", "threat_level": "medium"},
        ],
        "recommendations": [
            {"action": "Start in one dense city", "impact_on_score": 5, "priority": "high"},
            {"action": "Add subscription plans", "impact_on_score": 3, "priority": "medium"},
        ],
    }


@pytest.fixture
def sample_record() -> AnalysisRecord:
    """A finished medium-tier analysis."""
    analysis = detailed_analysis(52)
    return AnalysisRecord(
        idea_description=DOG_WALKING_IDEA,
        success_score=52,
        revenue_forecast={"year_1": 180000, "year_2": 320000, "year_3": 550000},
        unit_sales_forecast={"year_1": 3000, "year_2": 6000, "year_3": 10000},
        key_factors=analysis["key_factors"],
        competitors=analysis["competitors"],
        recommendations=analysis["recommendations"],
        tier_classification="medium",
        rule_flags={
            "bad": rule_evaluation()["bad_flags"],
            "good": rule_evaluation(good=(True, True, True, False, False))["good_flags"],
        },
    )
