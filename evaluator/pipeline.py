import logging
import random

from datamodels import (
    AnalysisRecord,
    ChatMessage,
    CompetitorResearch,
    DetailedAnalysis,
    RevenueForecast,
    UnitSalesForecast,
)
from evaluator import advisor, competitors
from evaluator.analyzer import analyze_with_tier
from evaluator.forecasts import (
    DEFAULT_TEMPLATES,
    ForecastTemplates,
    revenue_forecast,
    unit_sales_forecast,
)
from evaluator.rules import RuleOutcome, evaluate_rules
from evaluator.storage import AnalysisStore

logger = logging.getLogger(__name__)


def build_record(
    idea: str,
    outcome: RuleOutcome,
    analysis: DetailedAnalysis,
    revenue: RevenueForecast,
    units: UnitSalesForecast,
) -> AnalysisRecord:
    """Merge the pipeline outputs into one record. No computation happens here."""
    return AnalysisRecord(
        idea_description=idea,
        success_score=int(analysis.success_score),
        revenue_forecast=revenue,
        unit_sales_forecast=units,
        key_factors=analysis.key_factors,
        competitors=analysis.competitors,
        recommendations=analysis.recommendations,
        tier_classification=outcome.tier,
        rule_flags=outcome.rule_flags,
    )


async def analyze_idea(
    reasoner,
    idea: str,
    rng: random.Random | None = None,
    templates: ForecastTemplates = DEFAULT_TEMPLATES,
) -> AnalysisRecord:
    """
    Classify, analyze and forecast one business idea.

    The two reasoning calls run one after the other, since the second is
    constrained by the tier the first one yields.

    Raises:
        ValueError: the idea is empty
        IntegrationError: either reasoning call failed; nothing is produced
    """
    if not idea or not idea.strip():
        raise ValueError("Idea description must not be empty")

    outcome = await evaluate_rules(reasoner, idea)
    analysis = await analyze_with_tier(reasoner, idea, outcome, rng)
    record = build_record(
        idea,
        outcome,
        analysis,
        revenue_forecast(outcome.tier, rng, templates),
        unit_sales_forecast(outcome.tier, rng, templates),
    )
    logger.info(
        "Analysis finished: %s tier, score %d", record.tier_classification, record.success_score
    )
    return record


class AnalysisSession:
    """
    State for one user's analysis: the current record, the advisor chat and
    the latest competitor research.

    Only one external call may be in flight at a time. Callers check ``busy``
    and keep their controls disabled while it is set.
    """

    def __init__(
        self,
        reasoner,
        store: AnalysisStore | None = None,
        rng: random.Random | None = None,
        templates: ForecastTemplates = DEFAULT_TEMPLATES,
    ):
        self.reasoner = reasoner
        self.store = store
        self.rng = rng
        self.templates = templates
        self.record: AnalysisRecord | None = None
        self.transcript: list[ChatMessage] = []
        self.research: CompetitorResearch | None = None
        self.busy = False

    def _begin(self) -> None:
        if self.busy:
            raise RuntimeError("Another request is still running for this session")
        self.busy = True

    def _require_record(self) -> AnalysisRecord:
        if self.record is None:
            raise RuntimeError("No analysis yet")
        return self.record

    async def analyze_idea(self, text: str) -> AnalysisRecord:
        """Run the whole pipeline. On failure the previous state is kept."""
        self._begin()
        try:
            record = await analyze_idea(self.reasoner, text, self.rng, self.templates)
        finally:
            self.busy = False
        self.record = record
        self.transcript = advisor.initial_transcript()
        self.research = None
        return record

    async def send_chat_message(self, text: str) -> str:
        record = self._require_record()
        self._begin()
        try:
            return await advisor.send_chat_message(self.reasoner, record, self.transcript, text)
        finally:
            self.busy = False

    async def research_competitors(self) -> CompetitorResearch:
        record = self._require_record()
        self._begin()
        try:
            self.research = await competitors.research_competitors(
                self.reasoner, record.idea_description
            )
        finally:
            self.busy = False
        return self.research

    def save(self) -> str:
        record = self._require_record()
        if self.store is None:
            raise RuntimeError("No analysis store configured")
        self._begin()
        try:
            return self.store.save(record)
        finally:
            self.busy = False

    def reset_analysis(self) -> None:
        """Forget the current analysis. Anything already saved stays saved."""
        self.record = None
        self.transcript = []
        self.research = None
