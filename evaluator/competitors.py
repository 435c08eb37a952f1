import logging

from datamodels import CompetitorResearch
from prompts import COMPETITOR_RESEARCH

logger = logging.getLogger(__name__)


async def research_competitors(reasoner, idea: str) -> CompetitorResearch:
    """
    Search the web for competitors, similar products, patents and discussions.

    Raises:
        IntegrationError: the call failed or returned an invalid result
    """
    research = await reasoner.structured(
        COMPETITOR_RESEARCH.format(idea=idea),
        CompetitorResearch,
        ground_in_internet=True,
    )
    logger.info("Competitor research found %d competitor(s)", len(research.competitors))
    return research
