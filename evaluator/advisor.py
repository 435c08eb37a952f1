import json
import logging

from datamodels import AnalysisRecord, ChatMessage
from prompts import ADVISOR, CHAT_FALLBACK, CHAT_GREETING, SCORE_BAND_GUIDANCE
from structuredllm.llm_wrapper import IntegrationError

logger = logging.getLogger(__name__)

HIGH_SCORE = 60
LOW_SCORE = 30


def initial_transcript() -> list[ChatMessage]:
    return [ChatMessage(role="assistant", content=CHAT_GREETING)]


def score_band(score: int) -> str:
    if score >= HIGH_SCORE:
        return "HIGH"
    if score >= LOW_SCORE:
        return "MODERATE"
    return "LOW"


def _history(transcript: list[ChatMessage]) -> str:
    if not transcript:
        return "(none)"
    return "\n".join(f"{message.role.upper()}: {message.content}" for message in transcript)


def build_prompt(record: AnalysisRecord, transcript: list[ChatMessage], question: str) -> str:
    return ADVISOR.format(
        idea=record.idea_description,
        score=record.success_score,
        year_1_revenue=record.revenue_forecast.year_1,
        key_factors=json.dumps([factor.model_dump() for factor in record.key_factors]),
        recommendations=json.dumps([rec.model_dump() for rec in record.recommendations]),
        history=_history(transcript),
        question=question,
        guidance=SCORE_BAND_GUIDANCE.format(band=score_band(record.success_score)),
    )


async def send_chat_message(
    reasoner, record: AnalysisRecord, transcript: list[ChatMessage], text: str
) -> str:
    """
    Answer a follow-up question about a finished analysis.

    The user message and the reply are appended to ``transcript``. A failed
    call is answered with a fallback message instead of raising.
    """
    question = text.strip()
    if not question:
        raise ValueError("Chat message must not be empty")

    prompt = build_prompt(record, transcript, question)
    transcript.append(ChatMessage(role="user", content=question))
    try:
        reply = await reasoner.text(prompt)
    except IntegrationError:
        logger.exception("Advisor request failed")
        reply = CHAT_FALLBACK

    transcript.append(ChatMessage(role="assistant", content=reply))
    return reply
