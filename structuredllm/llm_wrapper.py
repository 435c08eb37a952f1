import asyncio
import json
import logging
from typing import TypeVar

import google.generativeai as genai
from pydantic import BaseModel, ValidationError

from config import Settings

T = TypeVar('T', bound=BaseModel)

logger = logging.getLogger(__name__)

SEARCH_TOOL = 'google_search_retrieval'


class IntegrationError(Exception):
    """An external reasoning or persistence call failed or returned invalid data."""


def _extract_json(text: str) -> str:
    # Grounded answers are free text and often arrive fenced as ```json ... ```
    text = text.strip()
    if text.startswith('```'):
        text = text.split('\n', 1)[1] if '\n' in text else ''
        text = text.rsplit('```', 1)[0]
    return text.strip()


def _schema_instructions(response_model: type[BaseModel]) -> str:
    schema = json.dumps(response_model.model_json_schema())
    return (
        '\n\nAnswer ONLY with a JSON object that validates against this JSON schema, '
        f'with no commentary:\n{schema}'
    )


async def _generate(
    model: str,
    system_prompt: str,
    prompt: str,
    api_key: str | None,
    delay: float,
    attempts: int,
    parse,
    tools=None,
    generation_config=None,
):
    if api_key:
        genai.configure(api_key=api_key)

    gemini = genai.GenerativeModel(model, system_instruction=system_prompt or None)

    for attempt in range(attempts):
        # Rate limiting
        if delay:
            await asyncio.sleep(delay)
        try:
            result = await gemini.generate_content_async(
                prompt,
                generation_config=generation_config,
                tools=tools,
            )
            return parse(result.text)
        except Exception as e:
            if attempt == attempts - 1:
                logger.error("Gemini request failed after %d attempt(s): %s", attempts, e)
                raise IntegrationError(
                    f'Failed to generate valid response after {attempts} attempt(s): {e}'
                ) from e
            logger.warning("Error on attempt %d: %s", attempt + 1, e)


async def google_structured_request(
    model: str,
    system_prompt: str,
    prompt: str,
    response_model: type[T],
    ground_in_internet: bool = False,
    api_key: str | None = None,
    delay: float = 0,
    attempts: int = 1,
) -> T:
    """
    LLM request wrapper for Google's Gemini returning a validated pydantic model.

    Args:
        model: Name of the model to use
        system_prompt: System prompt to guide the model
        prompt: User prompt/question
        response_model: Pydantic model class for response validation
        ground_in_internet: Enable Google Search grounding. Search grounding
            cannot be combined with a response schema, so the schema is sent
            in the prompt instead and the answer is parsed from text.
        api_key: Gemini API key; the library default is used when omitted
        delay: Seconds to wait before each request (rate limiting)
        attempts: Number of tries before giving up

    Raises:
        IntegrationError: the call failed or the response did not match the schema
    """

    def parse(text: str) -> T:
        try:
            return response_model.model_validate_json(_extract_json(text))
        except ValidationError as e:
            raise ValueError(f'Validation failed: {e}') from e

    if ground_in_internet:
        return await _generate(
            model,
            system_prompt,
            prompt + _schema_instructions(response_model),
            api_key,
            delay,
            attempts,
            parse,
            tools=SEARCH_TOOL,
        )

    return await _generate(
        model,
        system_prompt,
        prompt,
        api_key,
        delay,
        attempts,
        parse,
        generation_config=genai.GenerationConfig(
            response_mime_type='application/json',
            response_schema=response_model,
        ),
    )


async def google_text_request(
    model: str,
    system_prompt: str,
    prompt: str,
    api_key: str | None = None,
    delay: float = 0,
    attempts: int = 1,
) -> str:
    """Free-text Gemini request; the reply is returned as-is."""

    def parse(text: str) -> str:
        if not text or not text.strip():
            raise ValueError('Empty response')
        return text.strip()

    return await _generate(model, system_prompt, prompt, api_key, delay, attempts, parse)


class GeminiReasoner:
    """The reasoning service used by the evaluator, bound to one set of settings."""

    def __init__(self, settings: Settings, system_prompt: str = ''):
        self.settings = settings
        self.system_prompt = system_prompt

    async def structured(
        self, prompt: str, response_model: type[T], ground_in_internet: bool = False
    ) -> T:
        return await google_structured_request(
            model=self.settings.gemini_model,
            system_prompt=self.system_prompt,
            prompt=prompt,
            response_model=response_model,
            ground_in_internet=ground_in_internet,
            api_key=self.settings.gemini_api_key,
            delay=self.settings.request_delay,
            attempts=self.settings.llm_attempts,
        )

    async def text(self, prompt: str) -> str:
        return await google_text_request(
            model=self.settings.gemini_model,
            system_prompt=self.system_prompt,
            prompt=prompt,
            api_key=self.settings.gemini_api_key,
            delay=self.settings.request_delay,
            attempts=self.settings.llm_attempts,
        )
