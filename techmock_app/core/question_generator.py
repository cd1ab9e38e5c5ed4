"""Question generation backed by the Gemini API with a deterministic stand-in.

One call selects one of two paths:

    credentialed  -> one ``generate_content`` request constrained by a JSON
                     response schema; every returned item gets a fresh id.
    placeholder   -> ``count`` synthesized "Mock question i about topic"
                     items, used when no API key is configured or when the
                     request fails in any way (network, empty body, invalid
                     JSON, schema mismatch).

The generator never persists anything; callers add the questions to the bank.
No retries are attempted: the placeholder path is the only failure handling.
"""

from __future__ import annotations

import logging
import random
from typing import Annotated, Any, Callable

from google import genai
from google.genai import types
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter, ValidationError

from techmock_app.constants.test_constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_GENERATION_COUNT,
    OPTION_COUNT,
    OPTION_LETTERS,
)
from techmock_app.core.models import Question, new_record_id

logger = logging.getLogger(__name__)

NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

PROMPT_TEMPLATE = (
    'Generate {count} difficult technical interview multiple-choice questions about "{topic}".\n'
    "Each question must have 4 options and one correct answer index (0-3)."
)


class GenerationError(Exception):
    """Raised internally when the service response cannot be used."""


class GeneratedQuestion(BaseModel):
    """One item of the JSON array returned by the generation service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: NonEmptyText
    options: list[NonEmptyText] = Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_option_index: int = Field(alias="correctOptionIndex", ge=0, le=OPTION_COUNT - 1)
    category: str | None = None


_GENERATED_QUESTIONS = TypeAdapter(list[GeneratedQuestion])


def build_response_schema() -> types.Schema:
    """Schema declared to the service: an array of question objects."""
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(
            type=types.Type.OBJECT,
            properties={
                "text": types.Schema(type=types.Type.STRING, description="The question text"),
                "options": types.Schema(
                    type=types.Type.ARRAY,
                    items=types.Schema(type=types.Type.STRING),
                    min_items=OPTION_COUNT,
                    max_items=OPTION_COUNT,
                    description="Array of 4 possible answers",
                ),
                "correctOptionIndex": types.Schema(
                    type=types.Type.INTEGER,
                    minimum=0,
                    maximum=OPTION_COUNT - 1,
                    description="Index of the correct option (0-3)",
                ),
                "category": types.Schema(
                    type=types.Type.STRING,
                    description="The specific sub-topic or category",
                ),
            },
            required=["text", "options", "correctOptionIndex", "category"],
        ),
    )


def parse_generated_questions(payload: str | None, topic: str) -> list[Question]:
    """Turn the service's JSON text into questions with fresh ids."""
    if not payload or not payload.strip():
        raise GenerationError("Generation service returned an empty body.")
    try:
        items = _GENERATED_QUESTIONS.validate_json(payload)
    except ValidationError as exc:
        raise GenerationError(f"Response does not match the question schema: {exc}") from exc
    if not items:
        raise GenerationError("Generation service returned no questions.")
    return [
        Question(
            id=new_record_id("ai"),
            text=item.text,
            options=list(item.options),
            correct_option_index=item.correct_option_index,
            category=(item.category or "").strip() or topic,
        )
        for item in items
    ]


def mock_questions(topic: str, count: int, rng: random.Random | None = None) -> list[Question]:
    """Placeholder questions; the correct index is random so scoring still varies."""
    rng = rng or random.Random()
    return [
        Question(
            id=new_record_id("mock"),
            text=f"Mock question {i + 1} about {topic}",
            options=[f"Option {letter} for {topic}" for letter in OPTION_LETTERS],
            correct_option_index=rng.randrange(OPTION_COUNT),
            category=topic,
        )
        for i in range(count)
    ]


def _default_client_factory(api_key: str) -> Any:
    return genai.Client(api_key=api_key)


class QuestionGenerator:
    """Async adapter around the Gemini ``generate_content`` call."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_GEMINI_MODEL,
        *,
        client_factory: Callable[[str], Any] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip() or None
        self._model = model
        self._client_factory = client_factory or _default_client_factory
        self._client: Any = None
        self._rng = rng or random.Random()

    @property
    def has_credential(self) -> bool:
        return self._api_key is not None

    async def generate(self, topic: str, count: int = DEFAULT_GENERATION_COUNT) -> list[Question]:
        """Return questions about ``topic``; never raises for service failures."""
        cleaned_topic = (topic or "").strip()
        if not cleaned_topic:
            raise ValueError("Topic is required.")
        if count <= 0:
            raise ValueError("Question count must be positive.")

        if self._api_key is None:
            logger.warning("GEMINI_API_KEY not set; returning mock questions for %r", cleaned_topic)
            return mock_questions(cleaned_topic, count, self._rng)

        try:
            questions = await self._request_questions(cleaned_topic, count)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Question generation failed (%s); returning mock questions", exc)
            return mock_questions(cleaned_topic, count, self._rng)

        logger.info("Generated %d question(s) about %r", len(questions), cleaned_topic)
        return questions

    async def _request_questions(self, topic: str, count: int) -> list[Question]:
        if self._client is None:
            self._client = self._client_factory(self._api_key)
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=PROMPT_TEMPLATE.format(count=count, topic=topic),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=build_response_schema(),
            ),
        )
        return parse_generated_questions(getattr(response, "text", None), topic)
