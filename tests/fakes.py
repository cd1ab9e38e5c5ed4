"""Test doubles and record builders shared by the test modules."""

from __future__ import annotations

from types import SimpleNamespace

from techmock_app.core.models import Question


class FakeModels:
    """Stands in for ``client.aio.models`` of the google-genai SDK."""

    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[dict[str, object]] = []

    async def generate_content(self, **kwargs: object) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGenaiClient:
    def __init__(self, models: FakeModels) -> None:
        self.aio = SimpleNamespace(models=models)


def make_question(question_id: str, correct: int = 0, category: str = "General") -> Question:
    return Question(
        id=question_id,
        text=f"Question {question_id}?",
        options=[f"{question_id}-a", f"{question_id}-b", f"{question_id}-c", f"{question_id}-d"],
        correct_option_index=correct,
        category=category,
    )
