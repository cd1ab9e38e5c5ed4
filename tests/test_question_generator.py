import asyncio
import json
import random

import pytest

from fakes import FakeGenaiClient, FakeModels
from techmock_app.core.question_generator import (
    GenerationError,
    QuestionGenerator,
    mock_questions,
    parse_generated_questions,
)

VALID_ITEMS = [
    {
        "text": "Which index type suits range scans?",
        "options": ["Hash", "B-tree", "Bitmap", "None"],
        "correctOptionIndex": 1,
        "category": "Indexing",
    },
    {
        "text": "What isolation level prevents phantom reads?",
        "options": ["Read uncommitted", "Read committed", "Repeatable read", "Serializable"],
        "correctOptionIndex": 3,
    },
]


def _generator(models: FakeModels) -> QuestionGenerator:
    return QuestionGenerator(
        "test-key",
        "test-model",
        client_factory=lambda api_key: FakeGenaiClient(models),
        rng=random.Random(1),
    )


def _assert_mock_batch(questions, topic, count):
    assert len(questions) == count
    for i, question in enumerate(questions, start=1):
        assert question.id.startswith("mock-")
        assert question.text == f"Mock question {i} about {topic}"
        assert len(question.options) == 4
        assert 0 <= question.correct_option_index <= 3
        assert question.category == topic


def test_without_credential_returns_mock_questions(offline_generator):
    questions = asyncio.run(offline_generator.generate("SQL", 5))

    assert not offline_generator.has_credential
    _assert_mock_batch(questions, "SQL", 5)
    assert questions[0].options[0] == "Option A for SQL"


def test_blank_key_counts_as_missing():
    assert not QuestionGenerator("   ").has_credential


def test_successful_response_gets_fresh_ids_and_topic_category():
    models = FakeModels(text=json.dumps(VALID_ITEMS))

    questions = asyncio.run(_generator(models).generate("Databases", 2))

    assert [q.correct_option_index for q in questions] == [1, 3]
    assert all(q.id.startswith("ai-") for q in questions)
    assert len({q.id for q in questions}) == 2
    assert [q.category for q in questions] == ["Indexing", "Databases"]

    (call,) = models.calls
    assert call["model"] == "test-model"
    assert '"Databases"' in call["contents"]
    assert "Generate 2 difficult" in call["contents"]
    assert call["config"].response_mime_type == "application/json"


def test_client_is_created_once():
    created = []
    models = FakeModels(text=json.dumps(VALID_ITEMS))

    def factory(api_key):
        created.append(api_key)
        return FakeGenaiClient(models)

    generator = QuestionGenerator("test-key", client_factory=factory)
    asyncio.run(generator.generate("SQL", 2))
    asyncio.run(generator.generate("SQL", 2))

    assert created == ["test-key"]


def test_service_error_falls_back_to_mock_questions():
    models = FakeModels(error=ConnectionError("network down"))

    questions = asyncio.run(_generator(models).generate("Networking", 3))

    _assert_mock_batch(questions, "Networking", 3)


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "",
        "not json at all",
        "[]",
        json.dumps([{**VALID_ITEMS[0], "options": ["a", "b", "c"]}]),
        json.dumps([{**VALID_ITEMS[0], "correctOptionIndex": 4}]),
        json.dumps([{**VALID_ITEMS[0], "text": "  "}]),
        json.dumps({"text": "not an array"}),
    ],
)
def test_unusable_response_falls_back_to_mock_questions(payload):
    questions = asyncio.run(_generator(FakeModels(text=payload)).generate("Graphs", 4))

    _assert_mock_batch(questions, "Graphs", 4)


def test_parse_rejects_empty_array():
    with pytest.raises(GenerationError):
        parse_generated_questions("[]", "SQL")


@pytest.mark.parametrize("topic, count", [("", 5), ("   ", 5), ("SQL", 0)])
def test_invalid_request_raises(offline_generator, topic, count):
    with pytest.raises(ValueError):
        asyncio.run(offline_generator.generate(topic, count))


def test_mock_questions_are_deterministic_for_a_seeded_rng():
    first = mock_questions("Rust", 6, random.Random(5))
    second = mock_questions("Rust", 6, random.Random(5))

    assert [q.correct_option_index for q in first] == [q.correct_option_index for q in second]
