"""Service for managing the persisted question bank."""

from __future__ import annotations

from techmock_app.constants.test_constants import (
    DEFAULT_CATEGORY,
    OPTION_COUNT,
    QUESTIONS_KEY,
)
from techmock_app.core.collection_store import CollectionStore, RecordCollection
from techmock_app.core.models import Question, new_record_id

SEED_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="q1",
        text="What is the time complexity of searching in a balanced Binary Search Tree?",
        options=["O(n)", "O(log n)", "O(1)", "O(n log n)"],
        correct_option_index=1,
        category="Data Structures",
    ),
    Question(
        id="q2",
        text="Which of the following is NOT a JavaScript data type?",
        options=["Symbol", "Boolean", "Integer", "Undefined"],
        correct_option_index=2,
        category="JavaScript",
    ),
    Question(
        id="q3",
        text="In React, what hook is used to handle side effects?",
        options=["useState", "useReducer", "useEffect", "useMemo"],
        correct_option_index=2,
        category="React",
    ),
    Question(
        id="q4",
        text="What does SQL stand for?",
        options=[
            "Structured Query Language",
            "Simple Question Language",
            "System Query Logic",
            "Standard Query List",
        ],
        correct_option_index=0,
        category="Databases",
    ),
)


def seed_questions() -> list[Question]:
    """Return fresh copies of the built-in questions."""
    return [Question.from_dict(question.to_dict()) for question in SEED_QUESTIONS]


def build_manual_question(
    text: str,
    options: list[str],
    correct_option_index: int,
    category: str | None = None,
) -> Question:
    """Validate admin input and build a new question; nothing is persisted."""
    cleaned_text = (text or "").strip()
    if not cleaned_text:
        raise ValueError("Question text must not be empty.")
    if len(options) != OPTION_COUNT:
        raise ValueError("Each question must have exactly four options.")
    cleaned_options = [(option or "").strip() for option in options]
    if any(not option for option in cleaned_options):
        raise ValueError("Option text cannot be empty.")
    if not isinstance(correct_option_index, int) or not 0 <= correct_option_index < OPTION_COUNT:
        raise ValueError("Correct option index must be between 0 and 3.")
    return Question(
        id=new_record_id("manual"),
        text=cleaned_text,
        options=cleaned_options,
        correct_option_index=correct_option_index,
        category=(category or "").strip() or DEFAULT_CATEGORY,
    )


class QuestionBank:
    """Lifecycle of the Questions collection: lazy seed, append, delete."""

    def __init__(self, store: CollectionStore) -> None:
        self._questions = RecordCollection(store, QUESTIONS_KEY, Question.from_dict)

    def list_questions(self) -> list[Question]:
        """Return the bank, seeding it only if the collection was never written.

        A bank emptied by deleting every question stays empty.
        """
        if not self._questions.exists():
            questions = seed_questions()
            self._questions.save(questions)
            return questions
        return self._questions.load()

    def add_questions(self, new_questions: list[Question]) -> None:
        """Append to the end of the stored bank; ids are not checked for collisions.

        Appending does not trigger seeding.
        """
        current = self._questions.load()
        current.extend(new_questions)
        self._questions.save(current)

    def delete_question(self, question_id: str) -> bool:
        """Remove the first question with ``question_id``. Returns False when absent."""
        current = self._questions.load()
        index = next((i for i, q in enumerate(current) if q.id == question_id), None)
        if index is None:
            return False
        current.pop(index)
        self._questions.save(current)
        return True

    def get_question(self, question_id: str) -> Question | None:
        return next((q for q in self.list_questions() if q.id == question_id), None)
