"""Service for drawing attempts, scoring submissions and reading results back."""

from __future__ import annotations

import logging
import random

from techmock_app.constants.test_constants import MAX_ATTEMPT_QUESTIONS, RESULTS_KEY
from techmock_app.core.collection_store import CollectionStore, RecordCollection
from techmock_app.core.models import Question, TestResult, User, new_record_id, now_millis
from techmock_app.core.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)


def score_answers(questions: list[Question], answers: dict[str, int]) -> int:
    """Count questions whose recorded answer equals the correct option.

    Unanswered questions simply count as wrong.
    """
    return sum(1 for q in questions if answers.get(q.id) == q.correct_option_index)


class AttemptService:
    """Draws randomized attempts and persists scored TestResults."""

    def __init__(
        self,
        store: CollectionStore,
        question_bank: QuestionBank,
        rng: random.Random | None = None,
    ) -> None:
        self._results = RecordCollection(store, RESULTS_KEY, TestResult.from_dict)
        self._question_bank = question_bank
        self._rng = rng or random.Random()

    def set_shuffle_seed(self, seed: int | None) -> None:
        self._rng.seed(seed)

    def build_attempt(self, limit: int = MAX_ATTEMPT_QUESTIONS) -> list[Question]:
        """Shuffle the whole bank and keep at most ``limit`` questions."""
        questions = self._question_bank.list_questions()
        self._rng.shuffle(questions)
        return questions[:limit]

    def submit(self, user: User, attempt_questions: list[Question], answers: dict[str, int]) -> TestResult:
        """Score ``attempt_questions`` against ``answers`` and persist the result."""
        if not attempt_questions:
            raise ValueError("Cannot submit an attempt without questions.")

        question_ids = [q.id for q in attempt_questions]
        recorded = {qid: int(answers[qid]) for qid in question_ids if qid in answers}
        result = TestResult(
            id=new_record_id(),
            user_id=user.id,
            timestamp=now_millis(),
            score=score_answers(attempt_questions, recorded),
            total_questions=len(attempt_questions),
            answers=recorded,
            question_ids=question_ids,
        )
        results = self._results.load()
        results.append(result)
        self._results.save(results)
        logger.info(
            "User %s scored %d/%d (result %s)",
            user.id,
            result.score,
            result.total_questions,
            result.id,
        )
        return result

    def history(self, user_id: str) -> list[TestResult]:
        """Results of one user, newest first; ties keep insertion order."""
        own = [r for r in self._results.load() if r.user_id == user_id]
        return sorted(own, key=lambda r: r.timestamp, reverse=True)

    def result_by_id(self, result_id: str) -> TestResult | None:
        return next((r for r in self._results.load() if r.id == result_id), None)
