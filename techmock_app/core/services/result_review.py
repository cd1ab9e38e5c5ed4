"""Review and summary views computed from stored test results."""

from __future__ import annotations

from dataclasses import dataclass, field

from techmock_app.constants.test_constants import PASS_THRESHOLD_PERCENT, RECENT_RESULTS_LIMIT
from techmock_app.core.models import Question, TestResult


@dataclass(slots=True)
class ReviewItem:
    """One question of a past attempt, resolved against the current bank."""

    position: int  # 1-based position in the original attempt
    question: Question
    selected_option_index: int | None

    @property
    def is_correct(self) -> bool:
        return self.selected_option_index == self.question.correct_option_index


@dataclass(slots=True)
class ResultReview:
    """Snapshot returned to the result screen."""

    result: TestResult
    items: list[ReviewItem] = field(default_factory=list)
    missing_question_ids: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return is_passing(self.result)


@dataclass(slots=True)
class HistorySummary:
    """Dashboard figures for one user."""

    tests_taken: int
    average_percentage: int
    best_percentage: int
    recent_results: list[TestResult]


def is_passing(result: TestResult) -> bool:
    return result.percentage >= PASS_THRESHOLD_PERCENT


def review_result(result: TestResult, questions: list[Question]) -> ResultReview:
    """Pair each question id of ``result`` with the bank's current question.

    Questions deleted since the attempt are skipped and reported in
    ``missing_question_ids``; positions of the remaining items are unchanged.
    """
    by_id: dict[str, Question] = {}
    for question in questions:
        by_id.setdefault(question.id, question)

    review = ResultReview(result=result)
    for position, question_id in enumerate(result.question_ids, start=1):
        question = by_id.get(question_id)
        if question is None:
            review.missing_question_ids.append(question_id)
            continue
        review.items.append(
            ReviewItem(
                position=position,
                question=question,
                selected_option_index=result.answers.get(question_id),
            )
        )
    return review


def summarize_history(history: list[TestResult], recent_limit: int = RECENT_RESULTS_LIMIT) -> HistorySummary:
    """Summarize a newest-first history list."""
    if not history:
        return HistorySummary(tests_taken=0, average_percentage=0, best_percentage=0, recent_results=[])

    ratios = [r.score / r.total_questions if r.total_questions else 0.0 for r in history]
    return HistorySummary(
        tests_taken=len(history),
        average_percentage=round(sum(ratios) / len(ratios) * 100),
        best_percentage=max(r.percentage for r in history),
        recent_results=history[:recent_limit],
    )
