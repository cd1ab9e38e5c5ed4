from fakes import make_question
from techmock_app.core.models import TestResult
from techmock_app.core.services.result_review import is_passing, review_result, summarize_history


def _result(score: int, total: int, **kwargs) -> TestResult:
    return TestResult(
        id=kwargs.get("id", f"r{score}-{total}"),
        user_id="u1",
        timestamp=kwargs.get("timestamp", 0),
        score=score,
        total_questions=total,
        answers=kwargs.get("answers", {}),
        question_ids=kwargs.get("question_ids", []),
    )


def test_percentage_and_pass_threshold():
    assert _result(7, 10).percentage == 70
    assert is_passing(_result(7, 10))
    assert not is_passing(_result(2, 3))
    assert _result(0, 0).percentage == 0


def test_review_pairs_answers_with_current_questions():
    result = _result(1, 3, question_ids=["b", "a", "c"], answers={"a": 0, "b": 3})
    bank = [make_question("a", 0), make_question("b", 1), make_question("c", 2)]

    review = review_result(result, bank)

    assert [(item.position, item.question.id) for item in review.items] == [(1, "b"), (2, "a"), (3, "c")]
    assert [item.selected_option_index for item in review.items] == [3, 0, None]
    assert [item.is_correct for item in review.items] == [False, True, False]
    assert review.missing_question_ids == []
    assert not review.passed


def test_review_skips_deleted_questions():
    result = _result(2, 3, question_ids=["a", "gone", "c"], answers={"a": 0, "gone": 1, "c": 2})

    review = review_result(result, [make_question("c", 2), make_question("a", 0)])

    assert [(item.position, item.question.id) for item in review.items] == [(1, "a"), (3, "c")]
    assert review.missing_question_ids == ["gone"]


def test_summary_of_empty_history():
    summary = summarize_history([])

    assert summary.tests_taken == 0
    assert summary.average_percentage == 0
    assert summary.best_percentage == 0
    assert summary.recent_results == []


def test_summary_averages_ratios_and_limits_recent_results():
    history = [_result(1, 3, id=f"r{i}") for i in range(6)] + [_result(3, 4, id="best")]

    summary = summarize_history(history)

    assert summary.tests_taken == 7
    # (6 * 1/3 + 3/4) / 7 * 100
    assert summary.average_percentage == 39
    assert summary.best_percentage == 75
    assert [r.id for r in summary.recent_results] == ["r0", "r1", "r2", "r3", "r4"]
