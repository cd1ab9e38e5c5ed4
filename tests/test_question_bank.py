import pytest

from fakes import make_question
from techmock_app.core.services.question_bank import SEED_QUESTIONS, QuestionBank, build_manual_question


@pytest.fixture
def bank(memory_store) -> QuestionBank:
    return QuestionBank(memory_store)


def test_first_listing_seeds_the_bank(bank, memory_store):
    questions = bank.list_questions()

    assert [q.id for q in questions] == ["q1", "q2", "q3", "q4"]
    assert [q.correct_option_index for q in questions] == [1, 2, 2, 0]
    assert memory_store.contains("techmock_questions")


def test_seeding_happens_once(bank):
    bank.list_questions()
    bank.add_questions([make_question("extra")])

    assert [q.id for q in bank.list_questions()] == ["q1", "q2", "q3", "q4", "extra"]


def test_emptied_bank_is_not_reseeded(bank):
    for question in bank.list_questions():
        assert bank.delete_question(question.id)

    assert bank.list_questions() == []
    assert bank.list_questions() == []


def test_seed_copies_are_independent(bank):
    questions = bank.list_questions()
    questions[0].options.append("mutated")

    assert len(SEED_QUESTIONS[0].options) == 4


def test_add_to_fresh_store_does_not_seed(bank):
    bank.add_questions([make_question("a"), make_question("b")])

    assert [q.id for q in bank.list_questions()] == ["a", "b"]


def test_add_keeps_duplicate_ids(bank):
    bank.add_questions([make_question("a")])
    bank.add_questions([make_question("a", correct=3)])

    assert [q.correct_option_index for q in bank.list_questions()] == [0, 3]


def test_delete_removes_first_match(bank):
    bank.add_questions([make_question("a"), make_question("b"), make_question("a", correct=2)])

    assert bank.delete_question("a")
    assert [(q.id, q.correct_option_index) for q in bank.list_questions()] == [("b", 0), ("a", 2)]


def test_delete_missing_id_leaves_bank_unchanged(bank, memory_store):
    assert not bank.delete_question("missing")
    assert not memory_store.contains("techmock_questions")


def test_get_question(bank):
    assert bank.get_question("q4").text == "What does SQL stand for?"
    assert bank.get_question("nope") is None


def test_build_manual_question_trims_and_defaults_category():
    question = build_manual_question(" What is 2+2? ", [" 3", "4 ", "5", "6"], 1, "  ")

    assert question.id.startswith("manual-")
    assert question.text == "What is 2+2?"
    assert question.options == ["3", "4", "5", "6"]
    assert question.category == "General"


@pytest.mark.parametrize(
    "text, options, index, message",
    [
        ("", ["a", "b", "c", "d"], 0, "Question text must not be empty."),
        ("Q", ["a", "b", "c"], 0, "Each question must have exactly four options."),
        ("Q", ["a", "", "c", "d"], 0, "Option text cannot be empty."),
        ("Q", ["a", "b", "c", "d"], 4, "Correct option index must be between 0 and 3."),
        ("Q", ["a", "b", "c", "d"], -1, "Correct option index must be between 0 and 3."),
    ],
)
def test_build_manual_question_validation(text, options, index, message):
    with pytest.raises(ValueError) as excinfo:
        build_manual_question(text, options, index)
    assert str(excinfo.value) == message
