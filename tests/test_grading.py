import pytest

from questionbank.services.grading import check_answer
from tests.fakes import stock


def test_check_answer(repo_for):
    repo = repo_for("mcq")
    [item_id] = stock(repo, "DevOps", easy=1)

    right = check_answer(repo, item_id, "B")
    assert right.correct is True
    assert right.explanation.startswith("Bravo is right")

    assert check_answer(repo, item_id, " b ").correct is True
    assert check_answer(repo, item_id, "A").correct is False
    assert check_answer(repo, item_id, "Bravo").correct is False


def test_check_answer_unknown_question(repo_for):
    assert check_answer(repo_for("practice"), "missing", "A") is None


def test_check_answer_rejects_ungradable_kinds(repo_for):
    with pytest.raises(ValueError):
        check_answer(repo_for("coding"), "any", "A")
