"""Server-side answer checking; answer keys never leave this module."""

from dataclasses import dataclass
from typing import Optional

from questionbank.services.normalizer import OPTION_LETTERS
from questionbank.services.repository import ItemRepository


@dataclass
class AnswerCheck:
    question_id: str
    correct: bool
    explanation: Optional[str]


def check_answer(repo: ItemRepository, question_id: str, answer: str) -> Optional[AnswerCheck]:
    """Grade a submitted option letter. Returns None when the question does not exist."""
    if not repo.entry.gradable:
        raise ValueError(f"{repo.entry.kind.value} items cannot be graded by option letter")
    row = repo.get(question_id)
    if row is None:
        return None
    submitted = (answer or "").strip().upper()
    correct = submitted in OPTION_LETTERS and submitted == row.correct_answer
    return AnswerCheck(question_id=row.id, correct=correct, explanation=row.explanation)
