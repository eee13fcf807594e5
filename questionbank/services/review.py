"""Interview answer review against the stored expected points."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from questionbank.errors import GeneratorNotConfiguredError, MalformedOutputError
from questionbank.services.normalizer import normalize_review
from questionbank.services.repository import ItemRepository

logger = logging.getLogger(__name__)

MIN_ANSWER_LENGTH = 10

REVIEW_SYSTEM_INSTRUCTION = (
    "You are an expert technical interviewer evaluating a candidate's answer in a {domain} interview. "
    "Analyze the answer and provide constructive, professional feedback. Respond with JSON only."
)

REVIEW_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "INTEGER"},
        "strengths": {"type": "ARRAY", "items": {"type": "STRING"}},
        "improvements": {"type": "ARRAY", "items": {"type": "STRING"}},
        "feedback": {"type": "STRING"},
    },
    "required": ["score", "strengths", "improvements", "feedback"],
}


def build_review_prompt(question: str, expected_points: list, answer: str, candidate_name: Optional[str] = None) -> str:
    addressee = f"Address the candidate as {candidate_name}." if candidate_name else "Address the candidate directly."
    return f"""Evaluate this interview answer.

Question: {question}

Expected concepts to cover: {", ".join(expected_points)}

Candidate's answer: {answer}

Scoring guidelines:
- 85-100: complete, detailed answer covering all key concepts with examples
- 70-84: solid answer covering most concepts, could use more depth
- 50-69: partial answer, missing some important concepts
- 0-49: incomplete or incorrect answer

Return a score from 0 to 100, up to 3 strengths, up to 3 improvements, and 2-3 sentences
of encouraging but honest feedback. {addressee}
"""


def score_level(score: int) -> str:
    if score >= 85:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Satisfactory"
    return "Needs Improvement"


@dataclass
class AnswerReview:
    question_id: str
    score: int
    level: str
    strengths: list = field(default_factory=list)
    improvements: list = field(default_factory=list)
    feedback: str = ""


async def review_answer(
    repo: ItemRepository,
    question_id: str,
    answer: str,
    generator=None,
    candidate_name: Optional[str] = None,
) -> Optional[AnswerReview]:
    """Score a free-text answer against the question's expected points.

    Returns None when the question does not exist. The expected points are
    only sent to the generator and never returned. Answers shorter than
    ``MIN_ANSWER_LENGTH`` are scored without a generator call.
    """
    if not repo.entry.reviewable:
        raise ValueError(f"{repo.entry.kind.value} items have no expected points to review against")
    row = repo.get(question_id)
    if row is None:
        return None

    answer = (answer or "").strip()
    if len(answer) < MIN_ANSWER_LENGTH:
        logger.info("Answer to %s too short to review (%d chars)", question_id, len(answer))
        return AnswerReview(
            question_id=row.id,
            score=10,
            level=score_level(10),
            improvements=[
                "Provide a complete answer to the question",
                "Elaborate on your thoughts with concrete examples",
            ],
            feedback="The answer was too short to evaluate. Try to explain your reasoning in more detail.",
        )

    if generator is None:
        raise GeneratorNotConfiguredError("AI review not configured. Please contact administrator.")

    raw = await generator.review(row.question, list(row.expected_points or []), answer, row.domain, candidate_name)
    review = normalize_review(raw)
    if review is None:
        raise MalformedOutputError("Review response had no usable score")

    logger.info("Reviewed answer to %s: score %d", question_id, review["score"])
    return AnswerReview(question_id=row.id, level=score_level(review["score"]), **review)
