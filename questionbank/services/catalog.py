"""Item kinds served by the question bank and everything that differs between them."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from questionbank.models import MCQQuestion, PracticeQuestion, CodingProblem, InterviewQuestion
from questionbank.services.normalizer import normalize_mcq, normalize_coding, normalize_interview
from questionbank.services.tiers import Difficulty


class ItemKind(str, Enum):
    MCQ = "mcq"
    PRACTICE = "practice"
    CODING = "coding"
    INTERVIEW = "interview"


@dataclass(frozen=True)
class CatalogEntry:
    kind: ItemKind
    model: type
    noun: str
    public_fields: tuple
    answer_fields: tuple
    text_field: str
    list_key: str
    batch_size: int
    default_count: int
    max_count: int
    system_instruction: str
    build_prompt: Callable[[str, Difficulty, int], str]
    response_schema: dict
    normalize: Callable[[dict, str, Difficulty], Optional[dict]]

    def __post_init__(self):
        leaked = set(self.public_fields) & set(self.answer_fields)
        if leaked:
            raise ValueError(f"{self.kind.value}: answer fields exposed publicly: {sorted(leaked)}")

    @property
    def gradable(self) -> bool:
        return "correct_answer" in self.answer_fields

    @property
    def reviewable(self) -> bool:
        return "expected_points" in self.answer_fields

    def clamp_count(self, count) -> int:
        """Non-integer or non-positive counts fall back to the default; others are capped."""
        if isinstance(count, bool) or not isinstance(count, (int, float)) or count != count or count < 1:
            return self.default_count
        if count == float("inf"):
            return self.max_count
        return min(int(count), self.max_count)


def _mcq_prompt(domain: str, difficulty: Difficulty, count: int) -> str:
    return f"""Generate exactly {count} unique multiple-choice questions about {domain}.

Requirements:
- Questions must be specifically about {domain} concepts, technologies, tools, and best practices
- Include technical details, real-world scenarios, and practical knowledge
- Each question should have exactly 4 options (A, B, C, D)
- All questions should be {difficulty.value} difficulty
- Questions should be unique and not repeat common patterns
- Cover different aspects: fundamentals, advanced concepts, tools, frameworks, best practices
- Include a clear explanation for why the correct answer is right
"""


def _practice_prompt(domain: str, difficulty: Difficulty, count: int) -> str:
    return f"""Generate {count} multiple-choice practice questions for {domain}.
All questions should be {difficulty.value} difficulty. Each question must have:
- A clear, specific question
- Exactly 4 distinct options
- One correct answer, given as the letter A, B, C or D
- A detailed explanation suitable for a learner reviewing the topic
"""


def _coding_prompt(domain: str, difficulty: Difficulty, count: int) -> str:
    return f"""Generate {count} original coding problems for the domain: {domain}.

Each problem needs:
- A clear, descriptive title
- A detailed description (3-5 sentences) explaining what needs to be solved
- Difficulty: {difficulty.value}
- Input/output formats
- Constraints
- At least 5 test cases with input and expected output
- Sample input and output

Make every problem relevant to {domain} and appropriate for {difficulty.value} difficulty.
"""


def _interview_prompt(domain: str, difficulty: Difficulty, count: int) -> str:
    return f"""Generate exactly {count} interview questions for a {domain} interview.
All questions should be {difficulty.value} difficulty. Mix the categories:
- technical (domain-specific knowledge of {domain})
- behavioral (teamwork, challenges, learning)
- problem-solving (scenario-based, analytical thinking)

For each question provide the question text, its category, its difficulty and
3-5 expected points that a good answer should cover.
Make the questions professional, challenging but fair, and relevant to real-world {domain} work.
"""


_DIFFICULTY_SCHEMA = {"type": "STRING", "enum": ["easy", "medium", "hard"]}

MCQ_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question": {"type": "STRING"},
                    "option_a": {"type": "STRING"},
                    "option_b": {"type": "STRING"},
                    "option_c": {"type": "STRING"},
                    "option_d": {"type": "STRING"},
                    "correct_answer": {"type": "STRING", "enum": ["A", "B", "C", "D"]},
                    "difficulty": _DIFFICULTY_SCHEMA,
                    "explanation": {"type": "STRING"},
                },
                "required": [
                    "question", "option_a", "option_b", "option_c", "option_d",
                    "correct_answer", "difficulty", "explanation",
                ],
            },
        }
    },
    "required": ["questions"],
}

PRACTICE_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question": {"type": "STRING"},
                    "options": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "correctAnswer": {"type": "STRING"},
                    "difficulty": _DIFFICULTY_SCHEMA,
                    "explanation": {"type": "STRING"},
                },
                "required": ["question", "options", "correctAnswer", "explanation"],
            },
        }
    },
    "required": ["questions"],
}

CODING_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "problems": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "difficulty": _DIFFICULTY_SCHEMA,
                    "inputFormat": {"type": "STRING"},
                    "outputFormat": {"type": "STRING"},
                    "constraints": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "testCases": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "input": {"type": "STRING"},
                                "output": {"type": "STRING"},
                                "explanation": {"type": "STRING"},
                            },
                            "required": ["input", "output"],
                        },
                    },
                    "sampleInput": {"type": "STRING"},
                    "sampleOutput": {"type": "STRING"},
                },
                "required": ["title", "description", "difficulty", "inputFormat", "outputFormat", "testCases"],
            },
        }
    },
    "required": ["problems"],
}

INTERVIEW_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question": {"type": "STRING"},
                    "category": {"type": "STRING", "enum": ["technical", "behavioral", "problem-solving"]},
                    "difficulty": _DIFFICULTY_SCHEMA,
                    "expected_points": {"type": "ARRAY", "items": {"type": "STRING"}},
                },
                "required": ["question", "category", "difficulty", "expected_points"],
            },
        }
    },
    "required": ["questions"],
}

_MCQ_PUBLIC = ("id", "domain", "difficulty", "question", "option_a", "option_b", "option_c", "option_d")

CATALOG = {
    ItemKind.MCQ: CatalogEntry(
        kind=ItemKind.MCQ,
        model=MCQQuestion,
        noun="multiple-choice questions",
        public_fields=_MCQ_PUBLIC,
        answer_fields=("correct_answer", "explanation"),
        text_field="question",
        list_key="questions",
        batch_size=10,
        default_count=50,
        max_count=100,
        system_instruction=(
            "You are an expert question generator. Generate high-quality MCQ questions that test "
            "real knowledge. Always include a clear explanation for each answer."
        ),
        build_prompt=_mcq_prompt,
        response_schema=MCQ_RESPONSE_SCHEMA,
        normalize=normalize_mcq,
    ),
    ItemKind.PRACTICE: CatalogEntry(
        kind=ItemKind.PRACTICE,
        model=PracticeQuestion,
        noun="practice questions",
        public_fields=_MCQ_PUBLIC,
        answer_fields=("correct_answer", "explanation"),
        text_field="question",
        list_key="questions",
        batch_size=10,
        default_count=25,
        max_count=50,
        system_instruction="You generate educational MCQ questions for learners.",
        build_prompt=_practice_prompt,
        response_schema=PRACTICE_RESPONSE_SCHEMA,
        normalize=normalize_mcq,
    ),
    ItemKind.CODING: CatalogEntry(
        kind=ItemKind.CODING,
        model=CodingProblem,
        noun="coding problems",
        public_fields=(
            "id", "domain", "difficulty", "title", "description", "input_format",
            "output_format", "constraints", "sample_input", "sample_output",
        ),
        answer_fields=("test_cases",),
        text_field="title",
        list_key="problems",
        batch_size=3,
        default_count=10,
        max_count=20,
        system_instruction="You are a coding problem generator. Generate high-quality, original coding problems.",
        build_prompt=_coding_prompt,
        response_schema=CODING_RESPONSE_SCHEMA,
        normalize=normalize_coding,
    ),
    ItemKind.INTERVIEW: CatalogEntry(
        kind=ItemKind.INTERVIEW,
        model=InterviewQuestion,
        noun="interview questions",
        public_fields=("id", "domain", "difficulty", "question", "category"),
        answer_fields=("expected_points",),
        text_field="question",
        list_key="questions",
        batch_size=10,
        default_count=10,
        max_count=20,
        system_instruction="You are an expert technical interviewer. Generate professional interview questions.",
        build_prompt=_interview_prompt,
        response_schema=INTERVIEW_RESPONSE_SCHEMA,
        normalize=normalize_interview,
    ),
}


def get_entry(kind) -> CatalogEntry:
    return CATALOG[ItemKind(kind)]
