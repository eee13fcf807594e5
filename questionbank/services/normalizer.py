"""Parse and normalize untrusted generator output into storable items."""

import json
import logging
import re
from typing import Any, Optional

from questionbank.errors import MalformedOutputError
from questionbank.services.tiers import Difficulty, coerce_difficulty

logger = logging.getLogger(__name__)

MAX_QUESTION_LENGTH = 2000
MAX_DESCRIPTION_LENGTH = 4000
OPTION_LETTERS = ("A", "B", "C", "D")
INTERVIEW_CATEGORIES = ("technical", "behavioral", "problem-solving")

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)```")
_OPTION_LABEL_RE = re.compile(r"^\s*(?:\(?([A-Da-d])[\).:]|option\s+[A-Da-d]\s*[\).:-])\s+", re.IGNORECASE)
_ANSWER_LETTER_RE = re.compile(r"^(?:option\s*)?\(?([A-Da-d])\)?[\).:]?$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced block, or the text itself."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _extract_first_json_value(text: str) -> Any:
    """Pull the outermost JSON array or object out of surrounding prose."""
    starts = [i for i in (text.find("["), text.find("{")) if i >= 0]
    if not starts:
        raise ValueError("No JSON value found in model response")
    start = min(starts)
    closer = "]" if text[start] == "[" else "}"
    end = text.rfind(closer)
    if end <= start:
        raise ValueError("No JSON value found in model response")
    return json.loads(text[start : end + 1])


def parse_candidates(text: str, list_key: str) -> list[dict]:
    """Parse a model response into a list of raw candidate dicts.

    Accepts a bare array, an object wrapping the array under ``list_key``
    (or ``items``), or a single candidate object.
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedOutputError("Model response was empty")
    body = strip_code_fences(text)
    try:
        parsed = json.loads(body)
    except ValueError:
        try:
            parsed = _extract_first_json_value(body)
        except ValueError as e:
            raise MalformedOutputError(f"Model response was not JSON: {e}") from e

    if isinstance(parsed, dict):
        for key in (list_key, "items"):
            if isinstance(parsed.get(key), list):
                parsed = parsed[key]
                break
        else:
            parsed = [parsed]
    if not isinstance(parsed, list):
        raise MalformedOutputError("Model response did not contain a list of items")
    return [c for c in parsed if isinstance(c, dict)]


def _text(value: Any, limit: Optional[int] = None) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if limit and len(text) > limit:
        text = text[: limit - 1].rstrip() + "…"
    return text


def _first(raw: dict, *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _clean_option(value: Any) -> str:
    return _OPTION_LABEL_RE.sub("", _text(value), count=1).strip()


def _options_from(raw: dict) -> Optional[list[str]]:
    named = [_text(raw.get(f"option_{letter.lower()}")) for letter in OPTION_LETTERS]
    if all(named):
        return named
    options = raw.get("options")
    if isinstance(options, dict):
        options = [options.get(letter) or options.get(letter.lower()) for letter in OPTION_LETTERS]
    if not isinstance(options, list) or len(options) < 4:
        return None
    cleaned = [_clean_option(o) for o in options[:4]]
    if not all(cleaned):
        return None
    return cleaned


def _answer_letter(answer: Any, options: list[str]) -> Optional[str]:
    """Resolve a letter, a labelled letter or the literal option text to A-D."""
    text = _text(answer)
    if not text:
        return None
    match = _ANSWER_LETTER_RE.match(text)
    if match:
        return match.group(1).upper()
    lowered = text.lower()
    for letter, option in zip(OPTION_LETTERS, options):
        if option.lower() == lowered:
            return letter
    stripped = _clean_option(text).lower()
    for letter, option in zip(OPTION_LETTERS, options):
        if option.lower() == stripped:
            return letter
    return None


def normalize_mcq(raw: dict, domain: str, difficulty: Difficulty) -> Optional[dict]:
    """Normalize a multiple choice candidate; None when it cannot be repaired."""
    question = _text(raw.get("question"), MAX_QUESTION_LENGTH)
    if not question:
        return None
    options = _options_from(raw)
    if not options:
        return None
    letter = _answer_letter(_first(raw, "correct_answer", "correctAnswer", "answer"), options)
    if not letter:
        return None
    explanation = _text(raw.get("explanation")) or None
    return {
        "domain": domain,
        "difficulty": coerce_difficulty(raw.get("difficulty"), difficulty).value,
        "question": question,
        "option_a": options[0],
        "option_b": options[1],
        "option_c": options[2],
        "option_d": options[3],
        "correct_answer": letter,
        "explanation": explanation,
    }


def _test_cases(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    normalized: list[dict] = []
    for t in value:
        if not isinstance(t, dict):
            continue
        inp = t.get("input")
        out = _first(t, "output", "expectedOutput", "expected_output")
        if inp is None or out is None:
            continue
        normalized.append(
            {
                "input": inp if isinstance(inp, str) else json.dumps(inp),
                "output": out if isinstance(out, str) else json.dumps(out),
                "explanation": _text(t.get("explanation")),
            }
        )
    return normalized


def normalize_coding(raw: dict, domain: str, difficulty: Difficulty) -> Optional[dict]:
    """Normalize a coding problem candidate."""
    title = _text(_first(raw, "title", "problem_title"), 255)
    description = _text(_first(raw, "description", "prompt"), MAX_DESCRIPTION_LENGTH)
    if not title or not description:
        return None

    test_cases = _test_cases(_first(raw, "test_cases", "testCases", "tests"))
    if not test_cases:
        return None

    constraints = _first(raw, "constraints")
    if not isinstance(constraints, list):
        constraints = [constraints] if constraints else []

    sample_input = _text(_first(raw, "sample_input", "sampleInput")) or test_cases[0]["input"]
    sample_output = _text(_first(raw, "sample_output", "sampleOutput")) or test_cases[0]["output"]

    return {
        "domain": domain,
        "difficulty": coerce_difficulty(raw.get("difficulty"), difficulty).value,
        "title": title,
        "description": description,
        "input_format": _text(_first(raw, "input_format", "inputFormat")),
        "output_format": _text(_first(raw, "output_format", "outputFormat")),
        "constraints": [_text(c) for c in constraints if _text(c)],
        "sample_input": sample_input,
        "sample_output": sample_output,
        "test_cases": test_cases,
    }


def _category(value: Any) -> str:
    tag = _text(value).lower().replace("_", "-").replace(" ", "-")
    return tag if tag in INTERVIEW_CATEGORIES else "technical"


def normalize_interview(raw: dict, domain: str, difficulty: Difficulty) -> Optional[dict]:
    """Normalize an interview question candidate."""
    question = _text(raw.get("question"), MAX_QUESTION_LENGTH)
    if not question:
        return None
    points = _first(raw, "expected_points", "expectedPoints", "key_points")
    if isinstance(points, str):
        points = [points]
    if not isinstance(points, list):
        return None
    points = [_text(p) for p in points if _text(p)]
    if not points:
        return None
    return {
        "domain": domain,
        "difficulty": coerce_difficulty(raw.get("difficulty"), difficulty).value,
        "question": question,
        "category": _category(raw.get("category")),
        "expected_points": points,
    }


def normalize_batch(entry, candidates: list[dict], domain: str, difficulty: Difficulty, seen: set) -> list[dict]:
    """Validate a generated batch, dropping rejects and repeats of text in ``seen``.

    ``seen`` holds lower-cased item texts and is updated in place so it can
    span every batch of one generation run.
    """
    items: list[dict] = []
    rejected = 0
    for raw in candidates:
        item = entry.normalize(raw, domain, difficulty)
        if item is None:
            rejected += 1
            continue
        key = item[entry.text_field].strip().lower()
        if key in seen:
            rejected += 1
            continue
        seen.add(key)
        items.append(item)
    if rejected:
        logger.info("Dropped %d of %d generated %s for %s", rejected, len(candidates), entry.kind.value, domain)
    return items


def normalize_review(raw: Any) -> Optional[dict]:
    """Clamp a generated answer review; None when it carries no numeric score."""
    if not isinstance(raw, dict):
        return None
    score = raw.get("score")
    if isinstance(score, str):
        try:
            score = float(score.strip().rstrip("%"))
        except ValueError:
            return None
    if isinstance(score, bool) or not isinstance(score, (int, float)) or score != score:
        return None

    def _points(value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []
        return [_text(v, 300) for v in value if _text(v)][:5]

    return {
        "score": int(round(max(0, min(100, score)))),
        "strengths": _points(raw.get("strengths")),
        "improvements": _points(raw.get("improvements")),
        "feedback": _text(_first(raw, "feedback", "verbalFeedback", "verbal_feedback"), 1000),
    }
