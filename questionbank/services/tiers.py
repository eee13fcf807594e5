"""Difficulty tiers and the 30/40/30 stratification split."""

import difflib
from enum import Enum


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


TIERS = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)

_ALIASES = {
    "beginner": Difficulty.EASY,
    "basic": Difficulty.EASY,
    "simple": Difficulty.EASY,
    "intermediate": Difficulty.MEDIUM,
    "moderate": Difficulty.MEDIUM,
    "advanced": Difficulty.HARD,
    "difficult": Difficulty.HARD,
    "expert": Difficulty.HARD,
}


def split_tiers(count: int) -> dict[Difficulty, int]:
    """Split a request into easy/medium/hard targets; hard absorbs the remainder."""
    count = max(0, int(count))
    easy = (count * 3) // 10
    medium = (count * 4) // 10
    return {
        Difficulty.EASY: easy,
        Difficulty.MEDIUM: medium,
        Difficulty.HARD: count - easy - medium,
    }


def coerce_difficulty(value, default: Difficulty) -> Difficulty:
    """Map generator difficulty tags (any casing, common synonyms, typos) onto a tier."""
    if isinstance(value, Difficulty):
        return value
    if not isinstance(value, str):
        return default
    tag = value.strip().lower()
    if not tag:
        return default
    for tier in TIERS:
        if tag == tier.value:
            return tier
    if tag in _ALIASES:
        return _ALIASES[tag]
    close = difflib.get_close_matches(tag, [t.value for t in TIERS], n=1, cutoff=0.75)
    if close:
        return Difficulty(close[0])
    return default
