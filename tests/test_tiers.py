import pytest

from questionbank.services.catalog import CATALOG, CatalogEntry, ItemKind, get_entry
from questionbank.services.tiers import Difficulty, coerce_difficulty, split_tiers


def test_split_tiers_thirty_forty_thirty():
    assert split_tiers(10) == {Difficulty.EASY: 3, Difficulty.MEDIUM: 4, Difficulty.HARD: 3}
    assert split_tiers(50) == {Difficulty.EASY: 15, Difficulty.MEDIUM: 20, Difficulty.HARD: 15}


def test_split_tiers_remainder_goes_to_hard():
    assert split_tiers(1) == {Difficulty.EASY: 0, Difficulty.MEDIUM: 0, Difficulty.HARD: 1}
    assert split_tiers(7) == {Difficulty.EASY: 2, Difficulty.MEDIUM: 2, Difficulty.HARD: 3}


@pytest.mark.parametrize("count", range(0, 101))
def test_split_tiers_always_sums_to_count(count):
    assert sum(split_tiers(count).values()) == count


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("EASY", Difficulty.EASY),
        (" Medium ", Difficulty.MEDIUM),
        ("advanced", Difficulty.HARD),
        ("Beginner", Difficulty.EASY),
        ("intermediate", Difficulty.MEDIUM),
        ("hardd", Difficulty.HARD),
    ],
)
def test_coerce_difficulty_maps_tags(tag, expected):
    assert coerce_difficulty(tag, Difficulty.MEDIUM) == expected


def test_coerce_difficulty_falls_back_to_default():
    assert coerce_difficulty("banana", Difficulty.EASY) == Difficulty.EASY
    assert coerce_difficulty(None, Difficulty.HARD) == Difficulty.HARD
    assert coerce_difficulty(3, Difficulty.MEDIUM) == Difficulty.MEDIUM


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 50), ("abc", 50), (0, 50), (-5, 50), (True, 50), (float("nan"), 50), (7.9, 7), (30, 30), (500, 100)],
)
def test_clamp_count(raw, expected):
    assert get_entry("mcq").clamp_count(raw) == expected


def test_catalog_limits_per_kind():
    assert (CATALOG[ItemKind.PRACTICE].default_count, CATALOG[ItemKind.PRACTICE].max_count) == (25, 50)
    assert (CATALOG[ItemKind.CODING].default_count, CATALOG[ItemKind.CODING].max_count) == (10, 20)
    assert get_entry("interview").clamp_count(99) == 20


def test_no_catalog_entry_exposes_answer_fields():
    for entry in CATALOG.values():
        assert not set(entry.public_fields) & set(entry.answer_fields)


def test_catalog_entry_rejects_public_answer_field():
    mcq = get_entry("mcq")
    with pytest.raises(ValueError):
        CatalogEntry(**{**mcq.__dict__, "public_fields": mcq.public_fields + ("correct_answer",)})


def test_only_option_kinds_are_gradable():
    assert get_entry("mcq").gradable and get_entry("practice").gradable
    assert not get_entry("coding").gradable and not get_entry("interview").gradable
