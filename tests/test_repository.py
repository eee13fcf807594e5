from questionbank.services.tiers import Difficulty
from tests.fakes import stock


def test_count_by_domain_and_tier(repo_for):
    repo = repo_for("mcq")
    stock(repo, "DevOps", easy=2, medium=3, hard=1)
    stock(repo, "Blockchain", easy=4)

    assert repo.count("DevOps") == 6
    assert repo.count("DevOps", Difficulty.MEDIUM) == 3
    assert repo.count("Blockchain", Difficulty.HARD) == 0
    assert repo.count("Unknown") == 0


def test_range_read_projects_public_fields_only(repo_for):
    repo = repo_for("mcq")
    stock(repo, "DevOps", easy=3)

    rows = repo.range_read("DevOps", Difficulty.EASY, 0, 10)
    assert len(rows) == 3
    for row in rows:
        assert set(row) == set(repo.entry.public_fields)
        assert "correct_answer" not in row and "explanation" not in row


def test_range_read_slices_in_stable_order(repo_for):
    repo = repo_for("interview")
    stock(repo, "DevOps", medium=5)

    everything = [r["id"] for r in repo.range_read("DevOps", Difficulty.MEDIUM, 0, 5)]
    assert everything == sorted(everything)
    assert [r["id"] for r in repo.range_read("DevOps", Difficulty.MEDIUM, 2, 2)] == everything[2:4]
    assert repo.range_read("DevOps", Difficulty.MEDIUM, 0, 0) == []


def test_exclude_ids(repo_for):
    repo = repo_for("coding")
    ids = stock(repo, "Algorithms", hard=4)

    assert repo.count("Algorithms", exclude_ids=ids[:3]) == 1
    rows = repo.range_read("Algorithms", None, 0, 10, exclude_ids=ids[:3])
    assert [r["id"] for r in rows] == [ids[3]]


def test_inventory(repo_for):
    repo = repo_for("practice")
    stock(repo, "Cloud Computing", easy=1, medium=2, hard=3)
    assert repo.inventory("Cloud Computing") == {"total": 6, "easy": 1, "medium": 2, "hard": 3}
    assert repo.inventory("Nothing") == {"total": 0, "easy": 0, "medium": 0, "hard": 0}


def test_get_returns_answer_key(repo_for):
    repo = repo_for("mcq")
    [item_id] = stock(repo, "DevOps", easy=1)
    row = repo.get(item_id)
    assert row.correct_answer == "B"
    assert repo.get("missing") is None


def test_insert_many_falls_back_to_row_by_row(repo_for):
    repo = repo_for("mcq")
    good = repo.entry.normalize(
        {"question": "q?", "options": ["a", "b", "c", "d"], "correct_answer": "A"}, "DevOps", Difficulty.EASY
    )
    broken = dict(good, question=None)

    inserted = repo.insert_many([good, broken])
    assert len(inserted) == 1
    assert repo.count("DevOps") == 1
    assert repo.insert_many([]) == []
