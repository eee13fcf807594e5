import asyncio

import pytest

from questionbank.errors import GeneratorNotConfiguredError, RateLimitedError
from questionbank.services.seeding import seed_domains, seed_to_target
from tests.fakes import FakeGenerator, FailingGenerator, stock


def test_seed_fills_deficit(repo_for):
    repo = repo_for("mcq")
    stock(repo, "DevOps", easy=2)
    generator = FakeGenerator()

    report = asyncio.run(seed_to_target(repo, "DevOps", 12, generator, batch_delay=0))

    assert report.generated_count == 10
    assert report.new_total == 12
    assert report.condition == "ok"
    assert repo.inventory("DevOps") == {"total": 12, "easy": 5, "medium": 4, "hard": 3}


def test_seed_is_idempotent(repo_for):
    repo = repo_for("interview")
    generator = FakeGenerator()

    asyncio.run(seed_to_target(repo, "DevOps", 10, generator, batch_delay=0))
    calls = len(generator.calls)
    report = asyncio.run(seed_to_target(repo, "DevOps", 10, generator, batch_delay=0))

    assert report.generated_count == 0
    assert report.new_total == 10
    assert len(generator.calls) == calls


def test_seed_at_target_needs_no_generator(repo_for):
    repo = repo_for("mcq")
    stock(repo, "DevOps", hard=3)
    report = asyncio.run(seed_to_target(repo, "DevOps", 3, None, batch_delay=0))
    assert report.generated_count == 0


def test_seed_without_generator_raises(repo_for):
    with pytest.raises(GeneratorNotConfiguredError):
        asyncio.run(seed_to_target(repo_for("mcq"), "DevOps", 5, None, batch_delay=0))


def test_seed_keeps_committed_batches_after_rate_limit(repo_for):
    repo = repo_for("mcq")
    generator = FakeGenerator(script=[None, None, RateLimitedError("429")])

    report = asyncio.run(seed_to_target(repo, "DevOps", 20, generator, batch_delay=0))

    assert report.condition == "rate_limited"
    assert len(generator.calls) == 3
    assert report.new_total == report.generated_count == 14
    assert repo.inventory("DevOps") == {"total": 14, "easy": 6, "medium": 8, "hard": 0}


def test_seed_domains_in_order(repo_for):
    repo = repo_for("practice")
    generator = FakeGenerator()

    reports = asyncio.run(seed_domains(repo, ["DevOps", "Blockchain"], 4, generator, batch_delay=0))

    assert [r.domain for r in reports] == ["DevOps", "Blockchain"]
    assert all(r.new_total == 4 for r in reports)


def test_seed_domains_stops_on_rate_limit(repo_for):
    generator = FailingGenerator(RateLimitedError("429"))

    reports = asyncio.run(seed_domains(repo_for("mcq"), ["DevOps", "Blockchain"], 4, generator, batch_delay=0))

    assert len(reports) == 1
    assert reports[0].condition == "rate_limited"
