"""Difficulty-stratified random sampling with generative backfill."""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from questionbank.errors import MalformedOutputError
from questionbank.services.backfill import backfill
from questionbank.services.repository import ItemRepository
from questionbank.services.tiers import Difficulty, TIERS, split_tiers

logger = logging.getLogger(__name__)


class SupplyCondition(str, Enum):
    OK = "ok"
    PARTIAL_SUPPLY = "partial_supply"
    NO_CONTENT = "no_content"
    RATE_LIMITED = "rate_limited"
    QUOTA_EXHAUSTED = "quota_exhausted"
    GENERATOR_UNAVAILABLE = "generator_unavailable"


@dataclass
class SampleResult:
    items: list = field(default_factory=list)
    available_count: int = 0
    generated_count: int = 0
    condition: SupplyCondition = SupplyCondition.OK


def random_slice(
    repo: ItemRepository,
    domain: str,
    difficulty: Optional[Difficulty],
    wanted: int,
    rng=random,
    exclude_ids: Optional[list] = None,
) -> list[dict]:
    """Read ``min(wanted, available)`` contiguous items starting at a uniform random offset."""
    if wanted <= 0:
        return []
    available = repo.count(domain, difficulty, exclude_ids)
    to_fetch = min(wanted, available)
    if to_fetch <= 0:
        return []
    offset = rng.randint(0, available - to_fetch)
    return repo.range_read(domain, difficulty, offset, to_fetch, exclude_ids=exclude_ids)


async def sample_items(
    repo: ItemRepository,
    domain: str,
    requested_count: int,
    generator=None,
    rng=None,
    batch_delay: Optional[float] = None,
) -> SampleResult:
    """Return a shuffled, answer-free sample of up to ``requested_count`` items.

    Tiers short of their 30/40/30 target are backfilled through ``generator``
    first (when one is configured). Whatever the generator does, the
    existing supply is still served; the result's condition says why it
    may be short.
    """
    rng = rng or random.Random()
    if requested_count <= 0:
        return SampleResult(available_count=repo.count(domain))

    targets = split_tiers(requested_count)
    supply = {tier: repo.count(domain, tier) for tier in TIERS}
    needs = {tier: targets[tier] - supply[tier] for tier in TIERS if targets[tier] > supply[tier]}
    logger.info("Sampling %d %s for %s: targets %s, supply %s",
                requested_count, repo.entry.noun, domain,
                {t.value: n for t, n in targets.items()}, {t.value: n for t, n in supply.items()})

    generated = 0
    generation_error = None
    if needs and generator is not None:
        outcome = await backfill(repo, generator, domain, needs, batch_delay=batch_delay)
        generated = outcome.generated
        generation_error = outcome.error
    elif needs:
        logger.warning("No generator configured; serving existing %s for %s only", repo.entry.noun, domain)

    items: list[dict] = []
    for tier in TIERS:
        items.extend(random_slice(repo, domain, tier, targets[tier], rng))

    if len(items) < requested_count:
        selected_ids = [item["id"] for item in items]
        top_up = random_slice(repo, domain, None, requested_count - len(items), rng, exclude_ids=selected_ids)
        if top_up:
            logger.info("Topped up %d %s for %s from other tiers", len(top_up), repo.entry.noun, domain)
        items.extend(top_up)

    rng.shuffle(items)

    if len(items) >= requested_count:
        condition = SupplyCondition.OK
    elif generation_error is not None and not isinstance(generation_error, MalformedOutputError):
        if generation_error.condition in (SupplyCondition.RATE_LIMITED.value, SupplyCondition.QUOTA_EXHAUSTED.value):
            condition = SupplyCondition(generation_error.condition)
        else:
            condition = SupplyCondition.GENERATOR_UNAVAILABLE
    elif not items:
        condition = SupplyCondition.NO_CONTENT
    else:
        condition = SupplyCondition.PARTIAL_SUPPLY

    return SampleResult(
        items=items,
        available_count=repo.count(domain),
        generated_count=generated,
        condition=condition,
    )
