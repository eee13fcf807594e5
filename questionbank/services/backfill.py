"""Generate, validate and persist items until per-tier needs are met."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from questionbank import config
from questionbank.errors import GenerationError
from questionbank.services.normalizer import normalize_batch
from questionbank.services.repository import ItemRepository
from questionbank.services.tiers import Difficulty, TIERS

logger = logging.getLogger(__name__)


@dataclass
class BackfillOutcome:
    generated: int = 0
    batches: int = 0
    error: Optional[GenerationError] = None
    inserted_ids: list = field(default_factory=list)


async def backfill(
    repo: ItemRepository,
    generator,
    domain: str,
    needs: dict,
    batch_delay: Optional[float] = None,
    max_empty_batches: Optional[int] = None,
) -> BackfillOutcome:
    """Run sequential generation batches for ``needs`` ({Difficulty: count}).

    Tiers are served round-robin so an early stop still spreads new supply.
    Every batch is committed before the next one starts. Rate limit and
    quota errors end the run; malformed or failed batches only count
    towards ``max_empty_batches`` consecutive empty batches.
    """
    entry = repo.entry
    batch_delay = config.GENERATION_BATCH_DELAY if batch_delay is None else batch_delay
    max_empty_batches = max_empty_batches or config.MAX_EMPTY_BATCHES

    remaining = {Difficulty(d): int(n) for d, n in needs.items() if n > 0}
    outcome = BackfillOutcome()
    seen: set = set()
    empty_streak = 0

    while any(remaining.values()):
        for difficulty in TIERS:
            if remaining.get(difficulty, 0) <= 0:
                continue
            batch_count = min(entry.batch_size, remaining[difficulty])

            if outcome.batches > 0 and batch_delay > 0:
                await asyncio.sleep(batch_delay)
            outcome.batches += 1
            logger.info("Generating batch %d: %d %s %s for %s",
                        outcome.batches, batch_count, difficulty.value, entry.noun, domain)

            try:
                candidates = await generator.generate(entry, domain, difficulty, batch_count)
            except GenerationError as e:
                if e.terminal:
                    logger.error("Stopping generation for %s: %s", domain, e)
                    outcome.error = e
                    return outcome
                logger.warning("Batch %d for %s failed: %s", outcome.batches, domain, e)
                items = []
                last_error = e
            else:
                items = normalize_batch(entry, candidates[:batch_count], domain, difficulty, seen)
                last_error = None

            inserted = repo.insert_many(items)
            if not inserted:
                empty_streak += 1
                if empty_streak >= max_empty_batches:
                    logger.error("%d consecutive empty batches for %s, giving up", empty_streak, domain)
                    outcome.error = last_error
                    return outcome
                continue

            empty_streak = 0
            outcome.generated += len(inserted)
            outcome.inserted_ids.extend(inserted)
            remaining[difficulty] = max(0, remaining[difficulty] - len(inserted))
            logger.info("Batch %d inserted: %d %s", outcome.batches, len(inserted), entry.noun)

    return outcome
