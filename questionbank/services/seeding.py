"""Grow a domain's inventory to a target size, independent of any sample request."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from questionbank import config
from questionbank.errors import GeneratorNotConfiguredError
from questionbank.services.backfill import backfill
from questionbank.services.repository import ItemRepository
from questionbank.services.tiers import split_tiers

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    domain: str
    generated_count: int
    new_total: int
    condition: str = "ok"


async def seed_to_target(
    repo: ItemRepository,
    domain: str,
    target_count: int,
    generator=None,
    batch_delay: Optional[float] = None,
) -> SeedReport:
    """Generate the missing ``target_count - current`` items, split 30/40/30 by tier.

    Safe to re-run: the deficit is recomputed from the store on every call.
    Items committed by earlier batches are kept even when a later batch fails.
    """
    current = repo.count(domain)
    deficit = max(0, target_count - current)
    logger.info("Seeding %s for %s: %d existing, need %d more", repo.entry.noun, domain, current, deficit)

    if deficit == 0:
        return SeedReport(domain=domain, generated_count=0, new_total=current)
    if generator is None:
        raise GeneratorNotConfiguredError("AI generation not configured. Please contact administrator.")

    outcome = await backfill(repo, generator, domain, split_tiers(deficit), batch_delay=batch_delay)
    new_total = repo.count(domain)

    if new_total >= target_count:
        condition = "ok"
    elif outcome.error is not None:
        condition = outcome.error.condition
    else:
        condition = "partial_supply"
    logger.info("Generated %d %s for %s (total %d)", outcome.generated, repo.entry.noun, domain, new_total)
    return SeedReport(domain=domain, generated_count=outcome.generated, new_total=new_total, condition=condition)


async def seed_domains(
    repo: ItemRepository,
    domains: list[str],
    target_count: int,
    generator=None,
    batch_delay: Optional[float] = None,
) -> list[SeedReport]:
    """Seed several domains one after another, stopping at a terminal generator error."""
    batch_delay = config.GENERATION_BATCH_DELAY if batch_delay is None else batch_delay
    reports: list[SeedReport] = []
    for i, domain in enumerate(domains):
        if i > 0 and batch_delay > 0:
            await asyncio.sleep(batch_delay)
        report = await seed_to_target(repo, domain, target_count, generator, batch_delay=batch_delay)
        reports.append(report)
        if report.condition in ("rate_limited", "quota_exhausted"):
            logger.error("Stopping seed run after %s: %s", domain, report.condition)
            break
    return reports
