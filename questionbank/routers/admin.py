import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from questionbank.config import PRESEEDED_DOMAINS
from questionbank.database import get_db
from questionbank.dependencies import get_generator
from questionbank.errors import GeneratorNotConfiguredError
from questionbank.schemas.admin import SeedRequest, SeedAllRequest, SeedResponse, SeedAllResponse
from questionbank.services.catalog import get_entry
from questionbank.services.repository import ItemRepository
from questionbank.services.seeding import seed_to_target, seed_domains

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _not_configured(e: GeneratorNotConfiguredError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.post("/seed", response_model=SeedResponse)
async def seed(
    request: SeedRequest,
    db: Session = Depends(get_db),
    generator=Depends(get_generator),
):
    """Grow one domain's inventory up to ``target_count`` items."""
    repo = ItemRepository(db, get_entry(request.kind))
    try:
        report = await seed_to_target(repo, request.domain, request.target_count, generator=generator)
    except GeneratorNotConfiguredError as e:
        raise _not_configured(e)
    return SeedResponse.model_validate(report)


@router.post("/seed-all", response_model=SeedAllResponse)
async def seed_all(
    request: SeedAllRequest,
    db: Session = Depends(get_db),
    generator=Depends(get_generator),
):
    """Seed every preseeded domain in turn."""
    repo = ItemRepository(db, get_entry(request.kind))
    try:
        reports = await seed_domains(repo, PRESEEDED_DOMAINS, request.target_count, generator=generator)
    except GeneratorNotConfiguredError as e:
        raise _not_configured(e)
    logger.info("Seeded %d domains with %s", len(reports), get_entry(request.kind).noun)
    return SeedAllResponse(reports=[SeedResponse.model_validate(r) for r in reports])
