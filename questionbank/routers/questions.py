import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from questionbank.config import PRESEEDED_DOMAINS
from questionbank.database import get_db
from questionbank.dependencies import get_generator
from questionbank.errors import GenerationError, GeneratorNotConfiguredError, QuotaExhaustedError, RateLimitedError
from questionbank.schemas.questions import (
    SampleRequest,
    SampleResponse,
    InventoryResponse,
    AnswerCheckRequest,
    AnswerCheckResponse,
    ReviewRequest,
    ReviewResponse,
    validate_domain,
)
from questionbank.services.catalog import ItemKind, get_entry
from questionbank.services.grading import check_answer
from questionbank.services.repository import ItemRepository
from questionbank.services.review import review_answer
from questionbank.services.sampler import SupplyCondition, sample_items

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/questions", tags=["questions"])

_PRESEEDED = {d.lower() for d in PRESEEDED_DOMAINS}


@router.post("/{kind}/sample", response_model=SampleResponse)
async def sample(
    kind: ItemKind,
    request: SampleRequest,
    db: Session = Depends(get_db),
    generator=Depends(get_generator),
):
    """Serve a shuffled, difficulty-balanced set of items for a domain, generating any shortfall."""
    entry = get_entry(kind)
    count = entry.clamp_count(request.count)
    repo = ItemRepository(db, entry)

    result = await sample_items(repo, request.domain, count, generator=generator)

    if not result.items:
        if result.condition == SupplyCondition.RATE_LIMITED:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Rate limit exceeded. Please try again in a moment.",
            )
        if result.condition == SupplyCondition.QUOTA_EXHAUSTED:
            raise HTTPException(
                status_code=status.HTTP_402_PAYMENT_REQUIRED,
                detail="AI generation credits exhausted. Please try again later.",
            )
        if result.condition == SupplyCondition.GENERATOR_UNAVAILABLE:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="AI generation is temporarily unavailable. Please try again later.",
            )
        if generator is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="No questions available and AI generation is not configured.",
            )

    logger.info("Returning %d %s for %s (%s)", len(result.items), entry.noun, request.domain, result.condition.value)
    return SampleResponse(
        items=result.items,
        available_count=result.available_count,
        returned=len(result.items),
        generated_count=result.generated_count,
        condition=result.condition.value,
        is_custom_domain=request.domain.lower() not in _PRESEEDED,
    )


@router.get("/{kind}/inventory", response_model=InventoryResponse)
async def inventory(
    kind: ItemKind,
    domain: str = Query(...),
    db: Session = Depends(get_db),
):
    """Per-difficulty item counts for a domain."""
    try:
        domain = validate_domain(domain)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    counts = ItemRepository(db, get_entry(kind)).inventory(domain)
    return InventoryResponse(domain=domain, **counts)


@router.post("/{kind}/check", response_model=AnswerCheckResponse)
async def check(
    kind: ItemKind,
    request: AnswerCheckRequest,
    db: Session = Depends(get_db),
):
    """Grade a submitted option letter without revealing the answer key."""
    entry = get_entry(kind)
    if not entry.gradable:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{entry.noun.capitalize()} cannot be checked by option letter",
        )
    result = check_answer(ItemRepository(db, entry), request.question_id, request.answer)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    return AnswerCheckResponse(
        question_id=result.question_id,
        correct=result.correct,
        explanation=result.explanation,
    )


@router.post("/{kind}/review", response_model=ReviewResponse)
async def review(
    kind: ItemKind,
    request: ReviewRequest,
    db: Session = Depends(get_db),
    generator=Depends(get_generator),
):
    """Score a free-text interview answer; the expected points stay on the server."""
    entry = get_entry(kind)
    if not entry.reviewable:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{entry.noun.capitalize()} cannot be reviewed against expected points",
        )
    try:
        result = await review_answer(
            ItemRepository(db, entry),
            request.question_id,
            request.answer,
            generator=generator,
            candidate_name=request.candidate_name,
        )
    except RateLimitedError:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Please try again in a moment.",
        )
    except QuotaExhaustedError:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="AI generation credits exhausted. Please try again later.",
        )
    except GeneratorNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except GenerationError as e:
        logger.error("Answer review for %s failed: %s", request.question_id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI review is temporarily unavailable. Please try again later.",
        )
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    return ReviewResponse.model_validate(result)
