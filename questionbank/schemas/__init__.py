from questionbank.schemas.questions import (
    SampleRequest,
    SampleResponse,
    InventoryResponse,
    AnswerCheckRequest,
    AnswerCheckResponse,
    ReviewRequest,
    ReviewResponse,
)
from questionbank.schemas.admin import SeedRequest, SeedAllRequest, SeedResponse, SeedAllResponse

__all__ = [
    "SampleRequest",
    "SampleResponse",
    "InventoryResponse",
    "AnswerCheckRequest",
    "AnswerCheckResponse",
    "ReviewRequest",
    "ReviewResponse",
    "SeedRequest",
    "SeedAllRequest",
    "SeedResponse",
    "SeedAllResponse",
]
