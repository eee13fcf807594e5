import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Any

MAX_DOMAIN_LENGTH = 100
DOMAIN_REGEX = re.compile(r"^[a-zA-Z0-9\s\-/.+#&]+$")


def validate_domain(value: Any) -> str:
    """Trim and check a domain name; raises ValueError with a client-facing message."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Domain is required and must be a string")
    trimmed = value.strip()
    if len(trimmed) > MAX_DOMAIN_LENGTH:
        raise ValueError(f"Domain must be 1-{MAX_DOMAIN_LENGTH} characters")
    if not DOMAIN_REGEX.match(trimmed):
        raise ValueError("Domain contains invalid characters")
    return trimmed


class SampleRequest(BaseModel):
    domain: str
    count: Optional[Any] = None  # clamped per item kind, invalid values fall back to the default

    @field_validator("domain", mode="before")
    @classmethod
    def check_domain(cls, v):
        return validate_domain(v)


class SampleResponse(BaseModel):
    items: list[dict[str, Any]]
    available_count: int
    returned: int
    generated_count: int
    condition: str
    is_custom_domain: bool


class InventoryResponse(BaseModel):
    domain: str
    total: int
    easy: int
    medium: int
    hard: int


class AnswerCheckRequest(BaseModel):
    question_id: str = Field(min_length=1, max_length=36)
    answer: str = Field(min_length=1, max_length=16)


class AnswerCheckResponse(BaseModel):
    question_id: str
    correct: bool
    explanation: Optional[str]


class ReviewRequest(BaseModel):
    question_id: str = Field(min_length=1, max_length=36)
    answer: str = Field(max_length=5000)
    candidate_name: Optional[str] = Field(default=None, max_length=100)


class ReviewResponse(BaseModel):
    question_id: str
    score: int
    level: str
    strengths: list[str]
    improvements: list[str]
    feedback: str

    class Config:
        from_attributes = True
