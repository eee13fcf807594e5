from pydantic import BaseModel, Field, field_validator
from questionbank.config import SEED_TARGET_COUNT
from questionbank.schemas.questions import validate_domain
from questionbank.services.catalog import ItemKind


class SeedRequest(BaseModel):
    kind: ItemKind = ItemKind.MCQ
    domain: str
    target_count: int = Field(default=SEED_TARGET_COUNT, ge=1, le=2000)

    @field_validator("domain", mode="before")
    @classmethod
    def check_domain(cls, v):
        return validate_domain(v)


class SeedAllRequest(BaseModel):
    kind: ItemKind = ItemKind.MCQ
    target_count: int = Field(default=SEED_TARGET_COUNT, ge=1, le=2000)


class SeedResponse(BaseModel):
    domain: str
    generated_count: int
    new_total: int
    condition: str

    class Config:
        from_attributes = True


class SeedAllResponse(BaseModel):
    reports: list[SeedResponse]
