"""Content Schemas: generated product content and the policy it is checked against.

Invariants:
    - Wire names are camelCase (productId, sourceUrl, ...); Python names are snake_case
    - ProductContent has at least one claim
    - Duplicate claims (same normalized statement + source URL + category) are
      reported by parse_product_content, one issue per repeat at "claims.<i>"
    - Policy confidence bounds are 0..1; maxClaimsPerProduct is positive
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl
from pydantic.alias_generators import to_camel

from cartguard.core.domain_types import ClaimCategory
from cartguard.core.validation_result import ParseOutcome, ValidationIssue
from cartguard.schemas.parsing import SchemaPrefix, parse_payload


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Claim(_CamelModel):
    id: UUID
    statement: str = Field(min_length=1)
    source_url: HttpUrl
    category: ClaimCategory
    confidence: float = Field(ge=0, le=1)
    created_at: datetime


class ProductContent(_CamelModel):
    product_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    claims: list[Claim] = Field(min_length=1)


def duplicate_claim_indexes(claims: list[Claim]) -> list[int]:
    """Index of every claim that repeats an earlier one (statement + source URL + category)."""
    seen: set[tuple[str, str, str]] = set()
    duplicates = []
    for index, claim in enumerate(claims):
        key = (
            claim.statement.strip().lower(),
            str(claim.source_url).strip().lower(),
            claim.category.value,
        )
        if key in seen:
            duplicates.append(index)
        seen.add(key)
    return duplicates


def parse_product_content(payload: object) -> ParseOutcome:
    """parse_payload for ProductContent, plus one issue per duplicate claim."""
    outcome = parse_payload(ProductContent, payload, SchemaPrefix.PRODUCT)
    if not outcome.ok:
        return outcome
    issues = [
        ValidationIssue(
            code=f"{SchemaPrefix.PRODUCT.value}_DUPLICATE_CLAIM",
            message=f"Duplicate claim detected at claims.{index}",
            path=f"claims.{index}",
        )
        for index in duplicate_claim_indexes(outcome.value.claims)
    ]
    return ParseOutcome(issues=issues) if issues else outcome


class ValidationPolicy(_CamelModel):
    min_confidence: float = Field(ge=0, le=1)
    allowed_categories: list[ClaimCategory]
    require_source_for_categories: list[ClaimCategory]
    max_claims_per_product: int = Field(gt=0)
