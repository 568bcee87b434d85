"""Content Policy Enforcement: checks generated product claims against a validation policy.

Invariants:
    - All functions are PURE: no IO, no side effects
    - Every violation is reported (no first-error-wins), in claim order
    - Paths point at the offending field: "claims", "claims.<i>.category", ...
"""

from collections.abc import Sequence
from typing import Protocol

from cartguard.core.validation_result import ValidationIssue, ValidationResult


class ClaimLike(Protocol):
    category: str
    confidence: float
    source_url: str


class ProductContentLike(Protocol):
    claims: Sequence[ClaimLike]


class ValidationPolicyLike(Protocol):
    min_confidence: float
    allowed_categories: Sequence[str]
    require_source_for_categories: Sequence[str]
    max_claims_per_product: int


def check_claim_count(
    content: ProductContentLike, policy: ValidationPolicyLike,
) -> ValidationIssue | None:
    count = len(content.claims)
    if count > policy.max_claims_per_product:
        return ValidationIssue(
            "POLICY_MAX_CLAIMS_EXCEEDED",
            f"Claim count {count} exceeds maxClaimsPerProduct {policy.max_claims_per_product}",
            "claims",
        )
    return None


def check_claim(
    index: int, claim: ClaimLike, policy: ValidationPolicyLike,
) -> list[ValidationIssue]:
    issues = []
    category = _value(claim.category)
    if category not in {_value(c) for c in policy.allowed_categories}:
        issues.append(ValidationIssue(
            "POLICY_CATEGORY_NOT_ALLOWED",
            f"Category '{category}' is not allowed by policy",
            f"claims.{index}.category",
        ))
    if claim.confidence < policy.min_confidence:
        issues.append(ValidationIssue(
            "POLICY_MIN_CONFIDENCE",
            f"Confidence {claim.confidence} is below minConfidence {policy.min_confidence}",
            f"claims.{index}.confidence",
        ))
    requires_source = category in {_value(c) for c in policy.require_source_for_categories}
    if requires_source and not str(claim.source_url or "").strip():
        issues.append(ValidationIssue(
            "POLICY_SOURCE_REQUIRED",
            f"Category '{category}' requires a sourceUrl",
            f"claims.{index}.sourceUrl",
        ))
    return issues


def enforce_policy(
    content: ProductContentLike, policy: ValidationPolicyLike,
) -> ValidationResult:
    errors: list[ValidationIssue] = []
    count_error = check_claim_count(content, policy)
    if count_error:
        errors.append(count_error)
    for index, claim in enumerate(content.claims):
        errors.extend(check_claim(index, claim, policy))
    return ValidationResult(errors=tuple(errors))


def _value(category) -> str:
    return getattr(category, "value", category)
