"""Content Validation Service: schema-checks product content and policy, then enforces the policy."""

from cartguard.core.content_policy import enforce_policy
from cartguard.core.validation_result import ValidationResult
from cartguard.schemas.content import ValidationPolicy, parse_product_content
from cartguard.schemas.parsing import SchemaPrefix, parse_payload


def validate_product_content(content_payload: object, policy_payload: object) -> ValidationResult:
    content = parse_product_content(content_payload)
    if not content.ok:
        return ValidationResult.failed(content.issues)
    policy = parse_payload(ValidationPolicy, policy_payload, SchemaPrefix.POLICY)
    if not policy.ok:
        return ValidationResult.failed(policy.issues)
    return enforce_policy(content.value, policy.value)
