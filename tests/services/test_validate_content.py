"""Content Validation Service: schema checks, then policy enforcement."""

from cartguard.services.validate_content import validate_product_content


def _content(**claim_overrides) -> dict:
    claim = {
        "id": "5d1f0a1e-9a8f-4a52-9a57-1f7b1a3f2c10",
        "statement": "Made from 80% recycled aluminium",
        "sourceUrl": "https://example.com/lca-report",
        "category": "sustainability",
        "confidence": 0.9,
        "createdAt": "2026-02-01T10:00:00Z",
    }
    claim.update(claim_overrides)
    return {"productId": "sku-100", "title": "Desk lamp", "description": "LED lamp", "claims": [claim]}


def _policy(**overrides) -> dict:
    policy = {
        "minConfidence": 0.7,
        "allowedCategories": ["sustainability", "general"],
        "requireSourceForCategories": ["sustainability"],
        "maxClaimsPerProduct": 3,
    }
    policy.update(overrides)
    return policy


def test_compliant_content():
    result = validate_product_content(_content(), _policy())
    assert result.valid is True


def test_policy_violations_are_reported():
    result = validate_product_content(_content(category="health", confidence=0.2), _policy())
    assert [(e.code, e.path) for e in result.errors] == [
        ("POLICY_CATEGORY_NOT_ALLOWED", "claims.0.category"),
        ("POLICY_MIN_CONFIDENCE", "claims.0.confidence"),
    ]


def test_content_schema_failure_skips_policy():
    result = validate_product_content({"productId": "sku-100"}, {"not": "a policy"})
    assert result.valid is False
    assert all(e.code.startswith("SCHEMA_PRODUCT_") for e in result.errors)


def test_policy_schema_failure():
    result = validate_product_content(_content(), _policy(minConfidence=2))
    assert [e.code for e in result.errors] == ["SCHEMA_POLICY_LESS_THAN_EQUAL"]
    assert result.errors[0].path == "minConfidence"
