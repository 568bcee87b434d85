"""Evaluation Routes: listing evaluation and catalog validation.

Invariants:
    - Schema problems in the submitted documents are returned as data
      (valid=false + issues) with status 200, never as a 4xx
    - Evidence is read from the listing payload; nothing is persisted

Design Decisions:
    - Thin routes delegate to services.evaluate_listing
"""

import logging
from typing import Any

from fastapi import APIRouter

from cartguard.config import get_settings
from cartguard.schemas.requests import EvaluateListingRequest
from cartguard.services.evaluate_listing import (
    evaluate_listing_against_rule_catalog,
    validate_applicability_catalog,
    validate_rule_catalog,
)
from cartguard.services.evidence_repository import EmbeddedEvidenceRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["evaluation"])


@router.post("/listings/evaluate")
async def evaluate_listing(body: EvaluateListingRequest):
    """Evaluate a listing against a rule catalog and applicability catalog."""
    settings = get_settings()
    repository = EmbeddedEvidenceRepository(
        default_ttl_days=settings.default_evidence_ttl_days,
        legacy_sentinel_date=settings.legacy_sentinel_date,
    )
    evaluation = evaluate_listing_against_rule_catalog(
        body.listing,
        body.rule_catalog,
        body.applicability_catalog,
        as_of=body.as_of,
        repository=repository,
    )
    return evaluation.to_dict()


@router.post("/catalogs/rules/validate")
async def validate_rules(body: dict[str, Any]):
    verdict, catalog = validate_rule_catalog(body)
    payload = verdict.to_dict()
    if catalog is not None:
        payload["rule_count"] = len(catalog.rules)
    return payload


@router.post("/catalogs/applicability/validate")
async def validate_applicability(body: dict[str, Any]):
    verdict, catalog = validate_applicability_catalog(body)
    payload = verdict.to_dict()
    if catalog is not None:
        payload["entry_count"] = len(catalog.applicability_rules)
    return payload
