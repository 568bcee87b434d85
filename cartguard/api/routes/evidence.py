"""Evidence Command Routes: verify, reject, or flag a conflict on an evidence document.

Invariants:
    - Each endpoint returns the NEW serialized evidence; the client persists it
    - ConflictUnresolvedError surfaces as 409 through the global CartGuardError handler

Design Decisions:
    - Stateless: the document travels in the request body, matching the
      engine's "commands return a new value" model
"""

import logging

from fastapi import APIRouter

from cartguard.config import get_settings
from cartguard.schemas.requests import (
    RecordConflictRequest,
    RejectEvidenceRequest,
    VerifyEvidenceRequest,
)
from cartguard.services.evidence_commands import (
    record_document_conflict,
    reject_document,
    verify_document,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/evidence", tags=["evidence"])


@router.post("/verify")
async def verify_evidence(body: VerifyEvidenceRequest):
    return verify_document(
        body.document, body.verifier, body.confidence,
        default_ttl_days=get_settings().default_evidence_ttl_days,
    )


@router.post("/reject")
async def reject_evidence(body: RejectEvidenceRequest):
    return reject_document(
        body.document, body.verifier, body.reason,
        default_ttl_days=get_settings().default_evidence_ttl_days,
    )


@router.post("/conflict")
async def record_conflict(body: RecordConflictRequest):
    return record_document_conflict(
        body.document, body.auditor_a, body.auditor_b, body.reason,
        default_ttl_days=get_settings().default_evidence_ttl_days,
    )
