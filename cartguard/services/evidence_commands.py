"""Evidence Commands: apply verify / reject / record_conflict to a serialized evidence document.

Invariants:
    - Input may be either evidence shape; legacy documents are upgraded first
    - Output is always the event-sourced shape with exactly one more event
    - Invariant violations (open conflict, bad TTL) propagate as CartGuardError;
      the API maps them to HTTP status codes
    - Nothing is persisted here; the caller stores the returned document
"""

import logging
from datetime import datetime

from cartguard.core.domain_types import ConfidenceLevel
from cartguard.core.evidence import Evidence
from cartguard.schemas.evidence import EventSourcedEvidenceDocument, LegacyEvidenceDocument
from cartguard.services.evidence_codec import (
    DEFAULT_TTL_DAYS,
    decode_evidence_document,
    serialize_evidence,
)

logger = logging.getLogger(__name__)

EvidenceDocumentModel = EventSourcedEvidenceDocument | LegacyEvidenceDocument


def _decode(document: EvidenceDocumentModel, default_ttl_days: int) -> Evidence:
    return decode_evidence_document(document, default_ttl_days)


def verify_document(
    document: EvidenceDocumentModel,
    verifier: str,
    confidence: ConfidenceLevel = ConfidenceLevel.HIGH,
    now: datetime | None = None,
    default_ttl_days: int = DEFAULT_TTL_DAYS,
) -> dict:
    evidence = _decode(document, default_ttl_days).verify(verifier, confidence, now=now)
    logger.info("Evidence re-verified", extra={"document_key": evidence.document_key})
    return serialize_evidence(evidence)


def reject_document(
    document: EvidenceDocumentModel,
    verifier: str,
    reason: str,
    now: datetime | None = None,
    default_ttl_days: int = DEFAULT_TTL_DAYS,
) -> dict:
    evidence = _decode(document, default_ttl_days).reject(verifier, reason, now=now)
    logger.info("Evidence rejected", extra={"document_key": evidence.document_key})
    return serialize_evidence(evidence)


def record_document_conflict(
    document: EvidenceDocumentModel,
    auditor_a: str,
    auditor_b: str,
    reason: str,
    now: datetime | None = None,
    default_ttl_days: int = DEFAULT_TTL_DAYS,
) -> dict:
    evidence = _decode(document, default_ttl_days).record_conflict(
        auditor_a, auditor_b, reason, now=now,
    )
    logger.warning("Evidence conflict recorded", extra={"document_key": evidence.document_key})
    return serialize_evidence(evidence)
