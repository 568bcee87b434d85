"""Evidence Codec: converts between wire documents and the Evidence aggregate.

Invariants:
    - Event ids survive a serialize → deserialize round-trip unchanged
    - Duplicate persisted ids make the document undecodable (DuplicateEventIdError)
    - Persisted timestamps bypass the future-instant check
    - Legacy documents become exactly one synthetic, low-confidence event:
      stale/mismatched → rejected, conflicted → conflicted, anything else → verified
    - Undated legacy documents are anchored at LEGACY_SENTINEL_DATE with
      reason "legacy_no_verification_date"
    - Legacy TTL comes from EVIDENCE_TTL_DAYS, falling back to the default TTL

Design Decisions:
    - Ids missing from hand-written payloads are derived from key + position,
      so reloading the same payload yields the same ids; a derived id never
      reuses one already present in the payload
"""

from datetime import date, datetime

from cartguard.core.domain_types import (
    ConfidenceLevel,
    DocumentKey,
    EventId,
    VerificationDecision,
    normalize_document_key,
)
from cartguard.core.evidence import Evidence
from cartguard.core.verification import VerificationEvent, VerificationTimestamp
from cartguard.schemas.evidence import (
    EventSourcedEvidenceDocument,
    LegacyEvidenceDocument,
)

LEGACY_SENTINEL_DATE = date(2000, 1, 1)
LEGACY_VERIFIER = "legacy_import"
DEFAULT_TTL_DAYS = 365
EU_DECLARATION_TTL_DAYS = 1095

# Declarations of conformity are re-issued rarely; everything else defaults to a year.
EVIDENCE_TTL_DAYS: dict[str, int] = {
    "eu_doc_lvd": EU_DECLARATION_TTL_DAYS,
    "eu_doc_red": EU_DECLARATION_TTL_DAYS,
    "eu_doc_emc": EU_DECLARATION_TTL_DAYS,
    "eu_doc_rohs": EU_DECLARATION_TTL_DAYS,
    "eu_doc_gpsr": EU_DECLARATION_TTL_DAYS,
}

_LEGACY_DECISIONS = {
    "stale": VerificationDecision.REJECTED,
    "mismatched": VerificationDecision.REJECTED,
    "conflicted": VerificationDecision.CONFLICTED,
}


def ttl_for_document_key(key: str, default_ttl_days: int = DEFAULT_TTL_DAYS) -> int:
    return EVIDENCE_TTL_DAYS.get(normalize_document_key(key), default_ttl_days)


def _event_ids(document: EventSourcedEvidenceDocument) -> list[str]:
    """Persisted ids as-is; missing ones become <key>-evt-<n>, skipping ids already in use."""
    taken = {record.id for record in document.verification_events if record.id}
    ids = []
    for index, record in enumerate(document.verification_events):
        if record.id:
            ids.append(record.id)
            continue
        n = index
        while f"{document.document_key}-evt-{n}" in taken:
            n += 1
        derived = f"{document.document_key}-evt-{n}"
        taken.add(derived)
        ids.append(derived)
    return ids


def deserialize_evidence(document: EventSourcedEvidenceDocument) -> Evidence:
    events = tuple(
        VerificationEvent(
            id=EventId(event_id),
            timestamp=VerificationTimestamp(record.timestamp),
            decision=record.decision,
            verifier=record.verifier,
            reason=record.reason,
            confidence=record.confidence,
        )
        for event_id, record in zip(_event_ids(document), document.verification_events)
    )
    return Evidence(
        document_key=DocumentKey(document.document_key),
        document_name=document.document_name,
        ttl_days=document.ttl_days,
        events=events,
    )


def migrate_legacy_document(
    document: LegacyEvidenceDocument,
    default_ttl_days: int = DEFAULT_TTL_DAYS,
    sentinel: date = LEGACY_SENTINEL_DATE,
) -> Evidence:
    verified_at: date | datetime = document.last_verified_at or sentinel
    reason = (
        f"legacy_status_{document.status}"
        if document.last_verified_at is not None
        else "legacy_no_verification_date"
    )
    event = VerificationEvent(
        id=EventId(f"legacy-{normalize_document_key(document.document_key)}"),
        timestamp=VerificationTimestamp(verified_at),
        decision=_LEGACY_DECISIONS.get(document.status, VerificationDecision.VERIFIED),
        verifier=LEGACY_VERIFIER,
        reason=reason,
        confidence=ConfidenceLevel.LOW,
    )
    return Evidence(
        document_key=DocumentKey(document.document_key),
        document_name=document.document_name,
        ttl_days=ttl_for_document_key(document.document_key, default_ttl_days),
        events=(event,),
    )


def decode_evidence_document(
    document: EventSourcedEvidenceDocument | LegacyEvidenceDocument,
    default_ttl_days: int = DEFAULT_TTL_DAYS,
    sentinel: date = LEGACY_SENTINEL_DATE,
) -> Evidence:
    """Single entry point for either shape of the evidence union."""
    if isinstance(document, LegacyEvidenceDocument):
        return migrate_legacy_document(document, default_ttl_days, sentinel)
    return deserialize_evidence(document)


def serialize_evidence(evidence: Evidence) -> dict:
    return {
        "document_key": evidence.document_key,
        "document_name": evidence.document_name,
        "ttl_days": evidence.ttl_days,
        "verification_events": [event.to_dict() for event in evidence.audit_trail()],
    }
