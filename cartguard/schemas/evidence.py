"""Evidence Schemas: wire shapes for evidence documents embedded in listings.

Invariants:
    - An evidence document is EITHER event-sourced (ttl_days + non-empty
      verification_events) OR legacy (single status, optional last_verified_at)
    - The shape is decided once, by evidence_document_kind, at the boundary
    - verifier and reason are non-empty; decision/confidence are closed enums

Design Decisions:
    - Callable Discriminator + Tag over shape sniffing downstream: after parsing,
      callers match on the model type, never on which keys happen to be present
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Discriminator, Field, Tag

from cartguard.core.domain_types import ConfidenceLevel, VerificationDecision


class VerificationEventRecord(BaseModel):
    """Serialized VerificationEvent. id is optional only for hand-written payloads."""
    id: str | None = None
    timestamp: datetime
    decision: VerificationDecision
    verifier: str = Field(min_length=1)
    reason: str = Field(min_length=1)
    confidence: ConfidenceLevel


class EventSourcedEvidenceDocument(BaseModel):
    """Current shape: full verification history."""
    kind: Literal["event_sourced"] = "event_sourced"
    document_key: str = Field(min_length=1)
    document_name: str = Field(min_length=1)
    ttl_days: int = Field(gt=0, strict=True)
    verification_events: list[VerificationEventRecord] = Field(min_length=1)


LegacyStatus = Literal["present", "stale", "mismatched", "conflicted"]


class LegacyEvidenceDocument(BaseModel):
    """Old single-status shape, upgraded to one synthetic event on load."""
    kind: Literal["legacy"] = "legacy"
    document_key: str = Field(min_length=1)
    document_name: str = Field(min_length=1)
    status: LegacyStatus
    last_verified_at: date | datetime | None = None


# Union tags; pydantic adds them to error locations, they are not field names.
EVIDENCE_DOCUMENT_TAGS = frozenset({"event_sourced", "legacy"})


def evidence_document_kind(value: Any) -> str:
    if isinstance(value, dict):
        if "verification_events" in value or "ttl_days" in value:
            return "event_sourced"
        return "legacy"
    return getattr(value, "kind", "legacy")


EvidenceDocument = Annotated[
    Union[
        Annotated[EventSourcedEvidenceDocument, Tag("event_sourced")],
        Annotated[LegacyEvidenceDocument, Tag("legacy")],
    ],
    Discriminator(evidence_document_kind),
]
