"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - DocumentKey wraps str; lookups always go through normalize_document_key
    - All valid states encoded as Enums, no raw string matching
    - TokenValue is three-valued; UNDEFINED never collapses to False

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (catalogs and results are JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

DocumentKey = NewType("DocumentKey", str)
EventId = NewType("EventId", str)


def normalize_document_key(key: str) -> str:
    """Case-insensitive lookup form of a document key."""
    return key.strip().lower()


# ─── Constants ───────────────────────────────────────────────────

RE_VERIFICATION_WARNING_DAYS = 90
CONFLICT_LOCKOUT_DAYS = 30


# ─── Enums ───────────────────────────────────────────────────────

class VerificationDecision(str, Enum):
    """Outcome of one verification pass over an evidence document."""
    VERIFIED = "verified"
    REJECTED = "rejected"
    CONFLICTED = "conflicted"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EvidenceStatus(str, Enum):
    """Derived from the latest event of an Evidence aggregate."""
    PRESENT = "present"
    STALE = "stale"
    EXPIRED = "expired"
    CONFLICTED = "conflicted"


class RequirementType(str, Enum):
    LEGAL = "legal"
    MARKETPLACE = "marketplace"
    BEST_PRACTICE = "best_practice"


class SourceType(str, Enum):
    """Where a rule was sourced from; only official sources can block launch."""
    EURLEX = "eurlex"
    EU_OFFICIAL = "eu_official"
    NATIONAL_AUTHORITY = "national_authority"
    AMAZON_OFFICIAL = "amazon_official"
    SECONDARY = "secondary"


BLOCKING_SOURCE_TYPES = frozenset({
    SourceType.EURLEX,
    SourceType.EU_OFFICIAL,
    SourceType.NATIONAL_AUTHORITY,
})


class ApplicabilityState(str, Enum):
    APPLICABLE = "applicable"
    NOT_APPLICABLE = "not_applicable"
    UNKNOWN = "unknown"


class TokenValue(str, Enum):
    """Tri-state truth value of a compliance proposition."""
    TRUE = "true"
    FALSE = "false"
    UNDEFINED = "undefined"

    @classmethod
    def of(cls, value: bool | None) -> "TokenValue":
        if value is None:
            return cls.UNDEFINED
        return cls.TRUE if value else cls.FALSE


class RuleStatus(str, Enum):
    """Outcome status of one rule evaluated against one listing."""
    NOT_APPLICABLE = "not_applicable"
    UNKNOWN = "unknown"
    MISSING = "missing"
    CONFLICTED = "conflicted"
    STALE = "stale"
    EXPIRED = "expired"
    RE_VERIFICATION_DUE = "reVerificationDue"
    PRESENT = "present"


class ClaimCategory(str, Enum):
    SUSTAINABILITY = "sustainability"
    HEALTH = "health"
    PRICING = "pricing"
    GENERAL = "general"
