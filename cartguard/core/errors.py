"""Exceptions raised when a caller breaks a precondition of the engine.

Only broken preconditions raise: an evidence history that is empty or
repeats an event id, a verify during an open conflict, a bad TTL, a
verification in the future, an event with a blank verifier or reason.
Data-quality findings about listings, catalogs or content are
ValidationIssue values and never pass through here.

Each subclass pins its ``code``, ``category`` and ``http_status`` as class
attributes; the API layer turns any of them into the same JSON envelope
via ``to_response()``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    INVARIANT = "invariant"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Which listing / rule / document the failure concerns, if known."""
    document_key: str | None = None
    listing_id: str | None = None
    rule_id: str | None = None
    raised_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> dict:
        return {
            "document_key": self.document_key,
            "listing_id": self.listing_id,
            "rule_id": self.rule_id,
        }


class CartGuardError(Exception):
    code = "CARTGUARD_ERROR"
    category = ErrorCategory.INTERNAL
    severity = ErrorSeverity.ERROR
    http_status = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.raised_at.isoformat(),
                "context": self.context.as_dict(),
            }
        }


# ─── Evidence history ───────────────────────────────────────────

class EvidenceEmptyEventsError(CartGuardError):
    code = "EVIDENCE_EMPTY_EVENTS"
    category = ErrorCategory.INVARIANT
    http_status = 422

    def __init__(self, document_key: str):
        super().__init__(
            f"Evidence '{document_key}' must have at least one verification event",
            ErrorContext(document_key=document_key),
        )


class DuplicateEventIdError(CartGuardError):
    code = "DUPLICATE_EVENT_ID"
    category = ErrorCategory.INVARIANT
    http_status = 422

    def __init__(self, document_key: str, event_id: str):
        super().__init__(
            f"Evidence '{document_key}' has more than one event with id '{event_id}'",
            ErrorContext(document_key=document_key),
        )
        self.event_id = event_id


class ConflictUnresolvedError(CartGuardError):
    """Raised by verify() inside the conflict lockout window."""
    code = "CONFLICT_UNRESOLVED"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, document_key: str):
        super().__init__(
            f"Cannot verify evidence '{document_key}' with unresolved recent conflicts",
            ErrorContext(document_key=document_key),
        )


# ─── Input preconditions ────────────────────────────────────────

class _InputError(CartGuardError):
    category = ErrorCategory.VALIDATION
    http_status = 422


class InvalidTTLError(_InputError):
    code = "INVALID_TTL"

    def __init__(self, ttl_days: object):
        super().__init__(f"ttl_days must be a positive integer, got {ttl_days!r}")
        self.ttl_days = ttl_days


class FutureVerificationError(_InputError):
    code = "FUTURE_VERIFICATION"

    def __init__(self, instant: datetime):
        super().__init__(f"Cannot verify in the future: {instant.isoformat()}")
        self.instant = instant


class InvalidVerificationEventError(_InputError):
    """Blank verifier or reason on a new event."""
    code = "INVALID_VERIFICATION_EVENT"

    def __init__(self, field_name: str):
        super().__init__(f"Verification event requires a non-empty {field_name}")
        self.field = field_name
