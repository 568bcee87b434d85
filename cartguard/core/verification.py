"""Verification Primitives: day-granular timestamps and immutable verification events.

Invariants:
    - VerificationTimestamp is always UTC midnight (time-of-day dropped)
    - Live timestamps (VerificationTimestamp.live) reject instants after "now";
      direct construction and from_iso() skip the check (persisted data is trusted)
    - VerificationEvent is frozen; verifier and reason are non-empty
    - Event ids are generated once and carried through serialization

Design Decisions:
    - Every time-sensitive call accepts an explicit now/today; wall clock is only the default
    - Naive datetimes are read as UTC, plain dates as UTC midnight
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

from cartguard.core.domain_types import (
    ConfidenceLevel,
    EventId,
    RE_VERIFICATION_WARNING_DAYS,
    VerificationDecision,
)
from cartguard.core.errors import FutureVerificationError, InvalidVerificationEventError


# ─── Clock helpers ──────────────────────────────────────────────

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | date) -> datetime:
    """Coerce a date or datetime to an aware UTC datetime."""
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(value: datetime | date) -> datetime:
    """UTC midnight of the calendar day containing value."""
    return as_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 instant or date, accepting a trailing 'Z'."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def format_iso(value: datetime) -> str:
    """Canonical wire form: millisecond precision, 'Z' suffix."""
    utc = as_utc(value)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


# ─── Timestamp ──────────────────────────────────────────────────

@dataclass(frozen=True)
class VerificationTimestamp:
    """Instant a verification happened, truncated to its UTC day."""

    utc_date: datetime

    def __post_init__(self):
        object.__setattr__(self, "utc_date", start_of_day(self.utc_date))

    @classmethod
    def live(
        cls, instant: datetime | date, now: datetime | None = None,
    ) -> "VerificationTimestamp":
        """Timestamp for a verification happening now; future instants rejected."""
        moment = as_utc(instant)
        if moment > as_utc(now or utc_now()):
            raise FutureVerificationError(moment)
        return cls(moment)

    @classmethod
    def from_iso(cls, value: str) -> "VerificationTimestamp":
        return cls(parse_iso(value))

    def to_iso(self) -> str:
        return format_iso(self.utc_date)

    def expiry_date(self, ttl_days: int) -> datetime:
        return self.utc_date + timedelta(days=ttl_days)

    def is_stale_by(self, reference: datetime | date, ttl_days: int) -> bool:
        """True iff reference is strictly after timestamp + ttl_days."""
        return as_utc(reference) > self.expiry_date(ttl_days)

    def re_verification_date(
        self, ttl_days: int, warning_days: int = RE_VERIFICATION_WARNING_DAYS,
    ) -> datetime:
        return self.utc_date + timedelta(days=ttl_days - warning_days)

    def days_until_re_verification_due(
        self,
        ttl_days: int,
        warning_days: int = RE_VERIFICATION_WARNING_DAYS,
        today: datetime | date | None = None,
    ) -> int:
        """Signed whole days until re-verification is due; negative means overdue."""
        due = self.re_verification_date(ttl_days, warning_days)
        return (due - start_of_day(today or utc_now())).days


# ─── Event ──────────────────────────────────────────────────────

def new_event_id() -> EventId:
    return EventId(f"evt-{uuid4().hex}")


@dataclass(frozen=True)
class VerificationEvent:
    """One immutable verification decision in an evidence history."""

    id: EventId
    timestamp: VerificationTimestamp
    decision: VerificationDecision
    verifier: str
    reason: str
    confidence: ConfidenceLevel

    def __post_init__(self):
        if not self.verifier or not self.verifier.strip():
            raise InvalidVerificationEventError("verifier")
        if not self.reason or not self.reason.strip():
            raise InvalidVerificationEventError("reason")
        object.__setattr__(self, "decision", VerificationDecision(self.decision))
        object.__setattr__(self, "confidence", ConfidenceLevel(self.confidence))

    @classmethod
    def create(
        cls,
        decision: VerificationDecision,
        verifier: str,
        reason: str,
        confidence: ConfidenceLevel,
        timestamp: datetime | date | None = None,
        now: datetime | None = None,
    ) -> "VerificationEvent":
        """Record a new decision; timestamp defaults to now and may not be in the future."""
        current = now or utc_now()
        return cls(
            id=new_event_id(),
            timestamp=VerificationTimestamp.live(timestamp or current, now=current),
            decision=decision,
            verifier=verifier,
            reason=reason,
            confidence=confidence,
        )

    def to_dict(self) -> dict:
        """Wire form, as stored under ``verification_events``."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.to_iso(),
            "decision": self.decision.value,
            "verifier": self.verifier,
            "reason": self.reason,
            "confidence": self.confidence.value,
        }
