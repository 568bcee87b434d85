"""Evidence Aggregate: append-only verification history for one proof document.

Invariants:
    - events is a non-empty tuple, ordered oldest → newest, never mutated
    - event ids are unique within one Evidence
    - verify/reject/record_conflict return a NEW Evidence with exactly one appended event
    - ttl_days is a positive integer
    - status() reads the latest event only; is_valid(), expiry_date() and the
      re-verification helpers read the latest VERIFIED event. The two can disagree
      (a rejected document is "stale" yet still "valid" by its older verification)
    - verify() is locked out while a conflicted event lies within CONFLICT_LOCKOUT_DAYS

Design Decisions:
    - Frozen dataclass + tuple: copy-on-write, audit_trail() can hand out the tuple itself
    - Explicit now/as_of on every time-sensitive method so the aggregate stays testable
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from cartguard.core.domain_types import (
    CONFLICT_LOCKOUT_DAYS,
    ConfidenceLevel,
    DocumentKey,
    EvidenceStatus,
    RE_VERIFICATION_WARNING_DAYS,
    VerificationDecision,
)
from cartguard.core.errors import (
    ConflictUnresolvedError,
    DuplicateEventIdError,
    EvidenceEmptyEventsError,
    InvalidTTLError,
)
from cartguard.core.verification import VerificationEvent, as_utc, utc_now


def check_ttl_days(ttl_days: object) -> int:
    """Return ttl_days if it is a positive int, raise InvalidTTLError otherwise."""
    if isinstance(ttl_days, bool) or not isinstance(ttl_days, int) or ttl_days <= 0:
        raise InvalidTTLError(ttl_days)
    return ttl_days


@dataclass(frozen=True)
class Evidence:
    """A tracked compliance document plus its full verification history."""

    document_key: DocumentKey
    document_name: str
    ttl_days: int
    events: tuple[VerificationEvent, ...]

    def __post_init__(self):
        check_ttl_days(self.ttl_days)
        events = tuple(self.events)
        if not events:
            raise EvidenceEmptyEventsError(self.document_key)
        seen: set[str] = set()
        for event in events:
            if event.id in seen:
                raise DuplicateEventIdError(self.document_key, event.id)
            seen.add(event.id)
        object.__setattr__(self, "events", events)

    # --- Construction ----------------------------------------------------------

    @classmethod
    def create(
        cls,
        document_key: DocumentKey,
        document_name: str,
        ttl_days: int,
        verifier: str = "system",
        now: datetime | None = None,
    ) -> "Evidence":
        """Fresh evidence seeded with one high-confidence verified event."""
        check_ttl_days(ttl_days)
        initial = VerificationEvent.create(
            decision=VerificationDecision.VERIFIED,
            verifier=verifier,
            reason="evidence_created",
            confidence=ConfidenceLevel.HIGH,
            now=now,
        )
        return cls(document_key, document_name, ttl_days, (initial,))

    # --- Event lookup ----------------------------------------------------------

    def latest_event(self) -> VerificationEvent:
        return self.events[-1]

    def latest_event_with_decision(
        self, decision: VerificationDecision,
    ) -> VerificationEvent | None:
        for event in reversed(self.events):
            if event.decision == decision:
                return event
        return None

    def first_verified_at(self) -> datetime | None:
        for event in self.events:
            if event.decision == VerificationDecision.VERIFIED:
                return event.timestamp.utc_date
        return None

    def audit_trail(self) -> tuple[VerificationEvent, ...]:
        """Full ordered history. Immutable; callers cannot alter the aggregate."""
        return self.events

    # --- Derived state ---------------------------------------------------------

    def is_valid(self, as_of: datetime | date | None = None) -> bool:
        """True iff the most recent verified event is still within TTL."""
        latest_verified = self.latest_event_with_decision(VerificationDecision.VERIFIED)
        if latest_verified is None:
            return False
        return not latest_verified.timestamp.is_stale_by(as_of or utc_now(), self.ttl_days)

    def status(self, as_of: datetime | date | None = None) -> EvidenceStatus:
        """Reporting status, derived from the latest event only."""
        latest = self.latest_event()
        if latest.decision == VerificationDecision.CONFLICTED:
            return EvidenceStatus.CONFLICTED
        if latest.decision == VerificationDecision.REJECTED:
            return EvidenceStatus.STALE
        if latest.timestamp.is_stale_by(as_of or utc_now(), self.ttl_days):
            return EvidenceStatus.EXPIRED
        return EvidenceStatus.PRESENT

    def re_verification_due_date(
        self,
        warning_days: int = RE_VERIFICATION_WARNING_DAYS,
        now: datetime | None = None,
    ) -> datetime:
        """Date re-verification falls due. Without any verified event it is due now."""
        latest_verified = self.latest_event_with_decision(VerificationDecision.VERIFIED)
        if latest_verified is None:
            return as_utc(now or utc_now())
        return latest_verified.timestamp.re_verification_date(self.ttl_days, warning_days)

    def expiry_date(self, now: datetime | None = None) -> datetime:
        latest_verified = self.latest_event_with_decision(VerificationDecision.VERIFIED)
        if latest_verified is None:
            return as_utc(now or utc_now())
        return latest_verified.timestamp.expiry_date(self.ttl_days)

    def is_re_verification_due(
        self,
        as_of: datetime | date | None = None,
        warning_days: int = RE_VERIFICATION_WARNING_DAYS,
    ) -> bool:
        reference = as_utc(as_of or utc_now())
        return reference >= self.re_verification_due_date(warning_days, now=reference)

    def has_recent_conflicts(self, now: datetime | None = None) -> bool:
        cutoff = as_utc(now or utc_now()) - timedelta(days=CONFLICT_LOCKOUT_DAYS)
        return any(
            event.decision == VerificationDecision.CONFLICTED
            and event.timestamp.utc_date >= cutoff
            for event in self.events
        )

    # --- Commands (each returns a new Evidence) ---------------------------------

    def verify(
        self,
        verifier: str,
        confidence: ConfidenceLevel = ConfidenceLevel.HIGH,
        now: datetime | None = None,
    ) -> "Evidence":
        if self.has_recent_conflicts(now):
            raise ConflictUnresolvedError(self.document_key)
        return self._append(VerificationEvent.create(
            decision=VerificationDecision.VERIFIED,
            verifier=verifier,
            reason="re_verified",
            confidence=confidence,
            now=now,
        ))

    def reject(self, verifier: str, reason: str, now: datetime | None = None) -> "Evidence":
        return self._append(VerificationEvent.create(
            decision=VerificationDecision.REJECTED,
            verifier=verifier,
            reason=reason,
            confidence=ConfidenceLevel.HIGH,
            now=now,
        ))

    def record_conflict(
        self,
        auditor_a: str,
        auditor_b: str,
        reason: str,
        now: datetime | None = None,
    ) -> "Evidence":
        """Two auditors disagree; confidence is forced to low."""
        return self._append(VerificationEvent.create(
            decision=VerificationDecision.CONFLICTED,
            verifier=f"{auditor_a}+{auditor_b}",
            reason=reason,
            confidence=ConfidenceLevel.LOW,
            now=now,
        ))

    def _append(self, event: VerificationEvent) -> "Evidence":
        return replace(self, events=self.events + (event,))
