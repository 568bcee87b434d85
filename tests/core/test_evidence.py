"""Evidence aggregate: pure tests for the verification lifecycle state machine.

Tests cover:
    - create(): one verified event, status present, TTL validation
    - verify / reject / record_conflict append exactly one event, copy-on-write
    - status() from latest event vs is_valid() from latest verified event
    - TTL expiry, re-verification due date, expiry date
    - conflict lockout within 30 days, released after 30 days
    - construction invariants (non-empty history, unique event ids)
"""

from datetime import datetime, timedelta, timezone

import pytest

from cartguard.core.domain_types import (
    ConfidenceLevel,
    DocumentKey,
    EvidenceStatus,
    VerificationDecision,
)
from cartguard.core.errors import (
    ConflictUnresolvedError,
    DuplicateEventIdError,
    EvidenceEmptyEventsError,
    InvalidTTLError,
)
from cartguard.core.evidence import Evidence
from cartguard.core.verification import VerificationEvent, VerificationTimestamp

NOW = datetime(2026, 3, 1, 12, tzinfo=timezone.utc)
DOC_KEY = DocumentKey("eu_doc_lvd")


def _make_evidence(ttl_days: int = 365, now: datetime = NOW) -> Evidence:
    return Evidence.create(DOC_KEY, "LVD Declaration", ttl_days, now=now)


def _event(decision: VerificationDecision, day: datetime, reason: str = "test") -> VerificationEvent:
    return VerificationEvent(
        id=f"evt-{decision.value}-{day.date().isoformat()}",
        timestamp=VerificationTimestamp(day),
        decision=decision,
        verifier="auditor",
        reason=reason,
        confidence=ConfidenceLevel.MEDIUM,
    )


# ─── create ──────────────────────────────────────────────────────

def test_fresh_evidence_is_present_with_one_verified_event():
    ev = _make_evidence(1095)
    assert ev.status(NOW) == EvidenceStatus.PRESENT
    assert len(ev.audit_trail()) == 1
    first = ev.audit_trail()[0]
    assert first.decision == VerificationDecision.VERIFIED
    assert first.reason == "evidence_created"
    assert first.confidence == ConfidenceLevel.HIGH
    assert first.verifier == "system"


def test_create_records_custom_verifier():
    ev = Evidence.create(DOC_KEY, "LVD Declaration", 365, verifier="auditor-7", now=NOW)
    assert ev.latest_event().verifier == "auditor-7"


@pytest.mark.parametrize("ttl", [0, -5, 1.5, "365", True, None])
def test_create_rejects_non_positive_integer_ttl(ttl):
    with pytest.raises(InvalidTTLError):
        Evidence.create(DOC_KEY, "LVD Declaration", ttl, now=NOW)


def test_construction_requires_at_least_one_event():
    with pytest.raises(EvidenceEmptyEventsError):
        Evidence(DOC_KEY, "LVD Declaration", 365, ())


def test_construction_rejects_repeated_event_ids():
    event = _event(VerificationDecision.VERIFIED, NOW)
    with pytest.raises(DuplicateEventIdError):
        Evidence(DOC_KEY, "LVD Declaration", 365, (event, event))


# ─── TTL ─────────────────────────────────────────────────────────

def test_valid_within_ttl():
    ev = _make_evidence(365)
    assert ev.is_valid(ev.first_verified_at() + timedelta(days=100)) is True


def test_invalid_and_expired_after_ttl():
    ev = _make_evidence(365)
    day_400 = ev.first_verified_at() + timedelta(days=400)
    assert ev.is_valid(day_400) is False
    assert ev.status(day_400) == EvidenceStatus.EXPIRED


def test_expiry_date_anchors_on_latest_verification():
    ev = _make_evidence(365, now=NOW - timedelta(days=100))
    assert ev.expiry_date() == ev.first_verified_at() + timedelta(days=365)
    refreshed = ev.verify("auditor-2", now=NOW)
    assert refreshed.expiry_date() == datetime(2027, 3, 1, tzinfo=timezone.utc)


def test_re_verification_due_date_is_ttl_minus_warning():
    ev = _make_evidence(365)
    assert ev.re_verification_due_date(90) == ev.first_verified_at() + timedelta(days=275)


def test_is_re_verification_due_after_due_date():
    ev = _make_evidence(365)
    due = ev.re_verification_due_date()
    assert ev.is_re_verification_due(due - timedelta(days=1)) is False
    assert ev.is_re_verification_due(due) is True
    assert ev.is_re_verification_due(due + timedelta(days=1)) is True


def test_re_verification_without_verified_event_is_due_now():
    ev = Evidence(DOC_KEY, "LVD", 365, (_event(VerificationDecision.REJECTED, NOW),))
    assert ev.re_verification_due_date(now=NOW) == NOW
    assert ev.expiry_date(now=NOW) == NOW
    assert ev.is_re_verification_due(NOW) is True
    assert ev.is_valid(NOW) is False


# ─── commands ────────────────────────────────────────────────────

def test_verify_appends_verified_event():
    ev = _make_evidence()
    updated = ev.verify("auditor-2", ConfidenceLevel.HIGH, now=NOW)
    assert len(updated.audit_trail()) == 2
    latest = updated.audit_trail()[1]
    assert latest.decision == VerificationDecision.VERIFIED
    assert latest.verifier == "auditor-2"
    assert latest.reason == "re_verified"


def test_reject_appends_rejected_event_and_marks_stale():
    rejected = _make_evidence().reject("auditor-1", "invalid_signature", now=NOW)
    assert len(rejected.audit_trail()) == 2
    assert rejected.audit_trail()[1].decision == VerificationDecision.REJECTED
    assert rejected.status(NOW) == EvidenceStatus.STALE


def test_record_conflict_joins_auditors_and_forces_low_confidence():
    conflicted = _make_evidence().record_conflict("a1", "a2", "unfamiliar lab", now=NOW)
    latest = conflicted.latest_event()
    assert latest.decision == VerificationDecision.CONFLICTED
    assert latest.verifier == "a1+a2"
    assert latest.confidence == ConfidenceLevel.LOW
    assert conflicted.status(NOW) == EvidenceStatus.CONFLICTED


def test_commands_leave_original_untouched():
    ev = _make_evidence()
    before = ev.audit_trail()
    after = ev.reject("auditor-1", "blurry_scan", now=NOW).verify("auditor-2", now=NOW)
    assert ev.audit_trail() == before
    assert len(ev.audit_trail()) == 1
    assert after.audit_trail()[:1] == before


def test_audit_trail_grows_by_exactly_one_per_command():
    ev = _make_evidence(now=NOW - timedelta(days=60))
    steps = [
        lambda e: e.reject("auditor-1", "expired_certificate", now=NOW - timedelta(days=50)),
        lambda e: e.record_conflict("a1", "a2", "lab dispute", now=NOW - timedelta(days=45)),
        lambda e: e.verify("auditor-3", now=NOW),
    ]
    for step in steps:
        updated = step(ev)
        assert len(updated.audit_trail()) == len(ev.audit_trail()) + 1
        assert updated.audit_trail()[:-1] == ev.audit_trail()
        ev = updated


def test_audit_trail_cannot_be_mutated_by_callers():
    trail = _make_evidence().audit_trail()
    assert isinstance(trail, tuple)
    with pytest.raises(TypeError):
        trail[0] = None  # type: ignore[index]


# ─── conflict lockout ────────────────────────────────────────────

def test_verify_blocked_by_recent_conflict():
    conflicted = _make_evidence().record_conflict("a1", "a2", "ambiguous", now=NOW)
    assert conflicted.has_recent_conflicts(NOW) is True
    with pytest.raises(ConflictUnresolvedError):
        conflicted.verify("a3", now=NOW)


def test_verify_allowed_once_conflict_is_older_than_30_days():
    conflicted = _make_evidence(now=NOW - timedelta(days=60)).record_conflict(
        "a1", "a2", "ambiguous", now=NOW - timedelta(days=40),
    )
    assert conflicted.has_recent_conflicts(NOW) is False
    verified = conflicted.verify("a3", now=NOW)
    assert verified.status(NOW) == EvidenceStatus.PRESENT


def test_same_history_locks_then_releases_as_clock_advances():
    conflicted = _make_evidence().record_conflict("a1", "a2", "ambiguous", now=NOW)
    with pytest.raises(ConflictUnresolvedError):
        conflicted.verify("a3", now=NOW + timedelta(days=29))
    assert conflicted.verify("a3", now=NOW + timedelta(days=31)).latest_event().decision == (
        VerificationDecision.VERIFIED
    )


def test_reject_and_conflict_are_not_locked_out():
    conflicted = _make_evidence().record_conflict("a1", "a2", "ambiguous", now=NOW)
    assert conflicted.reject("a3", "withdrawn", now=NOW).status(NOW) == EvidenceStatus.STALE
    assert len(conflicted.record_conflict("a3", "a4", "again", now=NOW).audit_trail()) == 3


# ─── status vs is_valid divergence ──────────────────────────────

def test_rejected_evidence_is_stale_but_still_valid_by_older_verification():
    rejected = _make_evidence().reject("auditor-1", "invalid_signature", now=NOW)
    assert rejected.status(NOW) == EvidenceStatus.STALE
    assert rejected.is_valid(NOW) is True


def test_conflicted_evidence_is_still_valid_by_older_verification():
    conflicted = _make_evidence().record_conflict("a1", "a2", "ambiguous", now=NOW)
    assert conflicted.status(NOW) == EvidenceStatus.CONFLICTED
    assert conflicted.is_valid(NOW) is True


def test_latest_event_with_decision_searches_backwards():
    history = (
        _event(VerificationDecision.VERIFIED, datetime(2025, 1, 1, tzinfo=timezone.utc)),
        _event(VerificationDecision.VERIFIED, datetime(2025, 6, 1, tzinfo=timezone.utc)),
        _event(VerificationDecision.REJECTED, datetime(2025, 7, 1, tzinfo=timezone.utc)),
    )
    ev = Evidence(DOC_KEY, "LVD", 365, history)
    latest_verified = ev.latest_event_with_decision(VerificationDecision.VERIFIED)
    assert latest_verified.timestamp.utc_date.month == 6
    assert ev.latest_event_with_decision(VerificationDecision.CONFLICTED) is None
    assert ev.first_verified_at() == datetime(2025, 1, 1, tzinfo=timezone.utc)
