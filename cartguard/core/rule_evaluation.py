"""Rule Evaluation: combines applicability and evidence state into one outcome row per rule.

Invariants:
    - All functions are PURE given (listing, rule, catalog, lookup, as_of)
    - not_applicable / unknown applicability short-circuit, never blocking
    - A rule with no required_evidence_keys is "unknown", never blocking
    - Any unresolved key → "missing"; blocking iff is_blockable(rule)
    - Resolved evidence is scanned tier by tier:
      conflicted > stale > expired > reVerificationDue > present.
      Within a tier the first key in declared order wins
    - reVerificationDue is a warning only; present is never blocking

Design Decisions:
    - Evidence arrives through an EvidenceLookup callable, so the same pure
      evaluator serves sync repositories and async prefetches alike
    - Only well-sourced legal obligations gate launch: marketplace,
      best-practice, low-confidence and non-official rules are warnings
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from cartguard.core.applicability import get_applicability_state
from cartguard.core.domain_types import (
    ApplicabilityState,
    BLOCKING_SOURCE_TYPES,
    ConfidenceLevel,
    EvidenceStatus,
    RequirementType,
    RuleStatus,
    SourceType,
)
from cartguard.core.evidence import Evidence
from cartguard.core.repository_protocols import (
    ApplicabilityCatalogLike,
    ListingLike,
    RuleLike,
)
from cartguard.core.verification import VerificationEvent, as_utc, utc_now

EvidenceLookup = Callable[[str], Evidence | None]

TIER_ORDER: tuple[RuleStatus, ...] = (
    RuleStatus.CONFLICTED,
    RuleStatus.STALE,
    RuleStatus.EXPIRED,
    RuleStatus.RE_VERIFICATION_DUE,
)

_BLOCKABLE_TIERS = frozenset({
    RuleStatus.MISSING,
    RuleStatus.CONFLICTED,
    RuleStatus.STALE,
    RuleStatus.EXPIRED,
})


@dataclass(frozen=True)
class RuleEvaluation:
    """Outcome row for one rule against one listing."""

    rule_id: str
    status: RuleStatus
    blocking: bool
    message: str
    requirement_type: RequirementType
    source_type: SourceType
    confidence: ConfidenceLevel
    re_verification_due_date: datetime | None = None
    audit_trail: tuple[VerificationEvent, ...] | None = None

    def to_dict(self) -> dict:
        row = {
            "rule_id": self.rule_id,
            "status": self.status.value,
            "blocking": self.blocking,
            "message": self.message,
            "requirement_type": self.requirement_type.value,
            "source_type": self.source_type.value,
            "confidence": self.confidence.value,
        }
        if self.re_verification_due_date is not None:
            row["re_verification_due_date"] = self.re_verification_due_date.date().isoformat()
        if self.audit_trail is not None:
            row["audit_trail"] = [event.to_dict() for event in self.audit_trail]
        return row


def is_blockable(rule: RuleLike) -> bool:
    """Legal, not low-confidence, and sourced from an official EU or national body."""
    return (
        rule.requirement_type == RequirementType.LEGAL
        and rule.confidence != ConfidenceLevel.LOW
        and rule.source_type in BLOCKING_SOURCE_TYPES
    )


def evidence_tier(evidence: Evidence, as_of: datetime) -> RuleStatus:
    """Map one evidence document onto the evaluation tiers."""
    status = evidence.status(as_of)
    if status == EvidenceStatus.CONFLICTED:
        return RuleStatus.CONFLICTED
    if status == EvidenceStatus.STALE:
        return RuleStatus.STALE
    if status == EvidenceStatus.EXPIRED:
        return RuleStatus.EXPIRED
    if evidence.is_re_verification_due(as_of):
        return RuleStatus.RE_VERIFICATION_DUE
    return RuleStatus.PRESENT


def _tier_message(tier: RuleStatus, key: str, evidence: Evidence, as_of: datetime) -> str:
    if tier == RuleStatus.CONFLICTED:
        return f"Evidence '{key}' has an unresolved verification conflict."
    if tier == RuleStatus.STALE:
        reason = evidence.latest_event().reason
        return f"Evidence '{key}' was rejected at its latest verification ({reason})."
    if tier == RuleStatus.EXPIRED:
        expired_on = evidence.expiry_date(now=as_of).date().isoformat()
        return f"Evidence '{key}' expired on {expired_on}."
    due_on = evidence.re_verification_due_date(now=as_of).date().isoformat()
    return f"Evidence '{key}' is due for re-verification since {due_on}."


def _row(
    rule: RuleLike,
    status: RuleStatus,
    message: str,
    blocking: bool = False,
    re_verification_due_date: datetime | None = None,
    audit_trail: tuple[VerificationEvent, ...] | None = None,
) -> RuleEvaluation:
    return RuleEvaluation(
        rule_id=rule.rule_id,
        status=status,
        blocking=blocking,
        message=message,
        requirement_type=RequirementType(rule.requirement_type),
        source_type=SourceType(rule.source_type),
        confidence=ConfidenceLevel(rule.confidence),
        re_verification_due_date=re_verification_due_date,
        audit_trail=audit_trail,
    )


def resolve_required_evidence(
    keys: Sequence[str], lookup: EvidenceLookup,
) -> tuple[list[tuple[str, Evidence]], list[str]]:
    """Split required keys into (resolved pairs in declared order, missing keys)."""
    resolved: list[tuple[str, Evidence]] = []
    missing: list[str] = []
    for key in keys:
        evidence = lookup(key)
        if evidence is None:
            missing.append(key)
        else:
            resolved.append((key, evidence))
    return resolved, missing


def evaluate_evidence(
    rule: RuleLike,
    resolved: Sequence[tuple[str, Evidence]],
    as_of: datetime,
) -> RuleEvaluation:
    """Pick the highest-priority tier present among resolved evidence."""
    tiers = [(key, evidence, evidence_tier(evidence, as_of)) for key, evidence in resolved]

    for tier in TIER_ORDER:
        for key, evidence, found in tiers:
            if found != tier:
                continue
            return _row(
                rule,
                tier,
                _tier_message(tier, key, evidence, as_of),
                blocking=tier in _BLOCKABLE_TIERS and is_blockable(rule),
                re_verification_due_date=evidence.re_verification_due_date(now=as_of),
                audit_trail=evidence.audit_trail(),
            )

    trail: tuple[VerificationEvent, ...] = ()
    for _, evidence in resolved:
        trail += evidence.audit_trail()
    return _row(
        rule,
        RuleStatus.PRESENT,
        "All required evidence documents are present and verified.",
        re_verification_due_date=min(
            evidence.re_verification_due_date(now=as_of) for _, evidence in resolved
        ),
        audit_trail=trail,
    )


def evaluate_rule(
    listing: ListingLike,
    rule: RuleLike,
    applicability: ApplicabilityCatalogLike,
    lookup: EvidenceLookup,
    as_of: datetime | date | None = None,
) -> RuleEvaluation:
    """Evaluate one rule for one listing."""
    reference = as_utc(as_of or utc_now())

    state = get_applicability_state(rule.rule_id, listing, applicability)
    if state == ApplicabilityState.NOT_APPLICABLE:
        return _row(
            rule, RuleStatus.NOT_APPLICABLE,
            "Rule is not applicable for this listing context.",
        )
    if state == ApplicabilityState.UNKNOWN:
        return _row(
            rule, RuleStatus.UNKNOWN,
            "Rule applicability could not be determined from listing input.",
        )

    if not rule.required_evidence_keys:
        return _row(
            rule, RuleStatus.UNKNOWN,
            "Rule has no machine-readable required_evidence_keys (no evidence keys).",
        )

    resolved, missing = resolve_required_evidence(rule.required_evidence_keys, lookup)
    if missing:
        return _row(
            rule, RuleStatus.MISSING,
            f"Missing evidence keys: {', '.join(missing)}",
            blocking=is_blockable(rule),
        )

    return evaluate_evidence(rule, resolved, reference)


def evaluate_rules(
    listing: ListingLike,
    rules: Sequence[RuleLike],
    applicability: ApplicabilityCatalogLike,
    lookup: EvidenceLookup,
    as_of: datetime | date | None = None,
) -> list[RuleEvaluation]:
    """Evaluate every rule in catalog order against a single as_of instant."""
    reference = as_utc(as_of or utc_now())
    return [
        evaluate_rule(listing, rule, applicability, lookup, reference)
        for rule in rules
    ]
