"""Applicability Resolution: decides whether a rule applies to a listing.

Invariants:
    - Pure function of (rule_id, listing, catalog): no IO, no clock
    - No catalog entry scoped to the rule → APPLICABLE (open world)
    - Entries are visited in catalog order; the first firing entry with only
      then_not_applies short-circuits to NOT_APPLICABLE
    - Any firing entry with then_applies → APPLICABLE; else any entry with an
      UNDEFINED condition → UNKNOWN; else NOT_APPLICABLE

Design Decisions:
    - Catalog order is part of the contract (short-circuit must be deterministic)
    - An entry whose conditions include both FALSE and UNDEFINED still counts as
      unknown: the missing answer is surfaced rather than hidden by the FALSE
"""

from cartguard.core.compliance_tokens import resolve_token
from cartguard.core.domain_types import ApplicabilityState, TokenValue
from cartguard.core.repository_protocols import (
    ApplicabilityCatalogLike,
    ApplicabilityEntryLike,
    ListingLike,
)


def entries_for_rule(
    rule_id: str, catalog: ApplicabilityCatalogLike,
) -> list[ApplicabilityEntryLike]:
    return [entry for entry in catalog.applicability_rules if entry.rule_id == rule_id]


def evaluate_conditions(listing: ListingLike, conditions) -> TokenValue:
    """Conjunction of conditions. UNDEFINED wins over FALSE."""
    values = [resolve_token(listing, token) for token in conditions]
    if TokenValue.UNDEFINED in values:
        return TokenValue.UNDEFINED
    if TokenValue.FALSE in values:
        return TokenValue.FALSE
    return TokenValue.TRUE


def get_applicability_state(
    rule_id: str,
    listing: ListingLike,
    catalog: ApplicabilityCatalogLike,
) -> ApplicabilityState:
    scoped = entries_for_rule(rule_id, catalog)
    if not scoped:
        return ApplicabilityState.APPLICABLE

    has_match_apply = False
    has_unknown = False

    for entry in scoped:
        outcome = evaluate_conditions(listing, entry.conditions)
        if outcome == TokenValue.UNDEFINED:
            has_unknown = True
            continue
        if outcome == TokenValue.FALSE:
            continue
        if entry.then_not_applies and not entry.then_applies:
            return ApplicabilityState.NOT_APPLICABLE
        if entry.then_applies:
            has_match_apply = True

    if has_match_apply:
        return ApplicabilityState.APPLICABLE
    if has_unknown:
        return ApplicabilityState.UNKNOWN
    return ApplicabilityState.NOT_APPLICABLE
