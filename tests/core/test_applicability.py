"""Applicability Resolution: tests for the three-valued rule applicability decision.

Tests cover:
    - no entries for a rule → applicable (open world)
    - firing then_applies entry → applicable
    - firing then_not_applies-only entry short-circuits in catalog order
    - undefined conditions → unknown unless another entry applies
    - UNDEFINED beats FALSE inside a single entry
"""

from types import SimpleNamespace

from cartguard.core.applicability import (
    entries_for_rule,
    evaluate_conditions,
    get_applicability_state,
)
from cartguard.core.compliance_tokens import ComplianceToken
from cartguard.core.domain_types import ApplicabilityState, TokenValue

RADIO = ComplianceToken.RADIO_EQUIPMENT.value
NOT_RADIO = ComplianceToken.NOT_RADIO_EQUIPMENT.value
LVD_RANGE = ComplianceToken.LVD_VOLTAGE_RANGE.value
EMC = ComplianceToken.EMC_EQUIPMENT.value


def _make_listing(**overrides) -> SimpleNamespace:
    attrs = {
        "listing_id": "amz-de-1",
        "is_radio_equipment": False,
        "is_red_excluded": False,
        "is_lvd_annex_ii_excluded": False,
        "is_emc_equipment": True,
        "is_emc_relevant": True,
        "voltage_ac": 230,
        "voltage_dc": None,
    }
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


def _entry(rule_id, conditions, applies=False, not_applies=False) -> SimpleNamespace:
    return SimpleNamespace(
        rule_id=rule_id,
        conditions=conditions,
        then_applies=[rule_id] if applies else [],
        then_not_applies=[rule_id] if not_applies else [],
    )


def _catalog(*entries) -> SimpleNamespace:
    return SimpleNamespace(applicability_rules=list(entries))


# ─── evaluate_conditions ─────────────────────────────────────────

def test_all_true_conditions_are_true():
    assert evaluate_conditions(_make_listing(), [NOT_RADIO, LVD_RANGE]) == TokenValue.TRUE


def test_any_false_condition_is_false():
    assert evaluate_conditions(_make_listing(), [RADIO, LVD_RANGE]) == TokenValue.FALSE


def test_undefined_beats_false():
    listing = _make_listing(is_emc_equipment=None)
    assert evaluate_conditions(listing, [RADIO, EMC]) == TokenValue.UNDEFINED


# ─── get_applicability_state ─────────────────────────────────────

def test_rule_without_entries_is_applicable():
    catalog = _catalog(_entry("OTHER", [RADIO], applies=True))
    assert get_applicability_state("EU-LVD-001", _make_listing(), catalog) == (
        ApplicabilityState.APPLICABLE
    )


def test_firing_apply_entry_is_applicable():
    catalog = _catalog(_entry("EU-LVD-001", [LVD_RANGE], applies=True))
    assert get_applicability_state("EU-LVD-001", _make_listing(), catalog) == (
        ApplicabilityState.APPLICABLE
    )


def test_non_firing_entries_are_not_applicable():
    catalog = _catalog(_entry("EU-RED-001", [RADIO], applies=True))
    assert get_applicability_state("EU-RED-001", _make_listing(), catalog) == (
        ApplicabilityState.NOT_APPLICABLE
    )


def test_firing_not_applies_entry_short_circuits():
    catalog = _catalog(
        _entry("EU-RED-001", [NOT_RADIO], not_applies=True),
        _entry("EU-RED-001", [LVD_RANGE], applies=True),
    )
    assert get_applicability_state("EU-RED-001", _make_listing(), catalog) == (
        ApplicabilityState.NOT_APPLICABLE
    )


def test_catalog_order_decides_between_apply_and_not_apply():
    catalog = _catalog(
        _entry("EU-RED-001", [LVD_RANGE], applies=True),
        _entry("EU-RED-001", [NOT_RADIO], not_applies=True),
    )
    # apply entry seen first, but a later not_applies-only entry still short-circuits
    assert get_applicability_state("EU-RED-001", _make_listing(), catalog) == (
        ApplicabilityState.NOT_APPLICABLE
    )


def test_entry_with_both_lists_counts_as_apply():
    entry = SimpleNamespace(
        rule_id="EU-EMC-001",
        conditions=[EMC],
        then_applies=["EU-EMC-001"],
        then_not_applies=["EU-EMC-001"],
    )
    assert get_applicability_state("EU-EMC-001", _make_listing(), _catalog(entry)) == (
        ApplicabilityState.APPLICABLE
    )


def test_undefined_without_apply_is_unknown():
    listing = _make_listing(is_radio_equipment=None)
    catalog = _catalog(_entry("EU-RED-001", [RADIO], applies=True))
    assert get_applicability_state("EU-RED-001", listing, catalog) == ApplicabilityState.UNKNOWN


def test_apply_wins_over_unknown():
    listing = _make_listing(is_radio_equipment=None)
    catalog = _catalog(
        _entry("EU-LVD-001", [RADIO], applies=True),
        _entry("EU-LVD-001", [LVD_RANGE], applies=True),
    )
    assert get_applicability_state("EU-LVD-001", listing, catalog) == (
        ApplicabilityState.APPLICABLE
    )


def test_unknown_token_makes_rule_unknown():
    catalog = _catalog(_entry("EU-X-001", ["equipment_is_a_toaster"], applies=True))
    assert get_applicability_state("EU-X-001", _make_listing(), catalog) == (
        ApplicabilityState.UNKNOWN
    )


def test_entries_for_rule_keeps_catalog_order():
    first = _entry("EU-RED-001", [RADIO], applies=True)
    other = _entry("EU-LVD-001", [LVD_RANGE], applies=True)
    second = _entry("EU-RED-001", [NOT_RADIO], not_applies=True)
    assert entries_for_rule("EU-RED-001", _catalog(first, other, second)) == [first, second]
