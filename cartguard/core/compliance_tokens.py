"""Compliance Tokens: named propositions about a listing, resolved to a tri-state value.

Invariants:
    - Only the names in ComplianceToken are recognized
    - Unrecognized names resolve to TokenValue.UNDEFINED, never to FALSE
    - Radio/EMC propositions are UNDEFINED when the listing leaves the attribute unset
      (NOT_RADIO_EQUIPMENT included: an unset is_radio_equipment is UNDEFINED,
      not TRUE as a bare `not listing.is_radio_equipment` would give)
    - Exclusion flags default to "not excluded"; absent voltages are outside every range

Design Decisions:
    - Dispatch table over if-chain: adding a token is one entry, lookup is O(1)
    - Returns TokenValue, not bool | None: a missing answer cannot be mistaken for "no"
"""

from collections.abc import Callable
from enum import Enum

from cartguard.core.domain_types import TokenValue
from cartguard.core.repository_protocols import ListingLike


class ComplianceToken(str, Enum):
    """Propositions an applicability rule may test."""
    RADIO_INTENT = (
        "equipment_intentionally_emits_or_receives_radio_waves"
        "_for_radio_communication_or_radiodetermination"
    )
    RED_NOT_EXCLUDED = "equipment_not_excluded_under_RED_Article1_or_Annex"
    NOT_RADIO_EQUIPMENT = "equipment_not_radio_equipment_under_RED"
    RADIO_EQUIPMENT = "equipment_radio_equipment_under_RED"
    LVD_VOLTAGE_RANGE = (
        "equipment_designed_voltage_between_50_and_1000_V_AC"
        "_or_between_75_and_1500_V_DC"
    )
    LVD_NOT_ANNEX_II_EXCLUDED = "equipment_not_listed_in_LVD_Annex_II_exclusions"
    EMC_EQUIPMENT = "equipment_meets_definition_of_equipment_in_EMC_Article2"
    EMC_RELEVANT = (
        "equipment_liable_to_generate_electromagnetic_disturbance"
        "_or_performance_liable_to_be_affected"
    )


LVD_AC_RANGE = (50, 1000)
LVD_DC_RANGE = (75, 1500)


def _negate(value: bool | None) -> bool | None:
    return None if value is None else not value


def _within(value: float | None, bounds: tuple[int, int]) -> bool:
    return value is not None and bounds[0] <= value <= bounds[1]


def _voltage_in_lvd_range(listing: ListingLike) -> bool:
    return (
        _within(listing.voltage_ac, LVD_AC_RANGE)
        or _within(listing.voltage_dc, LVD_DC_RANGE)
    )


_RESOLVERS: dict[ComplianceToken, Callable[[ListingLike], bool | None]] = {
    ComplianceToken.RADIO_INTENT: lambda listing: listing.is_radio_equipment,
    ComplianceToken.RADIO_EQUIPMENT: lambda listing: listing.is_radio_equipment,
    ComplianceToken.NOT_RADIO_EQUIPMENT: lambda listing: _negate(listing.is_radio_equipment),
    ComplianceToken.RED_NOT_EXCLUDED: lambda listing: not bool(listing.is_red_excluded),
    ComplianceToken.LVD_VOLTAGE_RANGE: _voltage_in_lvd_range,
    ComplianceToken.LVD_NOT_ANNEX_II_EXCLUDED: lambda listing: not bool(listing.is_lvd_annex_ii_excluded),
    ComplianceToken.EMC_EQUIPMENT: lambda listing: listing.is_emc_equipment,
    ComplianceToken.EMC_RELEVANT: lambda listing: listing.is_emc_relevant,
}


def is_known_token(name: str) -> bool:
    return name in ComplianceToken._value2member_map_


def resolve_token(listing: ListingLike, name: str) -> TokenValue:
    """Truth value of the named proposition for this listing."""
    if not is_known_token(name):
        return TokenValue.UNDEFINED
    return TokenValue.of(_RESOLVERS[ComplianceToken(name)](listing))
