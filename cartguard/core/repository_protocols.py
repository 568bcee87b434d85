"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Listings, rules and catalogs reach the core through structural Protocols
    - Evidence lookups go through EvidenceRepository / AsyncEvidenceRepository

Design Decisions:
    - Protocol over ABC: pydantic boundary models satisfy these structurally,
      so the core never imports cartguard.schemas
    - Two repository contracts: the sync one is called directly by the core's
      caller; the async one is awaited by the shell, which prefetches evidence
      and hands the core a plain lookup function
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from cartguard.core.domain_types import ConfidenceLevel, RequirementType, SourceType

if TYPE_CHECKING:
    from cartguard.core.evidence import Evidence


class ListingLike(Protocol):
    """Compliance attributes of a listing read by the token resolver."""
    listing_id: str
    is_radio_equipment: bool | None
    is_red_excluded: bool | None
    is_lvd_annex_ii_excluded: bool | None
    is_emc_equipment: bool | None
    is_emc_relevant: bool | None
    voltage_ac: float | None
    voltage_dc: float | None


class RuleLike(Protocol):
    """Fields of a rule catalog row used by the rule evaluator."""
    rule_id: str
    requirement_type: RequirementType
    source_type: SourceType
    confidence: ConfidenceLevel
    required_evidence_keys: Sequence[str]


class ApplicabilityEntryLike(Protocol):
    """One conditional applicability entry. ``conditions`` is the catalog's ``if`` list."""
    rule_id: str
    conditions: Sequence[str]
    then_applies: Sequence[str]
    then_not_applies: Sequence[str]


class ApplicabilityCatalogLike(Protocol):
    applicability_rules: Sequence[ApplicabilityEntryLike]


class EvidenceRepository(Protocol):
    """Contract for resolving evidence per document key, implemented by the shell."""
    def load_evidence(
        self, document_key: str, listing: ListingLike,
    ) -> "Evidence | None": ...
    def save_evidence(self, evidence: "Evidence", listing: ListingLike) -> None: ...


class AsyncEvidenceRepository(Protocol):
    """Async variant for repositories that do IO."""
    async def load_evidence(
        self, document_key: str, listing: ListingLike,
    ) -> "Evidence | None": ...
    async def save_evidence(self, evidence: "Evidence", listing: ListingLike) -> None: ...
