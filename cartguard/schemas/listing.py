"""Listing Schema: the product/channel/jurisdiction submission under evaluation.

Invariants:
    - Identity fields are non-empty strings
    - Compliance flags are optional: None means "not stated", which the token
      resolver reports as undefined rather than false
    - evidence_documents may mix event-sourced and legacy shapes
"""

from pydantic import BaseModel, Field

from cartguard.schemas.evidence import EvidenceDocument


class ListingInput(BaseModel):
    listing_id: str = Field(min_length=1)
    product_id: str = Field(min_length=1)
    product_version: str = Field(min_length=1)
    product_archetype: str = Field(min_length=1)
    jurisdiction: str = Field(min_length=1)
    channel: str = Field(min_length=1)

    is_radio_equipment: bool | None = None
    is_red_excluded: bool | None = None
    is_lvd_annex_ii_excluded: bool | None = None
    is_emc_equipment: bool | None = None
    is_emc_relevant: bool | None = None
    voltage_ac: float | None = Field(None, ge=0)
    voltage_dc: float | None = Field(None, ge=0)

    evidence_documents: list[EvidenceDocument] = Field(default_factory=list)
