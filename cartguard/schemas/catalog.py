"""Catalog Schemas: rule catalog and applicability catalog documents.

Invariants:
    - Enumerated fields (requirement_type, source_type, confidence) are closed sets
    - last_verified_at is a calendar date (YYYY-MM-DD)
    - required_evidence_keys defaults to []; such rules evaluate to "unknown"
    - Applicability entries need at least one condition; ``if`` is exposed as
      ``conditions`` because ``if`` is a Python keyword
    - Catalog row order is preserved (the applicability short-circuit depends on it)
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from cartguard.core.domain_types import ConfidenceLevel, RequirementType, SourceType


class SubmissionMetadata(BaseModel):
    path: str
    deadline: str
    enforcement_if_missed: str


class RuleRecord(BaseModel):
    rule_id: str = Field(min_length=1)
    jurisdiction: str = Field(min_length=1)
    channel: str = Field(min_length=1)
    requirement_type: RequirementType
    trigger: str
    required_evidence: list[str]
    required_evidence_keys: list[str] = Field(default_factory=list)
    validation_checks: list[str]
    submission_metadata: SubmissionMetadata
    source_url: HttpUrl
    source_type: SourceType
    last_verified_at: date
    confidence: ConfidenceLevel
    unknown_reason: str = ""


class RuleCatalog(BaseModel):
    rules: list[RuleRecord]


class ApplicabilityRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rule_id: str = Field(min_length=1)
    conditions: list[str] = Field(alias="if", min_length=1)
    then_applies: list[str] = Field(default_factory=list)
    then_not_applies: list[str] = Field(default_factory=list)
    source_url: HttpUrl
    confidence: ConfidenceLevel
    last_verified_at: date


class ApplicabilityCatalog(BaseModel):
    applicability_rules: list[ApplicabilityRule]
