"""Request Schemas: API request envelopes.

Invariants:
    - Listing/catalog/content documents are accepted as raw JSON objects and
      parsed by the services, so their schema problems come back as
      ValidationIssues in a 200 response rather than as a 400
    - Evidence command bodies are fully typed: a malformed command is a 400
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from cartguard.core.domain_types import ConfidenceLevel
from cartguard.schemas.evidence import EvidenceDocument


class EvaluateListingRequest(BaseModel):
    listing: dict[str, Any]
    rule_catalog: dict[str, Any]
    applicability_catalog: dict[str, Any]
    as_of: datetime | None = None


class ValidateContentRequest(BaseModel):
    content: dict[str, Any]
    policy: dict[str, Any]


class VerifyEvidenceRequest(BaseModel):
    document: EvidenceDocument
    verifier: str = Field(min_length=1)
    confidence: ConfidenceLevel = ConfidenceLevel.HIGH


class RejectEvidenceRequest(BaseModel):
    document: EvidenceDocument
    verifier: str = Field(min_length=1)
    reason: str = Field(min_length=1)


class RecordConflictRequest(BaseModel):
    document: EvidenceDocument
    auditor_a: str = Field(min_length=1)
    auditor_b: str = Field(min_length=1)
    reason: str = Field(min_length=1)
