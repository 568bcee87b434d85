"""Boundary Parsing: turns pydantic ValidationErrors into field-pathed ValidationIssues.

Invariants:
    - parse_payload never raises for bad input; failures come back as issues
    - Issue code = "<PREFIX>_<PYDANTIC ERROR TYPE>" upper-cased
    - Issue path = dotted location ("rules.0.source_type"); root errors have no path
    - Discriminated-union tags never appear in a path: a bad embedded evidence
      document reports "evidence_documents.0.ttl_days"
"""

import logging
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from cartguard.core.validation_result import ParseOutcome, ValidationIssue
from cartguard.schemas.evidence import EVIDENCE_DOCUMENT_TAGS

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SchemaPrefix(str, Enum):
    LISTING = "SCHEMA_LISTING"
    RULES = "SCHEMA_RULES"
    APPLICABILITY = "SCHEMA_APPLICABILITY"
    PRODUCT = "SCHEMA_PRODUCT"
    POLICY = "SCHEMA_POLICY"
    EVIDENCE = "SCHEMA_EVIDENCE"


def location_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc if part not in EVIDENCE_DOCUMENT_TAGS)


def issues_from_validation_error(
    exc: ValidationError, prefix: SchemaPrefix,
) -> list[ValidationIssue]:
    issues = []
    for error in exc.errors():
        path = location_path(error["loc"])
        issues.append(ValidationIssue(
            code=f"{prefix.value}_{error['type'].upper()}",
            message=error["msg"],
            path=path or None,
        ))
    return issues


def parse_payload(
    model: type[ModelT], payload: object, prefix: SchemaPrefix,
) -> ParseOutcome:
    """Validate payload against model; ParseOutcome.value is the model on success."""
    try:
        return ParseOutcome(value=model.model_validate(payload))
    except ValidationError as exc:
        issues = issues_from_validation_error(exc, prefix)
        logger.info(
            f"{model.__name__} rejected with {len(issues)} issue(s)",
            extra={"error_code": prefix.value},
        )
        return ParseOutcome(issues=issues)
