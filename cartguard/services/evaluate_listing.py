"""Listing Evaluation Service: parse inputs, resolve evidence, run the pure rule engine.

Invariants:
    - Inputs are parsed in order listing → rule catalog → applicability catalog;
      the first rejected document short-circuits with its schema issues
    - Every rule in one evaluation is judged against the same as_of instant
    - The verdict is returned as data; nothing here raises for bad input

Design Decisions:
    - Impureim sandwich: parsing + evidence loading (shell) around
      evaluate_rules + aggregate_evaluations (core)
    - The async entry point prefetches evidence so the core stays synchronous
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from cartguard.core.aggregate import CatalogEvaluationResult, aggregate_evaluations
from cartguard.core.repository_protocols import AsyncEvidenceRepository, EvidenceRepository
from cartguard.core.rule_evaluation import EvidenceLookup, evaluate_rules
from cartguard.core.validation_result import ValidationResult
from cartguard.core.verification import as_utc, utc_now
from cartguard.schemas.catalog import ApplicabilityCatalog, RuleCatalog
from cartguard.schemas.listing import ListingInput
from cartguard.schemas.parsing import SchemaPrefix, parse_payload
from cartguard.services.evidence_repository import (
    EmbeddedEvidenceRepository,
    lookup_for,
    prefetch_evidence,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationInputs:
    listing: ListingInput
    rules: RuleCatalog
    applicability: ApplicabilityCatalog


def validate_rule_catalog(payload: object) -> tuple[ValidationResult, RuleCatalog | None]:
    outcome = parse_payload(RuleCatalog, payload, SchemaPrefix.RULES)
    if not outcome.ok:
        return ValidationResult.failed(outcome.issues), None
    return ValidationResult(), outcome.value


def validate_applicability_catalog(
    payload: object,
) -> tuple[ValidationResult, ApplicabilityCatalog | None]:
    outcome = parse_payload(ApplicabilityCatalog, payload, SchemaPrefix.APPLICABILITY)
    if not outcome.ok:
        return ValidationResult.failed(outcome.issues), None
    return ValidationResult(), outcome.value


def parse_evaluation_inputs(
    listing_payload: object,
    rules_payload: object,
    applicability_payload: object,
) -> EvaluationInputs | ValidationResult:
    """Parsed inputs, or the schema failure of the first rejected document."""
    listing = parse_payload(ListingInput, listing_payload, SchemaPrefix.LISTING)
    if not listing.ok:
        return ValidationResult.failed(listing.issues)
    rules = parse_payload(RuleCatalog, rules_payload, SchemaPrefix.RULES)
    if not rules.ok:
        return ValidationResult.failed(rules.issues)
    applicability = parse_payload(
        ApplicabilityCatalog, applicability_payload, SchemaPrefix.APPLICABILITY,
    )
    if not applicability.ok:
        return ValidationResult.failed(applicability.issues)
    return EvaluationInputs(listing.value, rules.value, applicability.value)


def _run_engine(
    inputs: EvaluationInputs, lookup: EvidenceLookup, as_of: datetime,
) -> CatalogEvaluationResult:
    rows = evaluate_rules(
        inputs.listing, inputs.rules.rules, inputs.applicability, lookup, as_of,
    )
    evaluation = aggregate_evaluations(inputs.listing.listing_id, rows)
    summary = evaluation.result.summary
    logger.info(
        f"Evaluated {summary['total_rules']} rule(s): "
        f"{summary['blocking_issues']} blocking, {summary['warnings']} warning(s)",
        extra={"listing_id": inputs.listing.listing_id},
    )
    return evaluation


def evaluate_listing_against_rule_catalog(
    listing_payload: object,
    rules_payload: object,
    applicability_payload: object,
    as_of: datetime | date | None = None,
    repository: EvidenceRepository | None = None,
) -> CatalogEvaluationResult:
    """Evaluate a listing against a rule catalog, loading evidence synchronously."""
    parsed = parse_evaluation_inputs(listing_payload, rules_payload, applicability_payload)
    if isinstance(parsed, ValidationResult):
        return CatalogEvaluationResult(verdict=parsed)
    repository = repository or EmbeddedEvidenceRepository()
    return _run_engine(
        parsed, lookup_for(repository, parsed.listing), as_utc(as_of or utc_now()),
    )


async def evaluate_listing_async(
    listing_payload: object,
    rules_payload: object,
    applicability_payload: object,
    repository: AsyncEvidenceRepository,
    as_of: datetime | date | None = None,
) -> CatalogEvaluationResult:
    """Same evaluation, for repositories whose loads must be awaited."""
    parsed = parse_evaluation_inputs(listing_payload, rules_payload, applicability_payload)
    if isinstance(parsed, ValidationResult):
        return CatalogEvaluationResult(verdict=parsed)
    keys = [key for rule in parsed.rules.rules for key in rule.required_evidence_keys]
    lookup = await prefetch_evidence(repository, keys, parsed.listing)
    return _run_engine(parsed, lookup, as_utc(as_of or utc_now()))
