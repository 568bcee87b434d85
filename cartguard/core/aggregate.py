"""Evaluation Aggregation: folds rule outcome rows into a launch verdict.

Invariants:
    - valid iff no row is blocking
    - one RULE_BLOCKING error per blocking row
    - one warning per row that is "unknown", or not "present" and not blocking
    - summary counts every RuleStatus exactly, plus totals
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from cartguard.core.domain_types import RuleStatus
from cartguard.core.rule_evaluation import RuleEvaluation
from cartguard.core.validation_result import ValidationIssue, ValidationResult


@dataclass(frozen=True)
class ListingEvaluationResult:
    listing_id: str
    evaluations: tuple[RuleEvaluation, ...]
    summary: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "listing_id": self.listing_id,
            "evaluations": [row.to_dict() for row in self.evaluations],
            "summary": dict(self.summary),
        }


@dataclass(frozen=True)
class CatalogEvaluationResult:
    """Verdict plus the per-rule breakdown it was derived from."""
    verdict: ValidationResult
    result: ListingEvaluationResult | None = None

    @property
    def valid(self) -> bool:
        return self.verdict.valid

    def to_dict(self) -> dict:
        payload = self.verdict.to_dict()
        if self.result is not None:
            payload["result"] = self.result.to_dict()
        return payload


def is_warning_row(row: RuleEvaluation) -> bool:
    return row.status == RuleStatus.UNKNOWN or (
        row.status != RuleStatus.PRESENT and not row.blocking
    )


def summarize(rows: Sequence[RuleEvaluation]) -> dict[str, int]:
    counts = Counter(row.status for row in rows)
    summary = {
        "total_rules": len(rows),
        "blocking_issues": sum(1 for row in rows if row.blocking),
        "warnings": sum(1 for row in rows if is_warning_row(row)),
    }
    for status in RuleStatus:
        summary[status.value] = counts.get(status, 0)
    return summary


def aggregate_evaluations(
    listing_id: str, rows: Sequence[RuleEvaluation],
) -> CatalogEvaluationResult:
    errors = [
        ValidationIssue("RULE_BLOCKING", row.message, row.rule_id)
        for row in rows if row.blocking
    ]
    warnings = [
        ValidationIssue(
            "RULE_UNKNOWN" if row.status == RuleStatus.UNKNOWN else "RULE_WARNING",
            row.message,
            row.rule_id,
        )
        for row in rows if is_warning_row(row)
    ]
    return CatalogEvaluationResult(
        verdict=ValidationResult(errors=tuple(errors), warnings=tuple(warnings)),
        result=ListingEvaluationResult(
            listing_id=listing_id,
            evaluations=tuple(rows),
            summary=summarize(rows),
        ),
    )
