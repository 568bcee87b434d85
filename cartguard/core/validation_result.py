"""Validation Result: the issue shape shared by schema checks, policy checks and rule evaluation.

Invariants:
    - valid is True iff errors is empty
    - path is a dotted field path ("claims.0.category") or a rule id, never a list

Design Decisions:
    - Issues are data, not exceptions: the caller decides what to do with them
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    path: str | None = None

    def to_dict(self) -> dict:
        issue = {"code": self.code, "message": self.message}
        if self.path is not None:
            issue["path"] = self.path
        return issue


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors

    @classmethod
    def failed(cls, errors: list[ValidationIssue]) -> "ValidationResult":
        return cls(errors=tuple(errors))

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


@dataclass(frozen=True)
class ParseOutcome:
    """Either a parsed boundary value or the issues that rejected it."""
    value: object | None = None
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues
