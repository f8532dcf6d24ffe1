from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Validation result models.

Validation is advisory: errors flip ``is_valid`` to False but never stop a
field map from being produced. Results from several sheets are combined with
``ValidationResult.merge``.
"""

__all__ = [
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """Single finding attached to a field, sheet or form instance."""
    field: str
    message: str
    severity: Severity


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @staticmethod
    def create(
        is_valid: bool,
        errors: list[tuple[str, str]] | None = None,
        warnings: list[tuple[str, str]] | None = None,
    ) -> ValidationResult:
        """Build a result from ``(field, message)`` pairs."""
        return ValidationResult(
            is_valid=is_valid,
            errors=[ValidationIssue(f, m, Severity.ERROR) for f, m in errors or []],
            warnings=[ValidationIssue(f, m, Severity.WARNING) for f, m in warnings or []],
        )

    @staticmethod
    def ok() -> ValidationResult:
        return ValidationResult(is_valid=True)

    @staticmethod
    def failure(field_name: str, message: str) -> ValidationResult:
        return ValidationResult.create(False, errors=[(field_name, message)])

    @staticmethod
    def merge(results: list[ValidationResult]) -> ValidationResult:
        """Concatenate issues in order; valid only when no errors remain."""
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        for r in results:
            errors.extend(r.errors)
            warnings.extend(r.warnings)
        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
