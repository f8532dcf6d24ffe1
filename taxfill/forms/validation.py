from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..models.parse_result import FormsData
from ..models.validation import ValidationResult
from .normalize import is_empty

"""Advisory checks over produced field maps.

Validators only read the forms data; they never change it and never stop
the pipeline. Findings are returned as a ValidationResult.
"""

__all__ = [
    "proceeds_fields",
    "validate_f8949",
    "validate_f1040",
]


def proceeds_fields(mapping: Mapping[str, str]) -> set[str]:
    """Physical field names that hold per-row proceeds (column c3)."""
    return {physical for key, physical in mapping.items() if key.endswith("_c3")}


def _is_proceeds(field_name: str, proceeds: set[str] | None) -> bool:
    if proceeds is not None:
        return field_name in proceeds
    return "_c3" in field_name


def validate_f8949(
    forms_data: FormsData, mapping: Mapping[str, str] | None = None
) -> ValidationResult:
    """Check Form 8949 instances.

    - error: no instance produced
    - warning: an instance with no fields
    - warning: a negative numeric proceeds cell
    """
    errors: list[tuple[str, str]] = []
    warnings: list[tuple[str, str]] = []
    proceeds = proceeds_fields(mapping) if mapping is not None else None

    if not forms_data:
        errors.append(("forms", "No forms generated"))

    for form_id, field_map in forms_data.items():
        if not field_map:
            warnings.append((form_id, "Form has no data"))
        for name, value in field_map.items():
            if (
                _is_proceeds(name, proceeds)
                and isinstance(value, (int, float))
                and value < 0
            ):
                warnings.append((f"{form_id}.{name}", "Negative proceeds amount detected"))

    return ValidationResult.create(not errors, errors, warnings)


def validate_f1040(
    forms_data: FormsData, required_fields: Iterable[str] = (), form_id: str = "f1040"
) -> ValidationResult:
    """Check the Form 1040 instance and its required fields."""
    field_map = forms_data.get(form_id)
    if not field_map:
        return ValidationResult.failure(form_id, "No data found for Form 1040")

    warnings = [
        (name, "Required field is empty")
        for name in required_fields
        if is_empty(field_map.get(name))
    ]
    return ValidationResult.create(True, [], warnings)
