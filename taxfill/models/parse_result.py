from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .validation import ValidationResult

"""Parse options and results exchanged between the dispatcher and parsers.

FieldMap is the unit handed to the document filler: physical field
identifier -> text or number. FormsData keys are document instance ids such
as ``f8949_1`` or ``f1040``.
"""

__all__ = [
    "DEFAULT_TAX_YEAR",
    "FieldMap",
    "FormsData",
    "RawRecord",
    "FormConfig",
    "ParseOptions",
    "ParseResult",
]

DEFAULT_TAX_YEAR = 2025

RawRecord = dict[str, Any]
FieldMap = dict[str, str | float]
FormsData = dict[str, FieldMap]


@dataclass(frozen=True)
class FormConfig:
    form_id: str
    display_name: str


@dataclass(frozen=True)
class ParseOptions:
    """Per-call switches for a parse run."""
    year: int = DEFAULT_TAX_YEAR
    validate: bool = True
    skip_empty_rows: bool = True


@dataclass(frozen=True)
class ParseResult:
    """Output of one sheet: generated instance ids, their field maps and
    the validation outcome."""
    form_ids: list[str]
    forms_data: FormsData = field(default_factory=dict)
    validation: ValidationResult = field(default_factory=ValidationResult.ok)
