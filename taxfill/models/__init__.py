"""Domain models for the spreadsheet -> tax form filler.

This package contains the data model shared by the form parsers, the
workbook service and the orchestrator.
"""

from .chunk import Chunk
from .parse_result import (
    DEFAULT_TAX_YEAR,
    FieldMap,
    FormConfig,
    FormsData,
    ParseOptions,
    ParseResult,
    RawRecord,
)
from .transaction import Transaction
from .validation import Severity, ValidationIssue, ValidationResult

__all__ = [
    # Mapping core
    "Transaction",
    "Chunk",
    "FieldMap",
    "FormsData",
    "RawRecord",
    # Parse contract
    "DEFAULT_TAX_YEAR",
    "FormConfig",
    "ParseOptions",
    "ParseResult",
    # Validation
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]
