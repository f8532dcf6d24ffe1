from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .parse_result import FormsData
from .validation import ValidationResult

"""Processing result models for the spreadsheet -> tax form pipeline.

WorkbookResult aggregates every sheet of one workbook. FileStat and
ProcessingResult carry the per-file and per-run figures rendered on the
SUMMARY line.
"""

__all__ = [
    "WorkbookResult",
    "FileStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class WorkbookResult:
    """Combined field maps and issues for all sheets of one workbook.

    ``validation`` is the merge of ``sheet_validation`` in sheet order.
    """
    forms_data: FormsData
    validation: ValidationResult
    sheet_validation: dict[str, ValidationResult] = field(default_factory=dict)
    sheets_processed: list[str] = field(default_factory=list)  # produced >= 1 instance
    sheets_failed: list[str] = field(default_factory=list)  # raised while parsing

    @property
    def form_ids(self) -> list[str]:
        return list(self.forms_data.keys())


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    forms_generated: int
    sheets_processed: int
    errors: int
    warnings: int
    elapsed_seconds: float
    bundle_path: str | None = None  # zip written for this file, if any


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for a whole run."""
    success_files: int
    failed_files: int
    total_forms: int
    total_sheets: int
    total_errors: int
    total_warnings: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
