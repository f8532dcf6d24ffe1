from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from .processing_result import WorkbookResult

"""ExcelFile domain model and FileStatus enum.

ExcelFile is the processing context for a single workbook, recording
whether it was read (success) or not (failed).
"""


class FileStatus(Enum):
    """Status enum for ExcelFile processing lifecycle.

    - FAILED means the workbook itself could not be read; sheets that fail to
      parse are reported as issues and do not fail the file.
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ExcelFile:
    """Processing context for a single workbook."""
    path: Path
    name: str
    status: FileStatus
    result: WorkbookResult | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    bundle_path: Path | None = None  # zip of filled PDFs, when filling ran
    error: str | None = None  # failure reason summary

    @property
    def form_count(self) -> int:
        return len(self.result.forms_data) if self.result else 0
