from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .validation import ValidationIssue

"""ErrorRecord model for the JSON Lines issue log.

Each validation error or warning surfaced while processing a workbook is
written as one record. ``sheet`` is ``"<FILE_LEVEL>"`` for problems that are
not tied to a single sheet (unreadable workbook, fill failures).
"""

__all__ = [
    "FILE_LEVEL",
    "ErrorRecord",
]

FILE_LEVEL = "<FILE_LEVEL>"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured issue record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Workbook filename being processed
        sheet: Sheet name, or FILE_LEVEL
        severity: "error" or "warning"
        field: Field, sheet or instance the issue refers to
        message: Human readable description
    """
    timestamp: str
    file: str
    sheet: str
    severity: str
    field: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, severity: str, field: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            severity=severity,
            field=field,
            message=message,
        )

    @staticmethod
    def from_issue(file: str, sheet: str, issue: ValidationIssue) -> ErrorRecord:
        return ErrorRecord.create(
            file=file,
            sheet=sheet,
            severity=issue.severity.value,
            field=issue.field,
            message=issue.message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
