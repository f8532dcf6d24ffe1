from __future__ import annotations
import json
from pathlib import Path
from taxfill.logging.error_log import ErrorLogBuffer
from taxfill.models.error_record import FILE_LEVEL, ErrorRecord
from taxfill.models.validation import Severity, ValidationIssue

KEYS = {"timestamp", "file", "sheet", "severity", "field", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="2025.xlsx",
        sheet="F8949",
        severity="error",
        field="columns",
        message="Could not detect column structure for Form 8949",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "2025.xlsx"
    assert data["sheet"] == "F8949"
    assert data["severity"] == "error"
    assert data["field"] == "columns"
    assert "timestamp" in data and data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_error_record_from_issue():
    issue = ValidationIssue("f1040", "No data found for Form 1040", Severity.WARNING)
    rec = ErrorRecord.from_issue("a.xlsx", FILE_LEVEL, issue)
    assert rec.severity == "warning"
    assert rec.sheet == "<FILE_LEVEL>"
    assert rec.message == "No data found for Form 1040"


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("f1.xlsx", "F8949", "error", "data", "No valid transactions found"))
    buf.append(ErrorRecord.create("f1.xlsx", "F1040", "warning", "f1_47", "Required field is empty"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent == Path("logs")
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_error_log_buffer_multiple_flushes(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "nested" / "logs")
    buf.append(ErrorRecord.create("f.xlsx", "S", "error", "sheet", "first"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("f.xlsx", "S", "error", "sheet", "second"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1
    assert buf.records == []
