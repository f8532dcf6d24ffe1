from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

from taxfill.excel.reader import WorkbookReadError, read_workbook, sheet_records


def test_read_workbook_records_and_order(temp_workdir: Path, make_workbook):
    path = make_workbook(temp_workdir / "data" / "t.xlsx", {
        "F8949": [
            ["Qty", "Name", "Sold"],
            [10, "ACME", datetime(2025, 3, 1)],
            [None, None, None],
            [5, "Globex", datetime(2025, 4, 1)],
        ],
        "F1040": [
            ["Variable", "Value"],
            ["Line 1a", 50000],
        ],
    })
    sheets = read_workbook(path)
    assert list(sheets) == ["F8949", "F1040"]

    rows = sheets["F8949"]
    # fully empty row dropped
    assert [r["Name"] for r in rows] == ["ACME", "Globex"]
    assert rows[0]["Qty"] == 10
    assert isinstance(rows[0]["Qty"], (int, float))
    assert pd.Timestamp(rows[1]["Sold"]) == pd.Timestamp("2025-04-01")
    assert sheets["F1040"] == [{"Variable": "Line 1a", "Value": 50000}]


def test_read_workbook_header_only_sheet(temp_workdir: Path, make_workbook):
    path = make_workbook(temp_workdir / "data" / "t.xlsx", {"F8949": [["Qty", "Name"]]})
    assert read_workbook(path) == {"F8949": []}


def test_read_workbook_missing_file(temp_workdir: Path):
    with pytest.raises(WorkbookReadError):
        read_workbook(temp_workdir / "data" / "missing.xlsx")


def test_read_workbook_corrupt_file(temp_workdir: Path):
    bad = temp_workdir / "data" / "bad.xlsx"
    bad.write_bytes(b"this is not a workbook")
    with pytest.raises(WorkbookReadError):
        read_workbook(bad)


def test_sheet_records_cleans_values():
    df = pd.DataFrame({" Name ": ["A", None], "Amount": [1.5, float("nan")], "Note": [None, "x"]})
    records = sheet_records(df)
    assert records == [
        {"Name": "A", "Amount": 1.5, "Note": None},
        {"Name": None, "Amount": None, "Note": "x"},
    ]
    assert type(records[0]["Amount"]) is float
