from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reader.

The first row of each sheet is its header row; every following row becomes
one record (header -> cell value). Empty cells become None, fully empty rows
are dropped, and numbers and dates keep their native types so the
normalizer can tell date serials from text.
"""

__all__ = [
    "WorkbookReadError",
    "read_workbook",
    "sheet_records",
]


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or decoded."""


def sheet_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a parsed sheet into ordered header -> value records."""
    columns = [str(c).strip() for c in df.columns]
    records: list[dict[str, Any]] = []
    for raw in df.itertuples(index=False, name=None):
        if all(pd.isna(v) for v in raw):
            continue
        record: dict[str, Any] = {}
        for col, val in zip(columns, raw, strict=False):
            if pd.isna(val):
                record[col] = None
            elif hasattr(val, "item") and not isinstance(val, pd.Timestamp):
                # numpy scalar -> python scalar
                record[col] = val.item()
            else:
                record[col] = val
        records.append(record)
    return records


def read_workbook(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Read every sheet (workbook order) of an Excel file into records.

    Parameters
    ----------
    path: workbook path

    Raises:
        WorkbookReadError: file missing or not a readable workbook
    """
    try:
        xls = pd.ExcelFile(path)
    except (OSError, ValueError) as e:
        raise WorkbookReadError(f"cannot read workbook {path}: {e}") from e
    except Exception as e:  # openpyxl/zipfile decode errors
        raise WorkbookReadError(f"cannot decode workbook {path}: {e}") from e

    sheets: dict[str, list[dict[str, Any]]] = {}
    with xls:
        for name in xls.sheet_names:
            df = xls.parse(name, header=0)
            sheets[str(name)] = sheet_records(df)
    return sheets
