# Shared pytest fixtures
from __future__ import annotations
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

from taxfill.models.transaction import Transaction


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("TAXFILL_TAX_YEAR", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./output
templates_directory: ./forms
tax_year: 2025
validate: true
skip_empty_rows: true
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "taxfill.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_workbook() -> Callable[[Path, dict[str, list[list[object]]]], Path]:
    """Write a real .xlsx; the first row of each sheet is its header row."""
    def _make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                df = pd.DataFrame(rows)
                df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def transaction_factory() -> Callable[..., Transaction]:
    def _make(
        name: str = "ACME",
        quantity: float = 10,
        purchase_price: float = 100.0,
        sell_price: float = 150.0,
        adjustment: float = 0.0,
        code: str = "",
        short_term: bool = True,
    ) -> Transaction:
        purchase = datetime(2025, 1, 2) if short_term else datetime(2022, 1, 2)
        return Transaction(
            quantity=quantity,
            name=name,
            purchase_date=purchase,
            sell_date=datetime(2025, 6, 30),
            purchase_price=purchase_price,
            sell_price=sell_price,
            code=code,
            adjustment=adjustment,
            is_short_term=short_term,
        )
    return _make


@pytest.fixture()
def f8949_records() -> list[dict[str, object]]:
    """Two short-term rows and one long-term row, as read from a sheet."""
    return [
        {"Quantity": 10, "Name": "ACME", "Purchase Date": 45658, "Sell Date": 45700,
         "Purchase Price": "$1,000.00", "Sell Price": 1200, "Code": None, "Adjustment": None},
        {"Quantity": 5, "Name": "Globex", "Purchase Date": "2025-02-01", "Sell Date": "2025-03-01",
         "Purchase Price": 500, "Sell Price": 450, "Code": "W", "Adjustment": 20},
        {"Quantity": 2.5, "Name": "Initech", "Purchase Date": 44562, "Sell Date": 45658,
         "Purchase Price": 100, "Sell Price": 300, "Code": None, "Adjustment": None},
    ]


@pytest.fixture()
def tax_workbook(temp_workdir: Path, make_workbook) -> Path:
    """data/2025.xlsx with one Form 8949 sheet (2 short, 1 long) and one Form 1040 sheet."""
    return make_workbook(temp_workdir / "data" / "2025.xlsx", {
        "F8949": [
            ["Quantity", "Name", "Purchase Date", "Sell Date", "Purchase Price", "Sell Price", "Code", "Adjustment"],
            [10, "ACME", datetime(2025, 1, 2), datetime(2025, 6, 30), 1000, 1200, None, None],
            [5, "Globex", datetime(2025, 2, 1), datetime(2025, 3, 1), 500, 450, "W", 20],
            [2, "Initech", datetime(2020, 5, 1), datetime(2025, 5, 1), 100, 300, None, None],
        ],
        "F1040": [
            ["Variable", "Value"],
            ["Line 1a", 85000],
            ["Line 7a", 1580],
            ["Line 9", 86580],
        ],
    })
