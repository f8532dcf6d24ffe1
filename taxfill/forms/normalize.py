from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, timedelta
from typing import Any

import pandas as pd

from ..models.transaction import Transaction

"""Cell value normalization and holding-period classification.

Raw cells arrive as text, numbers, spreadsheet date serials or native
dates. This module turns them into typed values and builds Transactions.

Rules:
- numeric dates are day-count serials counted from 1899-12-30 (serial 25569
  is 1970-01-01), truncated to UTC midnight
- currency text drops ``$`` and ``,`` before parsing; failures fall back to
  the caller's default
- short-term means the sale happened less than ONE_YEAR_MS after purchase,
  a fixed 365-day span that ignores leap days
"""

__all__ = [
    "EXCEL_EPOCH",
    "ONE_YEAR_MS",
    "is_empty",
    "excel_serial_to_datetime",
    "parse_date",
    "format_date",
    "parse_number",
    "is_short_term",
    "classify",
]

logger = logging.getLogger(__name__)

EXCEL_EPOCH = datetime(1899, 12, 30)
ONE_YEAR_MS = 365 * 24 * 60 * 60 * 1000


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_empty(value: Any) -> bool:
    """None, empty string, NaN and NaT count as empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def excel_serial_to_datetime(serial: float) -> datetime:
    """Convert a spreadsheet day serial to a naive UTC-midnight datetime."""
    if math.isnan(serial):
        raise ValueError("date serial is NaN")
    return EXCEL_EPOCH + timedelta(days=math.floor(serial))


def parse_date(value: Any) -> datetime:
    """Coerce a cell value to a naive (UTC) datetime.

    Raises:
        ValueError: the value cannot be interpreted as a date
    """
    if is_empty(value):
        raise ValueError("empty date")
    if isinstance(value, pd.Timestamp):
        dt = value.to_pydatetime()
    elif isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif _is_number(value):
        try:
            dt = excel_serial_to_datetime(float(value))
        except OverflowError as e:
            raise ValueError(f"date serial out of range: {value!r}") from e
    else:
        try:
            ts = pd.to_datetime(value)
        except (ValueError, TypeError, OverflowError) as e:
            raise ValueError(f"unparseable date: {value!r}") from e
        if pd.isna(ts):
            raise ValueError(f"unparseable date: {value!r}")
        dt = ts.to_pydatetime()

    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def format_date(value: datetime | date) -> str:
    """MM/DD/YYYY text as printed on the form."""
    return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"


def parse_number(value: Any, default: float = 0.0) -> float:
    """Parse a number, tolerating ``$`` and thousands separators."""
    if _is_number(value):
        number = float(value)
        return default if math.isnan(number) else number
    text = str(value).replace("$", "").replace(",", "").strip()
    try:
        number = float(text)
    except ValueError:
        return default
    return default if math.isnan(number) else number


def is_short_term(purchase_date: datetime, sell_date: datetime) -> bool:
    diff_ms = (sell_date - purchase_date) / timedelta(milliseconds=1)
    return diff_ms < ONE_YEAR_MS


def _cell(record: Mapping[str, Any], role_map: Mapping[str, str], role: str) -> Any:
    header = role_map.get(role)
    if header is None:
        return None
    return record.get(header)


def classify(
    records: Iterable[Mapping[str, Any]], role_map: Mapping[str, str]
) -> list[Transaction]:
    """Build Transactions from raw records in input order.

    Records with an empty quantity are skipped. Records whose dates cannot
    be parsed are dropped with a warning; the rest are still processed.
    """
    transactions: list[Transaction] = []
    for index, record in enumerate(records):
        if is_empty(_cell(record, role_map, "quantity")):
            continue
        try:
            purchase = parse_date(_cell(record, role_map, "purchaseDate"))
            sell = parse_date(_cell(record, role_map, "sellDate"))
        except ValueError as e:
            logger.warning("dropping transaction record %d: %s", index, e)
            continue

        name = _cell(record, role_map, "name")
        code = _cell(record, role_map, "code")
        adjustment = _cell(record, role_map, "adjustment")
        transactions.append(
            Transaction(
                quantity=parse_number(_cell(record, role_map, "quantity")),
                name="" if is_empty(name) else str(name),
                purchase_date=purchase,
                sell_date=sell,
                purchase_price=parse_number(_cell(record, role_map, "purchasePrice")),
                sell_price=parse_number(_cell(record, role_map, "sellPrice")),
                code="" if is_empty(code) else str(code),
                adjustment=0.0 if is_empty(adjustment) else parse_number(adjustment, default=0.0),
                is_short_term=is_short_term(purchase, sell),
            )
        )
    logger.debug("classified %d transactions", len(transactions))
    return transactions
