from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

"""Column role detection for spreadsheet sheets.

Headers are matched against per-role synonym lists by bidirectional
substring containment on the normalized (lower-cased, trimmed) header text.
When several headers match one role, the first header in record order wins.

Line-oriented sheets (variable/value pairs) are instead classified into one
of three shapes by ``detect_line_layout``.
"""

__all__ = [
    "TRANSACTION_SYNONYMS",
    "REQUIRED_TRANSACTION_ROLES",
    "OPTIONAL_TRANSACTION_ROLES",
    "LineLayout",
    "normalize_header",
    "header_matches",
    "find_header",
    "detect_columns",
    "detect_line_layout",
    "has_columns",
    "find_variable_value_columns",
]

logger = logging.getLogger(__name__)

TRANSACTION_SYNONYMS: dict[str, tuple[str, ...]] = {
    "quantity": ("quantity", "qty", "shares", "units"),
    "name": ("name", "description", "security", "asset"),
    "purchaseDate": ("purchase date", "acquired", "buy date", "date acquired"),
    "sellDate": ("sell date", "sold", "sale date", "date sold"),
    "purchasePrice": ("purchase price", "cost basis", "basis", "cost"),
    "sellPrice": ("sell price", "proceeds", "sale price", "sales proceeds"),
    "code": ("code", "code(s)", "codes"),
    "adjustment": ("adjustment", "amount of adjustment", "adj"),
}

REQUIRED_TRANSACTION_ROLES = (
    "quantity",
    "name",
    "purchaseDate",
    "sellDate",
    "purchasePrice",
    "sellPrice",
)
OPTIONAL_TRANSACTION_ROLES = ("code", "adjustment")

HEADER_ROW_MARKERS = ("variable", "field", "line", "item")
VARIABLE_COLUMN_MARKERS = ("variable", "field", "line")
VALUE_COLUMN_MARKERS = ("value", "amount")


class LineLayout(Enum):
    """Input shape of a line-oriented (variable/value) sheet.

    - HEADERLESS: every record is data; columns are read positionally
    - HEADER_ROW: first record is a header row; remaining rows read positionally
    - LABELED: first record is a header row; variable/value columns located by name
    """
    HEADERLESS = "headerless"
    HEADER_ROW = "header_row"
    LABELED = "labeled"

    @property
    def has_header_row(self) -> bool:
        return self is not LineLayout.HEADERLESS


def normalize_header(text: Any) -> str:
    return str(text).lower().strip()


def header_matches(header: Any, synonyms: Iterable[str]) -> bool:
    """True when the header contains a synonym or a synonym contains it."""
    normalized = normalize_header(header)
    return any(s in normalized or normalized in s for s in synonyms)


def find_header(headers: Iterable[Any], synonyms: Iterable[str]) -> str | None:
    """First header (in iteration order) matching any synonym."""
    synonyms = tuple(synonyms)
    for header in headers:
        if header_matches(header, synonyms):
            return header
    return None


def detect_columns(
    first_record: Mapping[str, Any],
    synonyms: Mapping[str, Iterable[str]] = TRANSACTION_SYNONYMS,
    required: Iterable[str] = REQUIRED_TRANSACTION_ROLES,
    optional: Iterable[str] = OPTIONAL_TRANSACTION_ROLES,
) -> dict[str, str] | None:
    """Resolve semantic roles to headers of ``first_record``.

    Returns:
        role -> header map, or None when any required role is unmatched.
        Unmatched optional roles are left out of the map.
    """
    headers = list(first_record.keys())
    role_map: dict[str, str] = {}
    for role in required:
        found = find_header(headers, synonyms[role])
        if found is None:
            logger.warning("could not find required column for: %s (headers=%s)", role, headers)
            return None
        role_map[role] = found
    for role in optional:
        found = find_header(headers, synonyms[role])
        if found is not None:
            role_map[role] = found
    return role_map


def has_columns(record: Mapping[str, Any], expected: Iterable[str]) -> bool:
    """True when every expected name is matched by some key (both directions)."""
    keys = [normalize_header(k) for k in record.keys()]
    return all(any(k in col or col in k for k in keys) for col in expected)


def detect_line_layout(first_record: Mapping[str, Any]) -> LineLayout:
    """Decide how a variable/value sheet is laid out.

    Keys named exactly ``variable``/``value`` mean the reader already consumed
    the header row, so the records are all data.
    """
    keys = [normalize_header(k) for k in first_record.keys()]
    if any(k in ("variable", "value") for k in keys):
        return LineLayout.HEADERLESS

    values = list(first_record.values())
    first_value = values[0] if values else None
    if not isinstance(first_value, str):
        return LineLayout.HEADERLESS
    normalized = first_value.lower().strip()
    if not any(marker in normalized for marker in HEADER_ROW_MARKERS):
        return LineLayout.HEADERLESS

    if has_columns(first_record, ("variable", "value")):
        return LineLayout.LABELED
    return LineLayout.HEADER_ROW


def find_variable_value_columns(record: Mapping[str, Any]) -> tuple[str, str] | None:
    """Locate the variable and value columns of a labeled sheet by key text."""
    headers = list(record.keys())
    variable_col = next(
        (h for h in headers if any(m in normalize_header(h) for m in VARIABLE_COLUMN_MARKERS)), None
    )
    value_col = next(
        (h for h in headers if any(m in normalize_header(h) for m in VALUE_COLUMN_MARKERS)), None
    )
    if variable_col is None or value_col is None:
        return None
    return variable_col, value_col
