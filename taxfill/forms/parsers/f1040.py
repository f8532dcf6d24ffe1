from __future__ import annotations

import logging
import numbers
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from ...models.parse_result import FieldMap, FormsData, ParseOptions, ParseResult, RawRecord
from ...models.validation import ValidationResult
from ..columns import LineLayout, detect_line_layout, find_variable_value_columns
from ..normalize import format_date, is_empty
from ..validation import validate_f1040
from .base import FormParser

"""Form 1040 - U.S. Individual Income Tax Return.

The sheet is a list of (variable, value) pairs where the variable is a
line name such as ``Line 1a``. Lines are translated to PDF fields through
the year's mapping table; unknown lines are ignored.
"""

__all__ = [
    "F1040Parser",
    "REQUIRED_LINES",
]

logger = logging.getLogger(__name__)

REQUIRED_LINES = ("Line 1a",)


def _field_value(value: Any) -> str | float:
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, date):
        return format_date(value)
    return str(value)


class F1040Parser(FormParser):
    form_id = "f1040"
    display_name = "Form 1040 - U.S. Individual Income Tax Return"
    aliases = ("f1040", "1040")

    def parse(self, records: Sequence[RawRecord], options: ParseOptions) -> ParseResult:
        if not records:
            return self._failure("sheet", "No data found in sheet")

        mapping = self.mapping_for(options.year)
        layout = detect_line_layout(records[0])
        data_rows = records[1:] if layout.has_header_row else records
        logger.debug("form=%s layout=%s data_rows=%d", self.form_id, layout.value, len(data_rows))

        warnings: list[tuple[str, str]] = []
        if layout is LineLayout.LABELED:
            columns = find_variable_value_columns(data_rows[0]) if data_rows else None
            if columns is None:
                logger.warning("could not detect variable and value columns")
                warnings.append(("columns", "Could not detect variable and value columns"))
        else:
            headers = list(data_rows[0].keys()) if data_rows else []
            if len(headers) < 2:
                logger.warning("not enough columns for two-column format")
                warnings.append(("columns", "Not enough columns for two-column format"))
                columns = None
            else:
                columns = (headers[0], headers[1])

        field_values: FieldMap = {}
        if columns is not None:
            field_values = self._extract(data_rows, columns, mapping, options.skip_empty_rows)
            if not field_values:
                return self._failure("data", "No valid line items found")

        result = self._finish({self.form_id: field_values}, options)
        if not warnings:
            return result
        return ParseResult(
            form_ids=result.form_ids,
            forms_data=result.forms_data,
            validation=ValidationResult.merge(
                [ValidationResult.create(True, [], warnings), result.validation]
            ),
        )

    def _extract(
        self,
        rows: Sequence[RawRecord],
        columns: tuple[str, str],
        mapping: Mapping[str, str],
        skip_empty_rows: bool,
    ) -> FieldMap:
        variable_col, value_col = columns
        field_values: FieldMap = {}
        for row in rows:
            variable = row.get(variable_col)
            value = row.get(value_col)
            if is_empty(variable):
                if skip_empty_rows:
                    continue
                break
            physical = mapping.get(str(variable).strip())
            if physical is None:
                logger.debug("no %s field for variable %r", self.form_id, variable)
                continue
            if not is_empty(value):
                field_values[physical] = _field_value(value)
        return field_values

    def validate(self, forms_data: FormsData, year: int) -> ValidationResult:
        mapping = self.mapping_for(year)
        required = [mapping[line] for line in REQUIRED_LINES if line in mapping]
        return validate_f1040(forms_data, required, self.form_id)
