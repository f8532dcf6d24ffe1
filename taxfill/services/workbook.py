from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..forms.dispatcher import FormDispatcher
from ..models.parse_result import FormsData, ParseOptions, RawRecord
from ..models.processing_result import WorkbookResult
from ..models.validation import ValidationResult
from .progress import SheetProgressIndicator

"""Workbook-level parsing: every sheet through the dispatcher, results merged.

Sheets are handled in workbook order. A sheet that cannot be parsed only
contributes issues; the other sheets still produce their forms. When two
sheets produce the same instance id the later sheet wins.
"""

__all__ = [
    "parse_workbook",
]

logger = logging.getLogger(__name__)


def parse_workbook(
    sheets: Mapping[str, Sequence[RawRecord]],
    dispatcher: FormDispatcher,
    options: ParseOptions | None = None,
    progress: SheetProgressIndicator | None = None,
) -> WorkbookResult:
    """Dispatch each non-empty sheet and combine field maps and issues.

    Args:
        sheets: sheet name -> records, in workbook order
        dispatcher: form dispatcher holding the registered parsers
        options: parse options (defaults: year 2025, validate, skip empty rows)
        progress: optional per-sheet progress indicator
    """
    options = options if options is not None else ParseOptions()
    forms_data: FormsData = {}
    sheet_validation: dict[str, ValidationResult] = {}
    sheets_processed: list[str] = []
    sheets_failed: list[str] = []

    for sheet_name, records in sheets.items():
        if not records:
            logger.warning('sheet "%s" is empty, skipping', sheet_name)
            continue

        if progress is not None:
            progress.start_sheet(sheet_name)
        try:
            result = dispatcher.dispatch(sheet_name, records, options)
        except Exception as e:
            # Unexpected parser failure: keep going with the remaining sheets
            logger.exception('failed to process sheet "%s"', sheet_name)
            sheets_failed.append(sheet_name)
            sheet_validation[sheet_name] = ValidationResult.failure(
                sheet_name, f"Failed to parse sheet: {e}"
            )
            if progress is not None:
                progress.finish_sheet(success=False)
            continue

        forms_data.update(result.forms_data)
        if result.form_ids:
            sheets_processed.append(sheet_name)
        sheet_validation[sheet_name] = result.validation
        logger.info(
            "processed sheet=%s forms=%d form_ids=%s",
            sheet_name,
            len(result.form_ids),
            ",".join(result.form_ids) or "-",
        )
        if progress is not None:
            progress.finish_sheet(success=bool(result.form_ids), forms_generated=len(result.form_ids))

    return WorkbookResult(
        forms_data=forms_data,
        validation=ValidationResult.merge(list(sheet_validation.values())),
        sheet_validation=sheet_validation,
        sheets_processed=sheets_processed,
        sheets_failed=sheets_failed,
    )
