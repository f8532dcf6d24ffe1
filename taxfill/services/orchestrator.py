from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import AppConfig
from ..excel.reader import WorkbookReadError, read_workbook
from ..forms.dispatcher import FormDispatcher
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import FILE_LEVEL, ErrorRecord
from ..models.excel_file import ExcelFile, FileStatus
from ..models.parse_result import ParseOptions
from ..models.processing_result import FileStat, ProcessingResult, WorkbookResult
from ..models.validation import Severity
from ..pdf.filler import PdfFormFiller, write_bundle
from .progress import ProgressTracker, SheetProgressIndicator
from .workbook import parse_workbook

"""Run orchestration.

For every workbook in the source directory: read sheets, parse them into
form instances, record issues, and (optionally) fill the PDF templates into
one zip per workbook. Workbooks are independent; an unreadable workbook
fails on its own and the run moves on.
"""

__all__ = [
    "ProcessingError",
    "scan_excel_files",
    "process_file",
    "process_all",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that stops the whole run."""


def scan_excel_files(directory: Path) -> list[Path]:
    """Return the .xlsx files directly inside ``directory``, sorted by name.

    Raises:
        ProcessingError: directory missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".xlsx")
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _record_issues(
    file_name: str, result: WorkbookResult, error_log: ErrorLogBuffer
) -> tuple[int, int]:
    errors = warnings = 0
    for sheet, validation in result.sheet_validation.items():
        for issue in [*validation.errors, *validation.warnings]:
            error_log.append(ErrorRecord.from_issue(file_name, sheet, issue))
            if issue.severity is Severity.ERROR:
                errors += 1
                logger.error("%s [%s] %s: %s", file_name, sheet, issue.field, issue.message)
            else:
                warnings += 1
                logger.warning("%s [%s] %s: %s", file_name, sheet, issue.field, issue.message)
    return errors, warnings


def process_file(
    path: Path,
    dispatcher: FormDispatcher,
    options: ParseOptions,
    error_log: ErrorLogBuffer,
    filler: PdfFormFiller | None = None,
    output_directory: Path | None = None,
) -> tuple[ExcelFile, int, int]:
    """Process one workbook.

    Returns:
        (ExcelFile, error count, warning count)
    """
    start_time = datetime.now(UTC)
    try:
        sheets = read_workbook(path)
    except WorkbookReadError as e:
        error_log.append(
            ErrorRecord.create(
                file=path.name,
                sheet=FILE_LEVEL,
                severity=Severity.ERROR.value,
                field="file",
                message=str(e),
            )
        )
        logger.error("%s: %s", path.name, e)
        return (
            ExcelFile(
                path=path,
                name=path.name,
                start_time=start_time,
                end_time=datetime.now(UTC),
                status=FileStatus.FAILED,
                error=str(e),
            ),
            1,
            0,
        )

    indicator = SheetProgressIndicator(file_name=path.name, total_sheets=len(sheets))
    result = parse_workbook(sheets, dispatcher, options, progress=indicator)
    errors, warnings = _record_issues(path.name, result, error_log)

    logger.info(
        "%s: sheets_processed=%d sheets_failed=%d forms=%s",
        path.name,
        len(result.sheets_processed),
        len(result.sheets_failed),
        ", ".join(result.form_ids) or "-",
    )

    bundle_path: Path | None = None
    if filler is not None and result.forms_data:
        fills = filler.fill_all(result.forms_data)
        for fill in fills:
            if fill.success:
                continue
            errors += 1
            error_log.append(
                ErrorRecord.create(
                    file=path.name,
                    sheet=FILE_LEVEL,
                    severity=Severity.ERROR.value,
                    field=fill.form_id,
                    message=f"fill failed: {fill.error}",
                )
            )
        out_dir = output_directory if output_directory is not None else Path("./output")
        bundle_path = write_bundle(fills, out_dir / f"{path.stem}_{options.year}_filled.zip")

    return (
        ExcelFile(
            path=path,
            name=path.name,
            result=result,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.SUCCESS,
            bundle_path=bundle_path,
        ),
        errors,
        warnings,
    )


def process_all(
    config: AppConfig,
    dispatcher: FormDispatcher,
    filler: PdfFormFiller | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Process every workbook of ``config.source_directory``.

    Raises:
        ProcessingError: the source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    options = config.parse_options()
    output_directory = Path(config.output_directory)

    file_paths = scan_excel_files(Path(config.source_directory))

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_forms = 0
    total_sheets = 0
    total_errors = 0
    total_warnings = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            excel_file, errors, warnings = process_file(
                file_path, dispatcher, options, error_log, filler, output_directory
            )

            if excel_file.status == FileStatus.SUCCESS:
                success_count += 1
            else:
                failed_count += 1
            sheets_processed = len(excel_file.result.sheets_processed) if excel_file.result else 0
            total_forms += excel_file.form_count
            total_sheets += sheets_processed
            total_errors += errors
            total_warnings += warnings

            progress.set_postfix(ok=success_count, failed=failed_count, forms=total_forms)
            progress.finish_file(success=(excel_file.status == FileStatus.SUCCESS))

            elapsed = (
                (excel_file.end_time - excel_file.start_time).total_seconds()
                if excel_file.start_time and excel_file.end_time
                else 0.0
            )
            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=excel_file.status.value,
                    forms_generated=excel_file.form_count,
                    sheets_processed=sheets_processed,
                    errors=errors,
                    warnings=warnings,
                    elapsed_seconds=elapsed,
                    bundle_path=str(excel_file.bundle_path) if excel_file.bundle_path else None,
                )
            )

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning("could not write issue log: %s", e)
    else:
        if log_path is not None:
            logger.info("issue log written to %s", log_path)

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_forms=total_forms,
        total_sheets=total_sheets,
        total_errors=total_errors,
        total_warnings=total_warnings,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
