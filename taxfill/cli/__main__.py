from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from taxfill.config.loader import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    ConfigError,
    apply_env_overrides,
    load_config,
)
from taxfill.forms.columns import detect_columns, detect_line_layout
from taxfill.forms.dispatcher import FormDispatcher
from taxfill.forms.mappings import MappingProvider
from taxfill.logging.init import log_summary, setup_logging
from taxfill.pdf.filler import PdfFormFiller
from taxfill.services.orchestrator import ProcessingError, process_all, scan_excel_files
from taxfill.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config, then command line overrides
- Build the mapping provider, dispatcher and PDF filler
- Process every .xlsx in the source directory and print the SUMMARY line

Exit codes: 0 all workbooks processed, 2 at least one workbook failed,
1 fatal (config or source directory problems).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so TAXFILL_* variables take precedence over the config file."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="taxfill", description="Spreadsheet -> tax form PDF filler")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--year", type=int, help="Tax year (selects field mapping tables)")
    p.add_argument("--no-validate", action="store_true", help="Skip advisory validation")
    p.add_argument(
        "--stop-at-empty-row",
        action="store_true",
        help="Stop reading a line-item sheet at the first empty variable",
    )
    p.add_argument("--no-fill", action="store_true", help="Parse only, do not fill PDFs")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet layout detection then exit")
    p.add_argument("--list-forms", action="store_true", help="List supported forms then exit")
    return p.parse_args(argv)


def _apply_args(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.year is not None:
        cfg = replace(cfg, tax_year=args.year)
    if args.no_validate:
        cfg = replace(cfg, validate=False)
    if args.stop_at_empty_row:
        cfg = replace(cfg, skip_empty_rows=False)
    return cfg


def _list_forms(dispatcher: FormDispatcher) -> int:
    for form in dispatcher.supported_forms():
        print(f"{form.form_id}: {form.display_name}")
    return EXIT_SUCCESS_ALL


def _inspect_data(cfg: AppConfig, dispatcher: FormDispatcher) -> int:
    from taxfill.excel.reader import WorkbookReadError, read_workbook

    try:
        excel_files = scan_excel_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not excel_files:
        print("inspect: no .xlsx files")
        return EXIT_SUCCESS_ALL
    for f in excel_files:
        print(f"FILE: {f.name}")
        try:
            sheets = read_workbook(f)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        for sname, records in sheets.items():
            parser = dispatcher.find_parser(sname)
            headers = list(records[0].keys()) if records else []
            print(f"  SHEET: {sname} rows={len(records)} parser={parser.form_id if parser else '-'}")
            print(f"    headers={headers}")
            if not records:
                continue
            if parser is not None and parser.form_id == "f8949":
                print(f"    columns={detect_columns(records[0])}")
            elif parser is not None:
                print(f"    layout={detect_line_layout(records[0]).value}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no list was given, so main([]) in tests stays isolated
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    mappings = MappingProvider()
    dispatcher = FormDispatcher.default(mappings)
    if args.list_forms:
        return _list_forms(dispatcher)

    try:
        cfg = _apply_args(apply_env_overrides(load_config(args.config)), args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg, dispatcher)

    logger.info(f"Processing files from: {directory} (tax year {cfg.tax_year})")
    filler = None if args.no_fill else PdfFormFiller(Path(cfg.templates_directory))

    try:
        result = process_all(cfg, dispatcher, filler)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
