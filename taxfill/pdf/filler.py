from __future__ import annotations

import io
import logging
import numbers
import zipfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from ..forms.normalize import is_empty
from ..models.fill_result import FillResult
from ..models.parse_result import FormsData

"""AcroForm filling of PDF templates.

Instance ids map to templates by their base id: ``f8949_2`` is filled from
``<templates_dir>/f8949.pdf``. Filling never raises; any failure is returned
on the FillResult.
"""

__all__ = [
    "PdfFormFiller",
    "base_form_id",
    "format_field_value",
    "write_bundle",
]

logger = logging.getLogger(__name__)


def base_form_id(form_id: str) -> str:
    return form_id.split("_")[0]


def format_field_value(value: Any) -> str:
    """Text written into a PDF field; numbers are rounded to cents and
    printed without trailing zeros."""
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        text = f"{float(value):.2f}".rstrip("0").rstrip(".")
        return "0" if text == "-0" else text
    return str(value)


class PdfFormFiller:
    def __init__(self, templates_dir: Path) -> None:
        self.templates_dir = Path(templates_dir)

    def template_path(self, form_id: str) -> Path:
        return self.templates_dir / f"{base_form_id(form_id)}.pdf"

    def list_fields(self, form_id: str) -> list[str]:
        """Fully qualified field names of the template (for building mappings)."""
        reader = PdfReader(str(self.template_path(form_id)))
        return list((reader.get_fields() or {}).keys())

    def fill(self, form_id: str, field_map: Mapping[str, Any]) -> FillResult:
        path = self.template_path(form_id)
        values = {
            name: format_field_value(v) for name, v in field_map.items() if not is_empty(v)
        }
        try:
            reader = PdfReader(str(path))
            template_fields = reader.get_fields() or {}
            filled = [n for n in values if n in template_fields]
            failed = [n for n in values if n not in template_fields]

            writer = PdfWriter(clone_from=reader)
            fill_values = {n: values[n] for n in filled}
            for page in writer.pages:
                writer.update_page_form_field_values(page, fill_values, auto_regenerate=False)
            writer.set_need_appearances_writer(True)

            buf = io.BytesIO()
            writer.write(buf)
        except (OSError, PyPdfError, ValueError, KeyError) as e:
            logger.error("form=%s template=%s fill failed: %s", form_id, path, e)
            return FillResult(form_id=form_id, success=False, error=str(e))

        if failed:
            logger.warning("form=%s %d fields not in template", form_id, len(failed))
        logger.debug(
            "form=%s filled %d/%d fields", form_id, len(filled), len(template_fields)
        )
        return FillResult(
            form_id=form_id,
            success=True,
            pdf_bytes=buf.getvalue(),
            filled_fields=filled,
            failed_fields=failed,
        )

    def fill_all(self, forms_data: FormsData) -> list[FillResult]:
        return [self.fill(form_id, field_map) for form_id, field_map in forms_data.items()]


def write_bundle(results: Iterable[FillResult], path: Path) -> Path | None:
    """Zip successful fills as ``{form_id}_filled.pdf``; None when nothing to write."""
    ok = [r for r in results if r.success and r.pdf_bytes is not None]
    if not ok:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for r in ok:
            zf.writestr(f"{r.form_id}_filled.pdf", r.pdf_bytes)
    logger.info("wrote %d filled forms to %s", len(ok), path)
    return path
