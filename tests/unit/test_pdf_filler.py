from __future__ import annotations

import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from taxfill.models.fill_result import FillResult
from taxfill.pdf.filler import PdfFormFiller, base_form_id, format_field_value, write_bundle


@pytest.mark.parametrize(
    "value, expected",
    [
        (1200.0, "1200"),
        (1234.5, "1234.5"),
        (0.1 + 0.2, "0.3"),
        (-70.0, "-70"),
        (-0.001, "0"),
        (7, "7"),
        ("01/01/2025", "01/01/2025"),
    ],
)
def test_format_field_value(value, expected):
    assert format_field_value(value) == expected


def test_template_path_uses_base_form_id(tmp_path: Path):
    filler = PdfFormFiller(tmp_path)
    assert base_form_id("f8949_2") == "f8949"
    assert filler.template_path("f8949_2") == tmp_path / "f8949.pdf"
    assert filler.template_path("f1040") == tmp_path / "f1040.pdf"


def test_fill_missing_template_returns_failure(tmp_path: Path):
    result = PdfFormFiller(tmp_path).fill("f1040", {"x": 1.0})
    assert result.success is False
    assert result.pdf_bytes is None
    assert result.error


def _fake_writer() -> MagicMock:
    writer = MagicMock()
    writer.pages = [MagicMock()]
    writer.write.side_effect = lambda buf: buf.write(b"%PDF-1.7 fake")
    return writer


def test_fill_success_with_mocked_pdf(tmp_path: Path):
    reader = MagicMock()
    reader.get_fields.return_value = {"a": {}, "b": {}}
    writer = _fake_writer()
    with patch("taxfill.pdf.filler.PdfReader", return_value=reader), \
         patch("taxfill.pdf.filler.PdfWriter", return_value=writer) as writer_cls:
        result = PdfFormFiller(tmp_path).fill("f8949_1", {"a": 150.0, "b": "", "zz": "x"})

    writer_cls.assert_called_once_with(clone_from=reader)
    assert result.success is True
    assert result.pdf_bytes == b"%PDF-1.7 fake"
    assert result.filled_fields == ["a"]
    assert result.failed_fields == ["zz"]
    writer.update_page_form_field_values.assert_called_once_with(
        writer.pages[0], {"a": "150"}, auto_regenerate=False
    )
    writer.set_need_appearances_writer.assert_called_once_with(True)


def test_fill_all_one_result_per_instance(tmp_path: Path):
    results = PdfFormFiller(tmp_path).fill_all({"f8949_1": {}, "f8949_2": {}, "f1040": {}})
    assert [r.form_id for r in results] == ["f8949_1", "f8949_2", "f1040"]


def test_write_bundle(tmp_path: Path):
    results = [
        FillResult(form_id="f8949_1", success=True, pdf_bytes=b"one"),
        FillResult(form_id="f1040", success=False, error="no template"),
        FillResult(form_id="f8949_2", success=True, pdf_bytes=b"two"),
    ]
    path = write_bundle(results, tmp_path / "out" / "2025.zip")
    assert path is not None
    with zipfile.ZipFile(path) as zf:
        assert zf.namelist() == ["f8949_1_filled.pdf", "f8949_2_filled.pdf"]
        assert zf.read("f8949_2_filled.pdf") == b"two"


def test_write_bundle_nothing_to_write(tmp_path: Path):
    target = tmp_path / "out" / "none.zip"
    assert write_bundle([FillResult(form_id="f1040", success=False)], target) is None
    assert not target.exists()


def test_list_fields_reads_template(tmp_path: Path):
    reader = MagicMock()
    reader.get_fields.return_value = {"topmostSubform[0].Page1[0].f1_47[0]": {}}
    with patch("taxfill.pdf.filler.PdfReader", return_value=reader) as reader_cls:
        names = PdfFormFiller(tmp_path).list_fields("f1040")
    reader_cls.assert_called_once_with(str(tmp_path / "f1040.pdf"))
    assert names == ["topmostSubform[0].Page1[0].f1_47[0]"]
