from __future__ import annotations

from collections.abc import Sequence

from taxfill.forms.dispatcher import FormDispatcher
from taxfill.forms.parsers import F1040Parser, F8949Parser, FormParser
from taxfill.models.parse_result import FormsData, ParseOptions, ParseResult, RawRecord
from taxfill.models.validation import ValidationResult


class EchoParser(FormParser):
    form_id = "echo"
    display_name = "Echo"
    aliases = ("echo", "8949")

    def parse(self, records: Sequence[RawRecord], options: ParseOptions) -> ParseResult:
        return self._finish({"echo": {"rows": float(len(records))}}, options)

    def validate(self, forms_data: FormsData, year: int) -> ValidationResult:
        return ValidationResult.ok()


def test_default_dispatcher_resolves_sheet_names():
    d = FormDispatcher.default()
    assert isinstance(d.find_parser("F8949"), F8949Parser)
    assert isinstance(d.find_parser("8949"), F8949Parser)
    assert isinstance(d.find_parser("F1040"), F1040Parser)
    assert isinstance(d.find_parser(" 1040 "), F1040Parser)
    assert d.find_parser("Notes") is None


def test_dispatch_unknown_sheet():
    result = FormDispatcher.default().dispatch("Notes", [{"a": 1}], ParseOptions())
    assert result.form_ids == []
    assert result.forms_data == {}
    assert [(e.field, e.message) for e in result.validation.errors] == [
        ("sheet", "No parser found for sheet: Notes")
    ]


def test_dispatch_1040_without_line_items_yields_no_forms():
    records = [{"Variable": None, "Value": 5}, {"Variable": "", "Value": 7}]
    result = FormDispatcher.default().dispatch("1040", records, ParseOptions(validate=False))
    assert result.form_ids == []
    assert not result.validation.is_valid


def test_dispatch_validate_switch_keeps_forms(f8949_records):
    d = FormDispatcher.default()
    on = d.dispatch("F8949", f8949_records, ParseOptions(validate=True))
    off = d.dispatch("F8949", f8949_records, ParseOptions(validate=False))
    assert on.forms_data == off.forms_data
    assert on.form_ids == off.form_ids == ["f8949_1"]


def test_first_registered_parser_wins():
    d = FormDispatcher([EchoParser()])
    d.register(F8949Parser())
    result = d.dispatch("8949", [{"x": 1}, {"x": 2}], ParseOptions())
    assert result.forms_data == {"echo": {"rows": 2.0}}
    assert [p.form_id for p in d.parsers] == ["echo", "f8949"]


def test_supported_forms():
    forms = FormDispatcher.default().supported_forms()
    assert [f.form_id for f in forms] == ["f8949", "f1040"]
    assert forms[1].display_name.startswith("Form 1040")
