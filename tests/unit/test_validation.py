from __future__ import annotations

from taxfill.forms.mappings import generate_f8949_mapping
from taxfill.forms.validation import proceeds_fields, validate_f1040, validate_f8949
from taxfill.models.validation import Severity, ValidationResult

MAPPING = generate_f8949_mapping()


def test_proceeds_fields_are_column_three():
    fields = proceeds_fields(MAPPING)
    assert len(fields) == 2 * 14
    assert MAPPING["st_r0_c3"] in fields
    assert MAPPING["st_total_proceed"] not in fields


def test_validate_f8949_no_forms():
    result = validate_f8949({}, MAPPING)
    assert not result.is_valid
    assert [(e.field, e.message) for e in result.errors] == [("forms", "No forms generated")]


def test_validate_f8949_empty_instance_and_negative_proceeds():
    proceeds = MAPPING["lt_r2_c3"]
    forms = {"f8949_1": {}, "f8949_2": {proceeds: -10.0, MAPPING["lt_r2_c7"]: -50.0}}
    result = validate_f8949(forms, MAPPING)
    assert result.is_valid
    assert [(w.field, w.message) for w in result.warnings] == [
        ("f8949_1", "Form has no data"),
        (f"f8949_2.{proceeds}", "Negative proceeds amount detected"),
    ]


def test_validate_f8949_without_mapping_uses_logical_keys():
    result = validate_f8949({"f8949_1": {"st_r0_c3": -1.0, "st_r0_c7": -3.0}})
    assert [w.field for w in result.warnings] == ["f8949_1.st_r0_c3"]


def test_validate_f1040():
    assert validate_f1040({}).errors[0].message == "No data found for Form 1040"
    assert not validate_f1040({"f1040": {}}).is_valid

    result = validate_f1040({"f1040": {"a": 1.0, "b": ""}}, required_fields=["a", "b", "c"])
    assert result.is_valid
    assert [w.field for w in result.warnings] == ["b", "c"]


def test_validation_result_merge():
    merged = ValidationResult.merge([
        ValidationResult.create(True, warnings=[("x", "w1")]),
        ValidationResult.failure("y", "e1"),
        ValidationResult.ok(),
    ])
    assert not merged.is_valid
    assert [(e.field, e.severity) for e in merged.errors] == [("y", Severity.ERROR)]
    assert [(w.field, w.severity) for w in merged.warnings] == [("x", Severity.WARNING)]
    assert ValidationResult.merge([]).is_valid
