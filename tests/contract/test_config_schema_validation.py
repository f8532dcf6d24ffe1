from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from taxfill.config.loader import SCHEMA_PATH

"""Config schema contract test."""


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_config_schema_full_example(schema):
    config = {
        "source_directory": "./data",
        "output_directory": "./output",
        "templates_directory": "./forms",
        "tax_year": 2025,
        "validate": True,
        "skip_empty_rows": False,
    }
    jsonschema.validate(config, schema)


def test_config_schema_minimal_valid_config(schema):
    jsonschema.validate({"source_directory": "./data"}, schema)


def test_config_schema_missing_required_key(schema):
    with pytest.raises(ValidationError):
        jsonschema.validate({"tax_year": 2025}, schema)


def test_config_schema_rejects_extra_key(schema):
    with pytest.raises(ValidationError):
        jsonschema.validate({"source_directory": "./data", "database": {}}, schema)


@pytest.mark.parametrize("year", [1999, 2101, "2025"])
def test_config_schema_rejects_bad_tax_year(schema, year):
    with pytest.raises(ValidationError):
        jsonschema.validate({"source_directory": "./data", "tax_year": year}, schema)


def test_config_schema_validates_from_sample_yaml(schema, sample_config_yaml: str):
    jsonschema.validate(yaml.safe_load(sample_config_yaml), schema)
