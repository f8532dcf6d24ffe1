from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.parse_result import DEFAULT_TAX_YEAR, ParseOptions

"""Config loader.

Responsibilities:
- Load the YAML config (default config/taxfill.yml)
- Validate it against config_schema.json shipped next to this module
- Apply defaults (tax_year=2025, validate=True, skip_empty_rows=True)
- Apply environment overrides (TAXFILL_TAX_YEAR)
"""

__all__ = [
    "SCHEMA_PATH",
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "AppConfig",
    "load_config",
    "apply_env_overrides",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/taxfill.yml")

ENV_TAX_YEAR = "TAXFILL_TAX_YEAR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class AppConfig:
    source_directory: str
    output_directory: str = "./output"
    templates_directory: str = "./forms"
    tax_year: int = DEFAULT_TAX_YEAR
    validate: bool = True
    skip_empty_rows: bool = True

    def parse_options(self) -> ParseOptions:
        return ParseOptions(
            year=self.tax_year, validate=self.validate, skip_empty_rows=self.skip_empty_rows
        )


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    return AppConfig(
        source_directory=data["source_directory"],
        output_directory=data.get("output_directory", "./output"),
        templates_directory=data.get("templates_directory", "./forms"),
        tax_year=data.get("tax_year", DEFAULT_TAX_YEAR),
        validate=data.get("validate", True),
        skip_empty_rows=data.get("skip_empty_rows", True),
    )


def apply_env_overrides(cfg: AppConfig) -> AppConfig:
    """Environment variables (typically loaded from .env) win over the file."""
    raw_year = os.getenv(ENV_TAX_YEAR)
    if not raw_year:
        return cfg
    try:
        year = int(raw_year)
    except ValueError as e:
        raise ConfigError(f"{ENV_TAX_YEAR} must be an integer: {raw_year!r}") from e
    return replace(cfg, tax_year=year)
