from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..models.parse_result import FormConfig, ParseOptions, ParseResult, RawRecord
from ..models.validation import ValidationResult
from .mappings import MappingProvider
from .parsers import F1040Parser, F8949Parser, FormParser

"""Sheet name -> form parser dispatch.

Parsers are scanned in registration order and the first one accepting the
sheet name handles it. An unknown sheet is reported as a single error in
the result; dispatch never raises for it.
"""

__all__ = [
    "FormDispatcher",
]

logger = logging.getLogger(__name__)


class FormDispatcher:
    def __init__(self, parsers: Iterable[FormParser] = ()) -> None:
        self._parsers: list[FormParser] = list(parsers)

    @classmethod
    def default(cls, mappings: MappingProvider | None = None) -> FormDispatcher:
        """Dispatcher with every built-in form, sharing one mapping provider."""
        mappings = mappings if mappings is not None else MappingProvider()
        return cls([F8949Parser(mappings), F1040Parser(mappings)])

    def register(self, parser: FormParser) -> None:
        self._parsers.append(parser)

    @property
    def parsers(self) -> list[FormParser]:
        return list(self._parsers)

    def find_parser(self, sheet_name: str) -> FormParser | None:
        return next((p for p in self._parsers if p.can_parse(sheet_name)), None)

    def dispatch(
        self, sheet_name: str, records: Sequence[RawRecord], options: ParseOptions
    ) -> ParseResult:
        parser = self.find_parser(sheet_name)
        if parser is None:
            logger.debug("no parser for sheet=%s", sheet_name)
            return ParseResult(
                form_ids=[],
                forms_data={},
                validation=ValidationResult.failure(
                    "sheet", f"No parser found for sheet: {sheet_name}"
                ),
            )
        logger.debug("sheet=%s parser=%s records=%d", sheet_name, parser.form_id, len(records))
        return parser.parse(records, options)

    def supported_forms(self) -> list[FormConfig]:
        return [p.form_config() for p in self._parsers]
