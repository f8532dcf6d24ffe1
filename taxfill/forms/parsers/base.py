from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ...models.parse_result import FormConfig, FormsData, ParseOptions, ParseResult, RawRecord
from ...models.validation import ValidationResult
from ..mappings import FieldMapping, MappingProvider

"""Abstract base class for form parsers.

Each supported tax form is one FormParser subclass. The dispatcher picks the
first registered parser whose ``can_parse`` accepts the sheet name.
"""

__all__ = [
    "FormParser",
]


class FormParser(ABC):
    """Shared contract for sheet -> field map pipelines.

    Subclasses set ``form_id``, ``display_name`` and ``aliases`` and
    implement ``parse`` and ``validate``.
    """

    form_id: str = ""
    display_name: str = ""
    aliases: tuple[str, ...] = ()

    def __init__(self, mappings: MappingProvider | None = None) -> None:
        self.mappings = mappings if mappings is not None else MappingProvider()

    def can_parse(self, sheet_name: str) -> bool:
        """Case-insensitive exact match against the parser's aliases."""
        return sheet_name.strip().lower() in self.aliases

    def form_config(self) -> FormConfig:
        return FormConfig(form_id=self.form_id, display_name=self.display_name)

    def mapping_for(self, year: int) -> FieldMapping:
        return self.mappings.get(self.form_id, year)

    @abstractmethod
    def parse(self, records: Sequence[RawRecord], options: ParseOptions) -> ParseResult:
        """Turn a sheet's records into form instances."""

    @abstractmethod
    def validate(self, forms_data: FormsData, year: int) -> ValidationResult:
        """Advisory checks over the produced field maps."""

    def _finish(self, forms_data: FormsData, options: ParseOptions) -> ParseResult:
        validation = (
            self.validate(forms_data, options.year) if options.validate else ValidationResult.ok()
        )
        return ParseResult(
            form_ids=list(forms_data.keys()), forms_data=forms_data, validation=validation
        )

    @staticmethod
    def _failure(field_name: str, message: str) -> ParseResult:
        return ParseResult(
            form_ids=[], forms_data={}, validation=ValidationResult.failure(field_name, message)
        )
