from __future__ import annotations

import logging
from collections.abc import Sequence

from ...models.parse_result import FormsData, ParseOptions, ParseResult, RawRecord
from ...models.validation import ValidationResult
from ..aggregate import MAX_ROWS_PER_FORM, MappingGapError, aggregate, merge_instances
from ..columns import detect_columns
from ..normalize import classify
from ..validation import validate_f8949
from .base import FormParser

"""Form 8949 - Sales and Other Dispositions of Capital Assets.

Pipeline: detect columns on the first record -> classify rows -> split by
holding period -> paginate each half 14 rows per page -> merge the halves
into ``f8949_1``, ``f8949_2``, ...
"""

__all__ = [
    "F8949Parser",
]

logger = logging.getLogger(__name__)


class F8949Parser(FormParser):
    form_id = "f8949"
    display_name = "Form 8949 - Sales and Dispositions of Capital Assets"
    aliases = ("f8949", "8949")

    def parse(self, records: Sequence[RawRecord], options: ParseOptions) -> ParseResult:
        if not records:
            return self._failure("sheet", "No data found in sheet")

        role_map = detect_columns(records[0])
        if role_map is None:
            logger.warning("could not detect column structure for %s", self.form_id)
            return self._failure("columns", "Could not detect column structure for Form 8949")

        transactions = classify(records, role_map)
        if not transactions:
            return self._failure("data", "No valid transactions found")

        short_term = [t for t in transactions if t.is_short_term]
        long_term = [t for t in transactions if not t.is_short_term]
        mapping = self.mapping_for(options.year)

        try:
            short_maps = aggregate(short_term, "st", mapping, MAX_ROWS_PER_FORM)
            long_maps = aggregate(long_term, "lt", mapping, MAX_ROWS_PER_FORM)
        except MappingGapError as e:
            logger.error("form=%s year=%d %s", self.form_id, options.year, e)
            return self._failure(e.key, str(e))

        forms_data = merge_instances(short_maps, long_maps, self.form_id)
        logger.info(
            "form=%s short_term=%d long_term=%d instances=%d",
            self.form_id,
            len(short_term),
            len(long_term),
            len(forms_data),
        )
        return self._finish(forms_data, options)

    def validate(self, forms_data: FormsData, year: int) -> ValidationResult:
        return validate_f8949(forms_data, self.mapping_for(year))
