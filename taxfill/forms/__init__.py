"""Row-to-field mapping core: column detection, normalization, pagination,
validation and per-sheet dispatch."""

from .aggregate import MAX_ROWS_PER_FORM, MappingGapError
from .dispatcher import FormDispatcher
from .mappings import MappingProvider

__all__ = [
    "MAX_ROWS_PER_FORM",
    "MappingGapError",
    "FormDispatcher",
    "MappingProvider",
]
