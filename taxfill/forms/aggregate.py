from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..models.chunk import Chunk
from ..models.parse_result import FieldMap, FormsData
from ..models.transaction import Transaction
from .normalize import format_date

"""Pagination of transactions into form instances.

A classification-homogeneous transaction list is cut into chunks of at most
MAX_ROWS_PER_FORM rows. Each chunk is projected to logical cell keys
(``{prefix}_r{row}_c{col}`` plus ``{prefix}_total_*``) and every key is
translated to a physical field name through the mapping table.

Short-term and long-term chunk lists are merged by position: instance ``n``
holds the n-th short chunk and the n-th long chunk. Their mapped fields
live on different pages, so the union never overwrites.
"""

__all__ = [
    "MAX_ROWS_PER_FORM",
    "MappingGapError",
    "chunk_transactions",
    "project_chunk",
    "aggregate",
    "merge_instances",
]

logger = logging.getLogger(__name__)

MAX_ROWS_PER_FORM = 14


class MappingGapError(Exception):
    """Raised when a logical cell key has no entry in the mapping table."""

    def __init__(self, key: str) -> None:
        super().__init__(f"mapping table has no entry for cell '{key}'")
        self.key = key


def chunk_transactions(
    transactions: Sequence[Transaction], capacity: int = MAX_ROWS_PER_FORM
) -> list[Chunk]:
    """Split into contiguous chunks of at most ``capacity``, keeping order."""
    if capacity <= 0:
        raise ValueError(f"capacity must be positive: {capacity}")
    return [
        Chunk.build(transactions[i:i + capacity])
        for i in range(0, len(transactions), capacity)
    ]


def _put(field_map: FieldMap, mapping: Mapping[str, str], key: str, value: str | float) -> None:
    physical = mapping.get(key)
    if physical is None:
        raise MappingGapError(key)
    field_map[physical] = value


def project_chunk(chunk: Chunk, prefix: str, mapping: Mapping[str, str]) -> FieldMap:
    """Map one chunk's rows and totals to physical field values.

    Column layout: c0 description, c1 acquired, c2 sold, c3 proceeds,
    c4 cost basis, c5 code (left out when blank), c6 adjustment, c7 gain/loss.

    Raises:
        MappingGapError: a cell key is missing from ``mapping``
    """
    field_map: FieldMap = {}
    for idx, t in enumerate(chunk.transactions):
        row = f"{prefix}_r{idx}"
        _put(field_map, mapping, f"{row}_c0", t.description)
        _put(field_map, mapping, f"{row}_c1", format_date(t.purchase_date))
        _put(field_map, mapping, f"{row}_c2", format_date(t.sell_date))
        _put(field_map, mapping, f"{row}_c3", t.sell_price)
        _put(field_map, mapping, f"{row}_c4", t.purchase_price)
        if t.code:
            _put(field_map, mapping, f"{row}_c5", t.code)
        _put(field_map, mapping, f"{row}_c6", t.adjustment)
        _put(field_map, mapping, f"{row}_c7", t.gain_loss)

    _put(field_map, mapping, f"{prefix}_total_proceed", chunk.total_proceeds)
    _put(field_map, mapping, f"{prefix}_total_cost", chunk.total_cost)
    _put(field_map, mapping, f"{prefix}_total_gl", chunk.total_gain_loss)
    _put(field_map, mapping, f"{prefix}_total_adj", chunk.total_adjustment)
    return field_map


def aggregate(
    transactions: Sequence[Transaction],
    prefix: str,
    mapping: Mapping[str, str],
    capacity: int = MAX_ROWS_PER_FORM,
) -> list[FieldMap]:
    """Chunk then project; one field map per chunk, in order."""
    chunks = chunk_transactions(transactions, capacity)
    logger.debug(
        "prefix=%s transactions=%d chunks=%d", prefix, len(transactions), len(chunks)
    )
    return [project_chunk(c, prefix, mapping) for c in chunks]


def merge_instances(
    short_term: Sequence[FieldMap],
    long_term: Sequence[FieldMap],
    base_form_id: str = "f8949",
) -> FormsData:
    """Combine chunk field maps by position into ``{base}_{n}`` instances."""
    total = max(len(short_term), len(long_term))
    forms_data: FormsData = {}
    for i in range(total):
        instance: FieldMap = {}
        if i < len(short_term):
            instance.update(short_term[i])
        if i < len(long_term):
            instance.update(long_term[i])
        forms_data[f"{base_form_id}_{i + 1}"] = instance
    return forms_data
