from __future__ import annotations

import logging

from ..models.parse_result import DEFAULT_TAX_YEAR

"""Field mapping tables by form type and tax year.

Each table maps a logical cell key (``st_r3_c2``, ``"Line 1a"``) to the
physical AcroForm field name of the PDF template for that year. Field names
change between revisions of a form, so a new year is added as a new table.
"""

__all__ = [
    "FieldMapping",
    "F8949_ROWS",
    "F8949_COLUMNS",
    "TOTAL_SUFFIXES",
    "generate_f8949_mapping",
    "F1040_2025",
    "MappingProvider",
]

logger = logging.getLogger(__name__)

FieldMapping = dict[str, str]

F8949_ROWS = 14
F8949_COLUMNS = 8
TOTAL_SUFFIXES = ("total_proceed", "total_cost", "total_gl", "total_adj")

# (prefix, page, table part) for the two halves of Form 8949
_F8949_PARTS = (
    ("st", 1, 1),
    ("lt", 2, 2),
)

# total suffix -> field number on the page
_F8949_TOTAL_FIELDS = {
    "total_proceed": 91,
    "total_cost": 92,
    "total_adj": 94,
    "total_gl": 95,
}


def generate_f8949_mapping() -> FieldMapping:
    """Build the 2025 Form 8949 table (14 rows x 8 columns per part + totals)."""
    mapping: FieldMapping = {}
    for prefix, page, part in _F8949_PARTS:
        for i in range(F8949_ROWS):
            for j in range(F8949_COLUMNS):
                num = F8949_COLUMNS * i + j + 3
                mapping[f"{prefix}_r{i}_c{j}"] = (
                    f"topmostSubform[0].Page{page}[0].Table_Line1_Part{part}[0]"
                    f".Row{i + 1}[0].f{page}_{num:02d}[0]"
                )
        for suffix, num in _F8949_TOTAL_FIELDS.items():
            mapping[f"{prefix}_{suffix}"] = f"topmostSubform[0].Page{page}[0].f{page}_{num:02d}[0]"
    return mapping


F1040_2025: FieldMapping = {
    "Line 1a": "topmostSubform[0].Page1[0].f1_47[0]",
    "Line 1b": "topmostSubform[0].Page1[0].f1_48[0]",
    "Line 1c": "topmostSubform[0].Page1[0].f1_49[0]",
    "Line 1d": "topmostSubform[0].Page1[0].f1_50[0]",
    "Line 1e": "topmostSubform[0].Page1[0].f1_51[0]",
    "Line 1f": "topmostSubform[0].Page1[0].f1_52[0]",
    "Line 1g": "topmostSubform[0].Page1[0].f1_53[0]",
    "Line 1ho": "topmostSubform[0].Page1[0].f1_54[0]",
    "Line 1h": "topmostSubform[0].Page1[0].f1_55[0]",
    "Line 1i": "topmostSubform[0].Page1[0].f1_56[0]",
    "Line 1z": "topmostSubform[0].Page1[0].f1_57[0]",
    "Line 2a": "topmostSubform[0].Page1[0].f1_58[0]",
    "Line 2b": "topmostSubform[0].Page1[0].f1_59[0]",
    "Line 3a": "topmostSubform[0].Page1[0].f1_60[0]",
    "Line 3b": "topmostSubform[0].Page1[0].f1_61[0]",
    "Line 4a": "topmostSubform[0].Page1[0].f1_62[0]",
    "Line 4b": "topmostSubform[0].Page1[0].f1_63[0]",
    "Line 5a": "topmostSubform[0].Page1[0].f1_65[0]",
    "Line 5b": "topmostSubform[0].Page1[0].f1_66[0]",
    "Line 6a": "topmostSubform[0].Page1[0].f1_68[0]",
    "Line 6b": "topmostSubform[0].Page1[0].f1_69[0]",
    "Line 7a": "topmostSubform[0].Page1[0].f1_70[0]",
    "Line 7b": "topmostSubform[0].Page1[0].f1_71[0]",
    "Line 8": "topmostSubform[0].Page1[0].f1_72[0]",
    "Line 9": "topmostSubform[0].Page1[0].f1_73[0]",
    "Line 10": "topmostSubform[0].Page1[0].f1_74[0]",
    "Line 11a": "topmostSubform[0].Page1[0].f1_75[0]",
    "Line 11b": "topmostSubform[0].Page2[0].f2_01[0]",
    "Line 12e": "topmostSubform[0].Page2[0].f2_02[0]",
    "Line 13a": "topmostSubform[0].Page2[0].f2_03[0]",
    "Line 13b": "topmostSubform[0].Page2[0].f2_04[0]",
    "Line 14": "topmostSubform[0].Page2[0].f2_05[0]",
    "Line 15": "topmostSubform[0].Page2[0].f2_06[0]",
    "Line 16": "topmostSubform[0].Page2[0].f2_08[0]",
    "Line 17": "topmostSubform[0].Page2[0].f2_09[0]",
    "Line 18": "topmostSubform[0].Page2[0].f2_10[0]",
    "Line 19": "topmostSubform[0].Page2[0].f2_11[0]",
    "Line 20": "topmostSubform[0].Page2[0].f2_12[0]",
    "Line 21": "topmostSubform[0].Page2[0].f2_13[0]",
    "Line 22": "topmostSubform[0].Page2[0].f2_14[0]",
    "Line 23": "topmostSubform[0].Page2[0].f2_15[0]",
    "Line 24": "topmostSubform[0].Page2[0].f2_16[0]",
    "Line 25a": "topmostSubform[0].Page2[0].f2_17[0]",
    "Line 25b": "topmostSubform[0].Page2[0].f2_18[0]",
    "Line 25c": "topmostSubform[0].Page2[0].f2_19[0]",
    "Line 25d": "topmostSubform[0].Page2[0].f2_20[0]",
    "Line 26": "topmostSubform[0].Page2[0].f2_21[0]",
    "Line 27a": "topmostSubform[0].Page2[0].f2_23[0]",
    "Line 28": "topmostSubform[0].Page2[0].f2_24[0]",
    "Line 29": "topmostSubform[0].Page2[0].f2_25[0]",
    "Line 30": "topmostSubform[0].Page2[0].f2_26[0]",
    "Line 31": "topmostSubform[0].Page2[0].f2_27[0]",
    "Line 32": "topmostSubform[0].Page2[0].f2_28[0]",
    "Line 33": "topmostSubform[0].Page2[0].f2_29[0]",
    "Line 34": "topmostSubform[0].Page2[0].f2_30[0]",
    "Line 35a": "topmostSubform[0].Page2[0].f2_31[0]",
    "Line 36": "topmostSubform[0].Page2[0].f2_34[0]",
    "Line 37": "topmostSubform[0].Page2[0].f2_35[0]",
    "Line 38": "topmostSubform[0].Page2[0].f2_36[0]",
}


class MappingProvider:
    """Lookup of field mapping tables keyed by (form type, tax year).

    A year without its own table falls back to the baseline year's table.
    """

    def __init__(
        self,
        tables: dict[str, dict[int, FieldMapping]] | None = None,
        *,
        baseline_year: int = DEFAULT_TAX_YEAR,
    ) -> None:
        if tables is None:
            tables = {
                "f8949": {2025: generate_f8949_mapping()},
                "f1040": {2025: F1040_2025},
            }
        self._tables = tables
        self.baseline_year = baseline_year

    def form_types(self) -> list[str]:
        return list(self._tables.keys())

    def years(self, form_type: str) -> list[int]:
        return sorted(self._tables[form_type].keys())

    def get(self, form_type: str, year: int | None = None) -> FieldMapping:
        """Return the table for ``form_type`` and ``year``.

        Raises:
            KeyError: unknown form type, or no table for the baseline year
        """
        by_year = self._tables[form_type]
        if year is not None and year in by_year:
            return by_year[year]
        logger.debug(
            "no %s mapping for year=%s, using baseline %d", form_type, year, self.baseline_year
        )
        return by_year[self.baseline_year]
