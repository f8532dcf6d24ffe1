from __future__ import annotations

import re

"""SUMMARY line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"sheets=([0-9]+)\s+forms=([0-9]+)\s+errors=([0-9]+)\s+warnings=([0-9]+)\s+"
    r"elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = (
        "SUMMARY files=1/1 success=1 failed=0 sheets=2 forms=3 errors=0 "
        "warnings=1 elapsed_sec=0.84"
    )
    assert SUMMARY_PATTERN.match(line), "SUMMARY line should match contract regex"


def test_summary_pattern_rejects_mismatched_file_counts():
    line = (
        "SUMMARY files=1/2 success=1 failed=0 sheets=2 forms=3 errors=0 "
        "warnings=1 elapsed_sec=0.84"
    )
    assert SUMMARY_PATTERN.match(line) is None
