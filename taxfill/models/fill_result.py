from __future__ import annotations

from dataclasses import dataclass, field

"""FillResult model returned by the PDF form filler."""

__all__ = [
    "FillResult",
]


@dataclass(frozen=True)
class FillResult:
    """Outcome of filling one document instance.

    ``pdf_bytes`` is set only on success; ``error`` only on failure.
    """
    form_id: str
    success: bool
    pdf_bytes: bytes | None = None
    error: str | None = None
    filled_fields: list[str] = field(default_factory=list)
    failed_fields: list[str] = field(default_factory=list)
