from .filler import PdfFormFiller, format_field_value, write_bundle

__all__ = [
    "PdfFormFiller",
    "format_field_value",
    "write_bundle",
]
