"""Fill tax form PDFs (Form 8949, Form 1040) from spreadsheet data."""

__version__ = "0.1.0"
