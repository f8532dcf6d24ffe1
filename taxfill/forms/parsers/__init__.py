"""Form parsers, one per supported tax form."""

from .base import FormParser
from .f1040 import F1040Parser
from .f8949 import F8949Parser

__all__ = [
    "FormParser",
    "F8949Parser",
    "F1040Parser",
]
