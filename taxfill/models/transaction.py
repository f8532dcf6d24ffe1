from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Transaction model for the capital gains pipeline.

A Transaction is one normalized spreadsheet row: typed quantities, prices and
dates plus the holding-period classification used to route it onto the
short-term or long-term half of Form 8949.
"""

__all__ = [
    "Transaction",
]


@dataclass(frozen=True)
class Transaction:
    """Normalized capital asset sale built from a single raw record.

    Dates keep their time component so the holding period is measured in
    milliseconds exactly as the classifier expects.
    """
    quantity: float
    name: str
    purchase_date: datetime
    sell_date: datetime
    purchase_price: float
    sell_price: float
    code: str
    adjustment: float
    is_short_term: bool

    @property
    def gain_loss(self) -> float:
        """Proceeds minus cost basis minus adjustment."""
        return self.sell_price - self.purchase_price - self.adjustment

    @property
    def description(self) -> str:
        """Column (a) text, e.g. ``"10 sh. ACME"``."""
        qty = self.quantity
        shown = int(qty) if float(qty).is_integer() else qty
        return f"{shown} sh. {self.name}"
