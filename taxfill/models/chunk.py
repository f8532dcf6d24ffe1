from __future__ import annotations

from dataclasses import dataclass

from .transaction import Transaction

"""Chunk model: one page worth of same-classification transactions."""

__all__ = [
    "Chunk",
]


@dataclass(frozen=True)
class Chunk:
    """Capacity-bounded group of transactions backing one form instance.

    Totals are computed once at construction time by ``Chunk.build``.
    """
    transactions: tuple[Transaction, ...]
    total_proceeds: float
    total_cost: float
    total_gain_loss: float
    total_adjustment: float

    @staticmethod
    def build(transactions: list[Transaction] | tuple[Transaction, ...]) -> Chunk:
        items = tuple(transactions)
        return Chunk(
            transactions=items,
            total_proceeds=sum(t.sell_price for t in items),
            total_cost=sum(t.purchase_price for t in items),
            total_gain_loss=sum(t.gain_loss for t in items),
            total_adjustment=sum(t.adjustment for t in items),
        )

    def __len__(self) -> int:
        return len(self.transactions)
