from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

import pandas as pd

from core.services.ledger import LedgerReader, PurchaseRecord, SaleRecord
from core.utils import safe_div


@dataclass
class SizeAccumulator:
    """
    Running purchase totals for one size.

    Cost is kept as an amount (avg_cost_per_kg x weight) and divided out once,
    so the weighted average does not depend on the order purchases are folded.
    """

    total_pieces: int = 0
    total_weight: float = 0.0
    total_cost: float = 0.0

    def add(self, pieces: int, weight: float, cost_per_kg: float) -> None:
        self.total_pieces += int(pieces)
        self.total_weight += float(weight)
        self.total_cost += float(cost_per_kg) * float(weight)

    @property
    def weighted_avg_cost_per_kg(self) -> float:
        return safe_div(self.total_cost, self.total_weight)

    @property
    def avg_weight_per_piece(self) -> float:
        return safe_div(self.total_weight, self.total_pieces)


@dataclass
class SalesAccumulator:
    pieces: int = 0
    amount: float = 0.0

    @property
    def avg_price_per_piece(self) -> float:
        return safe_div(self.amount, self.pieces)


@dataclass(frozen=True)
class InventorySnapshotRow:
    size: str
    remaining_pieces: int
    remaining_weight: float
    cost_of_remaining: float
    estimated_profit: float


@dataclass(frozen=True)
class InventorySnapshot:
    rows: tuple[InventorySnapshotRow, ...] = field(default_factory=tuple)
    total_cost_value: float = 0.0
    total_estimated_profit: float = 0.0


def accumulate_purchases(purchases: Iterable[PurchaseRecord]) -> dict[str, SizeAccumulator]:
    stock: dict[str, SizeAccumulator] = {}
    for p in purchases:
        cost_per_kg = float(p.avg_cost_per_kg or 0)
        for item in p.stock_items:
            stock.setdefault(item.size, SizeAccumulator()).add(item.pieces, item.weight, cost_per_kg)
    return stock


def accumulate_sales(sales: Iterable[SaleRecord]) -> dict[str, SalesAccumulator]:
    sold: dict[str, SalesAccumulator] = {}
    for s in sales:
        acc = sold.setdefault(s.size, SalesAccumulator())
        acc.pieces += int(s.pieces)
        acc.amount += float(s.amount)
    return sold


def aggregate(
    purchases: Optional[list[PurchaseRecord]],
    sales: Optional[list[SaleRecord]],
) -> Optional[InventorySnapshot]:
    """
    Folds both ledgers into a per-size snapshot of remaining stock.

    Returns None when either ledger is not available yet.

    - Sizes with nothing left (remaining pieces <= 0) produce no row.
    - Sales for sizes never purchased are ignored.
    - Profit uses the average sale price of the size so far, floored at 0:
      a size selling below cost reports 0, not a loss.
    """
    if purchases is None or sales is None:
        return None

    stock = accumulate_purchases(purchases)
    sold = accumulate_sales(sales)

    rows: list[InventorySnapshotRow] = []
    total_cost_value = 0.0
    total_estimated_profit = 0.0

    for size, acc in stock.items():
        size_sales = sold.get(size, SalesAccumulator())
        remaining_pieces = acc.total_pieces - size_sales.pieces
        if remaining_pieces <= 0:
            continue

        avg_cost = acc.weighted_avg_cost_per_kg
        avg_weight = acc.avg_weight_per_piece
        remaining_weight = remaining_pieces * avg_weight
        cost_of_remaining = remaining_weight * avg_cost

        cost_per_piece = avg_weight * avg_cost
        profit_per_piece = max(size_sales.avg_price_per_piece - cost_per_piece, 0.0)
        estimated_profit = remaining_pieces * profit_per_piece

        total_cost_value += cost_of_remaining
        if estimated_profit > 0:
            total_estimated_profit += estimated_profit

        rows.append(
            InventorySnapshotRow(
                size=size,
                remaining_pieces=int(remaining_pieces),
                remaining_weight=float(remaining_weight),
                cost_of_remaining=float(cost_of_remaining),
                estimated_profit=float(estimated_profit),
            )
        )

    return InventorySnapshot(
        rows=tuple(rows),
        total_cost_value=float(total_cost_value),
        total_estimated_profit=float(total_estimated_profit),
    )


def inventory_snapshot(reader: LedgerReader) -> Optional[InventorySnapshot]:
    # Both ledgers are read before folding; the fold sees a static view.
    purchases = reader.list_purchases()
    sales = reader.list_sales()
    return aggregate(purchases, sales)


SNAPSHOT_COLUMNS = [
    "Size",
    "Remaining Pieces",
    "Remaining Weight (Kg)",
    "Est. Cost Value",
    "Est. Potential Profit",
]


def snapshot_frame(snapshot: InventorySnapshot) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "Size": r.size,
                "Remaining Pieces": r.remaining_pieces,
                "Remaining Weight (Kg)": round(r.remaining_weight, 2),
                "Est. Cost Value": r.cost_of_remaining,
                "Est. Potential Profit": r.estimated_profit,
            }
            for r in snapshot.rows
        ],
        columns=SNAPSHOT_COLUMNS,
    )
    return df
