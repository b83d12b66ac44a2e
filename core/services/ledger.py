from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Optional, Protocol

from core.db import q


@dataclass(frozen=True)
class StockItem:
    size: str
    pieces: int
    weight: float


@dataclass(frozen=True)
class PurchaseRecord:
    id: int
    purchase_date: Optional[str]
    vendor: Optional[str]
    total_cost: Optional[float]
    transport_cost: Optional[float]
    gst: Optional[float]
    total_weight_kg: Optional[float]
    avg_cost_per_kg: Optional[float]
    bill_photo_ref: Optional[str] = None
    branch_id: Optional[str] = None
    created_at: Optional[str] = None
    created_by: Optional[str] = None
    stock_items: tuple[StockItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SaleRecord:
    size: str
    pieces: int
    amount: float
    branch_id: Optional[str] = None
    id: Optional[int] = None
    sale_ts: Optional[str] = None


class LedgerReader(Protocol):
    """Read side of the purchase and sales ledgers."""

    def list_purchases(self) -> list[PurchaseRecord]: ...

    def list_sales(self) -> list[SaleRecord]: ...


class SqliteLedger:
    """LedgerReader over the app's SQLite database."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def list_purchases(self) -> list[PurchaseRecord]:
        headers = q(self.conn, "SELECT * FROM purchases ORDER BY id")
        lines = q(
            self.conn,
            "SELECT purchase_id, size, pieces, weight FROM purchase_stock ORDER BY purchase_id, id",
        )

        by_purchase: dict[int, list[StockItem]] = {}
        for r in lines:
            by_purchase.setdefault(int(r["purchase_id"]), []).append(
                StockItem(size=str(r["size"]), pieces=int(r["pieces"]), weight=float(r["weight"]))
            )

        out: list[PurchaseRecord] = []
        for h in headers:
            pid = int(h["id"])
            out.append(
                PurchaseRecord(
                    id=pid,
                    purchase_date=h["purchase_date"],
                    vendor=h["vendor"],
                    total_cost=h["total_cost"],
                    transport_cost=h["transport_cost"],
                    gst=h["gst"],
                    total_weight_kg=h["total_weight_kg"],
                    avg_cost_per_kg=h["avg_cost_per_kg"],
                    bill_photo_ref=h["bill_photo_ref"],
                    branch_id=h["branch_id"],
                    created_at=h["created_at"],
                    created_by=h["created_by"],
                    stock_items=tuple(by_purchase.get(pid, [])),
                )
            )
        return out

    def list_sales(self) -> list[SaleRecord]:
        rows = q(self.conn, "SELECT * FROM sales_entries ORDER BY id")
        return [
            SaleRecord(
                id=int(r["id"]),
                sale_ts=r["sale_ts"],
                branch_id=r["branch_id"],
                size=str(r["size"]),
                pieces=int(r["pieces"]),
                amount=float(r["amount"]),
            )
            for r in rows
        ]
