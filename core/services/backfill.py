from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from core.config import DEFAULT_BRANCH
from core.db import execute, q, transaction
from core.logging_config import get_logger
from core.services.ledger import PurchaseRecord, SaleRecord, SqliteLedger
from core.utils import iso_now, safe_div

logger = get_logger(__name__)


@dataclass
class InventoryBucket:
    """
    One {branch_id}_{size} inventory document in the making.

    average_cost_per_kg is purchased cost over purchased weight, not over the
    weight still in stock, so selling stock does not inflate the cost per kg.
    """

    branch_id: str
    size: str
    total_pieces_in_stock: int = 0
    total_weight_in_stock: float = 0.0
    purchased_weight: float = 0.0
    purchased_cost: float = 0.0

    @property
    def doc_id(self) -> str:
        return inventory_doc_id(self.branch_id, self.size)

    @property
    def average_cost_per_kg(self) -> float:
        return safe_div(self.purchased_cost, self.purchased_weight)

    @property
    def total_cost_value(self) -> float:
        return self.total_weight_in_stock * self.average_cost_per_kg


def inventory_doc_id(branch_id: str, size: str) -> str:
    return f"{branch_id}_{size}"


def reconcile_inventory(
    purchases: Iterable[PurchaseRecord],
    sales: Iterable[SaleRecord],
    *,
    default_branch: str = DEFAULT_BRANCH,
) -> dict[str, InventoryBucket]:
    """
    Branch+size inventory for the persisted collection.

    Purchases add pieces, weight and cost. Each sale then removes its pieces and
    pieces x (current kg per piece) of weight from the matching bucket. The kg per
    piece is read at the moment the sale is processed, not at the time of sale.
    Sales without a purchase bucket are skipped.
    """
    buckets: dict[str, InventoryBucket] = {}

    for p in purchases:
        if not p.stock_items:
            continue
        branch = p.branch_id or default_branch
        cost_per_kg = float(p.avg_cost_per_kg or 0)
        for item in p.stock_items:
            key = inventory_doc_id(branch, item.size)
            b = buckets.get(key)
            if b is None:
                b = buckets[key] = InventoryBucket(branch_id=branch, size=item.size)
            b.total_pieces_in_stock += int(item.pieces)
            b.total_weight_in_stock += float(item.weight)
            b.purchased_weight += float(item.weight)
            b.purchased_cost += cost_per_kg * float(item.weight)

    for s in sales:
        b = buckets.get(inventory_doc_id(s.branch_id or default_branch, s.size))
        if b is None:
            continue
        kg_per_piece = safe_div(b.total_weight_in_stock, b.total_pieces_in_stock)
        b.total_pieces_in_stock -= int(s.pieces)
        b.total_weight_in_stock -= int(s.pieces) * kg_per_piece

    return buckets


def rebuild_inventory(conn, *, default_branch: str = DEFAULT_BRANCH) -> int:
    """
    Full recompute of the inventory table from both ledgers.

    Ledgers are read first, the result is staged in memory, then the table is
    replaced inside one transaction. Any write error rolls the whole run back.
    Returns the number of inventory documents written.
    """
    ledger = SqliteLedger(conn)
    purchases = ledger.list_purchases()
    sales = ledger.list_sales()
    logger.info("Rebuilding inventory from %d purchase(s) and %d sale(s)", len(purchases), len(sales))

    buckets = reconcile_inventory(purchases, sales, default_branch=default_branch)
    stamp = iso_now()

    with transaction(conn):
        execute(conn, "DELETE FROM inventory")
        for b in buckets.values():
            execute(
                conn,
                """
                INSERT INTO inventory (
                    doc_id, branch_id, size, total_pieces_in_stock, total_weight_in_stock,
                    average_cost_per_kg, total_cost_value, last_updated
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    b.doc_id,
                    b.branch_id,
                    b.size,
                    int(b.total_pieces_in_stock),
                    float(b.total_weight_in_stock),
                    float(b.average_cost_per_kg),
                    float(b.total_cost_value),
                    stamp,
                ),
            )

    logger.info("Inventory collection rebuilt: %d document(s)", len(buckets))
    return len(buckets)


def list_inventory(conn):
    return q(conn, "SELECT * FROM inventory ORDER BY branch_id, size")


# Column -> value written when the column is NULL. created_at is stamped per run.
PURCHASE_DEFAULTS: dict[str, Any] = {
    "branch_id": DEFAULT_BRANCH,
    "avg_cost_per_kg": 0.0,
    "vendor": "unknown",
    "total_cost": 0.0,
    "total_weight_kg": 0.0,
    "transport_cost": 0.0,
    "gst": 0.0,
    "bill_photo_ref": None,
    "created_at": None,
    "created_by": "admin",
}


def _defaults_for_run() -> dict[str, Any]:
    defaults = dict(PURCHASE_DEFAULTS)
    defaults["created_at"] = iso_now()
    return defaults


def patch_purchase_defaults(conn) -> int:
    """
    Fills missing purchase fields from PURCHASE_DEFAULTS.

    Only NULL fields are written; present values are never overwritten.
    All updates go out in one transaction. Returns the number of purchases patched.
    """
    defaults = _defaults_for_run()
    rows = q(conn, f"SELECT id, {', '.join(defaults)} FROM purchases ORDER BY id")

    updates: list[tuple[int, dict[str, Any]]] = []
    for r in rows:
        # A NULL default would write NULL over NULL.
        update = {col: val for col, val in defaults.items() if r[col] is None and val is not None}
        if update:
            updates.append((int(r["id"]), update))

    with transaction(conn):
        for purchase_id, update in updates:
            assignments = ", ".join(f"{col}=?" for col in update)
            execute(
                conn,
                f"UPDATE purchases SET {assignments} WHERE id=?",
                (*update.values(), purchase_id),
            )

    logger.info("Purchase defaults patched on %d of %d record(s)", len(updates), len(rows))
    return len(updates)
