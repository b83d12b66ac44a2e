from __future__ import annotations

from core.db import q
from core.services.demo_data import DEFAULT_SIZES, load_demo_data, upsert_reference_data, wipe_all
from core.services.inventory import inventory_snapshot
from core.services.ledger import SqliteLedger


def test_reference_data_is_idempotent(conn):
    upsert_reference_data(conn)
    upsert_reference_data(conn)
    codes = [r["code"] for r in q(conn, "SELECT code FROM sizes ORDER BY sort_order")]
    assert codes == [code for code, _, _ in DEFAULT_SIZES]


def test_demo_data_feeds_snapshot(conn):
    load_demo_data(conn)

    ledger = SqliteLedger(conn)
    assert len(ledger.list_purchases()) == 5
    assert len(ledger.list_sales()) == 12

    snap = inventory_snapshot(ledger)
    assert all(r.remaining_pieces > 0 for r in snap.rows)
    assert all(r.estimated_profit >= 0 for r in snap.rows)


def test_wipe_all(conn):
    load_demo_data(conn)
    wipe_all(conn)
    for table in ["sizes", "purchases", "purchase_stock", "sales_entries", "inventory"]:
        assert q(conn, f"SELECT COUNT(*) AS n FROM {table}")[0]["n"] == 0
