from __future__ import annotations

from core.db import x
from core.services.ledger import SqliteLedger, StockItem
from core.services.sales import create_sale


def test_list_purchases_with_stock_items(conn, log_purchase):
    first = log_purchase([("18x24", 100, 500.0)], branch_id="nidagundi")
    second = log_purchase([("24x30", 20, 160.0), ("30x40", 5, 60.0)])

    purchases = SqliteLedger(conn).list_purchases()

    assert [p.id for p in purchases] == [first, second]
    assert purchases[0].stock_items == (StockItem("18x24", 100, 500.0),)
    assert purchases[0].branch_id == "nidagundi"
    assert purchases[0].avg_cost_per_kg == 50.0
    assert [i.size for i in purchases[1].stock_items] == ["24x30", "30x40"]
    assert purchases[1].branch_id is None


def test_legacy_purchase_without_stock_or_fields(conn):
    x(conn, "INSERT INTO purchases (vendor) VALUES (NULL)")

    (p,) = SqliteLedger(conn).list_purchases()

    assert p.stock_items == ()
    assert p.vendor is None
    assert p.avg_cost_per_kg is None


def test_list_sales(conn):
    create_sale(conn, size="18x24", pieces=40, amount=12000, branch_id="vijayapura")
    create_sale(conn, size="24x30", pieces=2, amount=900)

    sales = SqliteLedger(conn).list_sales()

    assert [(s.size, s.pieces, s.amount, s.branch_id) for s in sales] == [
        ("18x24", 40, 12000.0, "vijayapura"),
        ("24x30", 2, 900.0, None),
    ]
