from __future__ import annotations

import pytest

from core.db import q
from core.services.sales import create_sale, recent_sales


def test_create_sale(conn):
    sale_id = create_sale(conn, size=" 18x24 ", pieces=40, amount=12000, branch_id="nidagundi")

    row = q(conn, "SELECT * FROM sales_entries WHERE id=?", (sale_id,))[0]
    assert row["size"] == "18x24"
    assert row["pieces"] == 40
    assert row["amount"] == 12000.0
    assert row["branch_id"] == "nidagundi"
    assert row["sale_ts"]


def test_blank_branch_stored_as_null(conn):
    sale_id = create_sale(conn, size="18x24", pieces=1, amount=300, branch_id="  ")
    assert q(conn, "SELECT branch_id FROM sales_entries WHERE id=?", (sale_id,))[0]["branch_id"] is None


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"size": "", "pieces": 1, "amount": 1}, "Size"),
        ({"size": "18x24", "pieces": 0, "amount": 1}, "Pieces"),
        ({"size": "18x24", "pieces": "many", "amount": 1}, "whole number"),
        ({"size": "18x24", "pieces": 1, "amount": -5}, "negative"),
        ({"size": "18x24", "pieces": 1, "amount": "lots"}, "number"),
    ],
)
def test_create_sale_rejects_invalid_input(conn, kwargs, message):
    with pytest.raises(ValueError, match=message):
        create_sale(conn, **kwargs)


def test_recent_sales(conn):
    a = create_sale(conn, size="18x24", pieces=1, amount=300)
    b = create_sale(conn, size="24x30", pieces=2, amount=800)
    assert [r["id"] for r in recent_sales(conn)] == [b, a]
