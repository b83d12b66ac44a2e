from __future__ import annotations

from datetime import date, timedelta

import pytest

from core.db import q
from core.services.purchases import (
    BillUpload,
    StockLineInput,
    avg_cost_per_kg,
    create_purchase,
    pieces_from_weight,
    recent_purchases,
    save_bill_photo,
)


def test_avg_cost_includes_transport_and_gst():
    assert avg_cost_per_kg(140000, 5000, 7000, 1000) == pytest.approx(152.0)


def test_avg_cost_zero_weight():
    assert avg_cost_per_kg(1000, 0, 0, 0) == 0.0


@pytest.mark.parametrize(
    "total,per_sheet,expected",
    [(450.0, 8.5, 53), (100.0, 5.0, 20), (0.0, 5.0, 0), (100.0, 0.0, 0)],
)
def test_pieces_from_weight(total, per_sheet, expected):
    assert pieces_from_weight(total, per_sheet) == expected


def test_create_purchase_stores_header_and_lines(conn, log_purchase):
    purchase_id = log_purchase(
        [("18x24", 100, 500.0), ("24x30", 20, 160.0)],
        total_cost=30000.0,
        total_weight_kg=660.0,
        transport_cost=1500.0,
        gst=1500.0,
        branch_id="nidagundi",
    )

    p = q(conn, "SELECT * FROM purchases WHERE id=?", (purchase_id,))[0]
    assert p["vendor"] == "ABC Tarpaulin Co."
    assert p["avg_cost_per_kg"] == pytest.approx(33000.0 / 660.0)
    assert p["branch_id"] == "nidagundi"
    assert p["created_by"] == "tester"
    assert p["created_at"]

    lines = q(conn, "SELECT size, pieces, weight FROM purchase_stock WHERE purchase_id=? ORDER BY id", (purchase_id,))
    assert [(r["size"], r["pieces"], r["weight"]) for r in lines] == [("18x24", 100, 500.0), ("24x30", 20, 160.0)]


def _kwargs(**over):
    base = dict(
        purchase_date=date.today().isoformat(),
        vendor="ABC",
        total_cost=1000.0,
        total_weight_kg=100.0,
        stock=[StockLineInput(size="18x24", pieces=10, weight=100.0)],
        created_by="tester",
    )
    base.update(over)
    return base


@pytest.mark.parametrize(
    "over,message",
    [
        ({"vendor": "  "}, "Vendor"),
        ({"purchase_date": (date.today() + timedelta(days=2)).isoformat()}, "future"),
        ({"purchase_date": "not-a-date"}, "date"),
        ({"total_cost": 0}, "cost"),
        ({"total_weight_kg": 0.5}, "weight"),
        ({"gst": -1}, "negative"),
        ({"stock": []}, "stock item"),
        ({"stock": [StockLineInput(size="", pieces=1, weight=1.0)]}, "Size"),
        ({"stock": [StockLineInput(size="18x24", pieces=0, weight=1.0)]}, "Pieces"),
        ({"stock": [StockLineInput(size="18x24", pieces=3, weight=0.0)]}, "weight"),
    ],
)
def test_create_purchase_rejects_invalid_input(conn, over, message):
    with pytest.raises(ValueError, match=message):
        create_purchase(conn, **_kwargs(**over))
    assert q(conn, "SELECT COUNT(*) AS n FROM purchases")[0]["n"] == 0


def test_failed_line_insert_rolls_back_header(conn, monkeypatch):
    import core.services.purchases as purchases

    real_execute = purchases.execute

    def failing_execute(c, sql, params=()):
        if "purchase_stock" in sql:
            raise RuntimeError("disk full")
        return real_execute(c, sql, params)

    monkeypatch.setattr(purchases, "execute", failing_execute)

    with pytest.raises(RuntimeError):
        create_purchase(conn, **_kwargs())
    assert q(conn, "SELECT COUNT(*) AS n FROM purchases")[0]["n"] == 0


def test_recent_purchases_lists_newest_first(conn, log_purchase):
    first = log_purchase([("18x24", 1, 5.0)])
    second = log_purchase([("18x24", 1, 5.0), ("30x40", 2, 20.0)])

    rows = recent_purchases(conn)

    assert [r["id"] for r in rows] == [second, first]
    assert rows[0]["sizes"] == 2


def test_save_bill_photo(tmp_path):
    ref = save_bill_photo(tmp_path, "../my bill?.jpg", b"\xff\xd8jpeg")

    assert ref.startswith("bills/")
    assert ref.endswith("-my_bill_.jpg")
    assert (tmp_path / ref).read_bytes() == b"\xff\xd8jpeg"


def test_bill_saved_with_valid_purchase(conn, tmp_path):
    purchase_id = create_purchase(
        conn,
        **_kwargs(bill=BillUpload(file_name="bill.jpg", content=b"jpeg"), data_dir=tmp_path),
    )

    ref = q(conn, "SELECT bill_photo_ref FROM purchases WHERE id=?", (purchase_id,))[0]["bill_photo_ref"]
    assert ref.startswith("bills/") and ref.endswith("-bill.jpg")
    assert (tmp_path / ref).read_bytes() == b"jpeg"


@pytest.mark.parametrize(
    "over",
    [
        {"vendor": ""},
        {"purchase_date": (date.today() + timedelta(days=1)).isoformat()},
        {"stock": [StockLineInput(size="18x24", pieces=0, weight=5.0)]},
    ],
)
def test_rejected_purchase_leaves_no_bill_file(conn, tmp_path, over):
    bill = BillUpload(file_name="bill.jpg", content=b"jpeg")

    with pytest.raises(ValueError):
        create_purchase(conn, **_kwargs(bill=bill, data_dir=tmp_path, **over))

    bills = tmp_path / "bills"
    assert not bills.exists() or list(bills.iterdir()) == []


def test_failed_insert_removes_saved_bill(conn, tmp_path, monkeypatch):
    import core.services.purchases as purchases

    real_execute = purchases.execute

    def failing_execute(c, sql, params=()):
        if "purchase_stock" in sql:
            raise RuntimeError("disk full")
        return real_execute(c, sql, params)

    monkeypatch.setattr(purchases, "execute", failing_execute)

    with pytest.raises(RuntimeError):
        create_purchase(conn, **_kwargs(bill=BillUpload(file_name="bill.jpg", content=b"jpeg"), data_dir=tmp_path))

    assert list((tmp_path / "bills").iterdir()) == []
    assert q(conn, "SELECT COUNT(*) AS n FROM purchases")[0]["n"] == 0


def test_bill_without_data_dir_is_rejected(conn):
    with pytest.raises(ValueError, match="data directory"):
        create_purchase(conn, **_kwargs(bill=BillUpload(file_name="bill.jpg", content=b"jpeg")))
