from __future__ import annotations

import random
from datetime import date, timedelta

from core.db import ensure_schema, x
from core.services.purchases import StockLineInput, create_purchase
from core.services.sales import create_sale


DEFAULT_SIZES = [
    ("18x24", "18 x 24", 1),
    ("24x30", "24 x 30", 2),
    ("30x40", "30 x 40", 3),
    ("other", "Other", 99),
]
DEMO_BRANCHES = ["nidagundi", "vijayapura"]
DEMO_VENDORS = ["ABC Tarpaulin Co.", "Sri Laxmi Plastics", "Deccan Polymers"]


def upsert_reference_data(conn) -> None:
    ensure_schema(conn)

    for code, desc, order in DEFAULT_SIZES:
        x(conn, "INSERT OR IGNORE INTO sizes(code, description, sort_order) VALUES (?, ?, ?)", (code, desc, int(order)))


def wipe_all(conn) -> None:
    # Keep schema, delete data (order matters for FKs).
    for t in ["inventory", "sales_entries", "purchase_stock", "purchases", "sizes"]:
        conn.execute(f"DELETE FROM {t};")
    conn.commit()


def load_demo_data(conn, *, seed: int = 7) -> None:
    rng = random.Random(seed)
    upsert_reference_data(conn)

    sizes = [code for code, _, _ in DEFAULT_SIZES if code != "other"]

    # A few purchase bills over the last week
    base_date = date.today() - timedelta(days=6)
    for i in range(5):
        lines = []
        for size in rng.sample(sizes, k=rng.randint(1, len(sizes))):
            per_sheet = rng.uniform(3.5, 9.0)
            pieces = rng.randint(40, 150)
            lines.append(StockLineInput(size=size, pieces=pieces, weight=round(pieces * per_sheet, 1)))

        total_weight = round(sum(l.weight for l in lines), 1)
        total_cost = round(total_weight * rng.uniform(140, 175), 0)

        create_purchase(
            conn,
            purchase_date=(base_date + timedelta(days=i)).isoformat(),
            vendor=rng.choice(DEMO_VENDORS),
            total_cost=total_cost,
            total_weight_kg=total_weight,
            transport_cost=rng.choice([0, 1500, 2500]),
            gst=round(total_cost * 0.05, 0),
            stock=lines,
            branch_id=rng.choice(DEMO_BRANCHES),
            created_by="demo",
        )

    # Sales at a markup over a rough landed cost per piece
    for _ in range(12):
        size = rng.choice(sizes)
        pieces = rng.randint(5, 30)
        indicative = rng.uniform(160, 175) * rng.uniform(4.0, 8.0)
        create_sale(
            conn,
            size=size,
            pieces=pieces,
            amount=round(pieces * indicative * rng.uniform(1.05, 1.35), 0),
            branch_id=rng.choice(DEMO_BRANCHES),
        )
