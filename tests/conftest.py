"""
Pytest fixtures for the inventory dashboard tests.

Provides:
- a fresh SQLite database per test with the schema applied
- a helper that logs purchases through the real writer
"""

from __future__ import annotations

from datetime import date

import pytest

from core.db import connect, ensure_schema
from core.services.purchases import StockLineInput, create_purchase


@pytest.fixture
def conn(tmp_path):
    c = connect(tmp_path / "app.db")
    ensure_schema(c)
    yield c
    c.close()


@pytest.fixture
def log_purchase(conn):
    """Writes a purchase through create_purchase; returns its id. items: (size, pieces, weight)."""

    def _log(items, *, total_cost=25000.0, total_weight_kg=500.0, branch_id=None, **kwargs):
        return create_purchase(
            conn,
            purchase_date=date.today().isoformat(),
            vendor=kwargs.pop("vendor", "ABC Tarpaulin Co."),
            total_cost=total_cost,
            total_weight_kg=total_weight_kg,
            stock=[StockLineInput(size=s, pieces=p, weight=w) for s, p, w in items],
            branch_id=branch_id,
            created_by=kwargs.pop("created_by", "tester"),
            **kwargs,
        )

    return _log
