from __future__ import annotations

from typing import Optional

from core.db import q, x
from core.logging_config import get_logger
from core.utils import iso_now

logger = get_logger(__name__)


def _normalize_branch(branch_id: Optional[str]) -> Optional[str]:
    if branch_id is None:
        return None
    s = str(branch_id).strip()
    return s if s else None


def create_sale(
    conn,
    *,
    size: str,
    pieces: int,
    amount: float,
    branch_id: Optional[str] = None,
) -> int:
    size = str(size or "").strip()
    if not size:
        raise ValueError("Size is required.")

    try:
        pieces = int(pieces)
    except (TypeError, ValueError):
        raise ValueError("Pieces sold must be a whole number.")
    if pieces <= 0:
        raise ValueError("Pieces sold must be > 0.")

    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise ValueError("Amount must be a number.")
    if amount < 0:
        raise ValueError("Amount cannot be negative.")

    sale_id = x(
        conn,
        """
        INSERT INTO sales_entries (sale_ts, branch_id, size, pieces, amount)
        VALUES (?, ?, ?, ?, ?)
        """,
        (iso_now(), _normalize_branch(branch_id), size, pieces, round(amount, 2)),
    )
    logger.info("Sale %s logged: size=%s pieces=%d amount=%.2f", sale_id, size, pieces, amount)
    return int(sale_id)


def recent_sales(conn, limit: int = 25):
    return q(
        conn,
        """
        SELECT id, sale_ts, branch_id, size, pieces, ROUND(amount, 2) AS amount
        FROM sales_entries
        ORDER BY id DESC
        LIMIT ?
        """,
        (int(limit),),
    )
