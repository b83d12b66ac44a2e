from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from core.db import execute, q, transaction
from core.logging_config import get_logger
from core.utils import iso_now, safe_div

logger = get_logger(__name__)


@dataclass
class StockLineInput:
    size: str
    pieces: int
    weight: float


@dataclass
class BillUpload:
    file_name: str
    content: bytes


def avg_cost_per_kg(total_cost: float, transport_cost: float, gst: float, total_weight_kg: float) -> float:
    """Landed cost per kg: purchase cost plus transport and GST over the total weight."""
    landed = float(total_cost or 0) + float(transport_cost or 0) + float(gst or 0)
    weight = float(total_weight_kg or 0)
    if weight <= 0:
        return 0.0
    return safe_div(landed, weight)


def pieces_from_weight(total_weight: float, weight_per_sheet: float) -> int:
    # Sheets are whole: a partial sheet still counts as one piece.
    tw = float(total_weight or 0)
    ws = float(weight_per_sheet or 0)
    if tw <= 0 or ws <= 0:
        return 0
    return int(math.ceil(tw / ws))


def _safe_file_name(name: str) -> str:
    base = Path(str(name)).name
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", base).strip("._")
    return cleaned or "bill"


def save_bill_photo(data_dir: Path, file_name: str, content: bytes) -> str:
    """
    Stores an uploaded bill image as bills/{epoch_ms}-{file_name} under the data dir.
    Returns the reference relative to the data dir.
    """
    bills = Path(data_dir) / "bills"
    bills.mkdir(parents=True, exist_ok=True)
    ref = f"bills/{int(time.time() * 1000)}-{_safe_file_name(file_name)}"
    (Path(data_dir) / ref).write_bytes(content)
    return ref


def _validate_lines(stock: list[StockLineInput]) -> list[StockLineInput]:
    if not stock:
        raise ValueError("At least one stock item is required.")

    out: list[StockLineInput] = []
    for l in stock:
        size = str(l.size or "").strip()
        if not size:
            raise ValueError("Size is required.")
        try:
            pieces = int(l.pieces)
            weight = float(l.weight)
        except (TypeError, ValueError):
            raise ValueError(f"Pieces and weight must be numbers for size {size}.")
        if pieces < 1:
            raise ValueError(f"Pieces must be at least 1 for size {size}.")
        if weight <= 0:
            raise ValueError(f"Total weight is required for size {size}.")
        out.append(StockLineInput(size=size, pieces=pieces, weight=weight))
    return out


def create_purchase(
    conn,
    *,
    purchase_date: str,
    vendor: str,
    total_cost: float,
    total_weight_kg: float,
    stock: list[StockLineInput],
    transport_cost: float = 0.0,
    gst: float = 0.0,
    bill_photo_ref: Optional[str] = None,
    bill: Optional[BillUpload] = None,
    data_dir: Optional[Path] = None,
    branch_id: Optional[str] = None,
    created_by: str,
) -> int:
    """
    Logs one purchase bill with its per-size stock lines.

    avg_cost_per_kg is fixed here, at creation time, from the bill totals.
    Header and lines are written in one transaction.

    An uploaded bill is saved under data_dir only once the input is valid,
    and removed again if the insert fails.
    """
    vendor = str(vendor or "").strip()
    if not vendor:
        raise ValueError("Vendor name is required.")

    try:
        when = date.fromisoformat(str(purchase_date))
    except ValueError:
        raise ValueError("A valid purchase date is required.")
    if when > date.today():
        raise ValueError("Date cannot be in the future.")

    try:
        total_cost = float(total_cost)
        total_weight_kg = float(total_weight_kg)
        transport_cost = float(transport_cost or 0)
        gst = float(gst or 0)
    except (TypeError, ValueError):
        raise ValueError("Costs and weight must be numbers.")

    if total_cost < 1:
        raise ValueError("Total purchase cost is required.")
    if total_weight_kg < 1:
        raise ValueError("Total weight is required.")
    if transport_cost < 0 or gst < 0:
        raise ValueError("Transport cost and GST cannot be negative.")

    lines = _validate_lines(stock)
    avg = avg_cost_per_kg(total_cost, transport_cost, gst, total_weight_kg)

    if bill is not None:
        if data_dir is None:
            raise ValueError("A data directory is required to store the bill photo.")
        bill_photo_ref = save_bill_photo(data_dir, bill.file_name, bill.content)

    try:
        purchase_id = _insert_purchase(
            conn,
            when=when,
            vendor=vendor,
            total_cost=total_cost,
            transport_cost=transport_cost,
            gst=gst,
            total_weight_kg=total_weight_kg,
            avg=avg,
            bill_photo_ref=bill_photo_ref,
            branch_id=branch_id,
            created_by=created_by,
            lines=lines,
        )
    except Exception:
        if bill is not None:
            (Path(data_dir) / bill_photo_ref).unlink(missing_ok=True)
        raise

    logger.info("Purchase %s logged: vendor=%s lines=%d avg_cost_per_kg=%.2f", purchase_id, vendor, len(lines), avg)
    return int(purchase_id)


def _insert_purchase(
    conn,
    *,
    when: date,
    vendor: str,
    total_cost: float,
    transport_cost: float,
    gst: float,
    total_weight_kg: float,
    avg: float,
    bill_photo_ref: Optional[str],
    branch_id: Optional[str],
    created_by: str,
    lines: list[StockLineInput],
) -> int:
    with transaction(conn):
        purchase_id = execute(
            conn,
            """
            INSERT INTO purchases (
                purchase_date, vendor, total_cost, transport_cost, gst,
                total_weight_kg, avg_cost_per_kg, bill_photo_ref, branch_id,
                created_at, created_by
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                when.isoformat(),
                vendor,
                total_cost,
                transport_cost,
                gst,
                total_weight_kg,
                float(avg),
                bill_photo_ref,
                (str(branch_id).strip() or None) if branch_id else None,
                iso_now(),
                str(created_by),
            ),
        )
        for l in lines:
            execute(
                conn,
                "INSERT INTO purchase_stock (purchase_id, size, pieces, weight) VALUES (?, ?, ?, ?)",
                (int(purchase_id), l.size, int(l.pieces), float(l.weight)),
            )
    return int(purchase_id)


def recent_purchases(conn, limit: int = 20):
    return q(
        conn,
        """
        SELECT p.id, p.purchase_date, p.vendor, p.branch_id,
               ROUND(p.total_cost, 2) AS total_cost,
               ROUND(p.transport_cost, 2) AS transport_cost,
               ROUND(p.gst, 2) AS gst,
               ROUND(p.total_weight_kg, 2) AS total_weight_kg,
               ROUND(p.avg_cost_per_kg, 2) AS avg_cost_per_kg,
               (SELECT COUNT(*) FROM purchase_stock ps WHERE ps.purchase_id = p.id) AS sizes
        FROM purchases p
        ORDER BY p.id DESC
        LIMIT ?
        """,
        (int(limit),),
    )
