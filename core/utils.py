from __future__ import annotations

from datetime import datetime, timezone


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def safe_div(n: float, d: float) -> float:
    return float(n) / float(d) if d else 0.0


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567 (last three, then pairs)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: float, *, symbol: str = "₹", decimals: int = 0) -> str:
    """
    Indian-style currency formatting, e.g. 1234567.8 -> "₹12,34,568".
    """
    value = round(float(amount or 0.0), decimals)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{decimals}f}"
    whole, _, frac = text.partition(".")
    out = f"{sign}{symbol}{_group_indian(whole)}"
    return f"{out}.{frac}" if frac else out
