from __future__ import annotations

import pytest

from core.utils import format_currency, iso_now, safe_div


def test_safe_div():
    assert safe_div(10, 4) == 2.5
    assert safe_div(10, 0) == 0.0
    assert safe_div(0, 0) == 0.0


@pytest.mark.parametrize(
    "amount,kwargs,expected",
    [
        (0, {}, "₹0"),
        (999, {}, "₹999"),
        (1000, {}, "₹1,000"),
        (15000, {}, "₹15,000"),
        (1234567.8, {}, "₹12,34,568"),
        (152, {"decimals": 2}, "₹152.00"),
        (-2500.5, {"decimals": 2}, "-₹2,500.50"),
        (None, {}, "₹0"),
    ],
)
def test_format_currency(amount, kwargs, expected):
    assert format_currency(amount, **kwargs) == expected


def test_iso_now_is_utc_seconds():
    stamp = iso_now()
    assert stamp.endswith("+00:00")
    assert "." not in stamp
