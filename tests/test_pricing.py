from decimal import Decimal

import pytest

from services.order_service.pricing import compute_totals, delivery_charge_for, line_total


def test_example_cart_totals():
    totals = compute_totals([(Decimal("100"), 2), (Decimal("50"), 1)])
    assert totals.subtotal == Decimal("250.00")
    assert totals.delivery_charge == Decimal("25.00")
    assert totals.total == Decimal("275.00")


@pytest.mark.parametrize(
    "subtotal, expected",
    [
        ("0", "25.00"),
        ("499.99", "25.00"),
        ("500", "0.00"),
        ("500.01", "0.00"),
        ("1200", "0.00"),
    ],
)
def test_free_delivery_threshold(subtotal, expected):
    assert delivery_charge_for(Decimal(subtotal)) == Decimal(expected)


def test_total_is_exact_sum():
    totals = compute_totals([(Decimal("0.10"), 3), (Decimal("0.20"), 1)])
    assert totals.subtotal == Decimal("0.50")
    assert totals.total == totals.subtotal + totals.delivery_charge


def test_line_total_accepts_strings():
    assert line_total("19.99", 3) == Decimal("59.97")
