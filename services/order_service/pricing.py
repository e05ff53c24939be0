"""Delivery and total rules shared by the checkout wizard and order validation."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Tuple

FREE_DELIVERY_THRESHOLD = Decimal("500")
FLAT_DELIVERY_CHARGE = Decimal("25")

CENT = Decimal("0.01")


class OrderTotals(NamedTuple):
    subtotal: Decimal
    delivery_charge: Decimal
    total: Decimal


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return money(Decimal(str(unit_price)) * quantity)


def delivery_charge_for(subtotal) -> Decimal:
    return money(0) if money(subtotal) >= FREE_DELIVERY_THRESHOLD else money(FLAT_DELIVERY_CHARGE)


def compute_totals(lines: Iterable[Tuple[Decimal, int]]) -> OrderTotals:
    """`lines` is (unit_price, quantity) pairs."""
    subtotal = money(sum((line_total(price, qty) for price, qty in lines), Decimal("0")))
    delivery = delivery_charge_for(subtotal)
    return OrderTotals(subtotal, delivery, subtotal + delivery)
