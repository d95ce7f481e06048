"""
Order totals.

All amounts are whole major currency units. Rounding happens
only here, half up, once for the discount and once for taxes.

Usage:
    from orders.calculators import OrderTotalsCalculator
    totals = OrderTotalsCalculator().calculate(subtotal=200, discount_percent=10)
    totals.total  # 312
"""

from dataclasses import asdict, dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class OrderTotals:
    subtotal: int
    discount: int
    taxes: int
    delivery_charges: int
    total: int

    def as_dict(self):
        return asdict(self)


class OrderTotalsCalculator:
    """
    Computes discount, taxes, delivery charge and total from a cart total.

    Tax percentage and delivery charge default to the ORDER_TAX_PERCENT and
    ORDER_DELIVERY_CHARGE settings.
    """

    def __init__(self, tax_percent=None, delivery_charge=None):
        self.tax_percent = settings.ORDER_TAX_PERCENT if tax_percent is None else tax_percent
        self.delivery_charge = settings.ORDER_DELIVERY_CHARGE if delivery_charge is None else delivery_charge

    def calculate(self, subtotal: int, discount_percent: int = 0) -> OrderTotals:
        discount = round_half_up(Decimal(subtotal) * Decimal(discount_percent) / Decimal(100))
        after_discount = subtotal - discount
        taxes = round_half_up(Decimal(after_discount) * Decimal(self.tax_percent) / Decimal(100))
        return OrderTotals(
            subtotal=subtotal,
            discount=discount,
            taxes=taxes,
            delivery_charges=self.delivery_charge,
            total=after_discount + taxes + self.delivery_charge,
        )
