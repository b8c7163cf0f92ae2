# voucherdesk/business_logic/invoice_calculator.py
"""
Line-item and invoice total arithmetic.

Everything here is pure: no I/O, no mutation of the arguments. Amounts are
computed with Decimal; anything that cannot be read as a finite number
counts as zero so a half-typed form never raises.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """Reads user or wire input as Decimal; None, blanks, garbage, NaN and infinities become 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not result.is_finite():
        return ZERO
    return result


def compute_item_amount(quantity: Any, rate: Any, discount_percent: Any = 0, vat_percent: Any = 0) -> Decimal:
    # discount first, VAT on the discounted base
    subtotal = to_decimal(quantity) * to_decimal(rate)
    discount_amount = (to_decimal(discount_percent) / HUNDRED) * subtotal
    after_discount = subtotal - discount_amount
    vat_amount = (to_decimal(vat_percent) / HUNDRED) * after_discount
    return after_discount + vat_amount


@dataclass(frozen=True)
class InvoiceTotals:
    items_total: Decimal = field(default=ZERO)
    charges_total: Decimal = field(default=ZERO)

    @property
    def grand_total(self) -> Decimal:
        return self.items_total + self.charges_total


def calculate_totals(items: Iterable[Any], charges: Iterable[Any]) -> InvoiceTotals:
    """Sums item and charge amounts from scratch; accepts entities or plain dicts."""
    items_total = sum((to_decimal(_amount_of(item)) for item in items), ZERO)
    charges_total = sum((to_decimal(_amount_of(charge)) for charge in charges), ZERO)
    return InvoiceTotals(items_total=items_total, charges_total=charges_total)


def _amount_of(line: Any) -> Any:
    if isinstance(line, dict):
        return line.get("amount")
    return getattr(line, "amount", None)
