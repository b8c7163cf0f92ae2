# voucherdesk/business_logic/entities/invoice_item_entity.py
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal
from .base_entity import BaseEntity

@dataclass
class InvoiceItemEntity(BaseEntity):
    # --- fields sent to the server ---
    product_id: Optional[int] = None
    quantity: Decimal = field(default_factory=lambda: Decimal("1"))
    rate: Decimal = field(default_factory=lambda: Decimal("0.0"))
    discount_percent: Decimal = field(default_factory=lambda: Decimal("0.0"))
    vat_percent: Decimal = field(default_factory=lambda: Decimal("0.0"))
    description: Optional[str] = None

    # derived by invoice_calculator.compute_item_amount, never typed in
    amount: Decimal = field(default_factory=lambda: Decimal("0.0"))

    # --- display only ---
    product_name: Optional[str] = field(default=None, compare=False, repr=False)
    unit: Optional[str] = field(default=None, compare=False, repr=False)
