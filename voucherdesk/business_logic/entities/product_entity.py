# voucherdesk/business_logic/entities/product_entity.py
from dataclasses import dataclass, field
from typing import Optional
from .base_entity import BaseEntity
from voucherdesk.constants import ProductType, InvoiceType
from decimal import Decimal
@dataclass
class ProductEntity(BaseEntity):
    name: str
    type: Optional[ProductType] = field(default=None)

    code: Optional[str] = field(default=None)
    unit: Optional[str] = field(default=None)
    sales_price: Decimal = field(default_factory=lambda: Decimal("0.0"))
    purchase_price: Decimal = field(default_factory=lambda: Decimal("0.0"))
    current_stock: Decimal = field(default_factory=lambda: Decimal("0.0"))
    is_active: bool = field(default=True)

    def default_rate(self, invoice_type: InvoiceType) -> Decimal:
        """Price a form may prefill as the line rate; the calculator never does this itself."""
        return self.sales_price if invoice_type == InvoiceType.SALES else self.purchase_price
