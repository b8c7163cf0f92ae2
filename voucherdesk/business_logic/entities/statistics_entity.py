# voucherdesk/business_logic/entities/statistics_entity.py
from dataclasses import dataclass, field
from decimal import Decimal

@dataclass
class StatisticsEntity:
    # Computed by the server over the whole filtered query, not only the current page.
    total_invoices: int = 0
    draft_invoices: int = 0
    posted_invoices: int = 0
    total_sales_amount: Decimal = field(default_factory=lambda: Decimal("0.0"))
    total_purchase_amount: Decimal = field(default_factory=lambda: Decimal("0.0"))
