# voucherdesk/business_logic/entities/additional_charge_entity.py
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal
from .base_entity import BaseEntity

@dataclass
class AdditionalChargeEntity(BaseEntity):
    """Flat amount booked against a ledger account; not subject to discount or VAT."""
    ledger_account_id: Optional[int] = None
    amount: Decimal = field(default_factory=lambda: Decimal("0.0"))
    description: Optional[str] = None

    ledger_account_name: Optional[str] = field(default=None, compare=False, repr=False)
