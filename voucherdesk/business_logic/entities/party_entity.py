# voucherdesk/business_logic/entities/party_entity.py
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal
from .base_entity import BaseEntity

@dataclass
class PartyEntity(BaseEntity):
    """A customer (sales context) or vendor (purchase context)."""
    name: str
    ledger_account_id: Optional[int] = field(default=None)
    email: Optional[str] = field(default=None)
    phone: Optional[str] = field(default=None)
    mobile: Optional[str] = field(default=None)
    address: Optional[str] = field(default=None)
    outstanding_balance: Decimal = field(default_factory=lambda: Decimal("0.0"))
    status: Optional[str] = field(default=None)
