# voucherdesk/business_logic/entities/ledger_account_entity.py
from dataclasses import dataclass, field
from typing import Optional
from .base_entity import BaseEntity
from decimal import Decimal

@dataclass
class LedgerAccountEntity(BaseEntity):
    name: str
    code: Optional[str] = field(default=None)
    account_type: Optional[str] = field(default=None)
    current_balance: Decimal = field(default_factory=lambda: Decimal("0.0"))

    @property
    def display_name(self) -> str:
        return f"{self.code} - {self.name}" if self.code else self.name
