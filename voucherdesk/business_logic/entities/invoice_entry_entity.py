# voucherdesk/business_logic/entities/invoice_entry_entity.py
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal
from .base_entity import BaseEntity

@dataclass
class InvoiceEntryEntity(BaseEntity):
    # Produced by the server when an invoice is posted; read-only on the client.
    ledger_account_id: int
    debit_amount: Decimal = field(default_factory=lambda: Decimal("0.0"))
    credit_amount: Decimal = field(default_factory=lambda: Decimal("0.0"))
    particulars: Optional[str] = field(default=None)
    ledger_account_name: Optional[str] = field(default=None)
    ledger_account_code: Optional[str] = field(default=None)
