# voucherdesk/business_logic/entities/invoice_entity.py
from dataclasses import dataclass, field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from .base_entity import BaseEntity
from .invoice_item_entity import InvoiceItemEntity
from .additional_charge_entity import AdditionalChargeEntity
from .invoice_entry_entity import InvoiceEntryEntity
from .party_entity import PartyEntity
from voucherdesk.constants import InvoiceType, InvoiceStatus, PaymentStatus

@dataclass
class InvoiceEntity(BaseEntity):
    voucher_type_id: int
    voucher_date: date
    party_id: int
    type: InvoiceType = field(default=InvoiceType.SALES)
    status: InvoiceStatus = field(default=InvoiceStatus.DRAFT)

    voucher_number: Optional[str] = field(default=None)
    reference_number: Optional[str] = field(default=None)
    narration: Optional[str] = field(default=None)
    total_amount: Decimal = field(default_factory=lambda: Decimal("0.0"))
    posted_at: Optional[datetime] = field(default=None)
    posted_by: Optional[int] = field(default=None)

    items: List[InvoiceItemEntity] = field(default_factory=list)
    additional_charges: List[AdditionalChargeEntity] = field(default_factory=list)
    entries: List[InvoiceEntryEntity] = field(default_factory=list)

    # display only
    party_name: Optional[str] = field(default=None, compare=False, repr=False)
    voucher_type_name: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def is_draft(self) -> bool:
        return self.status == InvoiceStatus.DRAFT

    @property
    def is_posted(self) -> bool:
        return self.status == InvoiceStatus.POSTED


@dataclass
class InvoiceDetails:
    """What GET /{id} returns: the invoice plus its party and payment position."""
    invoice: InvoiceEntity
    party: Optional[PartyEntity] = None
    # None when the server did not send one
    balance_due: Optional[Decimal] = None
    total_paid: Decimal = field(default_factory=lambda: Decimal("0.0"))

    @property
    def payment_status(self) -> PaymentStatus:
        if self.balance_due is None:
            return PaymentStatus.UNPAID
        if self.balance_due == 0:
            return PaymentStatus.PAID
        # an overpaid (negative) balance counts as partially paid
        if self.balance_due < self.invoice.total_amount:
            return PaymentStatus.PARTIALLY_PAID
        return PaymentStatus.UNPAID
