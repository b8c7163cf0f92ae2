# voucherdesk/business_logic/invoice_draft.py

import dataclasses
from datetime import date
from decimal import Decimal
from typing import Optional, List, Dict, Any

from .entities.invoice_entity import InvoiceEntity
from .entities.invoice_item_entity import InvoiceItemEntity
from .entities.additional_charge_entity import AdditionalChargeEntity
from .entities.party_entity import PartyEntity
from .entities.product_entity import ProductEntity
from .entities.ledger_account_entity import LedgerAccountEntity
from .errors import InvoiceValidationError
from .invoice_calculator import InvoiceTotals, calculate_totals, compute_item_amount, to_decimal
from voucherdesk.constants import (
    InvoiceType, InvoiceStatus,
    MSG_SELECT_VOUCHER_TYPE, MSG_SELECT_PARTY, MSG_ADD_ITEM,
    MSG_SELECT_PRODUCT, MSG_ITEM_QUANTITY, MSG_SELECT_CHARGE_ACCOUNT,
)

import logging
logger = logging.getLogger(__name__)

# Fields that feed compute_item_amount
ITEM_AMOUNT_FIELDS = ("quantity", "rate", "discount_percent", "vat_percent")
ITEM_EDITABLE_FIELDS = ITEM_AMOUNT_FIELDS + ("product_id", "description", "product_name", "unit")
CHARGE_EDITABLE_FIELDS = ("ledger_account_id", "amount", "description", "ledger_account_name")


class InvoiceDraft:
    """
    The invoice being built or edited in memory.

    Items and charges are addressed by position; removing one shifts the ones
    after it down by one. Every edit of an amount-bearing item field recomputes
    that item's amount, and `totals` is always summed afresh from the lines.
    """

    def __init__(self,
                 invoice_type: InvoiceType = InvoiceType.SALES,
                 voucher_type_id: Optional[int] = None,
                 voucher_date: Optional[date] = None,
                 party_id: Optional[int] = None,
                 narration: Optional[str] = None):
        self.invoice_type = invoice_type
        self.voucher_type_id = voucher_type_id
        self.voucher_date: date = voucher_date or date.today()
        self.party_id = party_id
        self.party_name: Optional[str] = None
        self.narration = narration
        self.reference_number: Optional[str] = None

        # set once the server has the invoice
        self.invoice_id: Optional[int] = None
        self.status: Optional[InvoiceStatus] = None

        self.items: List[InvoiceItemEntity] = []
        self.additional_charges: List[AdditionalChargeEntity] = []

    @classmethod
    def from_invoice(cls, invoice: InvoiceEntity) -> "InvoiceDraft":
        """Seeds a draft from an invoice already mapped to canonical field names."""
        draft = cls(invoice_type=invoice.type,
                    voucher_type_id=invoice.voucher_type_id,
                    voucher_date=invoice.voucher_date,
                    party_id=invoice.party_id,
                    narration=invoice.narration)
        draft.party_name = invoice.party_name
        draft.reference_number = invoice.reference_number
        draft.invoice_id = invoice.id
        draft.status = invoice.status
        draft.items = [dataclasses.replace(item) for item in invoice.items]
        draft.additional_charges = [dataclasses.replace(charge) for charge in invoice.additional_charges]
        logger.debug(f"Draft seeded from invoice ID {invoice.id}: {len(draft.items)} items, "
                     f"{len(draft.additional_charges)} charges")
        return draft

    @property
    def is_new(self) -> bool:
        return self.invoice_id is None

    def mark_saved(self, invoice: InvoiceEntity):
        """Adopts the id and status the server assigned."""
        self.invoice_id = invoice.id
        self.status = invoice.status

    # --- header ---

    def select_party(self, party: Optional[PartyEntity]):
        self.party_id = party.id if party else None
        self.party_name = party.name if party else None

    # --- items ---

    def _check_index(self, lines: list, index: int, kind: str):
        if not 0 <= index < len(lines):
            raise IndexError(f"{kind} index {index} out of range (0..{len(lines) - 1})")

    def add_item(self, product_id: Optional[int] = None, quantity: Any = 1, rate: Any = 0,
                 discount_percent: Any = 0, vat_percent: Any = 0,
                 description: Optional[str] = None) -> int:
        item = InvoiceItemEntity(
            product_id=product_id,
            quantity=to_decimal(quantity),
            rate=to_decimal(rate),
            discount_percent=to_decimal(discount_percent),
            vat_percent=to_decimal(vat_percent),
            description=description,
        )
        self._recompute_item(item)
        self.items.append(item)
        return len(self.items) - 1

    def update_item(self, index: int, field_name: str, value: Any):
        self._check_index(self.items, index, "Item")
        if field_name == "amount":
            raise ValueError("Item amount is derived from quantity, rate, discount and VAT; it cannot be set directly.")
        if field_name not in ITEM_EDITABLE_FIELDS:
            raise ValueError(f"Unknown item field '{field_name}'")

        item = self.items[index]
        if field_name in ITEM_AMOUNT_FIELDS:
            setattr(item, field_name, to_decimal(value))
            self._recompute_item(item)
        else:
            setattr(item, field_name, value)

    def set_item_product(self, index: int, product: Optional[ProductEntity]):
        # the rate is left alone; prefilling it is the form's decision
        self._check_index(self.items, index, "Item")
        item = self.items[index]
        item.product_id = product.id if product else None
        item.product_name = product.name if product else None
        item.unit = product.unit if product else None

    def remove_item(self, index: int) -> InvoiceItemEntity:
        self._check_index(self.items, index, "Item")
        return self.items.pop(index)

    @staticmethod
    def _recompute_item(item: InvoiceItemEntity):
        item.amount = compute_item_amount(item.quantity, item.rate, item.discount_percent, item.vat_percent)

    # --- additional charges ---

    def add_charge(self, ledger_account_id: Optional[int] = None, amount: Any = 0,
                   description: Optional[str] = "") -> int:
        self.additional_charges.append(AdditionalChargeEntity(
            ledger_account_id=ledger_account_id,
            amount=to_decimal(amount),
            description=description,
        ))
        return len(self.additional_charges) - 1

    def update_charge(self, index: int, field_name: str, value: Any):
        self._check_index(self.additional_charges, index, "Charge")
        if field_name not in CHARGE_EDITABLE_FIELDS:
            raise ValueError(f"Unknown charge field '{field_name}'")
        charge = self.additional_charges[index]
        setattr(charge, field_name, to_decimal(value) if field_name == "amount" else value)

    def set_charge_account(self, index: int, account: Optional[LedgerAccountEntity]):
        self._check_index(self.additional_charges, index, "Charge")
        charge = self.additional_charges[index]
        charge.ledger_account_id = account.id if account else None
        charge.ledger_account_name = account.name if account else None

    def remove_charge(self, index: int) -> AdditionalChargeEntity:
        self._check_index(self.additional_charges, index, "Charge")
        return self.additional_charges.pop(index)

    # --- totals ---

    @property
    def totals(self) -> InvoiceTotals:
        return calculate_totals(self.items, self.additional_charges)

    @property
    def total_amount(self) -> Decimal:
        return self.totals.grand_total

    # --- validation ---

    def validate(self):
        """Raises InvoiceValidationError for the first broken rule. Rates, discounts and VAT are not range-checked."""
        if not self.voucher_type_id:
            raise InvoiceValidationError("voucher_type", MSG_SELECT_VOUCHER_TYPE)
        if not self.party_id:
            raise InvoiceValidationError("party", MSG_SELECT_PARTY)
        if not self.items:
            raise InvoiceValidationError("items", MSG_ADD_ITEM)
        for item in self.items:
            if not item.product_id:
                raise InvoiceValidationError("item_product", MSG_SELECT_PRODUCT)
            if to_decimal(item.quantity) <= 0:
                raise InvoiceValidationError("item_quantity", MSG_ITEM_QUANTITY)
        for charge in self.additional_charges:
            if not charge.ledger_account_id:
                raise InvoiceValidationError("charge_account", MSG_SELECT_CHARGE_ACCOUNT)

    def is_valid(self) -> bool:
        try:
            self.validate()
        except InvoiceValidationError:
            return False
        return True

    # --- wire payload ---

    def to_payload(self, status: Optional[InvoiceStatus] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "voucher_type_id": self.voucher_type_id,
            "voucher_date": self.voucher_date,
            "party_id": self.party_id,
            "items": [self._item_payload(item) for item in self.items],
        }
        if self.narration:
            payload["narration"] = self.narration
        if self.reference_number:
            payload["reference_number"] = self.reference_number
        if self.additional_charges:
            payload["additional_charges"] = [self._charge_payload(c) for c in self.additional_charges]
        if status is not None:
            payload["status"] = status.value
        return payload

    @staticmethod
    def _item_payload(item: InvoiceItemEntity) -> Dict[str, Any]:
        row = {
            "product_id": item.product_id,
            "quantity": item.quantity,
            "rate": item.rate,
            "discount": item.discount_percent,
            "vat_rate": item.vat_percent,
        }
        if item.description:
            row["description"] = item.description
        return row

    @staticmethod
    def _charge_payload(charge: AdditionalChargeEntity) -> Dict[str, Any]:
        row = {"ledger_account_id": charge.ledger_account_id, "amount": charge.amount}
        if charge.description:
            row["description"] = charge.description
        return row
