# voucherdesk/business_logic/invoice_manager.py

from typing import Optional, List, Dict, Any, TYPE_CHECKING
from datetime import date

from .entities.invoice_entity import InvoiceEntity, InvoiceDetails
from .entities.form_data_entity import FormDataEntity
from .invoice_draft import InvoiceDraft
from .invoice_calculator import to_decimal
from .errors import InvoiceStateError, InvoiceValidationError, ApiServerError
from voucherdesk.constants import (
    InvoiceType, InvoiceStatus,
    MSG_ONLY_DRAFT_EDITABLE, MSG_ONLY_DRAFT_DELETABLE, MSG_ONLY_DRAFT_POSTABLE,
    MSG_ONLY_POSTED_UNPOSTABLE, MSG_ONLY_POSTED_PAYABLE, MSG_ALREADY_SAVED, MSG_NOT_SAVED,
    MSG_PAYMENT_AMOUNT, MSG_PAYMENT_EXCEEDS_BALANCE, MSG_SELECT_BANK_ACCOUNT, MSG_EMAIL_RECIPIENT,
)

# --- Repository imports (type checking only) ---
if TYPE_CHECKING:
    from ..data_access.invoices_repository import InvoicesRepository

import logging
logger = logging.getLogger(__name__)

# action -> (status the invoice must be in, message when it is not)
TRANSITION_RULES = {
    "update": (InvoiceStatus.DRAFT, MSG_ONLY_DRAFT_EDITABLE),
    "delete": (InvoiceStatus.DRAFT, MSG_ONLY_DRAFT_DELETABLE),
    "post": (InvoiceStatus.DRAFT, MSG_ONLY_DRAFT_POSTABLE),
    "unpost": (InvoiceStatus.POSTED, MSG_ONLY_POSTED_UNPOSTABLE),
    "record_payment": (InvoiceStatus.POSTED, MSG_ONLY_POSTED_PAYABLE),
}


class InvoiceManager:
    """
    Drives the invoice lifecycle against the server.

    draft --post--> posted --unpost--> draft; update and delete only while
    draft. The status the client knows is checked before any request; the
    server still has the last word and its rejections propagate as
    ApiServerError. Nothing passed in is modified when a call fails.
    """

    def __init__(self, invoices_repository: 'InvoicesRepository'):
        if invoices_repository is None:
            raise ValueError("invoices_repository cannot be None")
        self.invoices_repo = invoices_repository

    # --- state rules ---

    def can_transition(self, status: Optional[InvoiceStatus], action: str) -> bool:
        required, _ = TRANSITION_RULES[action]
        return status == required

    def check_transition(self, status: Optional[InvoiceStatus], action: str):
        required, message = TRANSITION_RULES[action]
        if status != required:
            logger.warning(f"Refusing '{action}': invoice status is "
                           f"{status.value if status else 'unsaved'}, needs {required.value}.")
            raise InvoiceStateError(message)

    # --- reads ---

    def get_form_data(self, invoice_type: InvoiceType) -> FormDataEntity:
        logger.debug(f"Fetching form data for {invoice_type.value} invoices.")
        return self.invoices_repo.get_form_data(invoice_type)

    def new_draft(self, invoice_type: InvoiceType, form_data: Optional[FormDataEntity] = None) -> InvoiceDraft:
        """An empty draft, with the default voucher type preselected when form data is given."""
        draft = InvoiceDraft(invoice_type=invoice_type)
        if form_data is not None:
            voucher_type = form_data.default_voucher_type()
            if voucher_type:
                draft.voucher_type_id = voucher_type.id
            else:
                logger.warning(f"No voucher types available for {invoice_type.value} invoices.")
        return draft

    def get_invoice_details(self, invoice_id: int) -> InvoiceDetails:
        logger.debug(f"Fetching invoice details for ID: {invoice_id}")
        return self.invoices_repo.get_details(invoice_id)

    def open_for_edit(self, invoice_id: int) -> InvoiceDraft:
        details = self.get_invoice_details(invoice_id)
        self.check_transition(details.invoice.status, "update")
        draft = InvoiceDraft.from_invoice(details.invoice)
        if details.party and not draft.party_name:
            draft.party_name = details.party.name
        return draft

    # --- lifecycle ---

    def create_invoice(self, draft: InvoiceDraft, status: InvoiceStatus = InvoiceStatus.DRAFT) -> InvoiceEntity:
        if not draft.is_new:
            raise InvoiceStateError(MSG_ALREADY_SAVED)
        draft.validate()

        logger.info(f"Attempting to create {draft.invoice_type.value} invoice ({status.value}) for party ID "
                    f"{draft.party_id} with {len(draft.items)} items, total {draft.total_amount}.")
        created = self.invoices_repo.create(draft.to_payload(status))
        if created is None:
            raise ApiServerError("Server did not return the created invoice")

        draft.mark_saved(created)
        logger.info(f"Invoice ID {created.id} ({created.voucher_number}) created with status {created.status.value}.")
        return created

    def update_invoice(self, draft: InvoiceDraft) -> InvoiceEntity:
        if draft.is_new:
            raise InvoiceStateError(MSG_NOT_SAVED)
        self.check_transition(draft.status, "update")
        draft.validate()

        logger.info(f"Updating invoice ID {draft.invoice_id}: {len(draft.items)} items, total {draft.total_amount}.")
        # status is never sent on update; posting has its own endpoint
        updated = self.invoices_repo.update(draft.invoice_id, draft.to_payload())
        if updated is None:
            updated = self.invoices_repo.get_details(draft.invoice_id).invoice
        return updated

    def delete_invoice(self, invoice: InvoiceEntity) -> None:
        self.check_transition(invoice.status, "delete")
        self.invoices_repo.delete(invoice.id)
        logger.info(f"Invoice ID {invoice.id} deleted.")

    def post_invoice(self, invoice: InvoiceEntity) -> InvoiceEntity:
        self.check_transition(invoice.status, "post")
        logger.info(f"Posting invoice ID {invoice.id}.")
        posted = self.invoices_repo.post(invoice.id)
        if posted is None:
            posted = self.invoices_repo.get_details(invoice.id).invoice
        logger.info(f"Invoice ID {invoice.id} posted at {posted.posted_at}.")
        return posted

    def unpost_invoice(self, invoice: InvoiceEntity) -> InvoiceEntity:
        self.check_transition(invoice.status, "unpost")
        logger.info(f"Unposting invoice ID {invoice.id}.")
        reverted = self.invoices_repo.unpost(invoice.id)
        if reverted is None:
            reverted = self.invoices_repo.get_details(invoice.id).invoice
        return reverted

    # --- payments & delivery ---

    def record_payment(self,
                       details: InvoiceDetails,
                       amount: Any,
                       bank_account_id: Optional[int],
                       payment_date: Optional[date] = None,
                       reference: Optional[str] = None,
                       notes: Optional[str] = None) -> Dict[str, Any]:
        self.check_transition(details.invoice.status, "record_payment")

        amount_dec = to_decimal(amount)
        if amount_dec <= 0:
            raise InvoiceValidationError("payment_amount", MSG_PAYMENT_AMOUNT)
        if details.balance_due is not None and amount_dec > details.balance_due:
            raise InvoiceValidationError("payment_amount", MSG_PAYMENT_EXCEEDS_BALANCE.format(balance=details.balance_due))
        if not bank_account_id:
            raise InvoiceValidationError("bank_account", MSG_SELECT_BANK_ACCOUNT)

        payload = {
            "date": payment_date or date.today(),
            "amount": amount_dec,
            "bank_account_id": bank_account_id,
            "reference": reference,
            "notes": notes,
        }
        logger.info(f"Recording payment of {amount_dec} against invoice ID {details.invoice.id}.")
        return self.invoices_repo.record_payment(details.invoice.id, payload)

    def email_invoice(self,
                      invoice_id: int,
                      to: Optional[str],
                      subject: Optional[str] = None,
                      message: Optional[str] = None,
                      cc: Optional[List[str]] = None,
                      attach_pdf: bool = True) -> None:
        if not to or not to.strip():
            raise InvoiceValidationError("recipient", MSG_EMAIL_RECIPIENT)
        payload = {
            "to": to.strip(),
            "subject": subject,
            "message": message,
            "cc": cc or None,
            "attach_pdf": attach_pdf,
        }
        logger.info(f"Emailing invoice ID {invoice_id} to {payload['to']}.")
        self.invoices_repo.email_invoice(invoice_id, payload)
