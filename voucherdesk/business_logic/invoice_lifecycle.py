# voucherdesk/business_logic/invoice_lifecycle.py

from typing import Any, Callable, Dict, Hashable, List, Optional, Set, Tuple
from datetime import date

from PyQt5.QtCore import QObject, pyqtSignal

from .entities.invoice_entity import InvoiceEntity, InvoiceDetails
from .entities.form_data_entity import FormDataEntity
from .invoice_draft import InvoiceDraft
from .invoice_manager import InvoiceManager
from .errors import InvoiceValidationError, InvoiceStateError, InvoiceBusyError, ApiError
from voucherdesk.constants import (
    InvoiceType, InvoiceStatus,
    MSG_VALIDATION_TITLE, MSG_ERROR_TITLE, MSG_SUCCESS_TITLE, MSG_ACTION_IN_PROGRESS,
    MSG_CONFIRM_POST_TITLE, MSG_CONFIRM_POST, MSG_CONFIRM_UNPOST_TITLE, MSG_CONFIRM_UNPOST,
    MSG_CONFIRM_DELETE_TITLE, MSG_CONFIRM_DELETE,
    ACTION_FAILURE_MESSAGES, ACTION_SUCCESS_MESSAGES,
)

import logging
logger = logging.getLogger(__name__)


class InvoiceLifecycleController(QObject):
    """
    User-facing side of the lifecycle: confirm, run once, report.

    `prompter` must provide confirm(title, text) -> bool, error(title, text)
    and info(title, text); presentation.dialogs.QtPrompter is the Qt one.

    - post, unpost and delete ask for confirmation before any request.
    - At most one request per invoice is outstanding; a second one is refused
      and busyChanged tells the UI to disable its actions meanwhile.
    - Validation and state errors are reported without a request; API errors
      are reported with the server's message, or a generic one per action.
    - Every method returns None/False on failure and leaves its arguments as
      they were.
    """
    busyChanged = pyqtSignal(bool)
    invoiceSaved = pyqtSignal(object)
    invoiceDeleted = pyqtSignal(int)

    def __init__(self, invoice_manager: InvoiceManager, prompter: Any, parent: Optional[QObject] = None):
        super().__init__(parent)
        if invoice_manager is None:
            raise ValueError("invoice_manager cannot be None")
        self.invoice_manager = invoice_manager
        self.prompter = prompter
        self._in_flight: Set[Hashable] = set()

    @property
    def is_busy(self) -> bool:
        return bool(self._in_flight)

    def is_busy_with(self, key: Hashable) -> bool:
        return key in self._in_flight

    @staticmethod
    def draft_key(draft: InvoiceDraft) -> Hashable:
        return draft.invoice_id if draft.invoice_id is not None else ("new", id(draft))

    # --- loading ---

    def load_form_data(self, invoice_type: InvoiceType) -> Optional[FormDataEntity]:
        ok, form_data = self._run(("form_data", invoice_type), "form_data", None,
                                  lambda: self.invoice_manager.get_form_data(invoice_type))
        return form_data if ok else None

    def open_for_edit(self, invoice_id: int) -> Optional[InvoiceDraft]:
        """A draft seeded from the stored invoice, or None (reported) when it cannot be edited."""
        ok, draft = self._run(invoice_id, "load", None,
                              lambda: self.invoice_manager.open_for_edit(invoice_id))
        return draft if ok else None

    # --- actions ---

    def save_new(self, draft: InvoiceDraft, status: InvoiceStatus = InvoiceStatus.DRAFT) -> Optional[InvoiceEntity]:
        success_key = "create_posted" if status == InvoiceStatus.POSTED else "create_draft"
        ok, created = self._run(self.draft_key(draft), "create", success_key,
                                lambda: self.invoice_manager.create_invoice(draft, status))
        if ok:
            self.invoiceSaved.emit(created)
        return created if ok else None

    def save_changes(self, draft: InvoiceDraft) -> Optional[InvoiceEntity]:
        ok, updated = self._run(self.draft_key(draft), "update", "update",
                                lambda: self.invoice_manager.update_invoice(draft))
        if ok:
            self.invoiceSaved.emit(updated)
        return updated if ok else None

    def post(self, invoice: InvoiceEntity) -> Optional[InvoiceEntity]:
        ok, posted = self._run(invoice.id, "post", "post",
                               lambda: self.invoice_manager.post_invoice(invoice),
                               confirm=(MSG_CONFIRM_POST_TITLE, MSG_CONFIRM_POST),
                               precheck=lambda: self.invoice_manager.check_transition(invoice.status, "post"))
        if ok:
            self.invoiceSaved.emit(posted)
        return posted if ok else None

    def unpost(self, invoice: InvoiceEntity) -> Optional[InvoiceEntity]:
        ok, reverted = self._run(invoice.id, "unpost", "unpost",
                                 lambda: self.invoice_manager.unpost_invoice(invoice),
                                 confirm=(MSG_CONFIRM_UNPOST_TITLE, MSG_CONFIRM_UNPOST),
                                 precheck=lambda: self.invoice_manager.check_transition(invoice.status, "unpost"))
        if ok:
            self.invoiceSaved.emit(reverted)
        return reverted if ok else None

    def delete(self, invoice: InvoiceEntity) -> bool:
        ok, _ = self._run(invoice.id, "delete", "delete",
                          lambda: self.invoice_manager.delete_invoice(invoice),
                          confirm=(MSG_CONFIRM_DELETE_TITLE, MSG_CONFIRM_DELETE),
                          precheck=lambda: self.invoice_manager.check_transition(invoice.status, "delete"))
        if ok:
            self.invoiceDeleted.emit(invoice.id)
        return ok

    def record_payment(self, details: InvoiceDetails, amount: Any, bank_account_id: Optional[int],
                       payment_date: Optional[date] = None, reference: Optional[str] = None,
                       notes: Optional[str] = None) -> Optional[Dict[str, Any]]:
        ok, result = self._run(details.invoice.id, "record_payment", "record_payment",
                               lambda: self.invoice_manager.record_payment(
                                   details, amount, bank_account_id, payment_date, reference, notes))
        return result if ok else None

    def email(self, invoice_id: int, to: Optional[str], subject: Optional[str] = None,
              message: Optional[str] = None, cc: Optional[List[str]] = None) -> bool:
        ok, _ = self._run(invoice_id, "email", "email",
                          lambda: self.invoice_manager.email_invoice(invoice_id, to, subject, message, cc))
        return ok

    # --- plumbing ---

    def _run(self, key: Hashable, action: str, success_key: Optional[str], call: Callable[[], Any],
             confirm: Optional[Tuple[str, str]] = None,
             precheck: Optional[Callable[[], None]] = None) -> Tuple[bool, Any]:
        try:
            self._check_idle(key, action)
            if precheck is not None:
                precheck()
        except (InvoiceBusyError, InvoiceStateError) as e:
            self.prompter.error(MSG_ERROR_TITLE, str(e))
            return False, None

        if confirm is not None:
            title, text = confirm
            if not self.prompter.confirm(title, text):
                logger.info(f"'{action}' for invoice {key} cancelled by the user.")
                return False, None

        self._in_flight.add(key)
        self.busyChanged.emit(True)
        try:
            result = call()
        except InvoiceValidationError as e:
            logger.info(f"'{action}' blocked by validation rule '{e.rule}': {e.message}")
            self.prompter.error(MSG_VALIDATION_TITLE, e.message)
            return False, None
        except InvoiceStateError as e:
            self.prompter.error(MSG_ERROR_TITLE, str(e))
            return False, None
        except ApiError as e:
            logger.error(f"'{action}' for invoice {key} failed: {e!r}")
            self.prompter.error(MSG_ERROR_TITLE, e.user_message(ACTION_FAILURE_MESSAGES[action]))
            return False, None
        finally:
            self._in_flight.discard(key)
            if not self._in_flight:
                self.busyChanged.emit(False)

        if success_key is not None:
            self.prompter.info(MSG_SUCCESS_TITLE, ACTION_SUCCESS_MESSAGES[success_key])
        return True, result

    def _check_idle(self, key: Hashable, action: str):
        if key in self._in_flight:
            logger.warning(f"'{action}' for invoice {key} refused: a request is already in flight.")
            raise InvoiceBusyError(MSG_ACTION_IN_PROGRESS)
