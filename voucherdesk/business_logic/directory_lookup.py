# voucherdesk/business_logic/directory_lookup.py

from typing import Any, Callable, List, Optional, TYPE_CHECKING

from PyQt5.QtCore import QObject, pyqtSignal

from .invoice_draft import InvoiceDraft
from .entities.party_entity import PartyEntity
from .entities.product_entity import ProductEntity
from .entities.ledger_account_entity import LedgerAccountEntity
from .entities.invoice_item_entity import InvoiceItemEntity
from .entities.additional_charge_entity import AdditionalChargeEntity
from voucherdesk.config import SEARCH_MIN_LENGTH, SEARCH_DEBOUNCE_MS
from voucherdesk.utils.debounce import DebouncedQuery

# --- Repository imports (type checking only) ---
if TYPE_CHECKING:
    from ..data_access.invoices_repository import InvoicesRepository

import logging
logger = logging.getLogger(__name__)


class DirectoryLookup(QObject):
    """
    Typeahead over one directory (parties, products or ledger accounts).

    `search(query)` returns the candidates; `binder(candidate)` writes the
    chosen one into the draft and returns False when there is nothing left to
    bind to. Selecting clears the candidates either way.
    """
    resultsChanged = pyqtSignal(object)
    selected = pyqtSignal(object)

    def __init__(self,
                 search: Callable[[str], List[Any]],
                 binder: Callable[[Any], Optional[bool]],
                 min_length: int = SEARCH_MIN_LENGTH,
                 delay_ms: int = SEARCH_DEBOUNCE_MS,
                 timer: Any = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._binder = binder
        self._query = DebouncedQuery(search, min_length=min_length, delay_ms=delay_ms, timer=timer, parent=self)
        self._query.resultsChanged.connect(self.resultsChanged)

    @property
    def results(self) -> List[Any]:
        return self._query.results

    @property
    def text(self) -> str:
        return self._query.text

    @property
    def is_pending(self) -> bool:
        return self._query.is_pending

    def set_text(self, text: Optional[str]):
        self._query.set_text(text)

    def select(self, candidate: Any) -> bool:
        bound = self._binder(candidate) is not False
        self._query.clear_results()
        if bound:
            self.selected.emit(candidate)
        else:
            logger.warning(f"Selection of {candidate!r} discarded: its line no longer exists.")
        return bound

    def close(self):
        self._query.close()


def _index_of(lines: list, line: Any) -> Optional[int]:
    # by identity: two lines with equal fields are still different lines
    for index, candidate in enumerate(lines):
        if candidate is line:
            return index
    return None


def party_lookup(repository: 'InvoicesRepository', draft: InvoiceDraft, **kwargs) -> DirectoryLookup:
    party_type = draft.invoice_type.party_type

    def bind(party: PartyEntity):
        draft.select_party(party)

    return DirectoryLookup(lambda query: repository.search_parties(query, party_type), bind, **kwargs)


def product_lookup(repository: 'InvoicesRepository', draft: InvoiceDraft, item: InvoiceItemEntity,
                   **kwargs) -> DirectoryLookup:
    """
    Product typeahead for one item line; the line is found again on select, so
    removals before it are fine. Only the product is bound: the line keeps its
    rate, and a form that wants the list price calls
    `draft.update_item(index, "rate", product.default_rate(draft.invoice_type))`.
    """
    invoice_type = draft.invoice_type

    def bind(product: ProductEntity) -> bool:
        index = _index_of(draft.items, item)
        if index is None:
            return False
        draft.set_item_product(index, product)
        return True

    return DirectoryLookup(lambda query: repository.search_products(query, invoice_type), bind, **kwargs)


def ledger_account_lookup(repository: 'InvoicesRepository', draft: InvoiceDraft, charge: AdditionalChargeEntity,
                          **kwargs) -> DirectoryLookup:
    def bind(account: LedgerAccountEntity) -> bool:
        index = _index_of(draft.additional_charges, charge)
        if index is None:
            return False
        draft.set_charge_account(index, account)
        return True

    return DirectoryLookup(repository.search_ledger_accounts, bind, **kwargs)
