# voucherdesk/business_logic/invoice_list_manager.py

import dataclasses
from dataclasses import dataclass
from datetime import date
from typing import Optional, List, Dict, Any, TYPE_CHECKING

from .entities.invoice_entity import InvoiceEntity
from .entities.statistics_entity import StatisticsEntity
from .errors import ApiError
from voucherdesk.constants import InvoiceType, InvoiceStatus, SortDirection, MSG_ERROR_TITLE, ACTION_FAILURE_MESSAGES
from voucherdesk.config import DEFAULT_PER_PAGE, DEFAULT_SORT, DEFAULT_DIRECTION
from voucherdesk.utils.pagination import PageInfo

# --- Repository imports (type checking only) ---
if TYPE_CHECKING:
    from ..data_access.invoices_repository import InvoicesRepository

import logging
logger = logging.getLogger(__name__)


@dataclass
class InvoiceFilters:
    type: InvoiceType = InvoiceType.SALES
    status: Optional[InvoiceStatus] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    search: Optional[str] = None
    sort: str = DEFAULT_SORT
    direction: SortDirection = SortDirection(DEFAULT_DIRECTION)
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    def to_params(self) -> Dict[str, Any]:
        """Query parameters for the list endpoint; empty values are stripped by the repository."""
        return {
            "type": self.type,
            "status": self.status,
            "from_date": self.from_date,
            "to_date": self.to_date,
            "search": self.search.strip() if self.search else None,
            "sort": self.sort,
            "direction": self.direction,
            "page": self.page,
            "per_page": self.per_page,
        }

    @property
    def active_filter_count(self) -> int:
        return sum(1 for value in (self.status, self.from_date, self.to_date, self.search) if value)


class InvoiceListManager:
    """
    Holds one page of invoices for a fixed invoice type, with its filters,
    page info and statistics.

    Filters and the held page change together and only after a successful
    fetch: when a load fails, the prompter (if any) is told, `last_error` is
    set and the previous page stays as it was.
    """

    def __init__(self,
                 invoices_repository: 'InvoicesRepository',
                 invoice_type: InvoiceType = InvoiceType.SALES,
                 prompter: Any = None,
                 per_page: int = DEFAULT_PER_PAGE):
        if invoices_repository is None:
            raise ValueError("invoices_repository cannot be None")
        self.invoices_repo = invoices_repository
        self.prompter = prompter
        self.filters = InvoiceFilters(type=invoice_type, per_page=per_page)

        self.invoices: List[InvoiceEntity] = []
        self.page_info = PageInfo(per_page=per_page)
        self.statistics: Optional[StatisticsEntity] = None
        self.is_loading = False
        self.last_error: Optional[ApiError] = None

    @property
    def invoice_type(self) -> InvoiceType:
        return self.filters.type

    @property
    def has_next_page(self) -> bool:
        return self.page_info.has_next

    @property
    def has_previous_page(self) -> bool:
        return self.page_info.has_previous

    # --- loading ---

    def load(self) -> bool:
        return self._fetch(self.filters)

    def refresh(self) -> bool:
        """Reloads the current page with the current filters."""
        return self._fetch(self.filters)

    def _fetch(self, filters: InvoiceFilters, append: bool = False) -> bool:
        self.is_loading = True
        try:
            page, statistics = self.invoices_repo.list_invoices(filters.to_params())
        except ApiError as e:
            logger.error(f"Loading {filters.type.value} invoices (page {filters.page}) failed: {e!r}")
            self.last_error = e
            if self.prompter is not None:
                self.prompter.error(MSG_ERROR_TITLE, e.user_message(ACTION_FAILURE_MESSAGES["list"]))
            return False
        finally:
            self.is_loading = False

        self.filters = filters
        self.invoices = self.invoices + list(page.items) if append else list(page.items)
        self.page_info = page.info
        if statistics is not None:
            self.statistics = statistics
        self.last_error = None
        logger.debug(f"Loaded {len(page.items)} {filters.type.value} invoices, page "
                     f"{page.info.current_page}/{page.info.last_page} ({page.info.total} total)")
        return True

    # --- filters ---

    def set_filters(self, **changes) -> bool:
        """Applies filter changes and reloads from page 1."""
        settable = {f.name for f in dataclasses.fields(InvoiceFilters)} - {"page"}
        unknown = set(changes) - settable
        if unknown:
            raise ValueError(f"Unknown or non-settable filters: {', '.join(sorted(unknown))}")
        if "type" in changes and changes["type"] != self.filters.type:
            raise ValueError("The invoice type of a list is fixed; create another list for the other type.")
        if "direction" in changes and not isinstance(changes["direction"], SortDirection):
            changes["direction"] = SortDirection(changes["direction"])
        if "status" in changes and changes["status"] is not None and not isinstance(changes["status"], InvoiceStatus):
            changes["status"] = InvoiceStatus(changes["status"])
        return self._fetch(dataclasses.replace(self.filters, page=1, **changes))

    def clear_filters(self) -> bool:
        """Unsets status, dates and search; type, sort and direction are kept."""
        return self._fetch(dataclasses.replace(self.filters, status=None, from_date=None,
                                               to_date=None, search=None, page=1))

    # --- paging ---

    def go_to_page(self, page: int) -> bool:
        if page < 1 or page > max(1, self.page_info.last_page):
            logger.warning(f"Page {page} out of range 1..{self.page_info.last_page}")
            return False
        return self._fetch(dataclasses.replace(self.filters, page=page))

    def next_page(self) -> bool:
        if not self.has_next_page:
            return False
        return self.go_to_page(self.page_info.current_page + 1)

    def previous_page(self) -> bool:
        if not self.has_previous_page:
            return False
        return self.go_to_page(self.page_info.current_page - 1)

    def load_more(self) -> bool:
        """Appends the next page to the invoices already held."""
        if not self.has_next_page:
            return False
        return self._fetch(dataclasses.replace(self.filters, page=self.page_info.current_page + 1), append=True)
