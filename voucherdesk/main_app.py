# voucherdesk/main_app.py
import os
import sys
import logging
import logging.config
from typing import Any, Optional

from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import QLocale

# --- Configuration and Constants ---
from voucherdesk.config import (
    API_BASE_URL, API_TOKEN, TENANT_SLUG, REQUEST_TIMEOUT, DEFAULT_PER_PAGE,
    LOGS_DIR, LOGGING_CONFIG,
)
from voucherdesk.constants import InvoiceType

# --- Data Access Layer (DAL) ---
from voucherdesk.data_access.api_client import ApiClient
from voucherdesk.data_access.invoices_repository import InvoicesRepository

# --- Business Logic Layer (BLL) ---
from voucherdesk.business_logic.errors import ApiError
from voucherdesk.business_logic.invoice_manager import InvoiceManager
from voucherdesk.business_logic.invoice_lifecycle import InvoiceLifecycleController
from voucherdesk.business_logic.invoice_list_manager import InvoiceListManager

# --- Presentation Layer ---
from voucherdesk.presentation.dialogs import QtPrompter

logger = logging.getLogger(__name__)


def setup_logging(logging_config: Optional[dict] = None):
    os.makedirs(LOGS_DIR, exist_ok=True)
    logging.config.dictConfig(logging_config or LOGGING_CONFIG)


class AppContext:
    """Repositories and managers of one API session, built once at startup."""

    def __init__(self,
                 api_client: Optional[ApiClient] = None,
                 prompter: Any = None,
                 base_url: str = API_BASE_URL,
                 token: Optional[str] = API_TOKEN,
                 tenant_slug: Optional[str] = TENANT_SLUG,
                 timeout: float = REQUEST_TIMEOUT):
        logger.info("Initializing API client...")
        self.api_client = api_client or ApiClient(base_url=base_url, token=token,
                                                  tenant_slug=tenant_slug, timeout=timeout)
        self.prompter = prompter if prompter is not None else QtPrompter()

        logger.info("Initializing Repositories...")
        self.invoices_repo = InvoicesRepository(self.api_client)

        logger.info("Initializing Managers...")
        self.invoice_manager = InvoiceManager(invoices_repository=self.invoices_repo)
        self.lifecycle = InvoiceLifecycleController(invoice_manager=self.invoice_manager,
                                                    prompter=self.prompter)

    def invoice_list(self, invoice_type: InvoiceType, per_page: int = DEFAULT_PER_PAGE) -> InvoiceListManager:
        return InvoiceListManager(invoices_repository=self.invoices_repo,
                                  invoice_type=invoice_type,
                                  prompter=self.prompter,
                                  per_page=per_page)

    def close(self):
        self.api_client.close()


def main() -> int:
    """Connects, loads the first page of each invoice list and logs what came back."""
    setup_logging()
    logger.info("Application starting...")
    app = QApplication(sys.argv)
    QLocale.setDefault(QLocale(QLocale.Language.English, QLocale.Country.UnitedStates))

    context = AppContext()
    exit_code = 0
    try:
        for invoice_type in InvoiceType:
            try:
                form_data = context.invoice_manager.get_form_data(invoice_type)
            except ApiError as e:
                logger.error(f"Could not load {invoice_type.value} form data: {e!r}")
                exit_code = 1
                continue
            logger.info(f"{invoice_type.label}: {len(form_data.voucher_types)} voucher types, "
                        f"{len(form_data.parties)} parties, {len(form_data.products)} products")

            invoices = context.invoice_list(invoice_type)
            if not invoices.load():
                exit_code = 1
                continue
            stats = invoices.statistics
            logger.info(f"{invoice_type.label}: {invoices.page_info.total} invoices"
                        + (f" ({stats.draft_invoices} draft, {stats.posted_invoices} posted)" if stats else ""))
    finally:
        context.close()
        app.quit()
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
