# voucherdesk/business_logic/__init__.py
from .errors import (
    InvoiceError, InvoiceValidationError, InvoiceStateError, InvoiceBusyError,
    ApiError, ApiTransportError, ApiServerError,
)
from .invoice_calculator import compute_item_amount, calculate_totals, InvoiceTotals
from .invoice_draft import InvoiceDraft
from .invoice_manager import InvoiceManager
from .invoice_lifecycle import InvoiceLifecycleController
from .invoice_list_manager import InvoiceListManager, InvoiceFilters
from .directory_lookup import DirectoryLookup, party_lookup, product_lookup, ledger_account_lookup
