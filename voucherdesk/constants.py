# voucherdesk/constants.py

from enum import Enum

# General
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

class InvoiceType(Enum):
    SALES = "sales"
    PURCHASE = "purchase"

    @property
    def label(self) -> str:
        return "Sales" if self is InvoiceType.SALES else "Purchase"

    @property
    def party_type(self) -> "PartyType":
        # Sales invoices are raised against customers, purchases against vendors
        return PartyType.CUSTOMER if self is InvoiceType.SALES else PartyType.VENDOR

class InvoiceStatus(Enum):
    DRAFT = "draft"
    POSTED = "posted"

class PartyType(Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"

class ProductType(Enum):
    GOODS = "goods"
    SERVICE = "service"

class InventoryEffect(Enum):
    INCREASE = "increase"
    DECREASE = "decrease"

class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


# REST resource paths (relative to the API base url)
INVOICES_PATH = "/accounting/invoices"
INVOICE_FORM_DATA_PATH = INVOICES_PATH + "/create"
SEARCH_CUSTOMERS_PATH = INVOICES_PATH + "/search-customers"
SEARCH_PRODUCTS_PATH = INVOICES_PATH + "/search-products"
SEARCH_LEDGER_ACCOUNTS_PATH = INVOICES_PATH + "/search-ledger-accounts"

# Query parameter keys the list endpoint understands
LIST_FILTER_KEYS = (
    "type", "status", "from_date", "to_date", "search",
    "sort", "direction", "page", "per_page",
)

# User-facing messages
MSG_VALIDATION_TITLE = "Validation Error"
MSG_ERROR_TITLE = "Error"
MSG_SUCCESS_TITLE = "Success"
MSG_CONNECTION_FAILED = "Could not reach the server. Please check your connection and try again."
MSG_UNREADABLE_RESPONSE = "The server sent a response that could not be read. Refresh to see the current state before trying again."

MSG_SELECT_VOUCHER_TYPE = "Please select a voucher type"
MSG_SELECT_PARTY = "Please select a party"
MSG_ADD_ITEM = "Please add at least one item"
MSG_SELECT_PRODUCT = "Please select a product for all items"
MSG_ITEM_QUANTITY = "Item quantity must be greater than 0"
MSG_SELECT_CHARGE_ACCOUNT = "Please select a ledger account for all charges"

MSG_CONFIRM_POST_TITLE = "Confirm Post"
MSG_CONFIRM_POST = "Are you sure you want to post this invoice? Once posted, the invoice cannot be edited."
MSG_CONFIRM_UNPOST_TITLE = "Confirm Unpost"
MSG_CONFIRM_UNPOST = "Are you sure you want to unpost this invoice? This will revert it to draft status."
MSG_CONFIRM_DELETE_TITLE = "Confirm Delete"
MSG_CONFIRM_DELETE = "Are you sure you want to delete this invoice? This action cannot be undone."

# Fallback messages when the server gives none, keyed by action
ACTION_FAILURE_MESSAGES = {
    "create": "Failed to create invoice",
    "update": "Failed to update invoice",
    "delete": "Failed to delete invoice",
    "post": "Failed to post invoice",
    "unpost": "Failed to unpost invoice",
    "load": "Failed to load invoice",
    "list": "Failed to load invoices",
    "form_data": "Failed to load form data",
    "record_payment": "Failed to record payment",
    "email": "Failed to email invoice",
}

ACTION_SUCCESS_MESSAGES = {
    "create_draft": "Invoice saved as draft successfully",
    "create_posted": "Invoice created and posted successfully",
    "update": "Invoice updated successfully",
    "delete": "Invoice deleted successfully",
    "post": "Invoice posted successfully",
    "unpost": "Invoice unposted successfully",
    "record_payment": "Payment recorded successfully",
    "email": "Invoice emailed successfully",
}

MSG_PAYMENT_AMOUNT = "Please enter a valid payment amount"
MSG_PAYMENT_EXCEEDS_BALANCE = "Payment amount cannot exceed balance due of {balance:,.2f}"
MSG_SELECT_BANK_ACCOUNT = "Please select a bank or cash account"
MSG_EMAIL_RECIPIENT = "Please enter recipient email address"

MSG_ONLY_DRAFT_EDITABLE = "Only draft invoices can be edited. Unpost the invoice first."
MSG_ONLY_DRAFT_DELETABLE = "Only draft invoices can be deleted."
MSG_ONLY_DRAFT_POSTABLE = "Only draft invoices can be posted."
MSG_ONLY_POSTED_UNPOSTABLE = "Only posted invoices can be unposted."
MSG_ONLY_POSTED_PAYABLE = "Payments can only be recorded against posted invoices."
MSG_ALREADY_SAVED = "This invoice has already been saved; update it instead."
MSG_NOT_SAVED = "This invoice has not been saved yet."
MSG_ACTION_IN_PROGRESS = "Another action on this invoice is still in progress."
