# voucherdesk/business_logic/errors.py

from typing import Any, Dict, List, Optional


class InvoiceError(Exception):
    """Base class for errors raised by the invoice core before any request is made."""


class InvoiceValidationError(InvoiceError, ValueError):
    """The draft breaks a pre-submit rule; `rule` names the first one that failed."""

    def __init__(self, rule: str, message: str):
        super().__init__(message)
        self.rule = rule
        self.message = message


class InvoiceStateError(InvoiceError):
    """The requested transition is not allowed from the invoice's current status."""


class InvoiceBusyError(InvoiceError):
    """Another lifecycle request for the same invoice is still outstanding."""


class ApiError(Exception):
    """Base class for failures of a remote call."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "")
        self.message = message

    def user_message(self, fallback: str) -> str:
        return self.message or fallback


class ApiTransportError(ApiError):
    """The server could not be reached (connection refused, DNS, timeout, ...)."""


class ApiServerError(ApiError):
    """The server answered with an error status or `success: false`."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None,
                 errors: Optional[Dict[str, List[str]]] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or {}
        self.payload = payload

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message or 'server error'}"
