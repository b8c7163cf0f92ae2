# tests/conftest.py
"""Shared fixtures: Qt application, fake timer, fake HTTP session, in-memory repository, recording prompter."""

import json
from datetime import date, datetime
from decimal import Decimal

import pytest
import requests
from PyQt5.QtCore import QCoreApplication

from voucherdesk.constants import InvoiceType, InvoiceStatus
from voucherdesk.business_logic.errors import ApiServerError
from voucherdesk.business_logic.invoice_draft import InvoiceDraft
from voucherdesk.business_logic.entities.invoice_entity import InvoiceEntity, InvoiceDetails
from voucherdesk.business_logic.entities.party_entity import PartyEntity
from voucherdesk.business_logic.entities.statistics_entity import StatisticsEntity
from voucherdesk.business_logic.entities.form_data_entity import FormDataEntity
from voucherdesk.business_logic.entities.voucher_type_entity import VoucherTypeEntity
from voucherdesk.utils.pagination import Page, PageInfo


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


# ============================================================================
# TIMER / SIGNAL DOUBLES
# ============================================================================

class FakeSignal:
    def __init__(self):
        self._slots = []

    def connect(self, slot):
        self._slots.append(slot)

    def emit(self, *args):
        for slot in list(self._slots):
            slot(*args)


class FakeTimer:
    """QTimer stand-in that only fires when the test says so."""

    def __init__(self):
        self.timeout = FakeSignal()
        self.single_shot = False
        self.interval = None
        self.active = False
        self.start_count = 0

    def setSingleShot(self, single_shot):
        self.single_shot = single_shot

    def setInterval(self, interval):
        self.interval = interval

    def start(self):
        self.active = True
        self.start_count += 1

    def stop(self):
        self.active = False

    def isActive(self):
        return self.active

    def fire(self):
        assert self.active, "timer fired while not running"
        if self.single_shot:
            self.active = False
        self.timeout.emit()


@pytest.fixture
def fake_timer():
    return FakeTimer()


# ============================================================================
# HTTP DOUBLES
# ============================================================================

def make_response(status_code=200, body=None, raw=None):
    response = requests.Response()
    response.status_code = status_code
    if raw is not None:
        response._content = raw.encode("utf-8")
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Records requests and answers them from a queue of responses or exceptions."""

    def __init__(self, *responses):
        self.headers = {}
        self.calls = []
        self.queue = list(responses)
        self.closed = False

    def request(self, method, url, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "timeout": timeout})
        outcome = self.queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()


# ============================================================================
# PROMPTER
# ============================================================================

class RecordingPrompter:
    def __init__(self, confirm_answer=True):
        self.confirm_answer = confirm_answer
        self.confirms = []
        self.errors = []
        self.infos = []

    def confirm(self, title, text):
        self.confirms.append((title, text))
        return self.confirm_answer

    def error(self, title, text):
        self.errors.append((title, text))

    def info(self, title, text):
        self.infos.append((title, text))


@pytest.fixture
def prompter():
    return RecordingPrompter()


# ============================================================================
# IN-MEMORY REPOSITORY
# ============================================================================

def make_invoice(invoice_id=1, status=InvoiceStatus.DRAFT, total="100.00", invoice_type=InvoiceType.SALES, **extra):
    return InvoiceEntity(
        id=invoice_id,
        voucher_type_id=1,
        voucher_date=date(2024, 5, 1),
        party_id=7,
        type=invoice_type,
        status=status,
        voucher_number=f"SV-{invoice_id:04d}",
        total_amount=Decimal(total),
        **extra,
    )


class FakeInvoicesRepository:
    """Implements the InvoicesRepository surface over a dict; `fail_with` makes the next write raise."""

    def __init__(self):
        self.invoices = {}
        self.calls = []
        self.fail_with = None
        self.list_pages = []
        self.list_error = None
        self.statistics = StatisticsEntity(total_invoices=3, draft_invoices=2, posted_invoices=1,
                                           total_sales_amount=Decimal("500.00"))
        self.balance_due = Decimal("100.00")
        self.on_call = None
        self._next_id = 100

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.on_call is not None:
            self.on_call(name)
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

    def call_names(self):
        return [c[0] for c in self.calls]

    def create(self, payload):
        self._record("create", payload)
        self._next_id += 1
        status = InvoiceStatus(payload.get("status", "draft"))
        invoice = make_invoice(self._next_id, status=status)
        self.invoices[invoice.id] = invoice
        return invoice

    def update(self, invoice_id, payload):
        self._record("update", invoice_id, payload)
        invoice = make_invoice(invoice_id, narration=payload.get("narration"))
        self.invoices[invoice_id] = invoice
        return invoice

    def delete(self, invoice_id):
        self._record("delete", invoice_id)
        self.invoices.pop(invoice_id, None)

    def post(self, invoice_id):
        self._record("post", invoice_id)
        invoice = make_invoice(invoice_id, status=InvoiceStatus.POSTED, posted_at=datetime(2024, 5, 2, 9, 30))
        self.invoices[invoice_id] = invoice
        return invoice

    def unpost(self, invoice_id):
        self._record("unpost", invoice_id)
        invoice = make_invoice(invoice_id, status=InvoiceStatus.DRAFT)
        self.invoices[invoice_id] = invoice
        return invoice

    def get_details(self, invoice_id):
        self._record("get_details", invoice_id)
        invoice = self.invoices.get(invoice_id)
        if invoice is None:
            raise ApiServerError("Invoice not found", status_code=404)
        return InvoiceDetails(invoice=invoice, party=PartyEntity(id=7, name="Acme Traders"),
                              balance_due=self.balance_due,
                              total_paid=invoice.total_amount - (self.balance_due or 0))

    def get_form_data(self, invoice_type):
        self._record("get_form_data", invoice_type)
        return FormDataEntity(type=invoice_type, voucher_types=[VoucherTypeEntity(id=1, name=invoice_type.label)])

    def list_invoices(self, params=None):
        self.calls.append(("list_invoices", dict(params or {})))
        if self.list_error is not None:
            raise self.list_error
        if self.list_pages:
            return self.list_pages.pop(0), self.statistics
        return Page(items=[], info=PageInfo()), self.statistics

    def record_payment(self, invoice_id, payload):
        self._record("record_payment", invoice_id, payload)
        return {"payment_id": 55}

    def email_invoice(self, invoice_id, payload):
        self._record("email_invoice", invoice_id, payload)

    def search_parties(self, search, party_type):
        self.calls.append(("search_parties", search, party_type))
        return [PartyEntity(id=7, name="Acme Traders")]

    def search_products(self, search, invoice_type):
        self.calls.append(("search_products", search, invoice_type))
        return []

    def search_ledger_accounts(self, search):
        self.calls.append(("search_ledger_accounts", search))
        return []


@pytest.fixture
def fake_repo():
    return FakeInvoicesRepository()


@pytest.fixture
def valid_draft():
    draft = InvoiceDraft(invoice_type=InvoiceType.SALES, voucher_type_id=1, party_id=7)
    draft.add_item(product_id=3, quantity=2, rate=500, vat_percent=10)
    return draft
