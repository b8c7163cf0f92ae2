# tests/test_invoice_manager.py

from decimal import Decimal

import pytest

from voucherdesk.constants import InvoiceType, InvoiceStatus
from voucherdesk.business_logic.invoice_manager import InvoiceManager
from voucherdesk.business_logic.errors import InvoiceStateError, InvoiceValidationError, ApiServerError
from voucherdesk.business_logic.entities.form_data_entity import FormDataEntity
from voucherdesk.business_logic.entities.voucher_type_entity import VoucherTypeEntity

from conftest import make_invoice


@pytest.fixture
def manager(fake_repo):
    return InvoiceManager(fake_repo)


class TestTransitionRules:

    @pytest.mark.parametrize("status, action, allowed", [
        (InvoiceStatus.DRAFT, "update", True),
        (InvoiceStatus.DRAFT, "delete", True),
        (InvoiceStatus.DRAFT, "post", True),
        (InvoiceStatus.DRAFT, "unpost", False),
        (InvoiceStatus.POSTED, "update", False),
        (InvoiceStatus.POSTED, "delete", False),
        (InvoiceStatus.POSTED, "post", False),
        (InvoiceStatus.POSTED, "unpost", True),
        (None, "post", False),
    ])
    def test_can_transition(self, manager, status, action, allowed):
        assert manager.can_transition(status, action) is allowed

    @pytest.mark.parametrize("status, action", [
        (InvoiceStatus.POSTED, "post"),
        (InvoiceStatus.POSTED, "delete"),
        (InvoiceStatus.DRAFT, "unpost"),
    ])
    def test_refused_transitions_never_reach_the_server(self, manager, fake_repo, status, action):
        invoice = make_invoice(5, status=status)
        operation = {"post": manager.post_invoice, "delete": manager.delete_invoice,
                     "unpost": manager.unpost_invoice}[action]
        with pytest.raises(InvoiceStateError):
            operation(invoice)
        assert fake_repo.calls == []
        assert invoice.status == status


class TestCreateAndUpdate:

    def test_create_draft(self, manager, fake_repo, valid_draft):
        created = manager.create_invoice(valid_draft)
        name, payload = fake_repo.calls[0]
        assert name == "create"
        assert payload["status"] == "draft"
        assert created.status == InvoiceStatus.DRAFT
        assert valid_draft.invoice_id == created.id
        assert valid_draft.status == InvoiceStatus.DRAFT

    def test_create_posted(self, manager, fake_repo, valid_draft):
        created = manager.create_invoice(valid_draft, InvoiceStatus.POSTED)
        assert fake_repo.calls[0][1]["status"] == "posted"
        assert created.status == InvoiceStatus.POSTED

    def test_invalid_draft_is_not_sent(self, manager, fake_repo):
        from voucherdesk.business_logic.invoice_draft import InvoiceDraft
        with pytest.raises(InvoiceValidationError):
            manager.create_invoice(InvoiceDraft(voucher_type_id=1, party_id=7))
        assert fake_repo.calls == []

    def test_failed_create_leaves_draft_unsaved(self, manager, fake_repo, valid_draft):
        fake_repo.fail_with = ApiServerError("Voucher type inactive", status_code=422)
        with pytest.raises(ApiServerError):
            manager.create_invoice(valid_draft)
        assert valid_draft.is_new
        assert valid_draft.status is None

    def test_saved_draft_cannot_be_created_again(self, manager, valid_draft):
        manager.create_invoice(valid_draft)
        with pytest.raises(InvoiceStateError):
            manager.create_invoice(valid_draft)

    def test_update_omits_status(self, manager, fake_repo, valid_draft):
        manager.create_invoice(valid_draft)
        valid_draft.narration = "Revised"
        updated = manager.update_invoice(valid_draft)
        name, invoice_id, payload = fake_repo.calls[-1]
        assert (name, invoice_id) == ("update", valid_draft.invoice_id)
        assert "status" not in payload
        assert updated.narration == "Revised"

    def test_update_of_unsaved_draft(self, manager, valid_draft):
        with pytest.raises(InvoiceStateError):
            manager.update_invoice(valid_draft)

    def test_open_for_edit_refuses_posted(self, manager, fake_repo):
        fake_repo.invoices[5] = make_invoice(5, status=InvoiceStatus.POSTED)
        with pytest.raises(InvoiceStateError):
            manager.open_for_edit(5)

    def test_open_for_edit(self, manager, fake_repo):
        fake_repo.invoices[5] = make_invoice(5)
        draft = manager.open_for_edit(5)
        assert draft.invoice_id == 5
        assert draft.party_name == "Acme Traders"
        assert not draft.is_new

    def test_new_draft_preselects_voucher_type(self, manager):
        form_data = FormDataEntity(type=InvoiceType.PURCHASE, voucher_types=[
            VoucherTypeEntity(id=1, name="Sales"), VoucherTypeEntity(id=2, name="purchase"),
        ])
        draft = manager.new_draft(InvoiceType.PURCHASE, form_data)
        assert draft.voucher_type_id == 2
        assert draft.invoice_type == InvoiceType.PURCHASE
        assert manager.new_draft(InvoiceType.SALES, FormDataEntity(type=InvoiceType.SALES)).voucher_type_id is None


class TestPostUnpostDelete:

    def test_post_returns_the_server_invoice(self, manager, fake_repo):
        invoice = make_invoice(5)
        posted = manager.post_invoice(invoice)
        assert posted.status == InvoiceStatus.POSTED
        assert posted.posted_at is not None
        # the caller's object is replaced, not changed
        assert invoice.status == InvoiceStatus.DRAFT

    def test_post_refetches_when_server_returns_nothing(self, manager, fake_repo):
        fake_repo.invoices[5] = make_invoice(5, status=InvoiceStatus.POSTED)
        fake_repo.post = lambda invoice_id: fake_repo.calls.append(("post", invoice_id))
        posted = manager.post_invoice(make_invoice(5))
        assert fake_repo.call_names() == ["post", "get_details"]
        assert posted.status == InvoiceStatus.POSTED

    def test_unpost(self, manager):
        reverted = manager.unpost_invoice(make_invoice(5, status=InvoiceStatus.POSTED))
        assert reverted.status == InvoiceStatus.DRAFT

    def test_delete(self, manager, fake_repo):
        manager.delete_invoice(make_invoice(5))
        assert fake_repo.calls == [("delete", 5)]


class TestPaymentsAndEmail:

    def _details(self, fake_repo, status=InvoiceStatus.POSTED):
        fake_repo.invoices[5] = make_invoice(5, status=status)
        details = fake_repo.get_details(5)
        fake_repo.calls.clear()
        return details

    def test_record_payment(self, manager, fake_repo):
        details = self._details(fake_repo)
        result = manager.record_payment(details, "40", bank_account_id=2, reference="CHQ-1")
        name, invoice_id, payload = fake_repo.calls[0]
        assert (name, invoice_id) == ("record_payment", 5)
        assert payload["amount"] == Decimal("40")
        assert payload["bank_account_id"] == 2
        assert payload["date"] is not None
        assert result == {"payment_id": 55}

    @pytest.mark.parametrize("amount, bank, rule", [
        (0, 2, "payment_amount"),
        ("abc", 2, "payment_amount"),
        ("100.01", 2, "payment_amount"),
        (10, None, "bank_account"),
    ])
    def test_payment_rules(self, manager, fake_repo, amount, bank, rule):
        details = self._details(fake_repo)
        with pytest.raises(InvoiceValidationError) as excinfo:
            manager.record_payment(details, amount, bank)
        assert excinfo.value.rule == rule
        assert fake_repo.calls == []

    def test_payment_without_known_balance_is_left_to_the_server(self, manager, fake_repo):
        fake_repo.balance_due = None
        fake_repo.invoices[5] = make_invoice(5, status=InvoiceStatus.POSTED)
        details = fake_repo.get_details(5)
        fake_repo.calls.clear()
        manager.record_payment(details, "500", bank_account_id=2)
        assert fake_repo.call_names() == ["record_payment"]

    def test_payment_against_draft(self, manager, fake_repo):
        details = self._details(fake_repo, status=InvoiceStatus.DRAFT)
        with pytest.raises(InvoiceStateError):
            manager.record_payment(details, 10, 2)

    def test_email_requires_recipient(self, manager, fake_repo):
        with pytest.raises(InvoiceValidationError):
            manager.email_invoice(5, "  ")
        manager.email_invoice(5, " buyer@acme.test ", subject="Invoice SV-0005")
        name, invoice_id, payload = fake_repo.calls[0]
        assert payload["to"] == "buyer@acme.test"
        assert payload["attach_pdf"] is True
