# voucherdesk/data_access/invoices_repository.py

from typing import Dict, Any, Optional, List, Tuple

from voucherdesk.data_access.base_repository import (
    BaseRepository, clean_params, entity_from_dict, to_wire_value, unwrap_data, translates_contract_errors,
)
from voucherdesk.data_access.api_client import ApiClient
from voucherdesk.business_logic.errors import ApiServerError
from voucherdesk.business_logic.invoice_calculator import compute_item_amount, to_decimal
from voucherdesk.business_logic.entities.invoice_entity import InvoiceEntity, InvoiceDetails
from voucherdesk.business_logic.entities.invoice_item_entity import InvoiceItemEntity
from voucherdesk.business_logic.entities.additional_charge_entity import AdditionalChargeEntity
from voucherdesk.business_logic.entities.invoice_entry_entity import InvoiceEntryEntity
from voucherdesk.business_logic.entities.party_entity import PartyEntity
from voucherdesk.business_logic.entities.product_entity import ProductEntity
from voucherdesk.business_logic.entities.ledger_account_entity import LedgerAccountEntity
from voucherdesk.business_logic.entities.voucher_type_entity import VoucherTypeEntity
from voucherdesk.business_logic.entities.statistics_entity import StatisticsEntity
from voucherdesk.business_logic.entities.form_data_entity import FormDataEntity
from voucherdesk.constants import (
    InvoiceType, PartyType, INVOICES_PATH, INVOICE_FORM_DATA_PATH, LIST_FILTER_KEYS,
    SEARCH_CUSTOMERS_PATH, SEARCH_PRODUCTS_PATH, SEARCH_LEDGER_ACCOUNTS_PATH,
)
from voucherdesk.config import DEFAULT_PER_PAGE
from voucherdesk.utils.pagination import Page, normalize_page
import logging

logger = logging.getLogger(__name__)

# The server is not consistent about item field names; first match wins.
ITEM_FIELD_ALIASES = {
    "discount_percent": ("discount_percent", "discount", "discount_percentage"),
    "vat_percent": ("vat_percent", "vat_rate", "tax_percentage"),
    "amount": ("amount", "total"),
}


def _first_present(row: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def normalize_item_row(row: Dict[str, Any]) -> InvoiceItemEntity:
    """Maps a server item row, whatever names it uses, onto the canonical InvoiceItemEntity."""
    product = row.get("product") if isinstance(row.get("product"), dict) else {}
    product_id = row.get("product_id")
    if product_id is None:
        product_id = product.get("id")

    quantity = to_decimal(row.get("quantity"))
    rate = to_decimal(row.get("rate"))
    discount = to_decimal(_first_present(row, ITEM_FIELD_ALIASES["discount_percent"]))
    vat = to_decimal(_first_present(row, ITEM_FIELD_ALIASES["vat_percent"]))
    raw_amount = _first_present(row, ITEM_FIELD_ALIASES["amount"])
    amount = to_decimal(raw_amount) if raw_amount is not None else compute_item_amount(quantity, rate, discount, vat)

    return InvoiceItemEntity(
        id=row.get("id"),
        product_id=product_id,
        quantity=quantity,
        rate=rate,
        discount_percent=discount,
        vat_percent=vat,
        description=row.get("description"),
        amount=amount,
        product_name=row.get("product_name") or product.get("name"),
        unit=row.get("unit") or product.get("unit"),
    )


def normalize_charge_row(row: Dict[str, Any]) -> AdditionalChargeEntity:
    account = row.get("ledger_account") if isinstance(row.get("ledger_account"), dict) else {}
    return AdditionalChargeEntity(
        id=row.get("id"),
        ledger_account_id=row.get("ledger_account_id") if row.get("ledger_account_id") is not None else account.get("id"),
        amount=to_decimal(row.get("amount")),
        description=row.get("description") or row.get("narration") or "",
        ledger_account_name=row.get("ledger_account_name") or account.get("name"),
    )


class InvoicesRepository(BaseRepository[InvoiceEntity]):
    """One method per endpoint of the /accounting/invoices resource."""

    def __init__(self, api_client: ApiClient):
        super().__init__(api_client=api_client,
                         model_type=InvoiceEntity,
                         resource_path=INVOICES_PATH)

    def _entity_from_row(self, row: Dict[str, Any]) -> InvoiceEntity:
        if row is None:
            raise ValueError("Input row cannot be None for InvoiceEntity")
        invoice = entity_from_dict(InvoiceEntity, row)
        invoice.items = [normalize_item_row(r) for r in row.get("items") or [] if isinstance(r, dict)]
        invoice.additional_charges = [normalize_charge_row(r) for r in row.get("additional_charges") or [] if isinstance(r, dict)]
        invoice.entries = self._entities_from_rows(row.get("entries") or [], InvoiceEntryEntity)

        party = row.get("party") if isinstance(row.get("party"), dict) else {}
        voucher_type = row.get("voucher_type") if isinstance(row.get("voucher_type"), dict) else {}
        invoice.party_name = row.get("party_name") or party.get("name")
        invoice.voucher_type_name = row.get("voucher_type_name") or voucher_type.get("name")
        return invoice

    def _invoice_from_payload(self, data: Any) -> Optional[InvoiceEntity]:
        """Mutation endpoints answer with the invoice, sometimes wrapped as {"invoice": {...}}."""
        if isinstance(data, dict) and isinstance(data.get("invoice"), dict):
            data = data["invoice"]
        if not isinstance(data, dict) or data.get("id") is None:
            return None
        return self._entity_from_row(data)

    # --- reads ---

    @translates_contract_errors
    def get_form_data(self, invoice_type: InvoiceType) -> FormDataEntity:
        body = self.api_client.get(INVOICE_FORM_DATA_PATH, params={"type": invoice_type.value})
        data = body if isinstance(body, dict) and "voucher_types" in body else unwrap_data(body)
        if not isinstance(data, dict):
            raise ApiServerError("API returned empty form data")

        form_data = FormDataEntity(
            type=invoice_type,
            voucher_types=self._entities_from_rows(data.get("voucher_types") or [], VoucherTypeEntity),
            parties=self._entities_from_rows(data.get("parties") or [], PartyEntity),
            products=self._entities_from_rows(data.get("products") or [], ProductEntity),
            ledger_accounts=self._entities_from_rows(data.get("ledger_accounts") or [], LedgerAccountEntity),
        )
        logger.debug(f"Form data for {invoice_type.value}: {len(form_data.voucher_types)} voucher types, "
                     f"{len(form_data.parties)} parties, {len(form_data.products)} products, "
                     f"{len(form_data.ledger_accounts)} ledger accounts")
        return form_data

    @translates_contract_errors
    def list_invoices(self, params: Optional[Dict[str, Any]] = None) -> Tuple[Page, Optional[StatisticsEntity]]:
        params = params or {}
        ignored = set(params) - set(LIST_FILTER_KEYS)
        if ignored:
            logger.debug(f"Ignoring unsupported list parameters: {sorted(ignored)}")
        query = clean_params({k: v for k, v in params.items() if k in LIST_FILTER_KEYS})
        body = self.api_client.get(INVOICES_PATH, params=query)
        page = normalize_page(body, params=query, default_per_page=DEFAULT_PER_PAGE)
        page.items = self._entities_from_rows(page.items)

        stats_row = None
        if isinstance(body, dict):
            stats_row = body.get("statistics")
            if stats_row is None and isinstance(body.get("data"), dict):
                stats_row = body["data"].get("statistics")
        statistics = entity_from_dict(StatisticsEntity, stats_row) if isinstance(stats_row, dict) else None
        return page, statistics

    @translates_contract_errors
    def get_details(self, invoice_id: int) -> InvoiceDetails:
        body = self.api_client.get(self._path(invoice_id))
        result = unwrap_data(body)
        if not isinstance(result, dict) or not isinstance(result.get("invoice"), dict):
            raise ApiServerError("Invalid invoice payload received from server")

        party_row = result.get("party")
        return InvoiceDetails(
            invoice=self._entity_from_row(result["invoice"]),
            party=entity_from_dict(PartyEntity, party_row) if isinstance(party_row, dict) and party_row.get("name") else None,
            balance_due=to_decimal(result["balance_due"]) if result.get("balance_due") is not None else None,
            total_paid=to_decimal(result.get("total_paid")),
        )

    # --- writes ---

    @translates_contract_errors
    def create(self, payload: Dict[str, Any]) -> Optional[InvoiceEntity]:
        body = self.api_client.post(INVOICES_PATH, json=to_wire_value(payload))
        return self._invoice_from_payload(unwrap_data(body))

    @translates_contract_errors
    def update(self, invoice_id: int, payload: Dict[str, Any]) -> Optional[InvoiceEntity]:
        body = self.api_client.put(self._path(invoice_id), json=to_wire_value(payload))
        return self._invoice_from_payload(unwrap_data(body))

    def delete(self, invoice_id: int) -> None:
        self.api_client.delete(self._path(invoice_id))

    @translates_contract_errors
    def post(self, invoice_id: int) -> Optional[InvoiceEntity]:
        body = self.api_client.post(self._path(invoice_id, "post"))
        return self._invoice_from_payload(unwrap_data(body))

    @translates_contract_errors
    def unpost(self, invoice_id: int) -> Optional[InvoiceEntity]:
        body = self.api_client.post(self._path(invoice_id, "unpost"))
        return self._invoice_from_payload(unwrap_data(body))

    def record_payment(self, invoice_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = self.api_client.post(self._path(invoice_id, "record-payment"), json=to_wire_value(clean_params(payload)))
        data = unwrap_data(body)
        return data if isinstance(data, dict) else {}

    def email_invoice(self, invoice_id: int, payload: Dict[str, Any]) -> None:
        self.api_client.post(self._path(invoice_id, "email"), json=to_wire_value(clean_params(payload)))

    # --- directory lookups ---

    @translates_contract_errors
    def search_parties(self, search: str, party_type: PartyType) -> List[PartyEntity]:
        body = self.api_client.get(SEARCH_CUSTOMERS_PATH, params={"search": search, "type": party_type.value})
        return self._entities_from_rows(unwrap_data(body), PartyEntity)

    @translates_contract_errors
    def search_products(self, search: str, invoice_type: InvoiceType) -> List[ProductEntity]:
        body = self.api_client.get(SEARCH_PRODUCTS_PATH, params={"search": search, "type": invoice_type.value})
        return self._entities_from_rows(unwrap_data(body), ProductEntity)

    @translates_contract_errors
    def search_ledger_accounts(self, search: str) -> List[LedgerAccountEntity]:
        body = self.api_client.get(SEARCH_LEDGER_ACCOUNTS_PATH, params={"search": search})
        return self._entities_from_rows(unwrap_data(body), LedgerAccountEntity)
