# voucherdesk/business_logic/entities/__init__.py
from .base_entity import BaseEntity
from .voucher_type_entity import VoucherTypeEntity
from .party_entity import PartyEntity
from .product_entity import ProductEntity
from .ledger_account_entity import LedgerAccountEntity
from .invoice_item_entity import InvoiceItemEntity
from .additional_charge_entity import AdditionalChargeEntity
from .invoice_entry_entity import InvoiceEntryEntity
from .invoice_entity import InvoiceEntity, InvoiceDetails
from .statistics_entity import StatisticsEntity
from .form_data_entity import FormDataEntity
