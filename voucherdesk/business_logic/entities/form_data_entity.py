# voucherdesk/business_logic/entities/form_data_entity.py
from dataclasses import dataclass, field
from typing import List, Optional
from .voucher_type_entity import VoucherTypeEntity
from .party_entity import PartyEntity
from .product_entity import ProductEntity
from .ledger_account_entity import LedgerAccountEntity
from voucherdesk.constants import InvoiceType

@dataclass
class FormDataEntity:
    type: InvoiceType
    voucher_types: List[VoucherTypeEntity] = field(default_factory=list)
    parties: List[PartyEntity] = field(default_factory=list)
    products: List[ProductEntity] = field(default_factory=list)
    ledger_accounts: List[LedgerAccountEntity] = field(default_factory=list)

    def default_voucher_type(self) -> Optional[VoucherTypeEntity]:
        """The voucher type named after the invoice type ("Sales"/"Purchase"), else the first one."""
        if not self.voucher_types:
            return None
        wanted = self.type.label.lower()
        for voucher_type in self.voucher_types:
            if voucher_type.name and voucher_type.name.lower() == wanted:
                return voucher_type
        return self.voucher_types[0]
