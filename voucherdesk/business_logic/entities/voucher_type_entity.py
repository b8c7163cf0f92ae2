# voucherdesk/business_logic/entities/voucher_type_entity.py
from dataclasses import dataclass, field
from typing import Optional
from .base_entity import BaseEntity
from voucherdesk.constants import InventoryEffect

@dataclass
class VoucherTypeEntity(BaseEntity):
    name: str
    code: Optional[str] = field(default=None)
    abbreviation: Optional[str] = field(default=None)
    category: Optional[str] = field(default=None)
    prefix: Optional[str] = field(default=None)
    inventory_effect: Optional[InventoryEffect] = field(default=None)
    is_active: bool = field(default=True)
