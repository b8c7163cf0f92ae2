# voucherdesk/business_logic/entities/base_entity.py
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class BaseEntity:
    # None until the server assigns one; keyword-only so subclasses can declare required fields
    id: Optional[int] = field(default=None, kw_only=True)
