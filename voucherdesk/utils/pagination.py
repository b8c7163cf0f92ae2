# voucherdesk/utils/pagination.py
"""
Turns the paginated list envelopes the API uses into one canonical page.

Accepted shapes:
    [ ...rows ]                                   flat array
    {"data": [...], "pagination": {...}}          or "meta" instead of "pagination"
    {"data": {"data": [...], "meta": {...}}}      nested
    {"data": {"current_page": 1, "data": [...], "last_page": 3, ...}}   paginator
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import logging
logger = logging.getLogger(__name__)

_META_KEYS = ("pagination", "meta")
_PAGINATOR_KEYS = ("current_page", "last_page", "total")


@dataclass
class PageInfo:
    current_page: int = 1
    last_page: int = 1
    per_page: int = 20
    total: int = 0
    from_: int = 0   # "from" on the wire
    to: int = 0

    @property
    def has_next(self) -> bool:
        return self.current_page < self.last_page

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    def to_dict(self) -> Dict[str, int]:
        return {
            "current_page": self.current_page, "last_page": self.last_page,
            "per_page": self.per_page, "total": self.total,
            "from": self.from_, "to": self.to,
        }


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    info: PageInfo = field(default_factory=PageInfo)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _extract_rows(payload: Any, data: Any, rows_key: Optional[str]) -> List[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("data"), list):
            return data["data"]
        if rows_key and isinstance(data.get(rows_key), list):
            return data[rows_key]
    if isinstance(payload, dict) and rows_key and isinstance(payload.get(rows_key), list):
        return payload[rows_key]
    return []


def _find_meta(payload: Any, data: Any) -> Dict[str, Any]:
    if isinstance(data, dict) and any(data.get(k) for k in _PAGINATOR_KEYS):
        return data
    candidates = []
    if isinstance(data, dict):
        candidates.extend(data.get(k) for k in _META_KEYS)
    if isinstance(payload, dict):
        candidates.extend(payload.get(k) for k in _META_KEYS)
    for candidate in candidates:
        if isinstance(candidate, dict):
            return candidate
    return {}


def normalize_page(payload: Any, params: Optional[Dict[str, Any]] = None,
                   rows_key: Optional[str] = None, default_per_page: int = 20) -> Page:
    """
    Normalizes a list response to a Page.

    `params` are the query parameters that were sent; they fill in page and
    per_page when the server omits them. `rows_key` names an alternate array
    key (e.g. "employees") some resources use instead of "data".
    """
    params = params or {}
    data = payload.get("data", payload) if isinstance(payload, dict) else payload
    if data is None:
        data = {}

    rows = _extract_rows(payload, data, rows_key)
    meta = _find_meta(payload, data)

    total = _as_int(meta.get("total"))
    if total is None and isinstance(data, dict):
        total = _as_int(data.get("total"))
    if total is None and isinstance(payload, dict):
        total = _as_int(payload.get("total"))
    if total is None:
        total = len(rows)

    per_page = _as_int(meta.get("per_page")) or _as_int(params.get("per_page")) or len(rows) or default_per_page
    current_page = _as_int(meta.get("current_page")) or _as_int(params.get("page")) or 1

    last_page = _as_int(meta.get("last_page"))
    if last_page is None:
        last_page = max(1, math.ceil(total / (per_page or 1)))

    from_ = _as_int(meta.get("from"))
    if from_ is None:
        from_ = 0 if total == 0 else (current_page - 1) * per_page + 1
    to = _as_int(meta.get("to"))
    if to is None:
        to = 0 if total == 0 else min(total, from_ + len(rows) - 1)

    info = PageInfo(current_page=current_page, last_page=last_page, per_page=per_page,
                    total=total, from_=from_, to=to)
    logger.debug(f"Normalized page: {len(rows)} rows, {info.to_dict()}")
    return Page(items=list(rows), info=info)
