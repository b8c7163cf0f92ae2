# voucherdesk/utils/date_converter.py

from datetime import date, datetime
from typing import Any, Optional

from voucherdesk.constants import DATE_FORMAT, DATETIME_FORMAT


def to_api_date(value: Optional[date]) -> Optional[str]:
    """Formats a date (or datetime) as the YYYY-MM-DD string the API expects."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DATE_FORMAT)


def parse_api_date(value: Any) -> Optional[date]:
    """Reads "YYYY-MM-DD" or a full ISO timestamp; anything unreadable gives None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value[:10], DATE_FORMAT).date()
    except ValueError:
        return None


def parse_api_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        try:
            return datetime.strptime(text[:19], DATETIME_FORMAT)
        except ValueError:
            return None
