# voucherdesk/data_access/base_repository.py

import functools
from typing import Callable, Generic, TypeVar, Type, List, Optional, Dict, Any, Union, TYPE_CHECKING

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from dataclasses import fields, is_dataclass, MISSING

from voucherdesk.data_access.api_client import ApiClient
from voucherdesk.business_logic.errors import ApiServerError
from voucherdesk.constants import MSG_UNREADABLE_RESPONSE
from voucherdesk.utils.date_converter import parse_api_date, parse_api_datetime, to_api_date

import logging

if TYPE_CHECKING:
    from ..business_logic.entities.base_entity import BaseEntity

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='BaseEntity')
E = TypeVar('E')


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drops None and empty-string values so the server only sees filters that were set."""
    if not params:
        return {}
    cleaned = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, (date, datetime)):
            value = to_api_date(value)
        cleaned[key] = value
    return cleaned


def to_wire_value(value: Any) -> Any:
    """Converts Decimal/Enum/date values (recursively) into plain JSON types."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return to_api_date(value)
    if isinstance(value, dict):
        return {k: to_wire_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire_value(v) for v in value]
    return value


def unwrap_data(body: Any) -> Any:
    """Returns body["data"] for enveloped responses, the body itself otherwise."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _resolve_optional(field_type: Any) -> Any:
    if getattr(field_type, '__origin__', None) is Union:
        possible_types = [arg for arg in getattr(field_type, '__args__', []) if arg is not type(None)]
        if possible_types:
            return possible_types[0]
    return field_type


def _is_optional(field_type: Any) -> bool:
    return getattr(field_type, '__origin__', None) is Union and type(None) in getattr(field_type, '__args__', [])


def entity_from_dict(model_type: Type[E], row: Dict[str, Any]) -> E:
    """
    Builds a dataclass instance from an API row.

    Only keys that match init fields are used; values are coerced to the
    declared field types (Enum, Decimal, date, datetime, bool). Nested lists
    and objects are left to the caller.
    """
    if not is_dataclass(model_type):
        raise TypeError(f"{model_type!r} is not a dataclass")

    entity_data: Dict[str, Any] = {}
    for f in fields(model_type):
        if not f.init:
            continue

        field_name = f.name
        value = row.get(field_name)
        has_default = f.default is not MISSING or f.default_factory is not MISSING

        if value is None:
            if not has_default and not _is_optional(f.type):
                raise ValueError(
                    f"API contract error: missing value for required field '{field_name}' "
                    f"of {model_type.__name__} in row: {row}"
                )
            if not has_default:
                entity_data[field_name] = None
            continue

        actual_type = _resolve_optional(f.type)
        try:
            is_enum = isinstance(actual_type, type) and issubclass(actual_type, Enum)
            if is_enum:
                entity_data[field_name] = actual_type(value)
            elif actual_type == Decimal:
                entity_data[field_name] = Decimal(str(value))
            elif actual_type == datetime:
                parsed_dt = parse_api_datetime(value)
                if parsed_dt is None:
                    raise ValueError(f"unreadable datetime {value!r}")
                entity_data[field_name] = parsed_dt
            elif actual_type == date:
                parsed = parse_api_date(value)
                if parsed is None:
                    raise ValueError(f"unreadable date {value!r}")
                entity_data[field_name] = parsed
            elif actual_type == bool:
                entity_data[field_name] = bool(value)
            elif actual_type == int and isinstance(value, str) and value.strip().lstrip("-").isdigit():
                entity_data[field_name] = int(value)
            else:
                entity_data[field_name] = value
        except (ValueError, TypeError, InvalidOperation) as e:
            logger.warning(f"Type conversion failed for field '{field_name}' with value '{value}'. Error: {e}")
            if not has_default:
                if not _is_optional(f.type):
                    raise ValueError(f"API contract error: bad value for '{field_name}' of {model_type.__name__}: {value!r}") from e
                entity_data[field_name] = None

    try:
        return model_type(**entity_data)
    except TypeError as e:
        logger.error(f"Failed to instantiate {model_type.__name__}. Error: {e}. Data passed: {entity_data}")
        raise


class BaseRepository(Generic[T]):
    def __init__(self, api_client: ApiClient, model_type: Type[T], resource_path: str):
        self.api_client = api_client
        self.model_type = model_type
        self._resource_path = resource_path.rstrip("/")
        logger.debug(f"BaseRepository for {self._resource_path} initialized ({model_type.__name__}).")

    def _path(self, *parts: Any) -> str:
        suffix = "/".join(str(p).strip("/") for p in parts if p not in (None, ""))
        return f"{self._resource_path}/{suffix}" if suffix else self._resource_path

    def _entity_from_row(self, row: Dict[str, Any]) -> T:
        return entity_from_dict(self.model_type, row)

    def _entities_from_rows(self, rows: Any, model_type: Optional[Type[E]] = None) -> List[Any]:
        if not isinstance(rows, list):
            return []
        target = model_type or self.model_type
        entities = []
        for row in rows:
            if not isinstance(row, dict):
                logger.debug(f"Skipping non-object row in {self._resource_path}: {row!r}")
                continue
            entities.append(entity_from_dict(target, row) if model_type else self._entity_from_row(row))
        return entities


def translates_contract_errors(method: Callable) -> Callable:
    """Reports a response body that cannot be mapped onto the entities as an ApiServerError."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (ValueError, TypeError) as e:
            logger.error(f"{method.__name__}: unreadable response from {self._resource_path}: {e}")
            raise ApiServerError(MSG_UNREADABLE_RESPONSE) from e
    return wrapper
