"""
Conversion between ORM instances and JSON-compatible dicts.

Used by the JSON file repository and by the backup export/import. The
column type decides the wire format:

    Date / DateTime -> ISO 8601 string
    Numeric         -> decimal string ("2100.00")
    Enum            -> enum value ("partially-paid")
    JSON            -> unchanged
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, Tuple, Type

from sqlalchemy import Date, DateTime, Enum as SQLEnum, Numeric, inspect as sa_inspect
from sqlalchemy.schema import Column

from app.database.base_class import Base


def iter_columns(model: Type[Base]) -> Iterator[Tuple[str, Column]]:
    """(attribute key, column) pairs of a mapped class."""
    for attr in sa_inspect(model).column_attrs:
        yield attr.key, attr.columns[0]


def to_json_value(column: Column, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(column.type, Numeric) and isinstance(value, (int, float)):
        return str(Decimal(str(value)))
    return value


def from_json_value(column: Column, value: Any) -> Any:
    if value is None:
        return None
    column_type = column.type
    if isinstance(column_type, SQLEnum) and column_type.enum_class is not None:
        return column_type.enum_class(value)
    if isinstance(column_type, DateTime):
        return datetime.fromisoformat(value) if isinstance(value, str) else value
    if isinstance(column_type, Date):
        return date.fromisoformat(value) if isinstance(value, str) else value
    if isinstance(column_type, Numeric):
        return Decimal(str(value))
    return value


def model_to_dict(obj: Base) -> Dict[str, Any]:
    return {
        key: to_json_value(column, getattr(obj, key))
        for key, column in iter_columns(type(obj))
    }


def dict_to_model(model: Type[Base], data: Dict[str, Any]) -> Base:
    """Build a detached instance, ignoring unknown keys."""
    kwargs = {
        key: from_json_value(column, data[key])
        for key, column in iter_columns(model)
        if key in data
    }
    return model(**kwargs)


def apply_column_defaults(obj: Base) -> None:
    """
    Fill unset attributes from the Python-side column defaults.

    The SQL backend gets this from the INSERT. The JSON backend calls it
    explicitly so ids and timestamps exist before the row is stored.
    """
    for key, column in iter_columns(type(obj)):
        if getattr(obj, key) is not None or column.default is None:
            continue
        default = column.default
        if default.is_scalar:
            setattr(obj, key, default.arg)
        elif default.is_callable:
            setattr(obj, key, default.arg(None))
