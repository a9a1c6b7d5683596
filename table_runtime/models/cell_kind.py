from __future__ import annotations

import numbers
import uuid
from collections.abc import Callable
from datetime import date, datetime
from enum import Enum
from typing import Any

from .currency import Currency

"""Closed set of value kinds a DataTable column can hold."""

__all__ = [
    "CellKind",
    "INT64_MAX",
    "INT64_MIN",
]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class CellKind(Enum):
    """Value kind of a column.

    Runtime representation per kind:

    - STRING: ``str``
    - INTEGER: integral number (not ``bool``) in the signed 64-bit range
    - DECIMAL: ``float``
    - BOOLEAN: ``bool``
    - UUID: ``uuid.UUID``
    - DATE: ``datetime.date`` (not ``datetime.datetime``)
    - TIMESTAMP: timezone-aware ``datetime.datetime``
    - CURRENCY: :class:`~table_runtime.models.currency.Currency`
    """
    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    UUID = "uuid"
    DATE = "date"
    TIMESTAMP = "timestamp"
    CURRENCY = "currency"

    @property
    def predicate(self) -> Callable[[Any], bool]:
        return _PREDICATES[self]

    def accepts(self, value: Any) -> bool:
        return _PREDICATES[self](value)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        return False
    return INT64_MIN <= int(value) <= INT64_MAX


def _is_decimal(value: Any) -> bool:
    return isinstance(value, float)


def _is_date(value: Any) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, datetime) and value.utcoffset() is not None


_PREDICATES: dict[CellKind, Callable[[Any], bool]] = {
    CellKind.STRING: lambda v: isinstance(v, str),
    CellKind.INTEGER: _is_integer,
    CellKind.DECIMAL: _is_decimal,
    CellKind.BOOLEAN: lambda v: isinstance(v, bool),
    CellKind.UUID: lambda v: isinstance(v, uuid.UUID),
    CellKind.DATE: _is_date,
    CellKind.TIMESTAMP: _is_timestamp,
    CellKind.CURRENCY: lambda v: isinstance(v, Currency),
}
