"""Cell type system: value kinds, formatters, display formats and currencies."""

from .cell_kind import CellKind
from .cell_type import CellType, ColumnType
from .currency import Currency
from .data_format import DateFormat, DateTimeFormat, IntegerFormat, TimeFormat, XLSXFormat
from .formatters import (
    BooleanFormatter,
    BooleanType,
    CellFormatter,
    CurrencyFormatter,
    CurrencyFormatType,
    DateFormatter,
    DecimalFormatter,
    IntegerFormatter,
    StringFormatter,
    TimestampFormatter,
    UUIDFormatter,
)

__all__ = [
    # Schema
    "CellKind",
    "CellType",
    "ColumnType",
    "Currency",
    # Formatters
    "BooleanFormatter",
    "BooleanType",
    "CellFormatter",
    "CurrencyFormatter",
    "CurrencyFormatType",
    "DateFormatter",
    "DecimalFormatter",
    "IntegerFormatter",
    "StringFormatter",
    "TimestampFormatter",
    "UUIDFormatter",
    # Display formats
    "DateFormat",
    "DateTimeFormat",
    "IntegerFormat",
    "TimeFormat",
    "XLSXFormat",
]
