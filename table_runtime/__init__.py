"""Typed in-memory tables with CSV and XLSX codecs.

>>> from table_runtime import CellType, ColumnType, DataTable
>>> table = DataTable([ColumnType("name", CellType.string()), ColumnType("age", CellType.integer())])
>>> table.add_row(["Alice Smith", 34])
>>> table.get_formatted_row(0)
['Alice Smith', '34']
"""

from .csv import CSVProperties
from .data_table import DataTable
from .excel import XLSXProperties
from .exceptions import (
    DataConversionError,
    DataTableError,
    InvalidCellTypeError,
    InvalidRowSizeError,
    MissingRowError,
)
from .models import (
    BooleanFormatter,
    BooleanType,
    CellFormatter,
    CellKind,
    CellType,
    ColumnType,
    Currency,
    CurrencyFormatter,
    CurrencyFormatType,
    DateFormat,
    DateFormatter,
    DateTimeFormat,
    DecimalFormatter,
    IntegerFormat,
    IntegerFormatter,
    StringFormatter,
    TimeFormat,
    TimestampFormatter,
    UUIDFormatter,
    XLSXFormat,
)

__version__ = "0.1.0"

__all__ = [
    "BooleanFormatter",
    "BooleanType",
    "CSVProperties",
    "CellFormatter",
    "CellKind",
    "CellType",
    "ColumnType",
    "Currency",
    "CurrencyFormatType",
    "CurrencyFormatter",
    "DataConversionError",
    "DataTable",
    "DataTableError",
    "DateFormat",
    "DateFormatter",
    "DateTimeFormat",
    "DecimalFormatter",
    "IntegerFormat",
    "IntegerFormatter",
    "InvalidCellTypeError",
    "InvalidRowSizeError",
    "MissingRowError",
    "StringFormatter",
    "TimeFormat",
    "TimestampFormatter",
    "UUIDFormatter",
    "XLSXFormat",
    "XLSXProperties",
]
