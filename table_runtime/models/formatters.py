from __future__ import annotations

import re
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from ..exceptions import DataConversionError
from .cell_kind import INT64_MAX, INT64_MIN, CellKind
from .currency import (
    Currency,
    currencies_by_display_name,
    currencies_by_numeric_code,
    currencies_by_symbol,
)
from .data_format import DEFAULT_DATE_FORMAT, DEFAULT_DATE_TIME_FORMAT, XLSXFormat

"""Cell formatters: per-column conversion between typed values and text.

A formatter is a pure strategy object chosen when a column is defined. It
never touches table state. ``parse`` raises DataConversionError on malformed
text and ``render`` raises DataConversionError when handed a value of the
wrong runtime kind, even though the table validates kinds before rendering.

Text forms are locale independent (ISO 8601 for dates and instants). The
``xlsx_format`` attribute is only used by the spreadsheet codec.
"""

__all__ = [
    "BooleanFormatter",
    "BooleanType",
    "CellFormatter",
    "CurrencyFormatType",
    "CurrencyFormatter",
    "DateFormatter",
    "DecimalFormatter",
    "IntegerFormatter",
    "StringFormatter",
    "TimestampFormatter",
    "UUIDFormatter",
    "default_formatter",
]

_INTEGER_RE = re.compile(r"[+-]?\d+")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class CellFormatter(ABC):
    """Base strategy for converting a cell value to and from text."""

    kind: CellKind
    xlsx_format: XLSXFormat = XLSXFormat.default()

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Convert ``text`` to the runtime value of this formatter's kind."""

    @abstractmethod
    def render(self, value: Any) -> str:
        """Convert a value of this formatter's kind to text."""

    def _check_kind(self, value: Any) -> None:
        if not self.kind.accepts(value):
            raise DataConversionError(
                f"Given value {value!r} is not of type {self.kind.name}."
            )

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(vars(self).items()))))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StringFormatter(CellFormatter):
    """Identity conversion. Subclass to apply custom formatting."""

    kind = CellKind.STRING

    def parse(self, text: str) -> Any:
        return text

    def render(self, value: Any) -> str:
        self._check_kind(value)
        return value


class IntegerFormatter(CellFormatter):
    kind = CellKind.INTEGER
    xlsx_format = XLSXFormat.integer()

    def parse(self, text: str) -> Any:
        stripped = text.strip()
        if not _INTEGER_RE.fullmatch(stripped):
            raise DataConversionError(f"Given value {text} is not a valid integer.")
        value = int(stripped)
        if not INT64_MIN <= value <= INT64_MAX:
            raise DataConversionError(f"Given value {text} is out of the 64-bit integer range.")
        return value

    def render(self, value: Any) -> str:
        self._check_kind(value)
        return str(int(value))


class DecimalFormatter(CellFormatter):
    """Renders decimals with a fixed number of fractional digits."""

    kind = CellKind.DECIMAL

    def __init__(self, precision: int = 4) -> None:
        self.precision = precision
        self.xlsx_format = XLSXFormat.decimal(precision)

    def parse(self, text: str) -> Any:
        try:
            value = float(text)
        except ValueError as e:
            raise DataConversionError(f"Given value {text} is not a valid decimal number.") from e
        if value != value or value in (float("inf"), float("-inf")):
            raise DataConversionError(f"Given value {text} is not a finite decimal number.")
        return value

    def render(self, value: Any) -> str:
        self._check_kind(value)
        return f"{value:.{self.precision}f}"

    def __repr__(self) -> str:
        return f"DecimalFormatter(precision={self.precision})"


class BooleanType(Enum):
    """Textual encodings of booleans as (true, false) pairs."""
    BINARY = ("1", "0")
    LITERAL_LOWERCASE = ("true", "false")
    LITERAL_UPPERCASE = ("TRUE", "FALSE")
    LITERAL_PASCALCASE = ("True", "False")
    UPPERCASE_CHARACTER = ("T", "F")
    LOWERCASE_CHARACTER = ("t", "f")

    @property
    def for_true(self) -> str:
        return self.value[0]

    @property
    def for_false(self) -> str:
        return self.value[1]


_BOOLEAN_LITERALS: dict[str, bool] = {
    **{bt.for_true: True for bt in BooleanType},
    **{bt.for_false: False for bt in BooleanType},
}


class BooleanFormatter(CellFormatter):
    """Renders with the configured encoding, parses any known encoding."""

    kind = CellKind.BOOLEAN

    def __init__(self, boolean_type: BooleanType = BooleanType.LITERAL_LOWERCASE) -> None:
        self.boolean_type = boolean_type

    def parse(self, text: str) -> Any:
        try:
            return _BOOLEAN_LITERALS[text]
        except KeyError:
            raise DataConversionError(f"{text} is not a valid Boolean representation.") from None

    def render(self, value: Any) -> str:
        self._check_kind(value)
        return self.boolean_type.for_true if value else self.boolean_type.for_false

    def __repr__(self) -> str:
        return f"BooleanFormatter({self.boolean_type.name})"


class UUIDFormatter(CellFormatter):
    kind = CellKind.UUID

    def parse(self, text: str) -> Any:
        try:
            return uuid.UUID(text)
        except ValueError as e:
            raise DataConversionError(f"Given string {text} is not a valid UUID.") from e

    def render(self, value: Any) -> str:
        self._check_kind(value)
        return str(value)


class DateFormatter(CellFormatter):
    """ISO 8601 calendar date in text; ``xlsx_format`` for workbooks."""

    kind = CellKind.DATE

    def __init__(self, xlsx_format: XLSXFormat = DEFAULT_DATE_FORMAT) -> None:
        self.xlsx_format = xlsx_format

    def parse(self, text: str) -> Any:
        if not _DATE_RE.fullmatch(text):
            raise DataConversionError(f"Given value {text} is not a valid Date.")
        try:
            return date.fromisoformat(text)
        except ValueError as e:
            raise DataConversionError(f"Given value {text} is not a valid Date.") from e

    def render(self, value: Any) -> str:
        self._check_kind(value)
        return value.isoformat()

    def __repr__(self) -> str:
        return f"DateFormatter({self.xlsx_format.format!r})"


class TimestampFormatter(CellFormatter):
    """ISO 8601 instant normalized to UTC (``...Z``) in text."""

    kind = CellKind.TIMESTAMP

    def __init__(self, xlsx_format: XLSXFormat = DEFAULT_DATE_TIME_FORMAT) -> None:
        self.xlsx_format = xlsx_format

    def parse(self, text: str) -> Any:
        try:
            value = datetime.fromisoformat(text)
        except ValueError as e:
            raise DataConversionError(f"Given value {text} is not a valid Timestamp.") from e
        if value.utcoffset() is None:
            raise DataConversionError(
                f"Given value {text} is not a valid Timestamp: missing UTC offset."
            )
        return value.astimezone(UTC)

    def render(self, value: Any) -> str:
        self._check_kind(value)
        return value.astimezone(UTC).isoformat().replace("+00:00", "Z")

    def __repr__(self) -> str:
        return f"TimestampFormatter({self.xlsx_format.format!r})"


class CurrencyFormatType(Enum):
    CODE = "code"  # ISO 4217 alphabetic code, e.g. USD
    SYMBOL = "symbol"  # e.g. $
    DISPLAY_NAME = "display_name"  # e.g. US Dollar
    NUMERIC_CODE = "numeric_code"  # e.g. 840


class CurrencyFormatter(CellFormatter):
    kind = CellKind.CURRENCY

    def __init__(self, format_type: CurrencyFormatType = CurrencyFormatType.CODE) -> None:
        self.format_type = format_type

    def parse(self, text: str) -> Any:
        if self.format_type is CurrencyFormatType.CODE:
            return Currency.of(text)
        if self.format_type is CurrencyFormatType.SYMBOL:
            lookup, label = currencies_by_symbol(), "symbol"
        elif self.format_type is CurrencyFormatType.DISPLAY_NAME:
            lookup, label = currencies_by_display_name(), "display name"
        else:
            lookup, label = currencies_by_numeric_code(), "numeric code"
        try:
            return lookup[text]
        except KeyError:
            raise DataConversionError(f"Currency with {label} {text} not found.") from None

    def render(self, value: Any) -> str:
        if not isinstance(value, Currency):
            raise DataConversionError(f"Given value {value!r} is not a valid Currency.")
        if self.format_type is CurrencyFormatType.CODE:
            return value.code
        if self.format_type is CurrencyFormatType.SYMBOL:
            return value.symbol
        if self.format_type is CurrencyFormatType.DISPLAY_NAME:
            return value.display_name
        return value.numeric_code

    def __repr__(self) -> str:
        return f"CurrencyFormatter({self.format_type.name})"


_DEFAULT_FORMATTERS: dict[CellKind, type[CellFormatter]] = {
    CellKind.STRING: StringFormatter,
    CellKind.INTEGER: IntegerFormatter,
    CellKind.DECIMAL: DecimalFormatter,
    CellKind.BOOLEAN: BooleanFormatter,
    CellKind.UUID: UUIDFormatter,
    CellKind.DATE: DateFormatter,
    CellKind.TIMESTAMP: TimestampFormatter,
    CellKind.CURRENCY: CurrencyFormatter,
}


def default_formatter(kind: CellKind) -> CellFormatter:
    """Return a new default formatter for ``kind``."""
    return _DEFAULT_FORMATTERS[kind]()
