from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Spreadsheet display formats.

These format codes only affect how the spreadsheet codec styles cells. The
delimited-text codec always uses the locale independent text form of a value.
"""

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_DATE_TIME_FORMAT",
    "DEFAULT_ZONE_ID",
    "DateFormat",
    "DateTimeFormat",
    "DecimalFormat",
    "IntegerFormat",
    "TimeFormat",
    "XLSXFormat",
]

DEFAULT_ZONE_ID = "UTC"


class IntegerFormat(Enum):
    DEFAULT = "0"


class DecimalFormat:
    """Decimal format codes are parametrised by precision."""

    @staticmethod
    def default(precision: int) -> str:
        if precision < 0:
            raise ValueError(f"precision must be >= 0, got {precision}")
        if precision == 0:
            return "0"
        return "0." + "0" * precision


class DateFormat(Enum):
    """Date display patterns (spreadsheet format codes)."""
    YEAR_MONTH_DAY = "yyyy-mm-dd"  # ISO 8601
    DAY_MONTH_YEAR = "dd-mm-yyyy"
    MONTH_DAY_YEAR = "mm-dd-yyyy"


class TimeFormat(Enum):
    HOUR_12 = "hh:mm:ss AM/PM"
    HOUR_24 = "hh:mm:ss"


@dataclass(frozen=True)
class DateTimeFormat:
    date_format: DateFormat
    time_format: TimeFormat

    @property
    def format(self) -> str:
        return f"{self.date_format.value} {self.time_format.value}"


@dataclass(frozen=True)
class XLSXFormat:
    """Number format code attached to a column when written to a workbook."""
    format: str

    @classmethod
    def default(cls) -> XLSXFormat:
        return cls("General")

    @classmethod
    def date(cls, date_format: DateFormat) -> XLSXFormat:
        return cls(date_format.value)

    @classmethod
    def date_time(cls, date_format: DateFormat, time_format: TimeFormat) -> XLSXFormat:
        return cls(DateTimeFormat(date_format, time_format).format)

    @classmethod
    def integer(cls, integer_format: IntegerFormat = IntegerFormat.DEFAULT) -> XLSXFormat:
        return cls(integer_format.value)

    @classmethod
    def decimal(cls, precision: int) -> XLSXFormat:
        return cls(DecimalFormat.default(precision))

    @property
    def is_general(self) -> bool:
        return self.format == "General"


DEFAULT_DATE_FORMAT = XLSXFormat.date(DateFormat.YEAR_MONTH_DAY)
DEFAULT_DATE_TIME_FORMAT = XLSXFormat.date_time(DateFormat.YEAR_MONTH_DAY, TimeFormat.HOUR_24)
