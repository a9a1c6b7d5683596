from __future__ import annotations

from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..models.data_format import DEFAULT_ZONE_ID

"""Spreadsheet format options."""

__all__ = [
    "DEFAULT_XLSX_PROPERTIES",
    "XLSXProperties",
]


@dataclass(frozen=True)
class XLSXProperties:
    """How a workbook sheet is laid out.

    column_headers: whether the first sheet row holds the column names
    zone_id: IANA zone used for the wall-clock time of TIMESTAMP cells, since
        spreadsheet datetimes carry no offset
    """
    column_headers: bool = True
    zone_id: str = DEFAULT_ZONE_ID

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.zone_id)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown zone_id: {self.zone_id}") from e

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.zone_id)


DEFAULT_XLSX_PROPERTIES = XLSXProperties()
