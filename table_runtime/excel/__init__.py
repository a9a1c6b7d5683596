"""Spreadsheet workbook (XLSX) codec for DataTable."""

from .properties import DEFAULT_XLSX_PROPERTIES, XLSXProperties
from .reader import from_xlsx
from .writer import generate_xlsx_template, to_xlsx

__all__ = [
    "DEFAULT_XLSX_PROPERTIES",
    "XLSXProperties",
    "from_xlsx",
    "generate_xlsx_template",
    "to_xlsx",
]
