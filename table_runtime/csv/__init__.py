"""Delimited-text (CSV) codec for DataTable."""

from .codec import from_csv, generate_csv_template, to_csv
from .properties import DEFAULT_CSV_PROPERTIES, CSVProperties

__all__ = [
    "CSVProperties",
    "DEFAULT_CSV_PROPERTIES",
    "from_csv",
    "generate_csv_template",
    "to_csv",
]
