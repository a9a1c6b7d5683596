from __future__ import annotations

import logging
from pathlib import Path

from ..config.loader import TableProfile
from ..data_table import DataTable

"""Format dispatch by file suffix, csv <-> xlsx conversion and templates.

The codec is chosen from the file suffix (``.csv`` or ``.xlsx``, case
insensitive) and run with the properties of the table profile.
"""

__all__ = [
    "ProcessingError",
    "SUPPORTED_SUFFIXES",
    "convert_file",
    "read_table",
    "write_table",
    "write_template",
]

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".xlsx")


class ProcessingError(Exception):
    """Fatal error of a service call (bad path, unsupported format)."""


def _suffix_of(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ProcessingError(f"unsupported file type {path.suffix or '<none>'}: {path}")
    return suffix


def read_table(profile: TableProfile, path: Path) -> DataTable:
    """Import ``path`` into a fresh table of the profile's schema."""
    suffix = _suffix_of(path)
    table = profile.new_table()
    if suffix == ".csv":
        table.from_csv(path, profile.csv)
    else:
        table.from_xlsx(path, profile.xlsx)
    return table


def write_table(profile: TableProfile, table: DataTable, path: Path) -> None:
    suffix = _suffix_of(path)
    if suffix == ".csv":
        table.to_csv(path, profile.csv)
    else:
        table.to_xlsx(path, profile.xlsx)


def convert_file(profile: TableProfile, source: Path, destination: Path) -> int:
    """Read ``source`` and write it to ``destination``; return the row count.

    Both suffixes are checked before anything is read, and nothing is written
    when the source does not validate.
    """
    _suffix_of(destination)
    if not source.is_file():
        raise ProcessingError(f"file not found: {source}")
    table = read_table(profile, source)
    write_table(profile, table, destination)
    logger.info(f"converted {source.name} -> {destination.name} rows={table.number_of_rows}")
    return table.number_of_rows


def write_template(profile: TableProfile, destination: Path) -> None:
    """Write a header-only import template for the profile's schema."""
    suffix = _suffix_of(destination)
    table = profile.new_table()
    if suffix == ".csv":
        table.generate_csv_template(destination, profile.csv)
    else:
        table.generate_xlsx_template(destination, profile.xlsx)
    logger.info(f"template written: {destination}")
