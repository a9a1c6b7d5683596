from __future__ import annotations

from dataclasses import dataclass

"""Delimited-text format options."""

__all__ = [
    "CSVProperties",
    "DEFAULT_CSV_PROPERTIES",
]


@dataclass(frozen=True)
class CSVProperties:
    """How a delimited-text file is laid out.

    delimiter: separates values inside a row
    quote_character: wraps values containing special characters
    line_separator: terminates each line
    column_headers: whether the first line holds the column names
    """
    delimiter: str = ","
    quote_character: str = '"'
    line_separator: str = "\n"
    column_headers: bool = True

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if len(self.quote_character) != 1:
            raise ValueError(
                f"quote_character must be a single character, got {self.quote_character!r}"
            )
        if self.delimiter == self.quote_character:
            raise ValueError("delimiter and quote_character must differ")
        if not self.line_separator:
            raise ValueError("line_separator must not be empty")


DEFAULT_CSV_PROPERTIES = CSVProperties()
