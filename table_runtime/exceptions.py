from __future__ import annotations

"""Exception hierarchy raised by DataTable and its codecs.

All errors are raised synchronously at the point of detection. Errors that
concern a specific cell carry its coordinates so callers can locate the
offending field in the source file.
"""

__all__ = [
    "DataTableError",
    "DataConversionError",
    "InvalidCellTypeError",
    "InvalidRowSizeError",
    "MissingRowError",
]


class DataTableError(Exception):
    """Base class for every error raised by table_runtime."""


class DataConversionError(DataTableError):
    """A formatter could not convert between a value and its text/display form."""


class InvalidCellTypeError(DataTableError):
    """A cell value does not match the type declared for its column."""

    def __init__(self, message: str, row_index: int, column_index: int) -> None:
        super().__init__(message)
        self.row_index = row_index
        self.column_index = column_index


class InvalidRowSizeError(DataTableError):
    """A row does not have exactly one cell per column."""

    def __init__(self, message: str, expected_size: int, actual_size: int) -> None:
        super().__init__(message)
        self.expected_size = expected_size
        self.actual_size = actual_size


class MissingRowError(DataTableError):
    """A row index is outside the range allowed for the operation."""

    def __init__(self, message: str, current_index: int, number_of_rows: int) -> None:
        super().__init__(message)
        self.current_index = current_index
        self.number_of_rows = number_of_rows
