from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from ..exceptions import (
    DataConversionError,
    InvalidCellTypeError,
    InvalidRowSizeError,
    MissingRowError,
)

"""ErrorRecord: one JSON Lines entry of the error log.

``row`` and ``column`` are the zero-based coordinates reported by the failing
operation; ``-1`` marks an error that concerns the whole file (unreadable
workbook, malformed CSV, I/O failure) or a whole row (row size mismatch).
"""

__all__ = [
    "ERROR_TYPES",
    "UNKNOWN_POSITION",
    "ErrorRecord",
    "error_type_of",
]

UNKNOWN_POSITION = -1

ERROR_TYPES = (
    "INVALID_CELL_TYPE",
    "INVALID_ROW_SIZE",
    "MISSING_ROW",
    "DATA_CONVERSION",
    "FILE_ERROR",
)


def error_type_of(error: BaseException) -> str:
    """Classify an exception into one of ``ERROR_TYPES``."""
    if isinstance(error, InvalidCellTypeError):
        return "INVALID_CELL_TYPE"
    if isinstance(error, InvalidRowSizeError):
        return "INVALID_ROW_SIZE"
    if isinstance(error, MissingRowError):
        return "MISSING_ROW"
    if isinstance(error, DataConversionError):
        return "DATA_CONVERSION"
    return "FILE_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: name of the file being validated or converted
        row: zero-based data row index, -1 when not applicable
        column: zero-based column index, -1 when not applicable
        error_type: one of ERROR_TYPES
        message: human readable description
    """
    timestamp: str
    file: str
    row: int
    column: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, column: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            column=column,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_exception(file: str, error: BaseException) -> ErrorRecord:
        """Build a record from a table error, picking up its cell coordinates."""
        row = getattr(error, "row_index", UNKNOWN_POSITION)
        column = getattr(error, "column_index", UNKNOWN_POSITION)
        if isinstance(error, MissingRowError):
            row = error.current_index
        return ErrorRecord.create(
            file=file,
            row=row,
            column=column,
            error_type=error_type_of(error),
            message=str(error),
        )

    def to_json_line(self) -> str:
        # dataclass のフィールドのみ (追加キーなし)
        return json.dumps(asdict(self), ensure_ascii=False)
