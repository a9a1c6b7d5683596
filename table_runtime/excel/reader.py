from __future__ import annotations

import logging
import numbers
import zipfile
from collections.abc import Callable
from datetime import UTC, date, datetime, time, tzinfo
from typing import TYPE_CHECKING, Any

from openpyxl import load_workbook
from openpyxl.cell.read_only import EmptyCell
from openpyxl.utils import get_column_letter
from openpyxl.utils.datetime import from_excel
from openpyxl.utils.exceptions import InvalidFileException

from ..exceptions import DataConversionError, InvalidCellTypeError
from ..models.cell_kind import CellKind
from ..models.cell_type import ColumnType
from ..streams import ByteSource, open_source
from .properties import DEFAULT_XLSX_PROPERTIES, XLSXProperties

if TYPE_CHECKING:
    from ..data_table import DataTable

"""Spreadsheet reader (openpyxl read-only, cached formula values).

The workbook is opened with ``data_only=True`` so a formula cell is read as
the value the spreadsheet application last evaluated for it; ``=A1+B1`` that
evaluated to 29 is indistinguishable from a literal 29. A formula that
evaluated to an error (``#DIV/0!``, ``#REF!`` ...) is an InvalidCellTypeError.

Only the first worksheet is read. Rows with no cells in the sheet XML are
skipped; a row whose cells are present but blank is a row of nulls. Row
indexes in errors count data rows only (header excluded, skipped rows not
counted), the same way the CSV codec counts them, and the message names the
sheet cell.

Timestamps come back with millisecond resolution (the spreadsheet serial
date is converted by openpyxl at that precision).
"""

__all__ = [
    "from_xlsx",
]

logger = logging.getLogger(__name__)

CellReader = Callable[[Any], Any]


class _CellMismatch(Exception):
    """Cell content cannot represent the column kind."""


def from_xlsx(table: DataTable, source: ByteSource, properties: XLSXProperties | None = None) -> None:
    """Append the rows of the first sheet of a workbook to ``table``.

    Raises
    ------
    InvalidCellTypeError: blank cell for a non-optional column, error cell,
        or a cell whose content does not fit the column type
    DataConversionError: the input is not a readable workbook
    """
    props = properties or DEFAULT_XLSX_PROPERTIES
    with open_source(source) as stream:
        try:
            workbook = load_workbook(stream, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            raise DataConversionError(f"Input is not a readable XLSX workbook: {e}") from e
        try:
            rows = _read_rows(table, workbook.worksheets[0], props)
        finally:
            workbook.close()
    table.append_table_data(rows)
    logger.debug(f"xlsx: read rows={len(rows)} headers={props.column_headers}")


def _read_rows(table: DataTable, sheet: Any, props: XLSXProperties) -> list[list[Any]]:
    zone = props.zone
    columns = table.column_headers
    readers = [_cell_reader(column, zone) for column in columns]
    width = len(columns)
    letters = [get_column_letter(i + 1) for i in range(width)]
    rows: list[list[Any]] = []
    header_pending = props.column_headers
    # max_col で各行を列数ぶんに揃える (欠けたセルは EmptyCell)
    for sheet_row_number, cells in enumerate(sheet.iter_rows(max_col=width), start=1):
        if header_pending:
            header_pending = False
            continue
        # セルが XML に存在しない行のみ空行 (null だけの行は残す)
        if all(isinstance(cell, EmptyCell) for cell in cells):
            continue
        row_index = len(rows)
        row: list[Any] = []
        for column_index, cell in enumerate(cells):
            value = cell.value
            if value is None:
                column = columns[column_index]
                if column.optional:
                    row.append(None)
                    continue
                raise InvalidCellTypeError(
                    f"Value for column {column.name} cannot be null "
                    f"(cell {letters[column_index]}{sheet_row_number}).",
                    row_index=row_index,
                    column_index=column_index,
                )
            if cell.data_type == "e":
                raise InvalidCellTypeError(
                    f"Error while reading the XLSX. Cell {letters[column_index]}{sheet_row_number} "
                    f"holds the unresolved formula result {value}.",
                    row_index=row_index,
                    column_index=column_index,
                )
            try:
                row.append(readers[column_index](value))
            except _CellMismatch:
                raise InvalidCellTypeError(
                    "Cell type is not valid for the given cell. "
                    f"Expected data table cell type: {columns[column_index].type.name}. "
                    f"Current XLSX cell type: {type(value).__name__} "
                    f"(cell {letters[column_index]}{sheet_row_number}).",
                    row_index=row_index,
                    column_index=column_index,
                ) from None
            except DataConversionError as e:
                raise InvalidCellTypeError(
                    f"{e} (cell {letters[column_index]}{sheet_row_number})",
                    row_index=row_index,
                    column_index=column_index,
                ) from e
        rows.append(row)
    return rows


def _cell_reader(column: ColumnType, zone: tzinfo) -> CellReader:
    kind = column.type.kind
    if kind is CellKind.BOOLEAN:
        return _read_boolean
    if kind is CellKind.INTEGER:
        return _read_integer
    if kind is CellKind.DECIMAL:
        return _read_decimal
    if kind is CellKind.DATE:
        return lambda value: _read_datetime(value).date()
    if kind is CellKind.TIMESTAMP:
        return lambda value: _read_datetime(value).replace(tzinfo=zone).astimezone(UTC)
    parse = column.type.formatter.parse

    def read_text(value: Any) -> Any:
        if not isinstance(value, str):
            raise _CellMismatch
        return parse(value)

    return read_text


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _read_boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise _CellMismatch
    return value


def _read_integer(value: Any) -> int:
    if not _is_number(value):
        raise _CellMismatch
    if isinstance(value, float):
        if not value.is_integer():
            raise DataConversionError(f"Given value {value} is not a valid integer.")
        return int(value)
    return int(value)


def _read_decimal(value: Any) -> float:
    if not _is_number(value):
        raise _CellMismatch
    return float(value)


def _read_datetime(value: Any) -> datetime:
    """Date-formatted cells arrive as datetimes; bare serial numbers are converted."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if _is_number(value):
        converted = from_excel(value)
        if isinstance(converted, datetime):
            return converted
    raise _CellMismatch
