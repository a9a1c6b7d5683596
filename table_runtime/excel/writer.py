from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import TYPE_CHECKING, Any

from openpyxl import Workbook
from openpyxl.cell import WriteOnlyCell
from openpyxl.cell.cell import Cell
from openpyxl.utils import get_column_letter

from ..models.cell_kind import CellKind
from ..models.cell_type import ColumnType
from ..streams import ByteSink, open_sink
from .properties import DEFAULT_XLSX_PROPERTIES, XLSXProperties

if TYPE_CHECKING:
    from openpyxl.styles.cell_style import StyleArray
    from openpyxl.worksheet._write_only import WriteOnlyWorksheet

    from ..data_table import DataTable

"""Spreadsheet writer (openpyxl write-only workbook).

Cells are written typed rather than as text: integers and decimals as numeric
cells, dates and timestamps as date cells, booleans as boolean cells, each
styled with the column formatter's ``xlsx_format``. STRING, UUID and CURRENCY
cells are written as text through the column formatter.

A null is written as a styled blank cell (the column number format, or text
``@`` for General columns), so every cell of a row is present in the sheet
XML and a row of nulls survives the round trip.

Timestamps are converted to ``XLSXProperties.zone_id`` and written without an
offset, since spreadsheet datetimes have no time zone. Spreadsheet times have
millisecond resolution: sub-millisecond digits are truncated, never rounded
into the next second.

Each column's style is resolved once per call and copied into its cells.
"""

__all__ = [
    "generate_xlsx_template",
    "to_xlsx",
]

logger = logging.getLogger(__name__)

SHEET_TITLE = "Sheet1"
TEXT_FORMAT = "@"
# 列幅推定に使うサンプル行数
WIDTH_SAMPLE_ROWS = 100
MAX_COLUMN_WIDTH = 60

CellWriter = Callable[[Any], Any]


def to_xlsx(table: DataTable, output: ByteSink, properties: XLSXProperties | None = None) -> None:
    """Write ``table`` to a single-sheet workbook (optional header row, then data rows)."""
    props = properties or DEFAULT_XLSX_PROPERTIES
    workbook = Workbook(write_only=True)
    sheet = workbook.create_sheet(SHEET_TITLE)
    _apply_column_layout(sheet, table, sample_rows=True)

    writers = [_cell_writer(sheet, column, props.zone) for column in table.column_headers]
    if props.column_headers:
        sheet.append(table.column_names)
    for row in table.iter_rows():
        sheet.append([write(value) for write, value in zip(writers, row)])

    _save(workbook, output)
    logger.debug(f"xlsx: wrote rows={table.number_of_rows} headers={props.column_headers}")


def generate_xlsx_template(table: DataTable, output: ByteSink, properties: XLSXProperties | None = None) -> None:
    """Write a header-only workbook carrying each column's display format."""
    workbook = Workbook(write_only=True)
    sheet = workbook.create_sheet(SHEET_TITLE)
    _apply_column_layout(sheet, table, sample_rows=False)
    sheet.append(table.column_names)
    _save(workbook, output)


def _save(workbook: Workbook, output: ByteSink) -> None:
    with open_sink(output) as stream:
        workbook.save(stream)


def _apply_column_layout(sheet: WriteOnlyWorksheet, table: DataTable, sample_rows: bool) -> None:
    """Set width and default number format per column (must precede the first row)."""
    widths = [len(name) for name in table.column_names]
    if sample_rows:
        for row_index in range(min(WIDTH_SAMPLE_ROWS, table.number_of_rows)):
            for column_index, text in enumerate(table.get_formatted_row(row_index)):
                widths[column_index] = max(widths[column_index], len(text))
    for column_index, column in enumerate(table.column_headers):
        dimension = sheet.column_dimensions[get_column_letter(column_index + 1)]
        dimension.width = min(widths[column_index] + 2, MAX_COLUMN_WIDTH)
        xlsx_format = column.type.formatter.xlsx_format
        if not xlsx_format.is_general:
            dimension.number_format = xlsx_format.format


def _style_for(sheet: WriteOnlyWorksheet, number_format: str) -> StyleArray:
    # 書式の登録はここで一度だけ、セルには StyleArray をコピーする
    template = WriteOnlyCell(sheet)
    template.number_format = number_format
    return template._style


def _cell_writer(sheet: WriteOnlyWorksheet, column: ColumnType, zone: tzinfo) -> CellWriter:
    """Build the per-column conversion once, not per cell."""
    formatter = column.type.formatter
    kind = column.type.kind
    xlsx_format = formatter.xlsx_format
    value_style = _style_for(sheet, xlsx_format.format)
    blank_style = value_style if not xlsx_format.is_general else _style_for(sheet, TEXT_FORMAT)

    def blank() -> Cell:
        return Cell(sheet, style_array=blank_style)

    def styled(value: Any) -> Cell:
        return Cell(sheet, value=value, style_array=value_style)

    if kind is CellKind.BOOLEAN:
        return lambda value: blank() if value is None else value
    if kind is CellKind.INTEGER:
        return lambda value: blank() if value is None else styled(int(value))
    if kind is CellKind.DECIMAL:
        return lambda value: blank() if value is None else styled(float(value))
    if kind is CellKind.DATE:
        return lambda value: blank() if value is None else styled(value)
    if kind is CellKind.TIMESTAMP:
        return lambda value: blank() if value is None else styled(_to_wall_clock(value, zone))
    render = formatter.render
    return lambda value: blank() if value is None else render(value)


def _to_wall_clock(value: datetime, zone: tzinfo) -> datetime:
    local = value.astimezone(zone)
    return local.replace(tzinfo=None, microsecond=local.microsecond - local.microsecond % 1000)
