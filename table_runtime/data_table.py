from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Iterator, Sequence
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, BinaryIO

from .exceptions import InvalidCellTypeError, InvalidRowSizeError, MissingRowError
from .models.cell_kind import CellKind
from .models.cell_type import ColumnType
from .models.currency import Currency

if TYPE_CHECKING:
    from os import PathLike

    from .csv.properties import CSVProperties
    from .excel.properties import XLSXProperties

"""Typed, in-memory table with a fixed per-column schema.

Every mutation (construction, set_cell, set_row, add_row, append_table_data)
validates against the schema before touching the stored rows, so a table can
never be observed in a state that violates its column types. Batch operations
stage and validate the whole batch first and commit only if every row passes.

Readers always receive copies of row data, never the internal lists.

Not thread safe: callers sharing a table between threads must serialize
access themselves.
"""

__all__ = [
    "DataTable",
    "Row",
]

Row = list[Any]
NULL_STRING = ""


class DataTable:
    """Row-oriented grid whose cells are validated against ``column_headers``.

    Parameters
    ----------
    column_headers: ordered column schema (immutable for the table's lifetime)
    rows: optional initial rows, validated eagerly; one bad cell fails the
        whole construction
    """

    def __init__(
        self,
        column_headers: Sequence[ColumnType],
        rows: Iterable[Sequence[Any]] | None = None,
    ) -> None:
        self._column_headers: tuple[ColumnType, ...] = tuple(column_headers)
        # 列ごとの検証関数と formatter はテーブル単位で一度だけ解決
        self._predicates = [c.type.kind.predicate for c in self._column_headers]
        self._formatters = [c.type.formatter for c in self._column_headers]
        self._rows: list[Row] = self._stage_rows(rows, start_index=0) if rows is not None else []

    # -- schema -----------------------------------------------------------------

    @property
    def column_headers(self) -> tuple[ColumnType, ...]:
        return self._column_headers

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self._column_headers]

    @property
    def number_of_rows(self) -> int:
        return len(self._rows)

    @property
    def number_of_columns(self) -> int:
        return len(self._column_headers)

    # -- cell operations ----------------------------------------------------------

    def get_cell(self, row_index: int, column_index: int) -> Any:
        self._check_row_exists(row_index)
        self._check_column_exists(column_index)
        return self._rows[row_index][column_index]

    def set_cell(self, value: Any, row_index: int, column_index: int) -> None:
        """Replace a single cell after validating it against its column."""
        self._check_row_exists(row_index)
        self._check_column_exists(column_index)
        self._validate_cell(row_index, column_index, value)
        self._rows[row_index][column_index] = value

    def get_formatted_cell(self, row_index: int, column_index: int) -> str:
        """Render a cell through its column formatter; null renders as ``""``."""
        value = self.get_cell(row_index, column_index)
        if value is None:
            return NULL_STRING
        return self._formatters[column_index].render(value)

    def get_cell_as_string(self, row_index: int, column_index: int) -> str | None:
        return self._get_cell_as(row_index, column_index, CellKind.STRING, "String")

    def get_cell_as_long(self, row_index: int, column_index: int) -> int | None:
        value = self._get_cell_as(row_index, column_index, CellKind.INTEGER, "Long")
        return None if value is None else int(value)

    def get_cell_as_double(self, row_index: int, column_index: int) -> float | None:
        value = self._get_cell_as(row_index, column_index, CellKind.DECIMAL, "Double")
        return None if value is None else float(value)

    def get_cell_as_boolean(self, row_index: int, column_index: int) -> bool | None:
        return self._get_cell_as(row_index, column_index, CellKind.BOOLEAN, "Boolean")

    def get_cell_as_uuid(self, row_index: int, column_index: int) -> uuid.UUID | None:
        return self._get_cell_as(row_index, column_index, CellKind.UUID, "UUID")

    def get_cell_as_date(self, row_index: int, column_index: int) -> date | None:
        return self._get_cell_as(row_index, column_index, CellKind.DATE, "LocalDate")

    def get_cell_as_instant(self, row_index: int, column_index: int) -> datetime | None:
        return self._get_cell_as(row_index, column_index, CellKind.TIMESTAMP, "Instant")

    def get_cell_as_currency(self, row_index: int, column_index: int) -> Currency | None:
        return self._get_cell_as(row_index, column_index, CellKind.CURRENCY, "Currency")

    def for_each_cell(self, action: Callable[[Any], None]) -> None:
        for row in self._rows:
            for cell in row:
                action(cell)

    # -- row operations -----------------------------------------------------------

    def get_row(self, row_index: int) -> Row:
        """Return an independent copy of the row at ``row_index``."""
        self._check_row_exists(row_index)
        return list(self._rows[row_index])

    def get_formatted_row(self, row_index: int) -> list[str]:
        self._check_row_exists(row_index)
        return self._format_row(self._rows[row_index])

    def set_row(self, row: Sequence[Any], row_index: int) -> None:
        """Replace the row at ``row_index`` atomically (size, then cell types)."""
        self._check_row_exists(row_index)
        new_row = self._validate_row(row, row_index)
        self._rows[row_index] = new_row

    def add_row(self, row: Sequence[Any], index: int | None = None) -> None:
        """Insert ``row`` at ``index`` (default: end), shifting later rows down.

        Valid insertion indexes are ``0..number_of_rows`` inclusive; appending
        at the end is the only insertion point that is always valid.
        """
        target = len(self._rows) if index is None else index
        self._check_insert_index(target)
        new_row = self._validate_row(row, target)
        self._rows.insert(target, new_row)

    def delete_row(self, row_index: int) -> None:
        self._check_row_exists(row_index)
        del self._rows[row_index]

    def for_each_row(self, action: Callable[[Row], None]) -> None:
        for row in self._rows:
            action(list(row))

    # -- table operations -----------------------------------------------------------

    def append_table_data(self, rows: Iterable[Sequence[Any]]) -> None:
        """Append ``rows`` at the end, all or nothing.

        The whole batch is validated before the table is touched. Errors report
        the row index the offending row would have had in this table.
        """
        staged = self._stage_rows(rows, start_index=len(self._rows))
        self._rows.extend(staged)

    def get_table(self) -> list[Row]:
        """Copy of all rows."""
        return [list(row) for row in self._rows]

    def iter_rows(self) -> Iterator[Row]:
        """Yield a copy of each row in order."""
        for row in self._rows:
            yield list(row)

    def formatted_rows(self) -> Iterator[list[str]]:
        for row in self._rows:
            yield self._format_row(row)

    def copy(self) -> DataTable:
        clone = DataTable(self._column_headers)
        clone._rows = self.get_table()
        return clone

    # -- codecs ---------------------------------------------------------------------

    def to_csv(self, output: str | PathLike[str] | BinaryIO, properties: CSVProperties | None = None) -> None:
        from .csv.codec import to_csv

        to_csv(self, output, properties)

    def from_csv(self, source: str | PathLike[str] | BinaryIO, properties: CSVProperties | None = None) -> None:
        from .csv.codec import from_csv

        from_csv(self, source, properties)

    def generate_csv_template(
        self, output: str | PathLike[str] | BinaryIO, properties: CSVProperties | None = None
    ) -> None:
        from .csv.codec import generate_csv_template

        generate_csv_template(self, output, properties)

    def to_xlsx(self, output: str | PathLike[str] | BinaryIO, properties: XLSXProperties | None = None) -> None:
        from .excel.writer import to_xlsx

        to_xlsx(self, output, properties)

    def from_xlsx(self, source: str | PathLike[str] | BinaryIO, properties: XLSXProperties | None = None) -> None:
        from .excel.reader import from_xlsx

        from_xlsx(self, source, properties)

    def generate_xlsx_template(
        self, output: str | PathLike[str] | BinaryIO, properties: XLSXProperties | None = None
    ) -> None:
        from .excel.writer import generate_xlsx_template

        generate_xlsx_template(self, output, properties)

    # -- dunder -----------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataTable):
            return NotImplemented
        return self._column_headers == other._column_headers and self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DataTable(columns={self.column_names!r}, rows={len(self._rows)})"

    # -- validation -------------------------------------------------------------------

    def _format_row(self, row: Row) -> list[str]:
        return [
            NULL_STRING if value is None else formatter.render(value)
            for value, formatter in zip(row, self._formatters)
        ]

    def _get_cell_as(self, row_index: int, column_index: int, kind: CellKind, target: str) -> Any:
        value = self.get_cell(row_index, column_index)
        column_type = self._column_headers[column_index].type
        if column_type.kind is not kind:
            raise InvalidCellTypeError(
                f"Cannot get given cell of column type {column_type.name} as type {target}.",
                row_index=row_index,
                column_index=column_index,
            )
        return value

    def _stage_rows(self, rows: Iterable[Sequence[Any]], start_index: int) -> list[Row]:
        staged: list[Row] = []
        for offset, row in enumerate(rows):
            staged.append(self._validate_row(row, start_index + offset))
        return staged

    def _validate_row(self, row: Sequence[Any], row_index: int) -> Row:
        new_row = list(row)
        expected = len(self._column_headers)
        if len(new_row) != expected:
            raise InvalidRowSizeError(
                f"The given row size of {len(new_row)} does not match with the number of "
                f"headers {expected}. Given row contains: {new_row!r}",
                expected_size=expected,
                actual_size=len(new_row),
            )
        predicates = self._predicates
        for column_index, value in enumerate(new_row):
            if value is None or not predicates[column_index](value):
                self._validate_cell(row_index, column_index, value)
        return new_row

    def _validate_cell(self, row_index: int, column_index: int, value: Any) -> None:
        column = self._column_headers[column_index]
        if value is None:
            if column.optional:
                return
            raise InvalidCellTypeError(
                f"Value for column {column.name} cannot be null.",
                row_index=row_index,
                column_index=column_index,
            )
        if not self._predicates[column_index](value):
            raise InvalidCellTypeError(
                f"Invalid input {value!r} for column {column.name}. "
                f"Column type: {column.type.name}. Input {type(value).__name__}.",
                row_index=row_index,
                column_index=column_index,
            )

    def _check_row_exists(self, row_index: int) -> None:
        if not 0 <= row_index < len(self._rows):
            raise MissingRowError(
                f"No row at index {row_index} as number of rows is equal to {len(self._rows)}.",
                current_index=row_index,
                number_of_rows=len(self._rows),
            )

    def _check_insert_index(self, row_index: int) -> None:
        if not 0 <= row_index <= len(self._rows):
            raise MissingRowError(
                f"Cannot add row at index {row_index} as number of rows is equal to {len(self._rows)}.",
                current_index=row_index,
                number_of_rows=len(self._rows),
            )

    def _check_column_exists(self, column_index: int) -> None:
        if not 0 <= column_index < len(self._column_headers):
            raise IndexError(
                f"column index {column_index} out of range for {len(self._column_headers)} columns"
            )
