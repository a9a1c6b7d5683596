from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Any

import pandas as pd

from ..exceptions import DataConversionError, InvalidCellTypeError
from ..streams import ByteSink, ByteSource, open_sink, open_source
from .properties import DEFAULT_CSV_PROPERTIES, CSVProperties

if TYPE_CHECKING:
    from ..data_table import DataTable

"""Delimited-text codec.

Writing renders every cell through its column formatter (null -> empty field)
and lets pandas apply minimal quoting. Reading parses every field as text
(no NA inference), skips blank lines, maps empty fields to null for optional
columns and converts the rest through the column formatter.

Errors while reading carry the zero-based data row index (header excluded,
blank lines not counted) and the column index. Parsed rows are staged and
appended in one step, so a failing read leaves the table unchanged.
"""

__all__ = [
    "from_csv",
    "generate_csv_template",
    "to_csv",
]

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
# C パーサが自前で扱える改行
_NATIVE_LINE_SEPARATORS = frozenset({"\n", "\r\n", "\r"})


def to_csv(table: DataTable, output: ByteSink, properties: CSVProperties | None = None) -> None:
    """Write ``table`` as delimited text (optional header line, then one line per row)."""
    props = properties or DEFAULT_CSV_PROPERTIES
    frame = pd.DataFrame(list(table.formatted_rows()), columns=table.column_names, dtype=object)
    _write_frame(frame, output, props, header=props.column_headers)
    logger.debug(f"csv: wrote rows={table.number_of_rows} headers={props.column_headers}")


def generate_csv_template(table: DataTable, output: ByteSink, properties: CSVProperties | None = None) -> None:
    """Write only the header line, as a blank import template for the schema."""
    props = properties or DEFAULT_CSV_PROPERTIES
    frame = pd.DataFrame(columns=table.column_names, dtype=object)
    _write_frame(frame, output, props, header=True)


def from_csv(table: DataTable, source: ByteSource, properties: CSVProperties | None = None) -> None:
    """Append the rows of a delimited-text source to ``table``.

    Raises
    ------
    InvalidCellTypeError: empty field for a non-optional column, or a field the
        column formatter cannot parse
    DataConversionError: the input is not well-formed delimited text
    """
    props = properties or DEFAULT_CSV_PROPERTIES
    with open_source(source) as stream:
        raw = stream.read()
    records = _read_records(raw, props)
    if props.column_headers:
        records = records[1:]
    rows = _parse_records(table, records)
    table.append_table_data(rows)
    logger.debug(f"csv: read rows={len(rows)} headers={props.column_headers}")


def _write_frame(frame: pd.DataFrame, output: ByteSink, props: CSVProperties, header: bool) -> None:
    text = frame.to_csv(
        None,
        sep=props.delimiter,
        quotechar=props.quote_character,
        lineterminator=props.line_separator,
        header=header,
        index=False,
    )
    with open_sink(output) as stream:
        stream.write(text.encode(ENCODING))


def _read_records(raw: bytes, props: CSVProperties) -> list[list[Any]]:
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DataConversionError(f"CSV input is not valid {ENCODING}: {e}") from e

    options: dict[str, Any] = {}
    separator = props.line_separator
    if separator not in _NATIVE_LINE_SEPARATORS:
        if len(separator) == 1:
            options["lineterminator"] = separator
        else:
            text = text.replace(separator, "\n")
    if not text.strip():
        return []

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=props.delimiter,
            quotechar=props.quote_character,
            header=None,
            dtype=str,
            na_filter=False,
            keep_default_na=False,
            skip_blank_lines=True,
            **options,
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise DataConversionError(f"Malformed CSV input: {e}") from e
    return frame.to_numpy(dtype=object).tolist()


def _parse_records(table: DataTable, records: list[list[Any]]) -> list[list[Any]]:
    columns = [(c.name, c.optional, c.type.formatter.parse) for c in table.column_headers]
    rows: list[list[Any]] = []
    for row_index, record in enumerate(records):
        width = len(record)
        row: list[Any] = []
        for column_index, (name, optional, parse) in enumerate(columns):
            text = record[column_index] if column_index < width else None
            # 欠落フィールド (NaN) と空文字は同じ扱い
            if not isinstance(text, str) or text == "":
                if optional:
                    row.append(None)
                    continue
                raise InvalidCellTypeError(
                    f"Value for column {name} cannot be null.",
                    row_index=row_index,
                    column_index=column_index,
                )
            try:
                row.append(parse(text))
            except DataConversionError as e:
                raise InvalidCellTypeError(
                    str(e), row_index=row_index, column_index=column_index
                ) from e
        rows.append(row)
    return rows
