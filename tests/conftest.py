# Shared pytest fixtures
from __future__ import annotations

import tempfile
import uuid
import zipfile
from collections.abc import Callable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import pytest

from table_runtime import CellType, ColumnType, Currency, DataTable
from table_runtime.logging.init import reset_logging

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

HEADER_LINE = "name,age,weight,currency,isEmployed,employeeId,dob,recordCreatedAt"


def _row(name, age, weight, code, employed, employee_id, dob) -> list[Any]:
    return [name, age, weight, Currency.of(code), employed, uuid.UUID(employee_id), dob, EPOCH]


BASE_DATA: list[list[Any]] = [
    _row("Alice Smith", 32, 65.2, "USD", True, "601a13cf-eaa4-48f3-9e88-c92ecc386dfe", date(1989, 7, 20)),
    _row("Bob Johnson", 45, 78.9, "EUR", False, "c0b75f54-c6df-4331-a981-0378b14f79d3", date(1977, 3, 12)),
    _row("Charlie Brown", 28, 70.0, "GBP", True, "939d576c-49e2-4d09-865f-4eb7f224c89d", date(1993, 11, 5)),
    _row("Diana Miller", 38, 55.5, "CAD", True, "c1bb2e07-2332-4b74-b9ad-3703460dd3ec", date(1984, 9, 18)),
    _row("Edward Davis", 50, 82.3, "AUD", False, "fedf4cbd-c36c-4ab9-99c9-d2176c793404", date(1972, 1, 30)),
    _row("Fiona White", 27, 68.7, "JPY", True, "9f3ca552-a7ca-4c3b-9ac7-3f27849cd724", date(1995, 4, 8)),
    _row("George Smith", 33, 75.6, "CHF", False, "38e3286b-b442-4208-995f-d45280ea1fc1", date(1988, 6, 14)),
    _row("Helen Brown", 42, 60.8, "INR", True, "f8324d58-75d7-4987-ae1e-28f1bbaa8f92", date(1979, 10, 22)),
    _row("Ivan Johnson", 29, 73.1, "CNY", False, "f8cd918e-3e96-4417-8322-22c5e9f98d5c", date(1992, 8, 3)),
    _row("Jack Miller", 36, 77.4, "SGD", True, "6f8be127-131e-47cf-8140-f7254e5ee67b", date(1985, 2, 17)),
]

# CSV rendering of BASE_DATA with default properties
BASE_CSV = "\n".join(
    [
        HEADER_LINE,
        "Alice Smith,32,65.2000,USD,true,601a13cf-eaa4-48f3-9e88-c92ecc386dfe,1989-07-20,1970-01-01T00:00:00Z",
        "Bob Johnson,45,78.9000,EUR,false,c0b75f54-c6df-4331-a981-0378b14f79d3,1977-03-12,1970-01-01T00:00:00Z",
        "Charlie Brown,28,70.0000,GBP,true,939d576c-49e2-4d09-865f-4eb7f224c89d,1993-11-05,1970-01-01T00:00:00Z",
        "Diana Miller,38,55.5000,CAD,true,c1bb2e07-2332-4b74-b9ad-3703460dd3ec,1984-09-18,1970-01-01T00:00:00Z",
        "Edward Davis,50,82.3000,AUD,false,fedf4cbd-c36c-4ab9-99c9-d2176c793404,1972-01-30,1970-01-01T00:00:00Z",
        "Fiona White,27,68.7000,JPY,true,9f3ca552-a7ca-4c3b-9ac7-3f27849cd724,1995-04-08,1970-01-01T00:00:00Z",
        "George Smith,33,75.6000,CHF,false,38e3286b-b442-4208-995f-d45280ea1fc1,1988-06-14,1970-01-01T00:00:00Z",
        "Helen Brown,42,60.8000,INR,true,f8324d58-75d7-4987-ae1e-28f1bbaa8f92,1979-10-22,1970-01-01T00:00:00Z",
        "Ivan Johnson,29,73.1000,CNY,false,f8cd918e-3e96-4417-8322-22c5e9f98d5c,1992-08-03,1970-01-01T00:00:00Z",
        "Jack Miller,36,77.4000,SGD,true,6f8be127-131e-47cf-8140-f7254e5ee67b,1985-02-17,1970-01-01T00:00:00Z",
    ]
) + "\n"


def make_columns(optional: bool = False) -> list[ColumnType]:
    return [
        ColumnType("name", CellType.string(), optional),
        ColumnType("age", CellType.integer(), optional),
        ColumnType("weight", CellType.decimal(), optional),
        ColumnType("currency", CellType.currency(), optional),
        ColumnType("isEmployed", CellType.boolean(), optional),
        ColumnType("employeeId", CellType.uuid(), optional),
        ColumnType("dob", CellType.date(), optional),
        ColumnType("recordCreatedAt", CellType.timestamp(), optional),
    ]


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def columns() -> list[ColumnType]:
    return make_columns()


@pytest.fixture()
def base_data() -> list[list[Any]]:
    return [list(row) for row in BASE_DATA]


@pytest.fixture()
def base_table(columns, base_data) -> DataTable:
    return DataTable(columns, base_data)


@pytest.fixture()
def nullable_table(base_data) -> DataTable:
    return DataTable(make_columns(optional=True), base_data)


@pytest.fixture()
def valid_row() -> list[Any]:
    return [
        "John Smith", 32, 35.6, Currency.of("INR"), False,
        uuid.UUID("8ec57ebd-38a5-403d-9feb-9b7d99426834"), date(1993, 2, 4),
        datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
    ]


@pytest.fixture()
def short_row(valid_row) -> list[Any]:
    return valid_row[:-1]


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
columns:
  - {name: name, type: string}
  - {name: age, type: integer}
  - {name: weight, type: decimal}
  - {name: currency, type: currency}
  - {name: isEmployed, type: boolean}
  - {name: employeeId, type: uuid}
  - {name: dob, type: date}
  - {name: recordCreatedAt, type: timestamp}
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "table.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def valid_csv_files(temp_workdir: Path) -> list[Path]:
    files = []
    for name in ["employees.csv", "more_employees.csv"]:
        f = temp_workdir / "data" / name
        f.write_text(BASE_CSV, encoding="utf-8")
        files.append(f)
    return files


@pytest.fixture()
def invalid_csv_file(temp_workdir: Path) -> Path:
    f = temp_workdir / "data" / "broken.csv"
    f.write_text(BASE_CSV.replace("Bob Johnson,45,", "Bob Johnson,forty-five,"), encoding="utf-8")
    return f


# -- raw workbook builder ---------------------------------------------------------
# openpyxl cannot evaluate formulas, so workbooks holding formula results are
# written by hand: <f> carries the formula, <v> the cached result.

_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/xl/workbook.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"/>'
    '<Override PartName="/xl/worksheets/sheet1.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.worksheet+xml"/>'
    "</Types>"
)
_ROOT_RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="xl/workbook.xml"/>'
    "</Relationships>"
)
_WORKBOOK = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<workbook xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
    '<sheets><sheet name="Sheet1" sheetId="1" r:id="rId1"/></sheets>'
    "</workbook>"
)
_WORKBOOK_RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/worksheet" '
    'Target="worksheets/sheet1.xml"/>'
    "</Relationships>"
)


def _column_letter(index: int) -> str:
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def raw_cell(reference: str, content: Any) -> str:
    """Render one <c> element.

    ``content`` is a plain value (str -> inline string, bool, int/float, None -> omitted)
    or a dict ``{"f": formula, "v": cached, "t": type}`` for formula cells.
    """
    if content is None:
        return ""
    if isinstance(content, dict):
        t = f' t="{content["t"]}"' if "t" in content else ""
        v = f"<v>{content['v']}</v>" if content.get("v") is not None else ""
        return f'<c r="{reference}"{t}><f>{content["f"]}</f>{v}</c>'
    if isinstance(content, bool):
        return f'<c r="{reference}" t="b"><v>{int(content)}</v></c>'
    if isinstance(content, (int, float)):
        return f'<c r="{reference}"><v>{content}</v></c>'
    return f'<c r="{reference}" t="inlineStr"><is><t>{content}</t></is></c>'


@pytest.fixture()
def make_raw_xlsx(tmp_path: Path) -> Callable[..., Path]:
    def _make(rows: list[list[Any]], name: str = "raw.xlsx") -> Path:
        width = max((len(r) for r in rows), default=1)
        body = []
        for row_number, row in enumerate(rows, start=1):
            cells = "".join(
                raw_cell(f"{_column_letter(i)}{row_number}", content) for i, content in enumerate(row)
            )
            body.append(f'<row r="{row_number}">{cells}</row>')
        sheet = (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<worksheet xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main">'
            f'<dimension ref="A1:{_column_letter(width - 1)}{max(len(rows), 1)}"/>'
            f"<sheetData>{''.join(body)}</sheetData>"
            "</worksheet>"
        )
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("[Content_Types].xml", _CONTENT_TYPES)
            zf.writestr("_rels/.rels", _ROOT_RELS)
            zf.writestr("xl/workbook.xml", _WORKBOOK)
            zf.writestr("xl/_rels/workbook.xml.rels", _WORKBOOK_RELS)
            zf.writestr("xl/worksheets/sheet1.xml", sheet)
        return path

    return _make


@pytest.fixture()
def base_csv() -> str:
    return BASE_CSV
