from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from openpyxl import Workbook, load_workbook

from table_runtime import (
    CellType,
    ColumnType,
    DataConversionError,
    DataTable,
    DateFormat,
    DateFormatter,
    InvalidCellTypeError,
    TimeFormat,
    TimestampFormatter,
    XLSXFormat,
    XLSXProperties,
)

HEADER = ["name", "age", "weight", "currency", "isEmployed", "employeeId", "dob", "recordCreatedAt"]


def _simple_columns(optional: bool = False) -> list[ColumnType]:
    return [
        ColumnType("name", CellType.string(), optional),
        ColumnType("age", CellType.integer(), optional),
        ColumnType("score", CellType.decimal(), optional),
    ]


class TestToXlsx:
    def test_round_trip(self, base_table, columns, tmp_path):
        out = tmp_path / "t.xlsx"
        base_table.to_xlsx(out)
        restored = DataTable(columns)
        restored.from_xlsx(out)
        assert restored == base_table

    def test_round_trip_without_headers(self, base_table, columns, tmp_path):
        props = XLSXProperties(column_headers=False)
        out = tmp_path / "t.xlsx"
        base_table.to_xlsx(out, props)

        sheet = load_workbook(out).worksheets[0]
        assert sheet.max_row == 10
        assert sheet["A1"].value == "Alice Smith"

        restored = DataTable(columns)
        restored.from_xlsx(out, props)
        assert restored == base_table

    def test_cells_are_typed(self, base_table, tmp_path):
        out = tmp_path / "t.xlsx"
        base_table.to_xlsx(out)
        sheet = load_workbook(out).worksheets[0]

        assert [c.value for c in sheet[1]] == HEADER
        assert sheet["B2"].value == 32
        assert sheet["B2"].number_format == "0"
        assert sheet["C2"].value == pytest.approx(65.2)
        assert sheet["C2"].number_format == "0.0000"
        assert sheet["D2"].value == "USD"
        assert sheet["E2"].value is True
        assert sheet["F2"].value == "601a13cf-eaa4-48f3-9e88-c92ecc386dfe"
        assert sheet["G2"].value == datetime(1989, 7, 20)
        assert sheet["G2"].number_format == "yyyy-mm-dd"
        assert sheet["H2"].value == datetime(1970, 1, 1)
        assert sheet["H2"].number_format == "yyyy-mm-dd hh:mm:ss"

    def test_nulls_are_blank(self, nullable_table, tmp_path):
        nullable_table.set_cell(None, 0, 1)
        nullable_table.set_cell(None, 0, 6)
        nullable_table.set_cell(None, 2, 0)
        out = tmp_path / "t.xlsx"
        nullable_table.to_xlsx(out)

        sheet = load_workbook(out).worksheets[0]
        assert sheet["B2"].value is None
        assert sheet["G2"].value is None
        assert sheet["A4"].value is None

        restored = DataTable(nullable_table.column_headers)
        restored.from_xlsx(out)
        assert restored == nullable_table

    def test_timestamps_use_zone(self, tmp_path):
        columns = [ColumnType("at", CellType.timestamp())]
        instant = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)
        table = DataTable(columns, [[instant]])
        tokyo = XLSXProperties(zone_id="Asia/Tokyo")
        out = tmp_path / "t.xlsx"
        table.to_xlsx(out, tokyo)

        assert load_workbook(out).worksheets[0]["A2"].value == datetime(2024, 5, 1, 21, 30)

        same_zone = DataTable(columns)
        same_zone.from_xlsx(out, tokyo)
        assert same_zone.get_cell(0, 0) == instant

        as_utc = DataTable(columns)
        as_utc.from_xlsx(out)
        assert as_utc.get_cell(0, 0) == datetime(2024, 5, 1, 21, 30, tzinfo=UTC)

    def test_rows_of_nulls_round_trip(self, tmp_path):
        columns = [
            ColumnType("a", CellType.string(), True),
            ColumnType("b", CellType.integer(), True),
        ]
        table = DataTable(columns, [[None, None], ["x", 1], [None, None]])
        out = tmp_path / "t.xlsx"
        table.to_xlsx(out)

        # 空セルも書式付きで出力される
        sheet = load_workbook(out).worksheets[0]
        assert sheet["A2"].value is None
        assert sheet["A2"].number_format == "@"
        assert sheet["B2"].number_format == "0"

        restored = DataTable(columns)
        restored.from_xlsx(out)
        assert restored.number_of_rows == 3
        assert restored == table

    def test_timestamps_keep_milliseconds(self, tmp_path):
        columns = [ColumnType("at", CellType.timestamp())]
        table = DataTable(
            columns,
            [
                [datetime(2024, 5, 6, 7, 8, 9, 999999, tzinfo=UTC)],
                [datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=UTC)],
            ],
        )
        out = tmp_path / "t.xlsx"
        table.to_xlsx(out)

        restored = DataTable(columns)
        restored.from_xlsx(out)
        # 切り捨て、次の秒へは繰り上げない
        assert restored.get_cell(0, 0) == datetime(2024, 5, 6, 7, 8, 9, 999000, tzinfo=UTC)
        assert restored.get_cell(1, 0) == datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=UTC)

    def test_custom_display_formats(self, tmp_path):
        columns = [
            ColumnType("day", CellType.date(DateFormatter(XLSXFormat.date(DateFormat.DAY_MONTH_YEAR)))),
            ColumnType(
                "at",
                CellType.timestamp(
                    TimestampFormatter(XLSXFormat.date_time(DateFormat.MONTH_DAY_YEAR, TimeFormat.HOUR_12))
                ),
            ),
        ]
        table = DataTable(columns, [[date(2001, 2, 3), datetime(2001, 2, 3, 16, 5, 6, tzinfo=UTC)]])
        out = tmp_path / "t.xlsx"
        table.to_xlsx(out)
        sheet = load_workbook(out).worksheets[0]
        assert sheet["A2"].number_format == "dd-mm-yyyy"
        assert sheet["B2"].number_format == "mm-dd-yyyy hh:mm:ss AM/PM"

        restored = DataTable(columns)
        restored.from_xlsx(out)
        assert restored == table


class TestXlsxTemplate:
    def test_header_and_column_formats(self, base_table, tmp_path):
        out = tmp_path / "template.xlsx"
        base_table.generate_xlsx_template(out)
        sheet = load_workbook(out).worksheets[0]
        assert sheet.max_row == 1
        assert [c.value for c in sheet[1]] == HEADER
        assert sheet.column_dimensions["B"].number_format == "0"
        assert sheet.column_dimensions["G"].number_format == "yyyy-mm-dd"
        assert sheet.column_dimensions["H"].number_format == "yyyy-mm-dd hh:mm:ss"

    def test_template_reads_back_empty(self, base_table, columns, tmp_path):
        out = tmp_path / "template.xlsx"
        base_table.generate_xlsx_template(out)
        table = DataTable(columns)
        table.from_xlsx(out)
        assert table.number_of_rows == 0


class TestFromXlsx:
    def test_formula_results_are_read_as_values(self, make_raw_xlsx):
        path = make_raw_xlsx([
            ["name", "age", "score"],
            [{"f": 'CONCATENATE("Al","ice")', "v": "Alice", "t": "str"}, {"f": "20+9", "v": 29}, {"f": "1/4", "v": 0.25}],
            ["Bob", 41, 1.5],
        ])
        table = DataTable(_simple_columns())
        table.from_xlsx(path)
        assert table.get_table() == [["Alice", 29, 0.25], ["Bob", 41, 1.5]]

    def test_formula_error_result(self, make_raw_xlsx):
        path = make_raw_xlsx([
            ["name", "age", "score"],
            ["Alice", 29, 1.0],
            ["Bob", 41, {"f": "1/0", "v": "#DIV/0!", "t": "e"}],
        ])
        with pytest.raises(InvalidCellTypeError) as exc:
            DataTable(_simple_columns()).from_xlsx(path)
        assert (exc.value.row_index, exc.value.column_index) == (1, 2)
        assert "C3" in str(exc.value)
        assert "#DIV/0!" in str(exc.value)

    def test_formula_without_cached_value_is_blank(self, make_raw_xlsx):
        rows = [
            ["name", "age", "score"],
            ["Alice", {"f": "A1+1"}, 1.0],
        ]
        table = DataTable(_simple_columns(optional=True))
        table.from_xlsx(make_raw_xlsx(rows, "optional.xlsx"))
        assert table.get_row(0) == ["Alice", None, 1.0]

        with pytest.raises(InvalidCellTypeError) as exc:
            DataTable(_simple_columns()).from_xlsx(make_raw_xlsx(rows, "required.xlsx"))
        assert (exc.value.row_index, exc.value.column_index) == (0, 1)

    def test_kind_mismatch(self, make_raw_xlsx):
        path = make_raw_xlsx([
            ["name", "age", "score"],
            ["Alice", 29, 1.0],
            ["Bob", "forty-one", 1.5],
        ])
        with pytest.raises(InvalidCellTypeError) as exc:
            DataTable(_simple_columns()).from_xlsx(path)
        assert (exc.value.row_index, exc.value.column_index) == (1, 1)
        assert "Expected data table cell type: INTEGER" in str(exc.value)
        assert "(cell B3)" in str(exc.value)

    def test_number_in_text_column(self, make_raw_xlsx):
        path = make_raw_xlsx([["name", "age", "score"], [12, 29, 1.0]])
        with pytest.raises(InvalidCellTypeError) as exc:
            DataTable(_simple_columns()).from_xlsx(path)
        assert exc.value.column_index == 0

    def test_fractional_number_in_integer_column(self, make_raw_xlsx):
        path = make_raw_xlsx([["name", "age", "score"], ["Alice", 29.5, 1.0]])
        with pytest.raises(InvalidCellTypeError):
            DataTable(_simple_columns()).from_xlsx(path)

    def test_integral_float_in_integer_column(self, make_raw_xlsx):
        path = make_raw_xlsx([["name", "age", "score"], ["Alice", 29.0, 1]])
        table = DataTable(_simple_columns())
        table.from_xlsx(path)
        assert table.get_row(0) == ["Alice", 29, 1.0]
        assert isinstance(table.get_cell(0, 1), int)
        assert isinstance(table.get_cell(0, 2), float)

    def test_text_cells_parsed_by_formatter(self, make_raw_xlsx, tmp_path):
        columns = [
            ColumnType("id", CellType.uuid()),
            ColumnType("currency", CellType.currency()),
            ColumnType("flag", CellType.boolean()),
        ]
        good = make_raw_xlsx([
            ["id", "currency", "flag"],
            ["601a13cf-eaa4-48f3-9e88-c92ecc386dfe", "EUR", False],
        ], "good.xlsx")
        table = DataTable(columns)
        table.from_xlsx(good)
        assert str(table.get_cell(0, 0)) == "601a13cf-eaa4-48f3-9e88-c92ecc386dfe"
        assert table.get_cell(0, 1).code == "EUR"
        assert table.get_cell(0, 2) is False

        bad = make_raw_xlsx([["id", "currency", "flag"], ["not-a-uuid", "EUR", True]], "bad.xlsx")
        with pytest.raises(InvalidCellTypeError) as exc:
            DataTable(columns).from_xlsx(bad)
        assert exc.value.column_index == 0
        assert "(cell A2)" in str(exc.value)

    def test_text_in_boolean_column(self, make_raw_xlsx):
        path = make_raw_xlsx([["flag"], ["true"]])
        with pytest.raises(InvalidCellTypeError):
            DataTable([ColumnType("flag", CellType.boolean())]).from_xlsx(path)

    def test_date_serial_number(self, make_raw_xlsx):
        # 32344 = 1988-07-20 in the 1900 date system
        path = make_raw_xlsx([["dob"], [32344]])
        table = DataTable([ColumnType("dob", CellType.date())])
        table.from_xlsx(path)
        assert table.get_cell(0, 0) == date(1988, 7, 20)

    def test_blank_rows_are_skipped(self, tmp_path):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(["name", "age", "score"])
        sheet.append(["Alice", 29, 1.0])
        sheet.append([None, None, None])
        sheet.append(["Bob", "x", 1.0])
        out = tmp_path / "blank.xlsx"
        workbook.save(out)

        with pytest.raises(InvalidCellTypeError) as exc:
            DataTable(_simple_columns()).from_xlsx(out)
        assert exc.value.row_index == 1
        assert "(cell B4)" in str(exc.value)

    def test_failed_read_leaves_table_unchanged(self, base_table, tmp_path):
        out = tmp_path / "t.xlsx"
        base_table.to_xlsx(out)
        workbook = load_workbook(out)
        workbook.worksheets[0]["B11"] = "old"
        workbook.save(out)

        before = base_table.copy()
        with pytest.raises(InvalidCellTypeError) as exc:
            base_table.from_xlsx(out)
        assert exc.value.row_index == 9
        assert base_table == before

    def test_not_a_workbook(self, columns, tmp_path):
        path = tmp_path / "fake.xlsx"
        path.write_bytes(b"name,age\nAlice,32\n")
        with pytest.raises(DataConversionError):
            DataTable(columns).from_xlsx(path)

    def test_only_first_sheet_is_read(self, tmp_path):
        workbook = Workbook()
        workbook.active.append(["name", "age", "score"])
        workbook.active.append(["Alice", 29, 1.0])
        extra = workbook.create_sheet("Other")
        extra.append(["name", "age", "score"])
        extra.append(["Bob", "bad", "bad"])
        out = tmp_path / "two.xlsx"
        workbook.save(out)

        table = DataTable(_simple_columns())
        table.from_xlsx(out)
        assert table.number_of_rows == 1


def test_invalid_zone_id():
    with pytest.raises(ValueError):
        XLSXProperties(zone_id="Mars/Olympus_Mons")
