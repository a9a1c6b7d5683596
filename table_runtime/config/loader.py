from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..csv.properties import CSVProperties
from ..data_table import DataTable
from ..excel.properties import XLSXProperties
from ..models.cell_type import CellType, ColumnType
from ..models.data_format import DateFormat, TimeFormat, XLSXFormat
from ..models.formatters import (
    BooleanFormatter,
    BooleanType,
    CellFormatter,
    CurrencyFormatter,
    CurrencyFormatType,
    DateFormatter,
    DecimalFormatter,
    TimestampFormatter,
)

"""Table profile loader.

A table profile is a YAML document describing a column schema and the codec
properties to use with it. It is validated against
``table_profile_schema.json`` (shipped next to this module) and then turned
into ColumnType / CSVProperties / XLSXProperties values.

Keys that only make sense for some column types (``precision`` for decimal,
``format`` for boolean and currency, ``date_format`` / ``time_format`` for
date and timestamp) are rejected on other types.
"""

__all__ = [
    "ConfigError",
    "SCHEMA_PATH",
    "TableProfile",
    "load_config",
    "parse_profile",
]

SCHEMA_PATH = Path(__file__).with_name("table_profile_schema.json")

_BOOLEAN_FORMATS = {bt.name.lower(): bt for bt in BooleanType}
_CURRENCY_FORMATS = {ct.value: ct for ct in CurrencyFormatType}
_DATE_FORMATS = {df.name.lower(): df for df in DateFormat}
_TIME_FORMATS = {tf.name.lower(): tf for tf in TimeFormat}


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class TableProfile:
    columns: tuple[ColumnType, ...]
    csv: CSVProperties
    xlsx: XLSXProperties
    source_directory: str | None = None

    def new_table(self) -> DataTable:
        """Empty table with this profile's schema."""
        return DataTable(self.columns)


def _validate_config_schema(data: Any) -> None:
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"config validation failed at {location}: {e.message}") from e


def load_config(path: Path) -> TableProfile:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    return parse_profile(data)


def parse_profile(data: Any) -> TableProfile:
    """Validate an already decoded profile document and build the TableProfile."""
    _validate_config_schema(data)

    columns = tuple(_build_column(raw) for raw in data["columns"])
    names = [c.name for c in columns]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigError(f"duplicate column names: {duplicates}")

    try:
        csv_props = CSVProperties(**data.get("csv", {}))
        xlsx_props = XLSXProperties(**data.get("xlsx", {}))
    except ValueError as e:
        raise ConfigError(f"invalid codec properties: {e}") from e

    return TableProfile(
        columns=columns,
        csv=csv_props,
        xlsx=xlsx_props,
        source_directory=data.get("source_directory"),
    )


def _build_column(raw: dict[str, Any]) -> ColumnType:
    name = raw["name"]
    type_name = raw["type"]
    allowed = {"name", "type", "optional"}
    formatter: CellFormatter | None = None

    if type_name == "decimal":
        allowed.add("precision")
        if "precision" in raw:
            formatter = DecimalFormatter(raw["precision"])
    elif type_name == "boolean":
        allowed.add("format")
        if "format" in raw:
            formatter = BooleanFormatter(_lookup(_BOOLEAN_FORMATS, raw["format"], name))
    elif type_name == "currency":
        allowed.add("format")
        if "format" in raw:
            formatter = CurrencyFormatter(_lookup(_CURRENCY_FORMATS, raw["format"], name))
    elif type_name == "date":
        allowed.add("date_format")
        if "date_format" in raw:
            formatter = DateFormatter(XLSXFormat.date(_DATE_FORMATS[raw["date_format"]]))
    elif type_name == "timestamp":
        allowed.update({"date_format", "time_format"})
        if "date_format" in raw or "time_format" in raw:
            date_format = _DATE_FORMATS[raw.get("date_format", "year_month_day")]
            time_format = _TIME_FORMATS[raw.get("time_format", "hour_24")]
            formatter = TimestampFormatter(XLSXFormat.date_time(date_format, time_format))

    unexpected = sorted(set(raw) - allowed)
    if unexpected:
        raise ConfigError(f"column {name}: keys {unexpected} do not apply to type {type_name}")

    factory = getattr(CellType, type_name)
    return ColumnType(name, factory(formatter), optional=raw.get("optional", False))


def _lookup(table: dict[str, Any], key: str, column: str) -> Any:
    try:
        return table[key]
    except KeyError:
        raise ConfigError(f"column {column}: format {key!r} is not valid here (choose from {sorted(table)})") from None
