#!/usr/bin/env python3
"""Dataset generation script for performance testing.

Generates a synthetic table with one column of every cell kind, writes it as
``.csv`` or ``.xlsx`` (by suffix) and writes the matching table profile next
to it, so the result can be fed straight to ``python -m table_runtime.cli``.
"""
from __future__ import annotations

import argparse
import sys
import uuid
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from table_runtime import CellType, ColumnType, Currency, DataTable

PERF_COLUMNS = [
    ColumnType("id", CellType.integer()),
    ColumnType("name", CellType.string()),
    ColumnType("amount", CellType.decimal(precision=2)),
    ColumnType("active", CellType.boolean()),
    ColumnType("key", CellType.uuid()),
    ColumnType("day", CellType.date()),
    ColumnType("created", CellType.timestamp()),
    ColumnType("currency", CellType.currency()),
    ColumnType("note", CellType.string(), optional=True),
]

PROFILE = {
    "columns": [
        {"name": "id", "type": "integer"},
        {"name": "name", "type": "string"},
        {"name": "amount", "type": "decimal", "precision": 2},
        {"name": "active", "type": "boolean"},
        {"name": "key", "type": "uuid"},
        {"name": "day", "type": "date"},
        {"name": "created", "type": "timestamp"},
        {"name": "currency", "type": "currency"},
        {"name": "note", "type": "string", "optional": True},
    ],
}

CURRENCY_CODES = ["USD", "EUR", "JPY", "CAD", "GBP"]
EPOCH_START = datetime(2023, 1, 1, tzinfo=UTC)


def generate_rows(rows: int, seed: int = 42) -> list[list[Any]]:
    """Synthetic rows matching PERF_COLUMNS (reproducible for a given seed)."""
    rng = np.random.default_rng(seed)
    amounts = np.round(rng.uniform(0.01, 9999.99, rows), 2)
    flags = rng.integers(0, 2, rows).astype(bool)
    day_offsets = rng.integers(0, 730, rows)
    second_offsets = rng.integers(0, 730 * 86_400, rows)
    currency_idx = rng.integers(0, len(CURRENCY_CODES), rows)
    key_bytes = rng.integers(0, 256, (rows, 16), dtype=np.uint8)
    currencies = [Currency.of(code) for code in CURRENCY_CODES]
    start_day = EPOCH_START.date()

    data: list[list[Any]] = []
    for i in range(rows):
        data.append([
            i + 1,
            f"Item_{i:06d}",
            float(amounts[i]),
            bool(flags[i]),
            uuid.UUID(bytes=key_bytes[i].tobytes()),
            start_day + timedelta(days=int(day_offsets[i])),
            EPOCH_START + timedelta(seconds=int(second_offsets[i])),
            currencies[int(currency_idx[i])],
            None if i % 10 == 0 else f"note {i}",
        ])
    return data


def build_table(rows: int, seed: int = 42) -> DataTable:
    return DataTable(PERF_COLUMNS, generate_rows(rows, seed))


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic table dataset (+ profile) for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/perf.csv
  %(prog)s data/perf.xlsx --rows 100000 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.csv or .xlsx)")
    parser.add_argument("--rows", type=int, default=100_000, help="Number of data rows (default: 100,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--profile",
        type=Path,
        default=None,
        help="Where to write the table profile (default: <output>.yml)",
    )
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    suffix = args.output.suffix.lower()
    if suffix not in (".csv", ".xlsx"):
        print("Error: output must end with .csv or .xlsx", file=sys.stderr)
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)
    table = build_table(args.rows, args.seed)
    if suffix == ".csv":
        table.to_csv(args.output)
    else:
        table.to_xlsx(args.output)

    profile_path = args.profile or args.output.with_suffix(".yml")
    profile_path.write_text(yaml.safe_dump(PROFILE, sort_keys=False), encoding="utf-8")

    print(f"Created {args.output} rows={args.rows:,} columns={len(PERF_COLUMNS)}")
    print(f"Profile: {profile_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
