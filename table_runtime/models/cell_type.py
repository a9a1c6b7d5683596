from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .cell_kind import CellKind
from .formatters import (
    BooleanFormatter,
    CellFormatter,
    CurrencyFormatter,
    DateFormatter,
    DecimalFormatter,
    IntegerFormatter,
    StringFormatter,
    TimestampFormatter,
    UUIDFormatter,
    default_formatter,
)

"""Column schema types: CellType (kind + formatter) and ColumnType."""

__all__ = [
    "CellType",
    "ColumnType",
]


@dataclass(frozen=True)
class CellType:
    """Value kind of a column together with the formatter used to render it.

    Use the factory constructors (``CellType.integer()`` etc.) rather than
    building instances directly; each accepts an optional custom formatter.
    """
    kind: CellKind
    formatter: CellFormatter = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.formatter is None:
            object.__setattr__(self, "formatter", default_formatter(self.kind))
        elif self.formatter.kind is not self.kind:
            raise ValueError(
                f"formatter {self.formatter!r} handles {self.formatter.kind.name}, "
                f"not {self.kind.name}"
            )

    def accepts(self, value: Any) -> bool:
        return self.kind.accepts(value)

    @property
    def name(self) -> str:
        return self.kind.name

    @classmethod
    def string(cls, formatter: StringFormatter | None = None) -> CellType:
        return cls(CellKind.STRING, formatter)  # type: ignore[arg-type]

    @classmethod
    def integer(cls, formatter: IntegerFormatter | None = None) -> CellType:
        return cls(CellKind.INTEGER, formatter)  # type: ignore[arg-type]

    @classmethod
    def decimal(cls, formatter: DecimalFormatter | None = None, *, precision: int | None = None) -> CellType:
        if formatter is None and precision is not None:
            formatter = DecimalFormatter(precision)
        return cls(CellKind.DECIMAL, formatter)  # type: ignore[arg-type]

    @classmethod
    def boolean(cls, formatter: BooleanFormatter | None = None) -> CellType:
        return cls(CellKind.BOOLEAN, formatter)  # type: ignore[arg-type]

    @classmethod
    def uuid(cls, formatter: UUIDFormatter | None = None) -> CellType:
        return cls(CellKind.UUID, formatter)  # type: ignore[arg-type]

    @classmethod
    def date(cls, formatter: DateFormatter | None = None) -> CellType:
        return cls(CellKind.DATE, formatter)  # type: ignore[arg-type]

    @classmethod
    def timestamp(cls, formatter: TimestampFormatter | None = None) -> CellType:
        return cls(CellKind.TIMESTAMP, formatter)  # type: ignore[arg-type]

    @classmethod
    def currency(cls, formatter: CurrencyFormatter | None = None) -> CellType:
        return cls(CellKind.CURRENCY, formatter)  # type: ignore[arg-type]


@dataclass(frozen=True)
class ColumnType:
    """One column of a DataTable schema."""
    name: str
    type: CellType
    optional: bool = False  # null を許容するか
