from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

import pandas as pd


class ColumnType(str, Enum):
    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    DATETIME = "DATETIME"


@dataclass(frozen=True)
class Column:
    name: str
    type: ColumnType


@dataclass(frozen=True)
class TableSchema:
    """Ordered column list for one sheet, loaded as ``schema_name.table_name``.

    Column order is the header's left-to-right order. Duplicate header names
    are kept as they are; the store rejects them when the table is created.
    """

    schema_name: str
    table_name: str
    columns: Tuple[Column, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        if not self.columns:
            raise ValueError("TableSchema requires at least one column.")

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


Row = Tuple[Any, ...]


@dataclass(frozen=True)
class RowSet:
    """Rows extracted from a sheet, each aligned with ``table.columns``."""

    table: TableSchema
    rows: Tuple[Row, ...]

    def __post_init__(self) -> None:
        rows = tuple(tuple(r) for r in self.rows)
        width = len(self.table.columns)
        for i, r in enumerate(rows):
            if len(r) != width:
                raise ValueError(
                    f"Row {i} has {len(r)} values, expected {width} for {self.table.qualified_name}"
                )
        object.__setattr__(self, "rows", rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def to_frame(self) -> pd.DataFrame:
        # positional construction keeps duplicate header names intact
        df = pd.DataFrame(list(self.rows), columns=range(len(self.table.columns)))
        df.columns = self.table.column_names
        return df
