from __future__ import annotations

from typing import List, Optional, Sequence

from .cells import CellData, SheetGrid
from .schema import Column, Row, RowSet, TableSchema
from .types import detect_column_type, extract_cell_value
from ..errors import (
    ColumnNameError,
    ColumnTypeError,
    InsufficientRowsError,
    NoColumnsError,
    TitleError,
)

MAX_NAME_LENGTH = 256

HEADER_ROW = 0
FIRST_DATA_ROW = 1


def _table_name(grid: SheetGrid, reserved_suffixes: Sequence[str]) -> str:
    title = grid.title
    if not isinstance(title, str) or not title or len(title) > MAX_NAME_LENGTH:
        raise TitleError("Sheet title is missing or invalid.")
    # DuckDB resolves identifiers case-insensitively
    folded = title.casefold()
    for suffix in reserved_suffixes:
        if suffix and folded.endswith(suffix.casefold()):
            raise TitleError(
                f"Sheet title {title!r} ends with {suffix!r}, which is reserved for reload tables."
            )
    return title


def _column_name(header: CellData, idx: int) -> str:
    name = header.effective_value.string_value if header.effective_value else None
    if not name or len(name) > MAX_NAME_LENGTH:
        raise ColumnNameError(
            f"Header cell at column {idx} must be a non-empty string of at most "
            f"{MAX_NAME_LENGTH} characters."
        )
    return name


def _probe_cell(row: List[CellData], idx: int) -> Optional[CellData]:
    return row[idx] if idx < len(row) else None


def infer_schema(
    grid: SheetGrid, schema_name: str, reserved_suffixes: Sequence[str] = ()
) -> TableSchema:
    """Build a table schema from the header row and the first data row.

    The header scan stops at the first header cell without a value. Column
    types come from the first data row's cell in the same position. Titles
    ending in one of ``reserved_suffixes`` are rejected so a sheet cannot take
    the name of another table's staging or old copy.
    """
    table_name = _table_name(grid, reserved_suffixes)

    if len(grid.rows) < 2:
        raise InsufficientRowsError(
            "A sheet needs at least two rows (header and one data row) to determine the schema."
        )

    header = list(grid.rows[HEADER_ROW])
    probe = list(grid.rows[FIRST_DATA_ROW])

    columns: List[Column] = []
    for idx, header_cell in enumerate(header):
        # end of columns
        if not header_cell.has_value:
            break

        name = _column_name(header_cell, idx)

        data_cell = _probe_cell(probe, idx)
        if data_cell is None or not data_cell.has_value:
            raise ColumnTypeError(
                f"Could not determine the type of column {name!r}: the first data row has no value."
            )
        columns.append(Column(name=name, type=detect_column_type(data_cell)))

    if not columns:
        raise NoColumnsError(f"Sheet {table_name!r} is missing a header row starting at row 0.")

    return TableSchema(schema_name=schema_name, table_name=table_name, columns=tuple(columns))


def extract_rows(table: TableSchema, grid: SheetGrid) -> RowSet:
    """Read the contiguous data block under the header.

    Extraction ends at the first row holding fewer cells than the table has
    columns, or at the first row whose values are all empty.
    """
    width = len(table.columns)
    rows: List[Row] = []

    for row in grid.rows[FIRST_DATA_ROW:]:
        if len(row) < width:
            break

        values = tuple(extract_cell_value(col, row[i]) for i, col in enumerate(table.columns))
        if all(v is None for v in values):
            break

        rows.append(values)

    return RowSet(table=table, rows=tuple(rows))
