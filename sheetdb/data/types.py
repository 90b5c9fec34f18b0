from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from .cells import CellData
from .schema import Column, ColumnType
from ..errors import CellValueError, ConversionError

# Spreadsheet serial numbers count days from 1899-12-30.
SERIAL_EPOCH = datetime(1899, 12, 30, 0, 0, 0)
SECONDS_PER_DAY = 86400

_DATE_FORMAT = "DATE"
_DATETIME_FORMAT = "DATE_TIME"


def detect_column_type(cell: CellData) -> ColumnType:
    """Classify a cell, preferring its number format over its value."""
    if cell.number_format is not None:
        if cell.number_format.type == _DATE_FORMAT:
            return ColumnType.DATE
        if cell.number_format.type == _DATETIME_FORMAT:
            return ColumnType.DATETIME
        return ColumnType.NUMBER

    value = cell.effective_value
    if value is not None:
        if value.bool_value is not None:
            return ColumnType.BOOLEAN
        if value.number_value is not None:
            return ColumnType.NUMBER

    return ColumnType.STRING


def serial_to_datetime(serial: Any) -> datetime:
    """Convert a day-count serial number to a naive datetime."""
    if isinstance(serial, bool):
        raise ConversionError(f"Serial date must be numeric, got boolean {serial!r}")
    try:
        days = float(serial)
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"Serial date must be numeric, got {serial!r}") from exc
    try:
        return SERIAL_EPOCH + timedelta(seconds=round(days * SECONDS_PER_DAY))
    except (ValueError, OverflowError) as exc:
        raise ConversionError(f"Serial date out of range: {serial!r}") from exc


def extract_cell_value(column: Column, cell: CellData) -> Any:
    if cell.effective_value is None:
        return None

    values = cell.effective_value.populated()
    if len(values) != 1:
        raise CellValueError(
            f"Invalid value {cell.effective_value} for column {column.name!r}: "
            f"expected exactly one populated variant, found {len(values)}"
        )

    value = values[0]
    if column.type in (ColumnType.DATE, ColumnType.DATETIME):
        return serial_to_datetime(value)
    return value
