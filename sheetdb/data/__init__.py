from .address import DocumentDescriptor, accepts_address, parse_address
from .cells import CellData, ExtendedValue, NumberFormat, SheetGrid
from .extract import extract_rows, infer_schema
from .schema import Column, ColumnType, RowSet, TableSchema
from .source import SheetSource
from .types import detect_column_type, extract_cell_value, serial_to_datetime

__all__ = [
    "DocumentDescriptor",
    "accepts_address",
    "parse_address",
    "CellData",
    "ExtendedValue",
    "NumberFormat",
    "SheetGrid",
    "extract_rows",
    "infer_schema",
    "Column",
    "ColumnType",
    "RowSet",
    "TableSchema",
    "SheetSource",
    "detect_column_type",
    "extract_cell_value",
    "serial_to_datetime",
]
