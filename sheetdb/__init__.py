"""sheetdb: spreadsheet ranges served as DuckDB tables, reloaded atomically on change."""

from .config import ConnectorSettings
from .connector import SheetConnector
from .data.address import DocumentDescriptor, parse_address
from .data.cells import CellData, ExtendedValue, NumberFormat, SheetGrid
from .data.extract import extract_rows, infer_schema
from .data.schema import Column, ColumnType, RowSet, TableSchema
from .data.sheets_source import EnvTokenProvider, GoogleSheetsSource, ServiceAccountTokenProvider
from .data.source import SheetSource
from .data.types import detect_column_type, extract_cell_value, serial_to_datetime
from .reload import ReloadCoordinator, ReloadReport
from .store.freshness import FreshnessCache
from .store.swapper import AtomicTableSwapper
from .errors import (
    SheetDBError,
    AddressError,
    SchemaError,
    TitleError,
    InsufficientRowsError,
    ColumnNameError,
    ColumnTypeError,
    NoColumnsError,
    ConversionError,
    CellValueError,
    StoreError,
    FetchError,
    GridFetchError,
    FreshnessFetchError,
    ConfigError,
)

__all__ = [
    "ConnectorSettings",
    "SheetConnector",
    "DocumentDescriptor",
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
    "EnvTokenProvider",
    "GoogleSheetsSource",
    "ServiceAccountTokenProvider",
    "SheetSource",
    "detect_column_type",
    "extract_cell_value",
    "serial_to_datetime",
    "ReloadCoordinator",
    "ReloadReport",
    "FreshnessCache",
    "AtomicTableSwapper",
    "SheetDBError",
    "AddressError",
    "SchemaError",
    "TitleError",
    "InsufficientRowsError",
    "ColumnNameError",
    "ColumnTypeError",
    "NoColumnsError",
    "ConversionError",
    "CellValueError",
    "StoreError",
    "FetchError",
    "GridFetchError",
    "FreshnessFetchError",
    "ConfigError",
]
