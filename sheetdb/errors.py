"""
Exception types raised while parsing addresses, reading sheets and loading tables.

Every failure mode has its own class so callers can tell them apart:
- AddressError: malformed connection address (raised before any I/O).
- SchemaError and subclasses: the sheet header cannot describe a table.
- ConversionError: a serial date could not be read as a number.
- CellValueError: a cell payload had zero or several populated variants.
- StoreError: DuckDB rejected a DDL/DML statement while staging or swapping.
- GridFetchError / FreshnessFetchError: the sheet source failed.
- ConfigError: invalid runtime settings.

The reload coordinator attaches the failing DocumentDescriptor to the raised
error as ``error.descriptor``.
"""

from __future__ import annotations

from typing import Any, Optional

__all__ = [
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


class SheetDBError(Exception):
    """Base class for sheetdb failures."""

    def __init__(self, message: str = "", *, descriptor: Optional[Any] = None):
        super().__init__(message)
        self.descriptor = descriptor

    def __str__(self) -> str:
        msg = super().__str__()
        if self.descriptor is not None:
            return f"{msg} [document={self.descriptor}]"
        return msg


class AddressError(SheetDBError, ValueError):
    """Connection address does not match the address grammar."""


class SchemaError(SheetDBError, ValueError):
    """Sheet header could not be turned into a table schema."""


class TitleError(SchemaError):
    """Sheet title is missing, empty or longer than 256 characters."""


class InsufficientRowsError(SchemaError):
    """Sheet holds fewer than two rows (header plus one data row)."""


class ColumnNameError(SchemaError):
    """Header cell is not a non-empty string of at most 256 characters."""


class ColumnTypeError(SchemaError):
    """First data row has no value to detect a column type from."""


class NoColumnsError(SchemaError):
    """Header row has no populated cell at its first position."""


class ConversionError(SheetDBError, ValueError):
    """Serial date value is not numeric."""


class CellValueError(SheetDBError, ValueError):
    """Cell payload carries zero or multiple populated value variants."""


class StoreError(SheetDBError, RuntimeError):
    """DDL/DML failure while staging or swapping a table."""


class FetchError(SheetDBError, RuntimeError):
    """Sheet source failure."""


class GridFetchError(FetchError):
    """Retrieving a document's cell grid failed."""


class FreshnessFetchError(FetchError):
    """Retrieving a document's freshness token failed."""


class ConfigError(SheetDBError, ValueError):
    """Invalid or missing configuration."""
