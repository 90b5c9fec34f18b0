import json
from pathlib import Path
from typing import Sequence, Tuple

import duckdb
import pytest

from sheetdb.data.cells import SheetGrid, cell, grid_from_values, sheets_from_response
from sheetdb.data.schema import Column, ColumnType, TableSchema
from sheetdb.errors import GridFetchError
from sheetdb.store.swapper import AtomicTableSwapper

DATA_DIR = Path(__file__).parent / "data"


class MemorySheetSource:
    """In-memory SheetSource for tests; records every call it receives."""

    name = "memory"

    def __init__(self):
        self.grids = {}
        self.tokens = {}
        self.token_calls = []
        self.grid_calls = []

    def put(self, document_id: str, range: str, grid: SheetGrid, token: str = "v1"):
        self.grids[(document_id, range)] = grid
        self.tokens[document_id] = token

    def fetch_grid(self, document_id: str, range: str) -> SheetGrid:
        self.grid_calls.append((document_id, range))
        try:
            return self.grids[(document_id, range)]
        except KeyError:
            raise GridFetchError(f"No grid for {document_id} {range}")

    def fetch_freshness_token(self, document_id: str) -> str:
        self.token_calls.append(document_id)
        return self.tokens[document_id]


def make_schema(
    schema_name: str, table_name: str, columns: Sequence[Tuple[str, ColumnType]]
) -> TableSchema:
    return TableSchema(
        schema_name=schema_name,
        table_name=table_name,
        columns=tuple(Column(name=n, type=ColumnType(t)) for n, t in columns),
    )


def employee_grid(title: str = "Employees", n_rows: int = 3) -> SheetGrid:
    rows = [["Name", "Hire Date", "Salary", "Active"]]
    for i in range(n_rows):
        rows.append(
            [
                f"Person {i}",
                cell(44477 + i, number_format="DATE"),
                100000.0 + i,
                i % 2 == 0,
            ]
        )
    return grid_from_values(title, rows)


@pytest.fixture
def memory_source():
    return MemorySheetSource()


@pytest.fixture
def conn():
    con = duckdb.connect(":memory:")
    yield con
    con.close()


@pytest.fixture
def swapper(conn):
    return AtomicTableSwapper(conn)


@pytest.fixture
def api_sheets():
    with open(DATA_DIR / "employee_data.json", "r", encoding="utf-8") as f:
        return sheets_from_response(json.load(f))


@pytest.fixture
def make_employee_grid():
    return employee_grid
