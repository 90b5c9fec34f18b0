from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import duckdb

from sheetdb.data.schema import ColumnType, RowSet, TableSchema
from sheetdb.errors import StoreError

logger = logging.getLogger(__name__)

_DUCKDB_TYPES = {
    ColumnType.STRING: "VARCHAR",
    ColumnType.NUMBER: "DOUBLE",
    ColumnType.DATE: "DATE",
    ColumnType.DATETIME: "TIMESTAMP",
    ColumnType.BOOLEAN: "BOOLEAN",
}


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def duckdb_type(column_type: ColumnType) -> str:
    return _DUCKDB_TYPES.get(column_type, "VARCHAR")


@dataclass
class AtomicTableSwapper:
    """
    Publish tables into DuckDB without exposing partially loaded state.

    A reload is two steps:
      stage(): (re)create ``<table><staging_suffix>`` and fill it row by row.
      swap():  in one transaction rename the live table to ``<table><old_suffix>``
               (when it exists), rename staging to the live name, drop the old one.

    Swaps for the same physical table are serialized by a per-table lock.
    Every call works on its own cursor of ``conn``.
    """

    conn: duckdb.DuckDBPyConnection
    staging_suffix: str = "__staging"
    old_suffix: str = "__old"
    _locks: Dict[str, threading.Lock] = field(default_factory=dict, init=False, repr=False)
    _locks_guard: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    # ---------------------------
    # SQL generation
    # ---------------------------
    def table_ref(self, table: TableSchema, suffix: str = "") -> str:
        return f"{quote_ident(table.schema_name)}.{quote_ident(table.table_name + suffix)}"

    def create_schema_sql(self, table: TableSchema) -> str:
        return f"CREATE SCHEMA IF NOT EXISTS {quote_ident(table.schema_name)}"

    def create_table_sql(self, table: TableSchema, suffix: str = "") -> str:
        cols = ", ".join(f"{quote_ident(c.name)} {duckdb_type(c.type)}" for c in table.columns)
        return f"CREATE TABLE {self.table_ref(table, suffix)} ({cols})"

    def insert_sql(self, table: TableSchema, suffix: str = "") -> str:
        cols = ", ".join(quote_ident(c.name) for c in table.columns)
        params = ", ".join("?" for _ in table.columns)
        return f"INSERT INTO {self.table_ref(table, suffix)} ({cols}) VALUES ({params})"

    def drop_table_sql(self, table: TableSchema, suffix: str = "") -> str:
        return f"DROP TABLE IF EXISTS {self.table_ref(table, suffix)}"

    def rename_table_sql(self, table: TableSchema, from_suffix: str, to_suffix: str) -> str:
        # DuckDB takes an unqualified target name; the table stays in its schema.
        return (
            f"ALTER TABLE {self.table_ref(table, from_suffix)} "
            f"RENAME TO {quote_ident(table.table_name + to_suffix)}"
        )

    # ---------------------------
    # Execution
    # ---------------------------
    def _execute(self, cur: duckdb.DuckDBPyConnection, sql: str, params: Sequence[Any] = ()) -> None:
        start = time.perf_counter()
        if params:
            cur.execute(sql, list(params))
        else:
            cur.execute(sql)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug(f"Executed SQL: {sql} Runtime: {elapsed_ms:.1f}ms")

    def _bind(self, table: TableSchema, row: Sequence[Any]) -> List[Any]:
        out = []
        for col, value in zip(table.columns, row):
            if col.type == ColumnType.DATE and isinstance(value, datetime):
                value = value.date()
            out.append(value)
        return out

    def _table_lock(self, table: TableSchema) -> threading.Lock:
        key = table.qualified_name
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @property
    def reserved_suffixes(self) -> Tuple[str, str]:
        return (self.staging_suffix, self.old_suffix)

    def table_exists(self, table: TableSchema, suffix: str = "") -> bool:
        with self.conn.cursor() as cur:
            row = cur.execute(
                "SELECT 1 FROM information_schema.tables "
                "WHERE table_schema = ? AND table_name = ? LIMIT 1",
                [table.schema_name, table.table_name + suffix],
            ).fetchone()
        return row is not None

    def stage(self, table: TableSchema, rows: Iterable[Sequence[Any]]) -> int:
        """Build the staging table for ``table``; return the number of rows inserted."""
        insert = self.insert_sql(table, self.staging_suffix)
        n = 0
        try:
            with self.conn.cursor() as cur:
                self._execute(cur, self.create_schema_sql(table))
                self._execute(cur, self.drop_table_sql(table, self.staging_suffix))
                self._execute(cur, self.create_table_sql(table, self.staging_suffix))
                for row in rows:
                    self._execute(cur, insert, self._bind(table, row))
                    n += 1
        except duckdb.Error as exc:
            self._discard_staging(table)
            raise StoreError(f"Unable to stage table {table.qualified_name}: {exc}") from exc
        return n

    def _discard_staging(self, table: TableSchema) -> None:
        try:
            with self.conn.cursor() as cur:
                self._execute(cur, self.drop_table_sql(table, self.staging_suffix))
        except duckdb.Error as exc:
            logger.warning(f"Unable to drop staging table for {table.qualified_name}: {exc}")

    def swap(self, table: TableSchema) -> None:
        """Make the staged table live under its permanent name."""
        with self._table_lock(table):
            had_live = self.table_exists(table)
            try:
                with self.conn.cursor() as cur:
                    # leftover from an interrupted swap
                    self._execute(cur, self.drop_table_sql(table, self.old_suffix))
                    self._execute(cur, "BEGIN TRANSACTION")
                    try:
                        if had_live:
                            self._execute(
                                cur, self.rename_table_sql(table, "", self.old_suffix)
                            )
                        self._execute(
                            cur, self.rename_table_sql(table, self.staging_suffix, "")
                        )
                        if had_live:
                            self._execute(cur, self.drop_table_sql(table, self.old_suffix))
                        self._execute(cur, "COMMIT")
                    except duckdb.Error:
                        cur.execute("ROLLBACK")
                        raise
            except duckdb.Error as exc:
                raise StoreError(f"Unable to swap table {table.qualified_name}: {exc}") from exc

    def stage_and_swap(self, rowset: RowSet) -> int:
        n = self.stage(rowset.table, rowset.rows)
        self.swap(rowset.table)
        logger.info(f"Swapped in {rowset.table.qualified_name} rows={n}")
        return n
