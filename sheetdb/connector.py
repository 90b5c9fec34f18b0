from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import duckdb
import pandas as pd

from .config import ConnectorSettings
from .data.address import accepts_address, parse_address
from .data.sheets_source import EnvTokenProvider, GoogleSheetsSource, ServiceAccountTokenProvider
from .data.source import SheetSource
from .errors import AddressError
from .reload import ReloadCoordinator, ReloadReport
from .store.freshness import FreshnessCache
from .store.swapper import AtomicTableSwapper, quote_ident


@dataclass
class SheetConnector:
    """
    Serve spreadsheet ranges as DuckDB tables.

    ``connect(address)`` refreshes every document named in the address (only
    those whose freshness token moved) and returns a cursor onto the shared
    database. The connector owns the freshness cache for its lifetime.
    """

    source: Optional[SheetSource] = None
    settings: ConnectorSettings = field(default_factory=ConnectorSettings)
    cache: FreshnessCache = field(init=False)
    swapper: AtomicTableSwapper = field(init=False)
    coordinator: ReloadCoordinator = field(init=False)
    last_report: Optional[ReloadReport] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.source is None:
            if self.settings.credentials_env:
                token_provider = ServiceAccountTokenProvider(self.settings.credentials_env)
            else:
                token_provider = EnvTokenProvider(self.settings.access_token_env)
            self.source = GoogleSheetsSource(
                token_provider=token_provider,
                timeout=self.settings.request_timeout,
            )
        self._conn = duckdb.connect(self.settings.database)
        self.cache = FreshnessCache()
        self.swapper = AtomicTableSwapper(
            self._conn,
            staging_suffix=self.settings.staging_suffix,
            old_suffix=self.settings.old_suffix,
        )
        self.coordinator = ReloadCoordinator(self.source, self.swapper, self.cache)

    @staticmethod
    def accepts_address(address: str) -> bool:
        return accepts_address(address)

    def refresh(self, address: str) -> ReloadReport:
        if not accepts_address(address):
            raise AddressError(f"Unsupported connection address: {address}")
        report = self.coordinator.reload(parse_address(address))
        self.last_report = report
        return report

    def connect(self, address: str) -> duckdb.DuckDBPyConnection:
        self.refresh(address)
        return self._conn.cursor()

    def read_table(self, schema: str, table: str) -> pd.DataFrame:
        with self._conn.cursor() as cur:
            return cur.execute(
                f"SELECT * FROM {quote_ident(schema)}.{quote_ident(table)}"
            ).fetch_df()

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> SheetConnector:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
