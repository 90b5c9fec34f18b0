"""
Runtime settings for a SheetConnector.

Precedence is env > base (if provided) > defaults. Recognized variables
(default prefix ``SHEETDB_``):
    - SHEETDB_DATABASE: DuckDB database path, ":memory:" for in-process only
    - SHEETDB_REQUEST_TIMEOUT: seconds for each Google API request
    - SHEETDB_ACCESS_TOKEN_ENV: name of the variable holding the bearer token
    - SHEETDB_CREDENTIALS_ENV: name of the variable holding a service account
      key JSON; when set, tokens are issued and refreshed from that key
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from .errors import ConfigError


@dataclass(frozen=True)
class ConnectorSettings:
    database: str = ":memory:"
    access_token_env: str = "SHEETDB_ACCESS_TOKEN"
    credentials_env: Optional[str] = None
    request_timeout: float = 30.0
    staging_suffix: str = "__staging"
    old_suffix: str = "__old"

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if not self.staging_suffix or not self.old_suffix:
            raise ConfigError("staging_suffix and old_suffix must be non-empty")
        if self.staging_suffix == self.old_suffix:
            raise ConfigError("staging_suffix and old_suffix must differ")

    @classmethod
    def from_env(
        cls, base: Optional[ConnectorSettings] = None, prefix: str = "SHEETDB_"
    ) -> ConnectorSettings:
        s = base or cls()

        v = os.getenv(prefix + "DATABASE")
        if v:
            s = replace(s, database=v)

        v = os.getenv(prefix + "REQUEST_TIMEOUT")
        if v:
            try:
                timeout = float(v)
            except ValueError as exc:
                raise ConfigError(f"{prefix}REQUEST_TIMEOUT must be a number, got {v!r}") from exc
            s = replace(s, request_timeout=timeout)

        v = os.getenv(prefix + "ACCESS_TOKEN_ENV")
        if v:
            s = replace(s, access_token_env=v)

        v = os.getenv(prefix + "CREDENTIALS_ENV")
        if v:
            s = replace(s, credentials_env=v)

        return s
