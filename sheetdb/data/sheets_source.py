from __future__ import annotations

import json
import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Type

import google.auth.exceptions
import google.auth.transport.requests
import requests
from google.oauth2 import service_account

from .cells import SheetGrid, sheets_from_response
from ..errors import ConfigError, FetchError, FreshnessFetchError, GridFetchError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str]

READONLY_SCOPES = (
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
)


class EnvTokenProvider:
    """Reads a Google OAuth bearer token from an environment variable on every call."""

    def __init__(self, env_var: str = "SHEETDB_ACCESS_TOKEN"):
        self.env_var = env_var

    def __call__(self) -> str:
        token = os.getenv(self.env_var)
        if not token:
            raise ConfigError(
                f"{self.env_var} must be set as an environment variable with a Google API access token"
            )
        return token


class ServiceAccountTokenProvider:
    """
    Issues bearer tokens for a Google service account and refreshes them on expiry.

    The service-account key JSON is read from ``env_var`` the first time a
    token is needed, scoped to read-only Sheets and Drive metadata access.
    Tests (or callers holding their own key) can pass ``credentials`` directly.
    """

    def __init__(
        self,
        env_var: str = "SHEETDB_CREDENTIALS",
        credentials: Optional[Any] = None,
        request: Optional[Any] = None,
    ):
        self.env_var = env_var
        self._credentials = credentials
        self._request = request
        self._lock = threading.Lock()

    def _load(self) -> service_account.Credentials:
        raw = os.getenv(self.env_var)
        if not raw:
            raise ConfigError(
                f"{self.env_var} must be set as an environment variable with the service account key JSON"
            )
        try:
            info = json.loads(raw)
            return service_account.Credentials.from_service_account_info(
                info, scopes=list(READONLY_SCOPES)
            )
        except ValueError as exc:
            raise ConfigError(f"{self.env_var} does not hold a valid service account key: {exc}") from exc

    def __call__(self) -> str:
        with self._lock:
            if self._credentials is None:
                self._credentials = self._load()
            if not self._credentials.valid:
                if self._request is None:
                    self._request = google.auth.transport.requests.Request()
                self._credentials.refresh(self._request)
                logger.debug("Refreshed service account token")
            return self._credentials.token


class GoogleSheetsSource:
    """
    Sheet source backed by the Google Sheets and Drive REST APIs.

    Grids come from spreadsheets.get with grid data for a single range;
    freshness tokens are the Drive ``modifiedTime`` of the document.
    """

    name: str = "google_sheets"

    SHEETS_URL = "https://sheets.googleapis.com/v4/spreadsheets"
    DRIVE_URL = "https://www.googleapis.com/drive/v3/files"
    GRID_FIELDS = (
        "sheets(data(rowData(values(effectiveValue,effectiveFormat(numberFormat))))"
        ",properties(title))"
    )

    def __init__(
        self,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.token_provider = token_provider or EnvTokenProvider()
        self.timeout = timeout
        self._session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token_provider()}",
            "Accept": "application/json",
        }

    def _get(
        self, url: str, params: Dict[str, Any], error_cls: Type[FetchError]
    ) -> Dict[str, Any]:
        try:
            headers = self._headers()
        except google.auth.exceptions.GoogleAuthError as exc:
            raise error_cls(f"Unable to obtain Google credentials for {url}: {exc}") from exc

        try:
            response = self._session.get(url, headers=headers, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise error_cls(f"Request to {url} failed: {exc}") from exc

        if response.status_code != 200:
            raise error_cls(f"API error {response.status_code} from {url}: {response.text[:200]}")

        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(f"Invalid JSON returned from {url}") from exc

    def fetch_grid(self, document_id: str, range: str) -> SheetGrid:
        payload = self._get(
            f"{self.SHEETS_URL}/{document_id}",
            {"ranges": range, "includeGridData": "true", "fields": self.GRID_FIELDS},
            GridFetchError,
        )
        sheets = sheets_from_response(payload)
        if len(sheets) != 1:
            raise GridFetchError(
                f"Expected exactly one sheet for {document_id} range {range}, got {len(sheets)}"
            )
        logger.debug(f"fetch_grid: {document_id} {range} rows={len(sheets[0].rows)}")
        return sheets[0]

    def fetch_freshness_token(self, document_id: str) -> str:
        payload = self._get(
            f"{self.DRIVE_URL}/{document_id}",
            {"fields": "modifiedTime"},
            FreshnessFetchError,
        )
        modified = payload.get("modifiedTime")
        if not modified:
            raise FreshnessFetchError(
                f"Server did not return a modification time for {document_id}"
            )
        return str(modified)
