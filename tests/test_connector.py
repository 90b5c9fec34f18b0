import pytest

from sheetdb.config import ConnectorSettings
from sheetdb.connector import SheetConnector
from sheetdb.data.address import DocumentDescriptor
from sheetdb.data.sheets_source import (
    EnvTokenProvider,
    GoogleSheetsSource,
    ServiceAccountTokenProvider,
)
from sheetdb.errors import AddressError, ConfigError

ADDRESS = (
    "sheetdb://doc=(id=doc1,range=Employees!A1:D20),"
    "doc=(id=doc2,range=Drum%20Inventory!A1:C5)/MySchema"
)


@pytest.fixture
def loaded_source(memory_source, make_employee_grid):
    memory_source.put("doc1", "Employees!A1:D20", make_employee_grid("Employees"), token="t1")
    memory_source.put(
        "doc2", "Drum Inventory!A1:C5", make_employee_grid("Drum Inventory", n_rows=2), token="t1"
    )
    return memory_source


def test_connect_loads_every_document(loaded_source):
    with SheetConnector(source=loaded_source) as connector:
        cur = connector.connect(ADDRESS)

        count = cur.execute('SELECT COUNT(*) FROM "MySchema"."Employees"').fetchone()[0]
        assert count == 3
        total = cur.execute(
            'SELECT SUM("Salary") FROM "MySchema"."Drum Inventory"'
        ).fetchone()[0]
        assert total == 200001.0
        assert connector.last_report.reloaded == [
            DocumentDescriptor("doc1", "Employees!A1:D20", "MySchema"),
            DocumentDescriptor("doc2", "Drum Inventory!A1:C5", "MySchema"),
        ]


def test_second_connect_skips_unchanged(loaded_source):
    with SheetConnector(source=loaded_source) as connector:
        connector.connect(ADDRESS)
        connector.connect(ADDRESS)

        assert len(loaded_source.grid_calls) == 2
        assert len(loaded_source.token_calls) == 4
        assert len(connector.last_report.unchanged) == 2


def test_read_table_returns_frame(loaded_source):
    with SheetConnector(source=loaded_source) as connector:
        connector.refresh(ADDRESS)
        df = connector.read_table("MySchema", "Employees")

    assert list(df.columns) == ["Name", "Hire Date", "Salary", "Active"]
    assert len(df) == 3
    assert df["Name"].tolist() == ["Person 0", "Person 1", "Person 2"]
    assert df["Active"].tolist() == [True, False, True]


def test_connectors_keep_separate_caches(loaded_source):
    with SheetConnector(source=loaded_source) as a, SheetConnector(source=loaded_source) as b:
        a.refresh(ADDRESS)
        b.refresh(ADDRESS)

        assert len(a.cache) == 2 and len(b.cache) == 2
        assert a.cache is not b.cache
    assert len(loaded_source.grid_calls) == 4


def test_malformed_address_never_reaches_source(memory_source):
    with SheetConnector(source=memory_source) as connector:
        with pytest.raises(AddressError):
            connector.connect("sheetdb://doc=(id=doc1,range=Employees!A1:D20)")
        with pytest.raises(AddressError):
            connector.connect("jdbc:mysql://localhost/db")

    assert memory_source.token_calls == []
    assert not SheetConnector.accepts_address("jdbc:mysql://localhost/db")


def test_on_disk_database(tmp_path, loaded_source):
    settings = ConnectorSettings(database=str(tmp_path / "sheets.duckdb"))
    with SheetConnector(source=loaded_source, settings=settings) as connector:
        connector.refresh(ADDRESS)
    with SheetConnector(source=loaded_source, settings=settings) as connector:
        df = connector.read_table("MySchema", "Employees")
    assert len(df) == 3


def test_default_source_is_google(monkeypatch):
    monkeypatch.setenv("MY_TOKEN", "abc")
    settings = ConnectorSettings(access_token_env="MY_TOKEN", request_timeout=5)
    with SheetConnector(settings=settings) as connector:
        assert isinstance(connector.source, GoogleSheetsSource)
        assert connector.source.timeout == 5
        assert isinstance(connector.source.token_provider, EnvTokenProvider)
        assert connector.source.token_provider.env_var == "MY_TOKEN"


def test_service_account_settings_select_service_account_tokens():
    settings = ConnectorSettings(credentials_env="MY_SA_KEY")
    with SheetConnector(settings=settings) as connector:
        provider = connector.source.token_provider
        assert isinstance(provider, ServiceAccountTokenProvider)
        assert provider.env_var == "MY_SA_KEY"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SHEETDB_DATABASE", "/tmp/x.duckdb")
    monkeypatch.setenv("SHEETDB_CREDENTIALS_ENV", "GSHEET_KEY")
    monkeypatch.setenv("SHEETDB_REQUEST_TIMEOUT", "12.5")
    s = ConnectorSettings.from_env()

    assert s.database == "/tmp/x.duckdb"
    assert s.request_timeout == 12.5
    assert s.credentials_env == "GSHEET_KEY"
    assert s.staging_suffix == "__staging"


def test_settings_validation(monkeypatch):
    monkeypatch.setenv("SHEETDB_REQUEST_TIMEOUT", "soon")
    with pytest.raises(ConfigError):
        ConnectorSettings.from_env()
    with pytest.raises(ConfigError):
        ConnectorSettings(request_timeout=0)
    with pytest.raises(ConfigError):
        ConnectorSettings(staging_suffix="_x", old_suffix="_x")
