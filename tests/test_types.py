from datetime import datetime

import pytest

from sheetdb.data.cells import CellData, ExtendedValue, NumberFormat, cell
from sheetdb.data.schema import Column, ColumnType
from sheetdb.data.types import detect_column_type, extract_cell_value, serial_to_datetime
from sheetdb.errors import CellValueError, ConversionError


def test_serial_epoch():
    assert serial_to_datetime(0) == datetime(1899, 12, 30, 0, 0, 0)


def test_serial_with_time_of_day():
    assert serial_to_datetime(39720.239583333336) == datetime(2008, 9, 29, 5, 45, 0)


def test_serial_coerces_numeric_strings():
    assert serial_to_datetime("44472") == datetime(2021, 10, 3)


@pytest.mark.parametrize("value", ["not a date", None, True, float("nan")])
def test_serial_rejects_non_numeric(value):
    with pytest.raises(ConversionError):
        serial_to_datetime(value)


def test_detect_from_number_format():
    assert detect_column_type(cell(44472.0, number_format="DATE")) == ColumnType.DATE
    assert detect_column_type(cell(39720.2, number_format="DATE_TIME")) == ColumnType.DATETIME
    assert detect_column_type(cell(3.5, number_format="PERCENT")) == ColumnType.NUMBER


def test_format_wins_over_value():
    # a text payload under a numeric format still reads as a number column
    assert detect_column_type(cell("n/a", number_format="CURRENCY")) == ColumnType.NUMBER
    assert detect_column_type(cell(True, number_format="DATE")) == ColumnType.DATE


def test_detect_from_value():
    assert detect_column_type(cell(True)) == ColumnType.BOOLEAN
    assert detect_column_type(cell(False)) == ColumnType.BOOLEAN
    assert detect_column_type(cell(100)) == ColumnType.NUMBER
    assert detect_column_type(cell("Data")) == ColumnType.STRING
    assert detect_column_type(CellData()) == ColumnType.STRING


def test_extract_native_values():
    assert extract_cell_value(Column("t", ColumnType.STRING), cell("Data")) == "Data"
    assert extract_cell_value(Column("n", ColumnType.NUMBER), cell(100)) == 100.0
    assert extract_cell_value(Column("b", ColumnType.BOOLEAN), cell(True)) is True


def test_extract_dates():
    date_col = Column("d", ColumnType.DATE)
    dt_col = Column("dt", ColumnType.DATETIME)

    assert extract_cell_value(date_col, cell(44472.0, number_format="DATE")) == datetime(2021, 10, 3)
    assert extract_cell_value(
        dt_col, cell(39720.239583333336, number_format="DATE_TIME")
    ) == datetime(2008, 9, 29, 5, 45)


def test_extract_empty_cell_is_none():
    assert extract_cell_value(Column("n", ColumnType.NUMBER), CellData()) is None
    fmt_only = CellData(number_format=NumberFormat(type="DATE"))
    assert extract_cell_value(Column("d", ColumnType.DATE), fmt_only) is None


def test_extract_rejects_ambiguous_payload():
    two = CellData(effective_value=ExtendedValue(string_value="x", number_value=1.0))
    with pytest.raises(CellValueError):
        extract_cell_value(Column("c", ColumnType.STRING), two)

    none = CellData(effective_value=ExtendedValue())
    with pytest.raises(CellValueError):
        extract_cell_value(Column("c", ColumnType.STRING), none)


def test_extract_date_column_with_text_value():
    with pytest.raises(ConversionError):
        extract_cell_value(Column("d", ColumnType.DATE), cell("tomorrow"))


def test_cell_from_api_payload():
    c = CellData.from_api(
        {
            "effectiveFormat": {"numberFormat": {"pattern": "M/d/yyyy H:mm:ss", "type": "DATE_TIME"}},
            "effectiveValue": {"numberValue": 39720.239583333336},
        }
    )
    assert c.number_format == NumberFormat(type="DATE_TIME", pattern="M/d/yyyy H:mm:ss")
    assert c.effective_value.number_value == 39720.239583333336
    assert CellData.from_api({}).has_value is False
