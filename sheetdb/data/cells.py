from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Sequence

# Sheets API ExtendedValue keys -> ExtendedValue attributes
_VALUE_KEYS = {
    "stringValue": "string_value",
    "numberValue": "number_value",
    "boolValue": "bool_value",
    "formulaValue": "formula_value",
    "errorValue": "error_value",
}


@dataclass(frozen=True)
class NumberFormat:
    type: str
    pattern: Optional[str] = None


@dataclass(frozen=True)
class ExtendedValue:
    """Effective value of a cell; normally exactly one field is populated."""

    string_value: Optional[str] = None
    number_value: Optional[float] = None
    bool_value: Optional[bool] = None
    formula_value: Optional[str] = None
    error_value: Optional[Mapping[str, Any]] = None

    def populated(self) -> List[Any]:
        return [
            getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        ]

    @staticmethod
    def from_api(payload: Mapping[str, Any]) -> "ExtendedValue":
        kwargs = {_VALUE_KEYS[k]: v for k, v in payload.items() if k in _VALUE_KEYS}
        return ExtendedValue(**kwargs)


@dataclass(frozen=True)
class CellData:
    effective_value: Optional[ExtendedValue] = None
    number_format: Optional[NumberFormat] = None

    @property
    def has_value(self) -> bool:
        return self.effective_value is not None

    @staticmethod
    def from_api(payload: Optional[Mapping[str, Any]]) -> "CellData":
        payload = payload or {}
        value = payload.get("effectiveValue")
        fmt = (payload.get("effectiveFormat") or {}).get("numberFormat")
        return CellData(
            effective_value=ExtendedValue.from_api(value) if value is not None else None,
            number_format=(
                NumberFormat(type=fmt.get("type", ""), pattern=fmt.get("pattern"))
                if fmt is not None
                else None
            ),
        )


@dataclass(frozen=True)
class SheetGrid:
    """One sheet's title and its cell rows, top to bottom.

    Rows may be ragged: the Sheets API drops trailing empty cells, so a row's
    length is the number of cells the source actually returned.
    """

    title: Optional[str]
    rows: Sequence[Sequence[CellData]] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", tuple(tuple(r) for r in self.rows))

    @staticmethod
    def from_api(sheet: Mapping[str, Any]) -> "SheetGrid":
        """Build a grid from a Sheets API ``Sheet`` resource."""
        title = (sheet.get("properties") or {}).get("title")
        data = sheet.get("data") or [{}]
        row_data = (data[0] or {}).get("rowData") or []
        rows = [
            [CellData.from_api(v) for v in (r or {}).get("values") or []]
            for r in row_data
        ]
        return SheetGrid(title=title, rows=rows)


def cell(value: Any = None, number_format: Optional[str] = None) -> CellData:
    """Shorthand for building cells from plain Python values."""
    fmt = NumberFormat(type=number_format) if number_format else None
    if value is None:
        return CellData(number_format=fmt)
    if isinstance(value, bool):
        ev = ExtendedValue(bool_value=value)
    elif isinstance(value, (int, float)):
        ev = ExtendedValue(number_value=float(value))
    else:
        ev = ExtendedValue(string_value=str(value))
    return CellData(effective_value=ev, number_format=fmt)


def grid_from_values(title: Optional[str], rows: Sequence[Sequence[Any]]) -> SheetGrid:
    """Build a grid where each item is a plain value or an existing CellData."""
    out: List[List[CellData]] = []
    for r in rows:
        out.append([v if isinstance(v, CellData) else cell(v) for v in r])
    return SheetGrid(title=title, rows=out)


def sheets_from_response(payload: Dict[str, Any]) -> List[SheetGrid]:
    return [SheetGrid.from_api(s) for s in payload.get("sheets") or []]
