from sheetdb.data.cells import SheetGrid, cell, grid_from_values


class DummySource:
    """In-memory sheet source whose documents can be edited between reloads."""

    name = "dummy"

    def __init__(self):
        self._grids = {}
        self._versions = {}

    def publish(self, document_id: str, range: str, grid: SheetGrid) -> None:
        self._grids[(document_id, range)] = grid
        self._versions[document_id] = self._versions.get(document_id, 0) + 1

    def fetch_grid(self, document_id: str, range: str) -> SheetGrid:
        return self._grids[(document_id, range)]

    def fetch_freshness_token(self, document_id: str) -> str:
        return f"v{self._versions[document_id]}"


def payroll_grid(salaries):
    rows = [["Employee", "Hire Date", "Salary"]]
    for i, s in enumerate(salaries):
        rows.append([f"Employee {i}", cell(44477 + i, number_format="DATE"), s])
    return grid_from_values("Payroll", rows)
