"""Pytest configuration and shared fixtures."""

import re
from pathlib import Path
from typing import Any, Optional

import pytest

from sheetrows.cache import MemoryCacheBackend, TTLCache
from sheetrows.config import Settings
from sheetrows.coordinates import letter_to_index
from sheetrows.sheets.base import ValueStore
from sheetrows.sheets.models import DeleteRange, SheetInfo, ValueRange, WriteResult
from sheetrows.table import TableManager

_RANGE_RE = re.compile(
    r"^(?P<sheet>[^!]+)!(?P<c1>[A-Z]+)(?P<r1>\d+)(?::(?P<c2>[A-Z]+)(?P<r2>\d+))?$"
)


def _parse_range(range_notation: str) -> tuple[str, int, int, int, int]:
    """Return sheet name and 0-based inclusive (row1, col1, row2, col2)."""
    match = _RANGE_RE.match(range_notation)
    if not match:
        raise ValueError(f"Unsupported range: {range_notation}")
    r1 = int(match["r1"]) - 1
    c1 = letter_to_index(match["c1"])
    r2 = int(match["r2"]) - 1 if match["r2"] else r1
    c2 = letter_to_index(match["c2"]) if match["c2"] else c1
    return match["sheet"], r1, c1, r2, c2


class FakeValueStore(ValueStore):
    """In-memory spreadsheet with Sheets-like read trimming and row shifting."""

    def __init__(self, sheets: Optional[dict[str, list[list[Any]]]] = None):
        self.grids: dict[str, list[list[Any]]] = {
            name: [list(row) for row in rows] for name, rows in (sheets or {"Sheet1": []}).items()
        }
        self.sheet_ids = {name: 1000 + i for i, name in enumerate(self.grids)}
        self.get_calls: list[str] = []
        self.append_calls: list[tuple[str, list[list[Any]]]] = []
        self.batch_update_calls: list[list[ValueRange]] = []
        self.delete_calls: list[DeleteRange] = []

    # Grid helpers

    def _cell(self, sheet: str, row: int, col: int) -> Any:
        grid = self.grids[sheet]
        if row < len(grid) and col < len(grid[row]):
            return grid[row][col]
        return ""

    def _set_cell(self, sheet: str, row: int, col: int, value: Any) -> None:
        grid = self.grids[sheet]
        while len(grid) <= row:
            grid.append([])
        while len(grid[row]) <= col:
            grid[row].append("")
        grid[row][col] = value

    def _row_is_empty(self, sheet: str, row: int, col: int) -> bool:
        grid = self.grids[sheet]
        if row >= len(grid):
            return True
        return all(cell in ("", None) for cell in grid[row][col:])

    def snapshot(self, sheet: str = "Sheet1") -> list[list[Any]]:
        return [list(row) for row in self.grids[sheet]]

    # ValueStore

    async def get_values(self, spreadsheet_id: str, range_notation: str) -> list[list[Any]]:
        self.get_calls.append(range_notation)
        sheet, r1, c1, r2, c2 = _parse_range(range_notation)
        rows = []
        for row in range(r1, r2 + 1):
            cells = [self._cell(sheet, row, col) for col in range(c1, c2 + 1)]
            while cells and cells[-1] in ("", None):
                cells.pop()
            rows.append(cells)
        while rows and not rows[-1]:
            rows.pop()
        return rows

    async def append_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        rows: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
        insert_data_option: str = "INSERT_ROWS",
    ) -> WriteResult:
        self.append_calls.append((range_notation, rows))
        sheet, r1, c1, _, _ = _parse_range(range_notation)
        target = r1
        while not self._row_is_empty(sheet, target, c1):
            target += 1
        grid = self.grids[sheet]
        for offset, values in enumerate(rows):
            if insert_data_option == "INSERT_ROWS" and target + offset < len(grid):
                grid.insert(target + offset, [])
            for col, value in enumerate(values):
                self._set_cell(sheet, target + offset, c1 + col, value)
        return WriteResult(status=200, updated_cells=sum(len(r) for r in rows))

    async def update_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        rows: list[list[Any]],
        value_input_option: str = "RAW",
    ) -> WriteResult:
        sheet, r1, c1, _, _ = _parse_range(range_notation)
        for row_offset, values in enumerate(rows):
            for col_offset, value in enumerate(values):
                self._set_cell(sheet, r1 + row_offset, c1 + col_offset, value)
        return WriteResult(status=200)

    async def batch_update_values(
        self,
        spreadsheet_id: str,
        data: list[ValueRange],
        value_input_option: str = "RAW",
    ) -> WriteResult:
        self.batch_update_calls.append(list(data))
        for item in data:
            await self.update_values(spreadsheet_id, item.range, item.values, value_input_option)
        return WriteResult(status=200)

    async def delete_ranges(self, spreadsheet_id: str, ranges: list[DeleteRange]) -> WriteResult:
        names = {sheet_id: name for name, sheet_id in self.sheet_ids.items()}
        for item in ranges:
            self.delete_calls.append(item)
            sheet = names[item.sheet_id]
            height = len(self.grids[sheet])
            removed = item.end_row_index - item.start_row_index
            for col in range(item.start_column_index, item.end_column_index):
                column = [self._cell(sheet, row, col) for row in range(height)]
                del column[item.start_row_index:item.end_row_index]
                column.extend([""] * removed)
                for row, value in enumerate(column):
                    self._set_cell(sheet, row, col, value)
        return WriteResult(status=200)

    async def get_sheets(self, spreadsheet_id: str) -> list[SheetInfo]:
        return [
            SheetInfo(name=name, id=self.sheet_ids[name], index=i)
            for i, name in enumerate(self.grids)
        ]


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Create settings with test values."""
    return Settings(
        google_credentials_path=tmp_path / "credentials.json",
        google_token_path=tmp_path / "token.json",
        google_service_account_path=None,
        use_cache=True,
        cache_backend="memory",
        cache_dir=tmp_path / "cache",
        cache_ttl_seconds=60,
        default_table_position="A:1",
        log_level="DEBUG",
    )


@pytest.fixture
def people_store() -> FakeValueStore:
    """A sheet with an id/name/status table at A1."""
    return FakeValueStore(
        {
            "Sheet1": [
                ["id", "name", "status"],
                ["1", "Ana", "open"],
                ["2", "Ben", "open"],
                ["7", "Cy", "open"],
            ]
        }
    )


@pytest.fixture
def memory_cache() -> TTLCache:
    return TTLCache("test-namespace", MemoryCacheBackend())


@pytest.fixture
def manager(people_store: FakeValueStore, memory_cache: TTLCache, mock_settings: Settings) -> TableManager:
    return TableManager(
        people_store,
        spreadsheet_id="sheet-123",
        sheet_name="Sheet1",
        cache=memory_cache,
        settings=mock_settings,
    )
