"""Discovery of table boundaries by probing the value store."""

import logging
from typing import Any, Optional

from ..coordinates import add_letters, decrement_letter, format_cell, format_range
from ..exceptions import RegionLimitError
from ..sheets.base import ValueStore
from ..sheets.models import SheetInfo, TablePosition, TableRegion

logger = logging.getLogger(__name__)

# Columns requested by the first, cheap probe of the header row
SHORT_PROBE_COLUMNS = 26
# Columns requested when the short probe is full; wider tables are rejected
WIDE_PROBE_COLUMNS = 256


def _is_filled(cell: Any) -> bool:
    return cell is not None and cell != ""


def _occupied_width(row: list[Any]) -> int:
    """Columns from the start cell through the last filled cell; 0 if the start cell is empty."""
    if not row or not _is_filled(row[0]):
        return 0
    return max(i for i, cell in enumerate(row) if _is_filled(cell)) + 1


class RegionResolver:
    """Finds the extent of a table whose dimensions are not stored anywhere."""

    def __init__(self, store: ValueStore, spreadsheet_id: str, sheet_name: str):
        self.store = store
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

    async def _probe_row(self, start: TablePosition, width: int) -> int:
        end_letter = add_letters(start.letter, width - 1)
        range_notation = format_range(
            self.sheet_name, start.letter, start.number, end_letter, start.number
        )
        values = await self.store.get_values(self.spreadsheet_id, range_notation)
        occupied = _occupied_width(values[0] if values else [])
        logger.debug(f"Probed {range_notation}: {occupied} occupied column(s)")
        return occupied

    async def resolve_last_column(self, start: TablePosition) -> str:
        """
        Find the column just past the last header cell.

        Returns:
            The letter immediately after the last non-empty cell of the start
            row, blank cells in between included; ``start.letter`` itself when the start cell is empty

        Raises:
            RegionLimitError: If the table is wider than WIDE_PROBE_COLUMNS
        """
        occupied = await self._probe_row(start, SHORT_PROBE_COLUMNS)
        if occupied >= SHORT_PROBE_COLUMNS:
            occupied = await self._probe_row(start, WIDE_PROBE_COLUMNS)
            if occupied >= WIDE_PROBE_COLUMNS:
                raise RegionLimitError(
                    f"Table at {self.sheet_name}!{start.cell} has at least "
                    f"{WIDE_PROBE_COLUMNS} columns, which is the probe limit"
                )
        return add_letters(start.letter, occupied)

    async def resolve_last_row(self, start: TablePosition) -> int:
        """Count consecutive populated cells down the start column, header included."""
        count = 0
        row = start.number
        while True:
            values = await self.store.get_values(
                self.spreadsheet_id, format_cell(self.sheet_name, start.letter, row)
            )
            if not values or not values[0] or not _is_filled(values[0][0]):
                break
            count += 1
            row += 1
        logger.debug(f"Table at {self.sheet_name}!{start.cell} spans {count} row(s)")
        return count

    async def resolve_headers(self, start: TablePosition) -> list[str]:
        """Fetch the header row from ``start`` through the last populated column."""
        end_letter = await self.resolve_last_column(start)
        if end_letter == start.letter:
            return []

        range_notation = format_range(
            self.sheet_name, start.letter, start.number, decrement_letter(end_letter), start.number
        )
        values = await self.store.get_values(self.spreadsheet_id, range_notation)
        return list(values[0]) if values else []

    async def resolve_region(self, start: TablePosition, header_width: int) -> TableRegion:
        """Combine a known header width with the probed row count."""
        row_count = await self.resolve_last_row(start)
        return TableRegion(
            start=start,
            end_letter=add_letters(start.letter, max(header_width - 1, 0)),
            end_row_number=start.number + max(row_count, 1) - 1,
        )

    async def find_sheet(self, sheet_name: Optional[str] = None) -> Optional[SheetInfo]:
        """Look a sheet up by name; None when the spreadsheet has no such sheet."""
        sheet_name = sheet_name or self.sheet_name
        for sheet in await self.store.get_sheets(self.spreadsheet_id):
            if sheet.name == sheet_name:
                return sheet
        return None

    async def resolve_sheet_index(self, sheet_name: Optional[str] = None) -> int:
        """
        Get the position of a sheet among all sheets of the spreadsheet.

        Returns 0 both for the first sheet and for a name that is not found;
        use find_sheet() when the difference matters.
        """
        sheet = await self.find_sheet(sheet_name)
        if sheet is None:
            logger.warning(
                f"Sheet '{sheet_name or self.sheet_name}' not found in "
                f"{self.spreadsheet_id}, defaulting to index 0"
            )
            return 0
        return sheet.index
