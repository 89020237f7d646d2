"""Base value store interface."""

from abc import ABC, abstractmethod
from typing import Any

from .models import DeleteRange, SheetInfo, ValueRange, WriteResult


class ValueStore(ABC):
    """Abstract range-based store that backs a table.

    Every method is a coroutine; implementations wrapping blocking
    transports must offload them.
    """

    @abstractmethod
    async def get_values(self, spreadsheet_id: str, range_notation: str) -> list[list[Any]]:
        """Return the cell matrix for a range, ``[]`` when it is empty."""
        pass

    @abstractmethod
    async def append_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        rows: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
        insert_data_option: str = "INSERT_ROWS",
    ) -> WriteResult:
        """Append rows after the table found at ``range_notation``."""
        pass

    @abstractmethod
    async def update_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        rows: list[list[Any]],
        value_input_option: str = "RAW",
    ) -> WriteResult:
        """Overwrite a single range."""
        pass

    @abstractmethod
    async def batch_update_values(
        self,
        spreadsheet_id: str,
        data: list[ValueRange],
        value_input_option: str = "RAW",
    ) -> WriteResult:
        """Overwrite several ranges in one request."""
        pass

    @abstractmethod
    async def delete_ranges(self, spreadsheet_id: str, ranges: list[DeleteRange]) -> WriteResult:
        """Delete row spans, shifting the rows below upwards."""
        pass

    @abstractmethod
    async def get_sheets(self, spreadsheet_id: str) -> list[SheetInfo]:
        """List the sheets of a spreadsheet in document order."""
        pass
