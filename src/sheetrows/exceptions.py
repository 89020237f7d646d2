"""Exceptions raised by sheetrows."""

from typing import Optional


class SheetRowsError(Exception):
    """Base class for all sheetrows errors."""

    pass


class AddressParseError(SheetRowsError, ValueError):
    """Exception raised when a table position string cannot be parsed."""

    def __init__(self, position: str, reason: str):
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid table position '{position}': {reason}")


class CacheWriteError(SheetRowsError):
    """Exception raised when the durable cache cannot be written."""

    pass


class RemoteOperationError(SheetRowsError):
    """Exception raised when a call to the value store fails."""

    def __init__(self, operation: str, message: str, status: Optional[int] = None):
        self.operation = operation
        self.status = status
        detail = f" (status {status})" if status is not None else ""
        super().__init__(f"{operation} failed{detail}: {message}")


class RegionLimitError(SheetRowsError):
    """Exception raised when a table is wider than the column probe limit."""

    pass


class SheetNotFoundError(SheetRowsError):
    """Exception raised when a sheet name is not present in the spreadsheet."""

    pass
