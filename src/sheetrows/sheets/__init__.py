"""Google Sheets API integration."""

from .base import ValueStore
from .client import GoogleSheetsClient
from .models import (
    DeleteRange,
    SheetInfo,
    TablePosition,
    TableRegion,
    ValueRange,
    WriteResult,
)

__all__ = [
    "ValueStore",
    "GoogleSheetsClient",
    "DeleteRange",
    "SheetInfo",
    "TablePosition",
    "TableRegion",
    "ValueRange",
    "WriteResult",
]
