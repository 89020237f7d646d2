"""sheetrows - record-level access to tables in Google Sheets, with a TTL cache."""

from .cache import JsonFileCacheBackend, MemoryCacheBackend, TTLCache
from .exceptions import (
    AddressParseError,
    CacheWriteError,
    RegionLimitError,
    RemoteOperationError,
    SheetNotFoundError,
    SheetRowsError,
)
from .sheets import GoogleSheetsClient, TablePosition, ValueStore
from .table import TableManager, where

__version__ = "0.1.0"

__all__ = [
    "JsonFileCacheBackend",
    "MemoryCacheBackend",
    "TTLCache",
    "AddressParseError",
    "CacheWriteError",
    "RegionLimitError",
    "RemoteOperationError",
    "SheetNotFoundError",
    "SheetRowsError",
    "GoogleSheetsClient",
    "TablePosition",
    "ValueStore",
    "TableManager",
    "where",
]
