"""Header-keyed table access on top of a value store."""

from .filters import FieldMatcher, RowFilter, as_predicate, where
from .manager import TableManager
from .mapper import (
    RowMapper,
    coerce_numeric_strings,
    deserialize_row,
    is_empty_record,
    serialize_row,
)
from .resolver import SHORT_PROBE_COLUMNS, WIDE_PROBE_COLUMNS, RegionResolver

__all__ = [
    "FieldMatcher",
    "RowFilter",
    "as_predicate",
    "where",
    "TableManager",
    "RowMapper",
    "coerce_numeric_strings",
    "deserialize_row",
    "is_empty_record",
    "serialize_row",
    "SHORT_PROBE_COLUMNS",
    "WIDE_PROBE_COLUMNS",
    "RegionResolver",
]
