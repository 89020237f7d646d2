"""Conversion between sheet rows and header-keyed records."""

import re
from typing import Any, Iterable, Optional

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def serialize_row(header: list[str], record: dict[str, Any]) -> list[Any]:
    """Lay a record out in header order; missing fields become empty cells."""
    return ["" if record.get(name) is None else record[name] for name in header]


def deserialize_row(header: list[str], row: list[Any]) -> dict[str, Optional[Any]]:
    """Key a row by header name. Cells past the end of a short row are None."""
    return {name: (row[i] if i < len(row) else None) for i, name in enumerate(header)}


def is_empty_record(record: dict[str, Any]) -> bool:
    """True when every field of a deserialized record is None or an empty string."""
    return all(value is None or value == "" for value in record.values())


def coerce_numeric_strings(record: dict[str, Any]) -> dict[str, Any]:
    """Return a shallow copy with integer-looking strings turned into ints."""
    coerced = dict(record)
    for key, value in coerced.items():
        if isinstance(value, str) and _INTEGER_RE.fullmatch(value):
            coerced[key] = int(value)
    return coerced


class RowMapper:
    """Maps rows to records using a header row as the schema."""

    def __init__(self, header: list[str]):
        self.header = list(header)

    def serialize(self, record: dict[str, Any]) -> list[Any]:
        return serialize_row(self.header, record)

    def serialize_many(self, records: Iterable[dict[str, Any]]) -> list[list[Any]]:
        return [self.serialize(record) for record in records]

    def deserialize(self, row: list[Any]) -> dict[str, Optional[Any]]:
        return deserialize_row(self.header, row)

    def deserialize_many(self, rows: list[list[Any]]) -> list[dict[str, Optional[Any]]]:
        """
        Deserialize a table body.

        A body consisting of one row with no values at all is reported as an
        empty table rather than a record of None fields.
        """
        records = [self.deserialize(row) for row in rows]
        if len(records) == 1 and is_empty_record(records[0]):
            return []
        return records
