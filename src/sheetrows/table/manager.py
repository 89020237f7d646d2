"""Record-level CRUD over a table that lives in a spreadsheet."""

import logging
import uuid
from typing import Any, Optional, Union

from ..cache import Found, TTLCache, create_cache
from ..config import Settings, settings as default_settings
from ..coordinates import add_letters, format_cell, format_range, letter_to_index, parse_position
from ..exceptions import RemoteOperationError, SheetNotFoundError
from ..sheets.base import ValueStore
from ..sheets.models import DeleteRange, TablePosition, ValueRange
from .filters import Record, RowPredicate, as_predicate
from .mapper import RowMapper, coerce_numeric_strings
from .resolver import RegionResolver

logger = logging.getLogger(__name__)

PositionLike = Union[str, TablePosition]


class TableManager:
    """
    Reads and writes a header-defined table as a list of records.

    The table starts at a position (``"A:1"`` by default); its first row is
    the header and every following consecutive row is a record. Reads go
    through an optional TTL cache; every successful write invalidates the
    cached records of the table it touched.
    """

    def __init__(
        self,
        store: ValueStore,
        spreadsheet_id: str = "",
        sheet_name: str = "",
        table_position: Optional[PositionLike] = None,
        cache: Optional[TTLCache] = None,
        use_cache: Optional[bool] = None,
        namespace: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the table manager.

        Args:
            store: Value store holding the spreadsheet
            spreadsheet_id: ID of the spreadsheet (from its URL)
            sheet_name: Exact name of the sheet (tab)
            table_position: Default top-left cell of the table, e.g. ``"B:4"``
            cache: Cache to use; one is created from settings when caching is on
            use_cache: Enable caching (defaults to ``settings.use_cache``, or
                True when ``cache`` is given)
            namespace: Cache namespace for a created cache (random by default)
            settings: Settings to read defaults from
        """
        self.settings = settings or default_settings
        self.store = store
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.table_position = self._to_position(
            table_position or self.settings.default_table_position
        )

        if use_cache is None:
            use_cache = cache is not None or self.settings.use_cache
        self.use_cache = use_cache

        if cache is None and use_cache:
            cache = create_cache(namespace or uuid.uuid4().hex, self.settings)
        self.cache = cache if use_cache else None

    @property
    def namespace(self) -> Optional[str]:
        return self.cache.namespace if self.cache else None

    # Fluent configuration

    def change_spreadsheet_id(self, spreadsheet_id: str) -> "TableManager":
        self.spreadsheet_id = spreadsheet_id
        return self

    def change_sheet_name(self, sheet_name: str) -> "TableManager":
        self.sheet_name = sheet_name
        return self

    def change_sheet_info(self, sheet_name: str, spreadsheet_id: str) -> "TableManager":
        self.sheet_name = sheet_name
        self.spreadsheet_id = spreadsheet_id
        return self

    def change_table_position(self, position: PositionLike) -> "TableManager":
        """Set the default table position, e.g. ``"H:13"``."""
        self.table_position = self._to_position(position)
        return self

    # Helpers

    @staticmethod
    def _to_position(position: PositionLike) -> TablePosition:
        if isinstance(position, TablePosition):
            return position
        return parse_position(position)

    def _resolve_position(self, position: Optional[PositionLike]) -> TablePosition:
        return self._to_position(position) if position is not None else self.table_position

    def _resolver(self) -> RegionResolver:
        return RegionResolver(self.store, self.spreadsheet_id, self.sheet_name)

    def _cache_key(self, position: TablePosition, kind: str) -> str:
        return f"{self.spreadsheet_id}:{self.sheet_name}!{position.cell}:{kind}"

    async def _cache_get(self, key: str) -> Optional[Found]:
        if self.cache is None:
            return None
        result = await self.cache.get_async(key)
        return result if isinstance(result, Found) else None

    async def _cache_set(self, key: str, value: Any) -> None:
        if self.cache is not None:
            await self.cache.set_async(key, value)

    async def _invalidate_values(self, position: TablePosition) -> None:
        if self.cache is not None:
            await self.cache.delete_async(self._cache_key(position, "values"))

    async def _matching_row_numbers(
        self, start: TablePosition, row_filter: RowPredicate
    ) -> list[tuple[int, Record]]:
        """Absolute row numbers and records of every match, highest row first."""
        predicate = as_predicate(row_filter)
        records = await self.get_rows(start)
        matches = [
            (start.number + 1 + offset, record)
            for offset, record in enumerate(records)
            if predicate(record)
        ]
        # Positional writes against a shifting index space go bottom-up
        matches.sort(key=lambda item: item[0], reverse=True)
        return matches

    # Reads

    async def get_headers(self, position: Optional[PositionLike] = None) -> list[str]:
        """Get the header row of the table at ``position``."""
        start = self._resolve_position(position)
        key = self._cache_key(start, "headers")

        cached = await self._cache_get(key)
        if cached is not None:
            return list(cached.value)

        headers = await self._resolver().resolve_headers(start)
        await self._cache_set(key, headers)
        return headers

    async def get_rows(
        self,
        position: Optional[PositionLike] = None,
        filter: Optional[RowPredicate] = None,
    ) -> list[Record]:
        """
        Get every record of the table, optionally filtered.

        The unfiltered records are what gets cached; ``filter`` is applied
        on every call.
        """
        start = self._resolve_position(position)
        key = self._cache_key(start, "values")

        cached = await self._cache_get(key)
        if cached is not None:
            records = [dict(record) for record in cached.value]
        else:
            records = await self._fetch_rows(start)
            await self._cache_set(key, [dict(record) for record in records])

        if filter is not None:
            predicate = as_predicate(filter)
            records = [record for record in records if predicate(record)]
        return records

    async def _fetch_rows(self, start: TablePosition) -> list[Record]:
        headers = await self.get_headers(start)
        if not headers:
            return []

        region = await self._resolver().resolve_region(start, len(headers))
        if region.body_row_count == 0:
            return []

        values = await self.store.get_values(self.spreadsheet_id, region.body_range(self.sheet_name))
        return RowMapper(headers).deserialize_many(values)

    # Writes

    async def insert_rows(
        self, values: list[Record], position: Optional[PositionLike] = None
    ) -> bool:
        """Append records after the last row of the table."""
        start = self._resolve_position(position)
        if not values:
            return True

        headers = await self.get_headers(start)
        rows = RowMapper(headers).serialize_many(values)
        result = await self.store.append_values(
            self.spreadsheet_id,
            format_cell(self.sheet_name, start.letter, start.number),
            rows,
            value_input_option="USER_ENTERED",
            insert_data_option="INSERT_ROWS",
        )
        if result.success:
            logger.info(f"Inserted {len(rows)} row(s) into {self.sheet_name}!{start.cell}")
            await self._invalidate_values(start)
        return result.success

    async def update_rows(
        self,
        filter: RowPredicate,
        values: Record,
        position: Optional[PositionLike] = None,
    ) -> bool:
        """Merge ``values`` into every record matched by ``filter``."""
        start = self._resolve_position(position)
        matches = await self._matching_row_numbers(start, filter)
        if not matches:
            return True

        headers = await self.get_headers(start)
        mapper = RowMapper(headers)
        end_letter = self._last_header_letter(start, headers)

        data = [
            ValueRange(
                range=format_range(self.sheet_name, start.letter, row, end_letter, row),
                values=[mapper.serialize(coerce_numeric_strings({**record, **values}))],
            )
            for row, record in matches
        ]
        result = await self.store.batch_update_values(
            self.spreadsheet_id, data, value_input_option="RAW"
        )
        if result.success:
            logger.info(f"Updated {len(data)} row(s) in {self.sheet_name}!{start.cell}")
            await self._invalidate_values(start)
        return result.success

    async def delete_rows(
        self, filter: RowPredicate, position: Optional[PositionLike] = None
    ) -> bool:
        """
        Delete every record matched by ``filter``.

        One delete request is sent per row, from the bottom of the table up,
        because each deletion shifts the rows below it. Each request spans
        from the start column through one column past the last header.

        Raises:
            SheetNotFoundError: If the current sheet name is not in the spreadsheet
        """
        start = self._resolve_position(position)
        matches = await self._matching_row_numbers(start, filter)
        if not matches:
            return True

        resolver = self._resolver()
        sheet = await resolver.find_sheet()
        if sheet is None:
            raise SheetNotFoundError(
                f"Sheet '{self.sheet_name}' not found in spreadsheet {self.spreadsheet_id}"
            )
        headers = await self.get_headers(start)
        start_column = letter_to_index(start.letter)

        deleted = 0
        for row, _ in matches:
            request = DeleteRange(
                sheet_id=sheet.id,
                start_row_index=row - 1,
                end_row_index=row,
                start_column_index=start_column,
                end_column_index=start_column + len(headers) + 1,
            )
            try:
                result = await self.store.delete_ranges(self.spreadsheet_id, [request])
            except RemoteOperationError:
                # Earlier deletions have already shifted the table
                if deleted:
                    await self._invalidate_values(start)
                raise
            if not result.success:
                break
            deleted += 1

        if deleted:
            logger.info(f"Deleted {deleted} row(s) from {self.sheet_name}!{start.cell}")
            await self._invalidate_values(start)
        return deleted == len(matches)

    async def clear_cache(self) -> None:
        """Drop every cached entry of this manager's namespace."""
        if self.cache is not None:
            await self.cache.clear_async()

    @staticmethod
    def _last_header_letter(start: TablePosition, headers: list[str]) -> str:
        return add_letters(start.letter, max(len(headers) - 1, 0))
