"""
Record store service for the activity log.

This module provides the persistence facade the rest of the system uses to
write and read activity records. It offers:
- Record normalization (field whitelisting, empty value removal, defaults)
- Hook points to observe or rewrite records and query results in transit
- Delegation of indexing, searching and aggregation to a backing API
- Found-rows tracking for the most recent query
- Distinct field values for populating filter options
- Per-record metadata lookup

Insertion failure is the only explicit failure path: the error is reported to
the ``POST_INSERT_ERROR`` hook and handed back to the caller. Missing query
responses and missing metadata degrade to empty results.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ...core.exceptions import StorageError, ValidationError
from ...core.models import apply_defaults, filter_record_fields
from ..api import RecordAPI
from ..hooks import HookBus, HookType

logger = logging.getLogger(__name__)

DISTINCT_AGGREGATION = "fields"


class RecordStore:
    """
    Facade over a backing record API.

    One instance serves one logical request. ``found_rows`` is a single slot
    overwritten by every successful ``query`` call.

    Attributes:
        api (RecordAPI): Backing API performing the actual indexing and search
        hooks (HookBus): Hook bus notified while records are in transit
        found_rows (Optional[int]): Total reported by the most recent query
    """

    def __init__(self, api: RecordAPI, hooks: Optional[HookBus] = None):
        """
        Initialize the record store.

        Args:
            api: Backing API to delegate to
            hooks: Hook bus to fire; a private one is created if omitted
        """
        self.api = api
        self.hooks = hooks or HookBus()
        self.found_rows: Optional[int] = None

    async def store(self, data: Mapping[str, Any]) -> Union[str, StorageError, bool]:
        """
        Store a record.

        Unrecognized fields and empty values are dropped, the ``RECORD_ARRAY``
        filter may rewrite the remainder, and defaults are filled in before the
        record is inserted.

        Args:
            data: Record data

        Returns:
            Record ID if inserted, the error if the insert failed, or False if
            nothing was left to store after filtering
        """
        record = filter_record_fields(data)
        record = await self.hooks.apply_filters(HookType.RECORD_ARRAY, record)

        # Extensions may empty the record to take over the saving process
        if not record:
            return False

        record = apply_defaults(record)

        result = await self.insert(record)

        if isinstance(result, StorageError):
            logger.error(f"Record insert failed: {str(result)}")
            await self._notify(HookType.POST_INSERT_ERROR, str(result))
            return result

        await self._notify(HookType.POST_INSERTED, result, record)
        return result

    async def _notify(self, hook: HookType, *args: Any) -> None:
        # Runs after the insert completed; payload errors are logged, not raised
        try:
            await self.hooks.do_action(hook, *args)
        except ValidationError as e:
            logger.error(f"Skipped {hook.value} callbacks: {str(e)}")

    async def insert(self, record: Dict[str, Any]) -> Union[str, StorageError]:
        """
        Insert a new record.

        Used by store(); backing API failures are returned rather than raised.

        Args:
            record: Normalized record data

        Returns:
            Record ID, or the StorageError raised by the backing API
        """
        try:
            return await self.api.new_record(record)
        except StorageError as e:
            return e

    async def query(
        self, query: Dict[str, Any], fields: Optional[List[str]] = None
    ) -> Union[List[Dict[str, Any]], bool]:
        """
        Query records.

        Args:
            query: Search body
            fields: Return only these fields

        Returns:
            List of matching records after the ``QUERY_RESULTS`` filter, or
            False if the backing API returned no response at all. A search
            without matches yields an empty list and sets found rows to 0.
        """
        response = await self.api.search(query, fields)

        if response is None:
            return False

        self.found_rows = response.total

        results = list(response.records)
        return await self.hooks.apply_filters(HookType.QUERY_RESULTS, results)

    def get_found_rows(self) -> Optional[int]:
        """
        Get total count of the last query made with query().

        Returns:
            Total item count, or None if no query has succeeded yet
        """
        return self.found_rows

    async def get_distinct_field_values(self, field: str) -> List[Any]:
        """
        Get the values currently in use for a field.

        Used to fill search filters with only used items instead of all items.

        Args:
            field: Requested field (e.g. "context")

        Returns:
            Distinct values in bucket order
        """
        query = {"aggregations": {DISTINCT_AGGREGATION: {"terms": {"field": field}}}}

        response = await self.api.search(query, [field])
        if response is None:
            return []

        return [bucket.get("key") for bucket in response.meta.buckets(DISTINCT_AGGREGATION)]

    async def get_meta(self, record_id: str, key: str = "", single: bool = False) -> Any:
        """
        Retrieve metadata of a single record.

        Args:
            record_id: Record ID
            key: Meta key; if omitted, all metadata of the record is returned
            single: Return a single unwrapped value instead of a mapping

        Returns:
            ``{}`` if the record has no metadata; ``{key: value}`` when
            ``single`` is False (the whole map under ``""`` when no key was
            given); otherwise the unwrapped value
        """
        record = await self.api.get_record(record_id)

        if not record or not isinstance(record.get("stream_meta"), dict):
            return {}

        stream_meta = record["stream_meta"]
        meta = stream_meta.get(key) if key else stream_meta

        if not single:
            return {key: meta}

        if key and isinstance(meta, list):
            return meta[0] if meta else None
        return meta
