"""
Local JSON-file backing API.

This module provides a self-contained implementation of the backing record API
for development and offline use. It handles:
- Identifier assignment for new records
- Persistent storage in a single JSON file, with a backup copy before each write
- Search, sorting, paging and terms aggregations over the stored records
- Thread-safe operations with asyncio locks
"""

import asyncio
import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiofiles

from ...core.exceptions import QueryError, StorageError
from ...core.models import SearchMeta, SearchResponse
from .base import RecordAPI
from .filtering import (
    DEFAULT_PAGE_SIZE,
    aggregate,
    paginate,
    project_fields,
    record_matches,
    sort_records,
)

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "records.json"


class LocalRecordAPI(RecordAPI):
    """
    Backing API storing records in a JSON file.

    Attributes:
        storage_dir (str): Directory for persistent storage
        storage_file (str): Full path to the storage file
        _records (Dict[str, Dict[str, Any]]): In-memory records keyed by ID
        _lock (asyncio.Lock): Serializes mutations and persistence
    """

    def __init__(self, storage_dir: str, filename: str = DEFAULT_FILENAME):
        """
        Initialize the local API.

        Args:
            storage_dir: Directory for persistent storage
            filename: Name of storage file

        Actual data loading from persistent storage happens in initialize().
        """
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()
        self.storage_dir = storage_dir
        self.storage_file = os.path.join(storage_dir, filename)

    async def initialize(self) -> None:
        """
        Load existing records from disk.

        Raises:
            StorageError: If loading fails
        """
        async with self._lock:
            await self._load_from_storage()

    async def cleanup(self) -> None:
        async with self._lock:
            await self._persist_records()

    async def _load_from_storage(self) -> None:
        try:
            if os.path.exists(self.storage_file):
                async with aiofiles.open(self.storage_file, "r") as f:
                    content = await f.read()
                if content.strip():
                    self._records = json.loads(content)
            logger.info(f"Loaded {len(self._records)} records from storage")

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load from storage: {str(e)}")
            raise StorageError(f"Storage loading failed: {str(e)}")

    async def _persist_records(self) -> None:
        try:
            os.makedirs(self.storage_dir, exist_ok=True)
            if os.path.exists(self.storage_file):
                async with (
                    aiofiles.open(self.storage_file, "r") as src,
                    aiofiles.open(f"{self.storage_file}.bak", "w") as dst,
                ):
                    await dst.write(await src.read())

            async with aiofiles.open(self.storage_file, "w") as f:
                await f.write(json.dumps(self._records, indent=2, default=str))

            logger.debug(f"Persisted {len(self._records)} records to {self.storage_file}")

        except (OSError, TypeError) as e:
            logger.error(f"Failed to persist records: {str(e)}")
            raise StorageError(f"Record persistence failed: {str(e)}")

    async def new_record(self, record: Dict[str, Any]) -> str:
        """
        Store a new record under a freshly assigned ID.

        Raises:
            StorageError: If the record cannot be persisted
        """
        record_id = uuid.uuid4().hex
        stored = dict(record)
        stored["ID"] = record_id
        stored.setdefault("created", datetime.now(timezone.utc).isoformat())

        async with self._lock:
            self._records[record_id] = stored
            try:
                await self._persist_records()
            except StorageError:
                del self._records[record_id]
                raise

        return record_id

    async def search(
        self, query: Dict[str, Any], fields: Optional[List[str]] = None
    ) -> SearchResponse:
        """
        Search stored records.

        Recognized body keys are ``query``, ``sort``, ``from``, ``size`` and
        ``aggregations`` (or ``aggs``).

        Returns:
            Matching page with total and aggregations; a search without
            matches has no records and a zero total

        Raises:
            QueryError: If the body uses unsupported clauses or invalid paging
        """
        query = query or {}
        try:
            offset = int(query.get("from", 0))
            size = int(query.get("size", DEFAULT_PAGE_SIZE))
        except (TypeError, ValueError):
            raise QueryError("Paging parameters must be integers")

        async with self._lock:
            records = list(self._records.values())

        matched = [record for record in records if record_matches(record, query.get("query"))]
        ordered = sort_records(matched, query.get("sort"))
        page = [project_fields(record, fields) for record in paginate(ordered, offset, size)]

        return SearchResponse(
            records=page,
            meta=SearchMeta(
                total=len(matched),
                aggregations=aggregate(matched, query.get("aggregations") or query.get("aggs")),
            ),
        )

    async def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        async with self._lock:
            record = self._records.get(str(record_id))
        if record is None:
            return None
        return _with_stream_meta(record)


def _with_stream_meta(record: Dict[str, Any]) -> Dict[str, Any]:
    """Expose the record's ``meta`` field under ``stream_meta``, as the hosted API does."""
    result = dict(record)
    if isinstance(record.get("meta"), dict):
        result["stream_meta"] = dict(record["meta"])
    return result
