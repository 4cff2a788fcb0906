"""
Core interface for backing record APIs.

This module defines the contract every backing API implementation must honor.
The record store only ever talks to this interface, so the hosted indexing
service and the local JSON backend are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ...core.models import SearchResponse


class RecordAPI(ABC):
    """
    Abstract base class for backing record APIs.

    Implementations own identifier assignment, indexing, searching and
    aggregation. Lifecycle methods must be awaited before and after use.
    """

    async def initialize(self) -> None:
        """
        Prepare the API for use.

        Raises:
            StorageError: If initialization fails
        """

    async def cleanup(self) -> None:
        """
        Release any resources held by the API.
        """

    @abstractmethod
    async def new_record(self, record: Dict[str, Any]) -> str:
        """
        Index a new record.

        Args:
            record: Normalized record data

        Returns:
            Identifier assigned to the record

        Raises:
            StorageError: If the record could not be indexed
        """

    @abstractmethod
    async def search(
        self, query: Dict[str, Any], fields: Optional[List[str]] = None
    ) -> Optional[SearchResponse]:
        """
        Search indexed records.

        Args:
            query: Search body (filters, sort, paging, aggregations)
            fields: Restrict returned records to these fields

        Returns:
            Parsed response (no records and a zero total when nothing
            matched), or None when no usable response was received

        Raises:
            QueryError: If the query is not understood
        """

    @abstractmethod
    async def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a single record.

        Args:
            record_id: Identifier assigned by ``new_record``

        Returns:
            The record, or None if it does not exist
        """
