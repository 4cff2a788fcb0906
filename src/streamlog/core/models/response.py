"""
Models for backing API search responses.

This module defines the parsed form of a search response:
- SearchResponse: records plus the response metadata
- SearchMeta: total match count and aggregation results
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class SearchMeta:
    """
    Metadata returned alongside a page of search results.

    Attributes:
        total (int): Total number of matching records before paging
        aggregations (Dict[str, Any]): Aggregation results keyed by aggregation name
    """

    total: int = 0
    aggregations: Dict[str, Any] = field(default_factory=dict)

    def buckets(self, name: str) -> List[Dict[str, Any]]:
        """
        Get the buckets of a terms aggregation.

        Args:
            name: Aggregation name

        Returns:
            List of bucket dictionaries, empty if the aggregation is missing
        """
        aggregation = self.aggregations.get(name) or {}
        return list(aggregation.get("buckets") or [])


@dataclass
class SearchResponse:
    """
    A page of records returned by the backing API.

    Attributes:
        records (List[Dict[str, Any]]): Matched records in result order
        meta (SearchMeta): Total count and aggregations
    """

    records: List[Dict[str, Any]] = field(default_factory=list)
    meta: SearchMeta = field(default_factory=SearchMeta)

    @property
    def total(self) -> int:
        return self.meta.total

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> Optional["SearchResponse"]:
        """
        Build a response from decoded JSON.

        Args:
            payload: Decoded response body

        Returns:
            Parsed response, or None when the payload is empty

        Raises:
            TypeError: If ``meta`` or a record is not a mapping
            ValueError: If ``total`` is not a number
        """
        if not payload:
            return None

        meta = payload.get("meta") or {}
        if not isinstance(meta, Mapping):
            raise TypeError(f"Search response meta must be an object, got {type(meta).__name__}")
        records = payload.get("records") or []
        if isinstance(records, Mapping):
            records = list(records.values())

        return cls(
            records=[dict(record) for record in records],
            meta=SearchMeta(
                total=int(meta.get("total") or 0),
                aggregations=dict(meta.get("aggregations") or {}),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert response to its wire format."""
        return {
            "records": self.records,
            "meta": {"total": self.meta.total, "aggregations": self.meta.aggregations},
        }
