"""
Record query model.

This module defines the query model used to list activity records. It turns
friendly listing arguments into the search body understood by the backing
API:
- Free-text search on a single field
- Field filters
- Date range on the record creation time
- Sorting
- Pagination
- Field selection
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ...core.exceptions import QueryError
from ...core.models import RECORD_FIELDS
from .filters import SearchFilter
from .sorting import SearchSort

DEFAULT_PAGE_SIZE = 20


@dataclass
class RecordQuery:
    """
    Listing query for activity records.

    Attributes:
        search (Optional[str]): Text to look for
        search_field (str): Field the text search applies to
        filters (List[SearchFilter]): Filters every record must satisfy
        date_from (Optional[str]): Earliest creation date, inclusive (YYYY-MM-DD)
        date_to (Optional[str]): Latest creation date, inclusive (YYYY-MM-DD)
        sort (SearchSort): Sorting criteria, newest first by default
        page (int): Current page number (1-based)
        page_size (int): Number of records per page
        fields (Optional[List[str]]): Fields to return, all if None
    """

    search: Optional[str] = None
    search_field: str = "summary"
    filters: List[SearchFilter] = field(default_factory=list)
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    sort: SearchSort = field(default_factory=SearchSort)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    fields: Optional[List[str]] = None

    def where(self, field_name: str, value: Any, operator: str = "eq") -> "RecordQuery":
        """
        Add a filter and return the query for chaining.
        """
        self.filters.append(SearchFilter(field=field_name, operator=operator, value=value))
        return self

    def validate(self) -> None:
        """
        Validate query configuration.

        Checks pagination bounds, that every referenced field is a record
        field, that dates parse, and that filters and sort are valid.

        Raises:
            QueryError: If any validation check fails
        """
        if self.page < 1:
            raise QueryError("Page number must be positive")
        if self.page_size < 1:
            raise QueryError("Page size must be positive")

        referenced = [self.search_field, self.sort.field]
        referenced.extend(f.field for f in self.filters)
        referenced.extend(self.fields or [])
        for name in referenced:
            if name not in RECORD_FIELDS:
                raise QueryError(f"Unknown record field: {name}")

        for filter in self.filters:
            filter.validate()
        self.sort.validate()

        for value in (self.date_from, self.date_to):
            if value is not None:
                _parse_date(value)

    def to_search_body(self) -> Dict[str, Any]:
        """
        Convert query to the backing API's search body.

        Returns:
            Dictionary with ``query``, ``sort``, ``from`` and ``size`` keys

        Raises:
            QueryError: If the query is invalid
        """
        self.validate()

        occurrences: Dict[str, List[Dict[str, Any]]] = {}
        for search_filter in self.filters:
            occurrence, clause = search_filter.to_clause()
            occurrences.setdefault(occurrence, []).append(clause)

        if self.search:
            occurrences.setdefault("must", []).append({"match": {self.search_field: self.search}})

        created_range: Dict[str, str] = {}
        if self.date_from:
            created_range["gte"] = _parse_date(self.date_from).isoformat()
        if self.date_to:
            created_range["lt"] = (_parse_date(self.date_to) + timedelta(days=1)).isoformat()
        if created_range:
            occurrences.setdefault("filter", []).append({"range": {"created": created_range}})

        body: Dict[str, Any] = {
            "sort": [self.sort.to_sort_clause()],
            "from": (self.page - 1) * self.page_size,
            "size": self.page_size,
        }
        if occurrences:
            body["query"] = {"bool": occurrences}
        return body


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise QueryError(f"Invalid date: {value}")
