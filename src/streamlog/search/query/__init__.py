"""
Query models for listing activity records.

- RecordQuery: listing arguments turned into a search body
- SearchFilter: a single field filter
- SearchSort: sorting criteria
"""

from .base import RecordQuery
from .filters import SearchFilter
from .sorting import SearchSort

__all__ = [
    "RecordQuery",
    "SearchFilter",
    "SearchSort",
]
