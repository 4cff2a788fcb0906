"""
Search module for activity records.

This module builds the search bodies the record store hands to the backing
API: text search, field filters, creation date ranges, sorting and
pagination.
"""

from .query import RecordQuery, SearchFilter, SearchSort

__all__ = [
    "RecordQuery",
    "SearchFilter",
    "SearchSort",
]
