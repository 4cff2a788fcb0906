"""
Core data models for activity records.

This package exposes the record schema helpers and the search response models
shared by the façade and the backing API implementations.
"""

from .record import (
    RECORD_DEFAULTS,
    RECORD_FIELDS,
    apply_defaults,
    filter_record_fields,
    is_empty_value,
)
from .response import SearchMeta, SearchResponse

__all__ = [
    "RECORD_DEFAULTS",
    "RECORD_FIELDS",
    "apply_defaults",
    "filter_record_fields",
    "is_empty_value",
    "SearchMeta",
    "SearchResponse",
]
