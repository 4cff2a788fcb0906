"""Core record functionality."""

from .exceptions import (
    APIRequestError,
    ConfigurationError,
    EventError,
    QueryError,
    StorageError,
    ValidationError,
)
from .models import (
    RECORD_DEFAULTS,
    RECORD_FIELDS,
    SearchMeta,
    SearchResponse,
    apply_defaults,
    filter_record_fields,
)

__all__ = [
    "APIRequestError",
    "ConfigurationError",
    "EventError",
    "QueryError",
    "RECORD_DEFAULTS",
    "RECORD_FIELDS",
    "SearchMeta",
    "SearchResponse",
    "StorageError",
    "ValidationError",
    "apply_defaults",
    "filter_record_fields",
]
