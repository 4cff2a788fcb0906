"""
Record schema for the activity log.

A record is a plain mapping from field name to value. This module defines which
fields are recognized, the defaults filled in before a record is inserted, and
the helpers that normalize loosely-typed input into that shape.
"""

from typing import Any, Dict, Mapping, Tuple

RECORD_FIELDS: Tuple[str, ...] = (
    "ID",
    "created",
    "site_id",
    "blog_id",
    "object_id",
    "author",
    "author_role",
    "summary",
    "visibility",
    "type",
    "parent",
    "connector",
    "context",
    "action",
    "ip",
    "meta",
)

RECORD_DEFAULTS: Dict[str, Any] = {
    "type": "stream",
    "site_id": 1,
    "blog_id": 0,
    "object_id": None,
    "author": 0,
    "author_role": "",
    "visibility": "publish",
    "parent": 0,
}


def is_empty_value(value: Any) -> bool:
    """
    Check whether a field value counts as empty.

    ``None``, ``False``, zero, empty strings, the string ``"0"`` and empty
    containers are all empty.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def filter_record_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Keep only recognized fields with non-empty values.

    Args:
        data: Loosely-typed record input

    Returns:
        New dictionary holding the recognized, non-empty fields in input order
    """
    return {
        key: value
        for key, value in data.items()
        if key in RECORD_FIELDS and not is_empty_value(value)
    }


def apply_defaults(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Fill defaults for any omitted default-bearing field.

    Values already present in ``data`` always win, including ``None``.
    """
    record = dict(RECORD_DEFAULTS)
    record.update(data)
    return record
