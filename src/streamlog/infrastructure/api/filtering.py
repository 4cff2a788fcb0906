"""Utilities for evaluating search bodies against in-memory records.

Supports the subset of the indexing service's query language the record
store relies on: ``bool`` queries with ``filter``/``must``/``must_not``
clauses built from ``term``, ``terms``, ``range``, ``match`` and ``exists``,
plus ``sort``, ``from``/``size`` paging and ``terms`` aggregations.
"""

from collections import Counter
from typing import Any, Dict, List, Optional

from ...core.exceptions import QueryError

DEFAULT_PAGE_SIZE = 20
DEFAULT_SORT = [{"created": {"order": "desc"}}]

# Comparison result (-1, 0, 1) checks per range operator
RANGE_CHECKS = {
    "gt": lambda c: c > 0,
    "gte": lambda c: c >= 0,
    "lt": lambda c: c < 0,
    "lte": lambda c: c <= 0,
}


def _values_equal(actual: Any, expected: Any) -> bool:
    if isinstance(actual, list):
        return any(_values_equal(item, expected) for item in actual)
    if actual == expected:
        return True
    # Numeric ids arrive as strings from query strings
    return actual is not None and str(actual) == str(expected)


def _compare(actual: Any, bound: Any) -> Optional[int]:
    if actual is None:
        return None
    try:
        if actual < bound:
            return -1
        return 1 if actual > bound else 0
    except TypeError:
        try:
            left, right = float(actual), float(bound)
        except (TypeError, ValueError):
            return None
        return (left > right) - (left < right)


def clause_matches(record: Dict[str, Any], clause: Dict[str, Any]) -> bool:
    """
    Check if a record satisfies a single query clause.

    Args:
        record: Record to check
        clause: Single-key clause such as ``{"term": {"author": 1}}``

    Returns:
        True if the record matches, False otherwise

    Raises:
        QueryError: If the clause type is not supported
    """
    if len(clause) != 1:
        raise QueryError(f"Query clause must have exactly one key: {clause}")

    kind, body = next(iter(clause.items()))

    if kind == "bool":
        return bool_matches(record, body)

    if kind == "match_all":
        return True

    if kind == "exists":
        field = body.get("field")
        return field in record and record[field] not in (None, "", [])

    if not isinstance(body, dict) or len(body) != 1:
        raise QueryError(f"Invalid {kind} clause: {body}")
    field, expected = next(iter(body.items()))
    actual = record.get(field)

    if kind == "term":
        if isinstance(expected, dict):
            expected = expected.get("value")
        return _values_equal(actual, expected)

    if kind == "terms":
        return any(_values_equal(actual, value) for value in expected)

    if kind == "match":
        if isinstance(expected, dict):
            expected = expected.get("query")
        if actual is None:
            return False
        return str(expected).lower() in str(actual).lower()

    if kind == "range":
        for operator, bound in expected.items():
            if operator not in RANGE_CHECKS:
                raise QueryError(f"Unsupported range operator: {operator}")
            comparison = _compare(actual, bound)
            if comparison is None or not RANGE_CHECKS[operator](comparison):
                return False
        return True

    raise QueryError(f"Unsupported query clause: {kind}")


def _as_list(clauses: Any) -> List[Dict[str, Any]]:
    if clauses is None:
        return []
    if isinstance(clauses, dict):
        return [clauses]
    return list(clauses)


def bool_matches(record: Dict[str, Any], body: Dict[str, Any]) -> bool:
    """
    Check if a record satisfies a ``bool`` query body.

    ``filter`` and ``must`` clauses must all match, ``must_not`` clauses must
    all fail, and at least one ``should`` clause must match when any are given.
    """
    for key in body:
        if key not in {"filter", "must", "must_not", "should"}:
            raise QueryError(f"Unsupported bool occurrence: {key}")

    required = _as_list(body.get("filter")) + _as_list(body.get("must"))
    if not all(clause_matches(record, clause) for clause in required):
        return False
    if any(clause_matches(record, clause) for clause in _as_list(body.get("must_not"))):
        return False

    should = _as_list(body.get("should"))
    return not should or any(clause_matches(record, clause) for clause in should)


def record_matches(record: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
    """
    Check if a record matches the ``query`` part of a search body.

    Args:
        record: Record to check
        query: Query clause, or None to match everything
    """
    if not query:
        return True
    return clause_matches(record, query)


def sort_records(records: List[Dict[str, Any]], sort: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
    """
    Sort records by a list of sort criteria.

    Each criterion is either a field name (ascending) or
    ``{field: {"order": "asc"|"desc"}}``. Records missing the field sort last.

    Raises:
        QueryError: If a sort direction is invalid
    """
    criteria = sort if sort else DEFAULT_SORT
    ordered = list(records)

    # Stable sorts applied from the least significant criterion
    for criterion in reversed(criteria):
        if isinstance(criterion, str):
            field, direction = criterion, "asc"
        else:
            field, options = next(iter(criterion.items()))
            direction = options.get("order", "asc") if isinstance(options, dict) else options
        if direction not in {"asc", "desc"}:
            raise QueryError(f"Invalid sort direction: {direction}")

        present = [r for r in ordered if r.get(field) is not None]
        missing = [r for r in ordered if r.get(field) is None]
        present.sort(key=lambda r: _sort_key(r.get(field)), reverse=direction == "desc")
        ordered = present + missing

    return ordered


def _sort_key(value: Any) -> Any:
    if isinstance(value, bool):
        return (0, int(value), "")
    if isinstance(value, (int, float)):
        return (0, value, "")
    return (1, 0, str(value))


def paginate(records: List[Dict[str, Any]], offset: int = 0, size: int = DEFAULT_PAGE_SIZE) -> List[Dict[str, Any]]:
    """
    Slice a page out of sorted records.

    Raises:
        QueryError: If offset is negative or size is negative
    """
    if offset < 0:
        raise QueryError("Offset must be non-negative")
    if size < 0:
        raise QueryError("Size must be non-negative")
    return records[offset : offset + size]


def aggregate(records: List[Dict[str, Any]], aggregations: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Compute ``terms`` aggregations over matched records.

    Buckets are ordered by document count descending, then by key.

    Raises:
        QueryError: If an aggregation type is not supported
    """
    results: Dict[str, Any] = {}
    for name, definition in (aggregations or {}).items():
        if "terms" not in definition:
            raise QueryError(f"Unsupported aggregation for {name}: {list(definition)}")
        terms = definition["terms"]
        field = terms.get("field")
        size = terms.get("size")

        counts: Counter = Counter()
        for record in records:
            value = record.get(field)
            values = value if isinstance(value, list) else [value]
            for item in values:
                if item is not None and item != "":
                    counts[item] += 1

        buckets = [
            {"key": key, "doc_count": count}
            for key, count in sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
        ]
        if size is not None:
            buckets = buckets[: int(size)]
        results[name] = {"buckets": buckets}
    return results


def project_fields(record: Dict[str, Any], fields: Optional[List[str]]) -> Dict[str, Any]:
    """
    Narrow a record to the requested fields, always keeping ``ID``.
    """
    if not fields:
        return dict(record)
    wanted = set(fields) | {"ID"}
    return {key: value for key, value in record.items() if key in wanted}
