"""
Tests for record query building.
"""

import pytest

from streamlog.core.exceptions import QueryError
from streamlog.search import RecordQuery, SearchFilter, SearchSort


def test_default_query_body():
    """Test the body of an unfiltered query."""
    body = RecordQuery().to_search_body()

    assert body == {"sort": [{"created": {"order": "desc"}}], "from": 0, "size": 20}


def test_filters_search_and_dates():
    """Test filters, text search and date range end up in the bool query."""
    query = (
        RecordQuery(search="updated", date_from="2024-01-01", date_to="2024-01-31", page=3, page_size=10)
        .where("context", "post")
        .where("author", [1, 2], operator="in")
        .where("action", "deleted", operator="ne")
    )

    body = query.to_search_body()

    assert body["from"] == 20
    assert body["size"] == 10
    assert body["query"]["bool"] == {
        "filter": [
            {"term": {"context": "post"}},
            {"terms": {"author": [1, 2]}},
            {"range": {"created": {"gte": "2024-01-01", "lt": "2024-02-01"}}},
        ],
        "must_not": [{"term": {"action": "deleted"}}],
        "must": [{"match": {"summary": "updated"}}],
    }


def test_exists_filter_occurrence():
    """Test that exists filters can require presence or absence."""
    assert SearchFilter("ip", "exists").to_clause() == ("filter", {"exists": {"field": "ip"}})
    assert SearchFilter("ip", "exists", False).to_clause() == ("must_not", {"exists": {"field": "ip"}})


def test_range_and_contains_filters():
    """Test range and contains filter clauses."""
    assert SearchFilter("author", "gte", 5).to_clause() == ("filter", {"range": {"author": {"gte": 5}}})
    assert SearchFilter("summary", "contains", "post").to_clause() == (
        "filter",
        {"match": {"summary": "post"}},
    )


@pytest.mark.parametrize(
    "query, message",
    [
        (RecordQuery(page=0), "Page number must be positive"),
        (RecordQuery(page_size=0), "Page size must be positive"),
        (RecordQuery().where("colour", "red"), "Unknown record field: colour"),
        (RecordQuery().where("author", 1, operator="near"), "Invalid operator: near"),
        (RecordQuery().where("author", "1,2", operator="in"), "requires a list"),
        (RecordQuery(sort=SearchSort("created", "up")), "Invalid sort direction: up"),
        (RecordQuery(date_from="yesterday"), "Invalid date: yesterday"),
        (RecordQuery(fields=["summary", "bogus"]), "Unknown record field: bogus"),
    ],
)
def test_invalid_queries(query, message):
    """Test that invalid queries raise QueryError."""
    with pytest.raises(QueryError, match=message):
        query.to_search_body()
