"""
Filter models for record queries.

This module provides the filter model used to narrow record listings. Each
filter turns into a single clause of the indexing service's ``bool`` query:
- Equality and inequality comparisons
- Numeric and date range filters
- List membership checks
- Case-insensitive substring matching
- Field existence checks
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ...core.exceptions import QueryError

VALID_OPERATORS = {
    "eq",
    "ne",
    "gt",
    "gte",
    "lt",
    "lte",
    "in",
    "nin",
    "contains",
    "exists",
}

# Operators whose clause belongs under must_not instead of filter
NEGATED_OPERATORS = {"ne", "nin"}


@dataclass
class SearchFilter:
    """
    Filter criteria for record queries.

    Attributes:
        field (str): The record field to apply the filter on
        operator (str): The type of filter operation to perform
        value (Any): The value to filter against

    Supported Operators:
        Equality:
            - "eq": Equal to
            - "ne": Not equal to

        Range:
            - "gt", "gte", "lt", "lte"

        List:
            - "in": Value in list
            - "nin": Value not in list

        Other:
            - "contains": Case-insensitive substring match
            - "exists": Field is present and non-empty
    """

    field: str
    operator: str = "eq"
    value: Any = None

    def validate(self) -> None:
        """
        Validate filter configuration.

        Raises:
            QueryError: If the operator is unknown or the value does not suit it
        """
        if not self.field:
            raise QueryError("Filter field must be a non-empty string")
        if self.operator not in VALID_OPERATORS:
            raise QueryError(f"Invalid operator: {self.operator}")
        if self.operator in {"in", "nin"} and isinstance(self.value, (str, bytes)):
            raise QueryError(f"Operator {self.operator} requires a list of values")

    @property
    def negated(self) -> bool:
        return self.operator in NEGATED_OPERATORS

    def to_clause(self) -> Tuple[str, Dict[str, Any]]:
        """
        Convert filter to a query clause.

        Returns:
            Tuple of the bool occurrence ("filter" or "must_not") and the clause

        Raises:
            QueryError: If the operator is not supported

        Example:
            SearchFilter("author", "in", [1, 2]).to_clause()
            returns: ("filter", {"terms": {"author": [1, 2]}})
        """
        occurrence = "must_not" if self.negated else "filter"

        if self.operator in {"eq", "ne"}:
            return occurrence, {"term": {self.field: self.value}}
        elif self.operator in {"gt", "gte", "lt", "lte"}:
            return occurrence, {"range": {self.field: {self.operator: self.value}}}
        elif self.operator in {"in", "nin"}:
            return occurrence, {"terms": {self.field: list(self.value)}}
        elif self.operator == "contains":
            return occurrence, {"match": {self.field: self.value}}
        elif self.operator == "exists":
            occurrence = "filter" if self.value in (None, True) else "must_not"
            return occurrence, {"exists": {"field": self.field}}
        else:
            raise QueryError(f"Unsupported operator: {self.operator}")
