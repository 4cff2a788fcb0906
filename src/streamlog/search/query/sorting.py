"""
Sorting models for record queries.
"""

from dataclasses import dataclass
from typing import Any, Dict

from ...core.exceptions import QueryError


@dataclass
class SearchSort:
    """
    Sorting criteria for record listings.

    Attributes:
        field (str): The field to sort results by
        direction (str): Sort direction ("asc" or "desc")

    Example uses:
        - Newest first: SearchSort(field="created", direction="desc")
        - By author: SearchSort(field="author")
    """

    field: str = "created"
    direction: str = "desc"

    def validate(self) -> None:
        """
        Validate sort configuration.

        Raises:
            QueryError: If the sort direction is invalid
        """
        if self.direction not in {"asc", "desc"}:
            raise QueryError(f"Invalid sort direction: {self.direction}")

    def to_sort_clause(self) -> Dict[str, Any]:
        """
        Convert sort criteria to the service's sort format.

        Example:
            SearchSort(field="created", direction="desc").to_sort_clause()
            returns: {"created": {"order": "desc"}}
        """
        return {self.field: {"order": self.direction}}
