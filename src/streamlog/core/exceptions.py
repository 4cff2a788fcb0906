"""
Custom exceptions for the activity record store.

This module defines the hierarchy of custom exceptions used throughout the system
to handle various error conditions in a structured and meaningful way. Each exception
type corresponds to a specific category of errors that may occur during record
storage, querying or hook dispatch.
"""

from typing import Any, Dict, Optional


class ValidationError(Exception):
    """
    Raised when data validation fails.

    Examples:
        * Hook payload does not match its registered schema
        * Malformed record data
    """

    def __str__(self) -> str:
        """Format validation error message."""
        return f"Validation Error: {super().__str__()}"


class StorageError(Exception):
    """
    Raised when storage operations fail.

    This exception is raised when the backing API cannot persist or read
    records, such as connection failures, rejected requests, or file system
    errors in the local backend.
    """


class APIRequestError(StorageError):
    """
    Raised when a request to the backing API fails.

    Instances double as the error value returned by ``RecordStore.store`` when
    an insert is rejected, so they carry enough context to be reported back to
    callers without the original traceback.

    Attributes:
        code: Short machine-readable error code
        status_code: HTTP status code, if the failure came from a response
        details: Additional context about the failure
    """

    def __init__(
        self,
        message: str,
        code: str = "api_request_failed",
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def get_error_message(self) -> str:
        """Return the human readable error message."""
        return str(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "code": self.code,
            "message": str(self),
            "status_code": self.status_code,
            "details": self.details,
        }


class QueryError(Exception):
    """
    Raised when query operations fail.

    Examples:
        * Invalid filter operator or sort direction
        * Unsupported search clause in the local backend
        * Invalid pagination parameters
    """


class EventError(Exception):
    """
    Raised when hook operations fail.

    Examples:
        * A filter callback raised while rewriting a value
        * Registering a callback that is not callable
    """


class ConfigurationError(Exception):
    """
    Raised when configuration is invalid.

    Examples:
        * Missing API key for the remote backend
        * Unknown backend name
        * Invalid timeout value
    """

