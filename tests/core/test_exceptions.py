"""
Tests for custom exceptions.
"""

from streamlog.core.exceptions import (
    APIRequestError,
    StorageError,
    ValidationError,
)


def test_validation_error_message():
    """Test validation error message formatting."""
    error = ValidationError("test message")
    assert str(error) == "Validation Error: test message"


def test_api_request_error_is_storage_error():
    """Test the API error hierarchy and its dictionary form."""
    error = APIRequestError("Index unavailable", code="unavailable", status_code=503, details={"retry": False})

    assert isinstance(error, StorageError)
    assert error.get_error_message() == "Index unavailable"
    assert error.to_dict() == {
        "code": "unavailable",
        "message": "Index unavailable",
        "status_code": 503,
        "details": {"retry": False},
    }
