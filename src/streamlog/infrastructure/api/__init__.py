"""
Backing record API implementations.

This package provides the backends the record store delegates to:
- RecordAPI: Interface every backend implements
- RemoteRecordAPI: HTTP client for the hosted indexing service
- LocalRecordAPI: JSON-file backend for development and offline use
"""

from .base import RecordAPI
from .local import LocalRecordAPI
from .remote import RemoteRecordAPI

__all__ = [
    "LocalRecordAPI",
    "RecordAPI",
    "RemoteRecordAPI",
]
