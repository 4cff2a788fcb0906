"""Shared test fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from streamlog.core.exceptions import APIRequestError
from streamlog.core.models import SearchResponse
from streamlog.infrastructure.api import RecordAPI
from streamlog.infrastructure.hooks import HookBus
from streamlog.infrastructure.storage import RecordStore


class FakeRecordAPI(RecordAPI):
    """In-memory backing API recording every call."""

    def __init__(self) -> None:
        self.inserted: List[Dict[str, Any]] = []
        self.searches: List[Dict[str, Any]] = []
        self.search_response: Optional[SearchResponse] = None
        self.records: Dict[str, Dict[str, Any]] = {}
        self.insert_error: Optional[APIRequestError] = None

    async def new_record(self, record: Dict[str, Any]) -> str:
        if self.insert_error is not None:
            raise self.insert_error
        self.inserted.append(record)
        return f"rec-{len(self.inserted)}"

    async def search(
        self, query: Dict[str, Any], fields: Optional[List[str]] = None
    ) -> Optional[SearchResponse]:
        self.searches.append({"query": query, "fields": fields})
        return self.search_response

    async def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self.records.get(record_id)


@pytest.fixture
def fake_api() -> FakeRecordAPI:
    """Fixture providing an in-memory backing API."""
    return FakeRecordAPI()


@pytest.fixture
def hooks() -> HookBus:
    """Fixture providing an empty hook bus."""
    return HookBus()


@pytest.fixture
def record_store(fake_api: FakeRecordAPI, hooks: HookBus) -> RecordStore:
    """Fixture providing a record store over the fake API."""
    return RecordStore(fake_api, hooks)


@pytest.fixture
def sample_record() -> Dict[str, Any]:
    """Fixture providing a typical record as logged by a connector."""
    return {
        "summary": "Hello World! updated",
        "author": 1,
        "author_role": "administrator",
        "connector": "posts",
        "context": "post",
        "action": "updated",
        "object_id": 1,
        "ip": "127.0.0.1",
        "meta": {"post_title": "Hello World!"},
    }
