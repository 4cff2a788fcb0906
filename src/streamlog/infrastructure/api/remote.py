"""
HTTP client for the hosted record indexing service.

Records are created, searched and fetched through the site-scoped REST
endpoints of the service:
- ``POST /sites/{site_uuid}/records``
- ``POST /sites/{site_uuid}/records/_search``
- ``GET /sites/{site_uuid}/records/{record_id}``

Insert failures raise ``APIRequestError``. Search and fetch failures are
logged and reported as empty responses.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ...core.exceptions import APIRequestError
from ...core.models import SearchResponse
from .base import RecordAPI

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class RemoteRecordAPI(RecordAPI):
    """
    Backing API talking to the hosted indexing service over HTTP.

    Attributes:
        base_url (str): Service root URL
        site_uuid (str): Site the records belong to
        client (Optional[httpx.AsyncClient]): HTTP client, created on first use
    """

    def __init__(
        self,
        base_url: str,
        site_uuid: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Service root URL
            site_uuid: Site the records belong to
            api_key: Bearer token sent with every request
            timeout: Per-request timeout in seconds
            client: Preconfigured HTTP client, used instead of creating one
        """
        self.base_url = base_url.rstrip("/")
        self.site_uuid = site_uuid
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self.client = client
        self._owns_client = client is None

    async def initialize(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        logger.info(f"Connected record API client to {self.base_url}")

    async def cleanup(self) -> None:
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None

    def _records_path(self, suffix: str = "") -> str:
        return f"/sites/{self.site_uuid}/records{suffix}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if self.client is None:
            await self.initialize()
        logger.debug(f"{method} {path}")
        return await self.client.request(
            method, f"{self.base_url}{path}", headers=self._headers, **kwargs
        )

    async def new_record(self, record: Dict[str, Any]) -> str:
        """
        Index a new record.

        Raises:
            APIRequestError: If the request fails or the response carries no id
        """
        try:
            response = await self._request("POST", self._records_path(), json={"records": [record]})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise APIRequestError(
                _error_message(e.response),
                code="record_rejected",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise APIRequestError(f"Record API request failed: {str(e)}") from e
        except ValueError as e:
            raise APIRequestError(f"Invalid record API response: {str(e)}", code="invalid_response") from e

        record_ids = payload.get("record_ids") if isinstance(payload, dict) else None
        if not record_ids:
            raise APIRequestError("Record API returned no record id", code="invalid_response")
        return str(record_ids[0])

    async def search(
        self, query: Dict[str, Any], fields: Optional[List[str]] = None
    ) -> Optional[SearchResponse]:
        body: Dict[str, Any] = {"query": query}
        if fields:
            body["fields"] = list(fields)

        try:
            response = await self._request("POST", self._records_path("/_search"), json=body)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
            return SearchResponse.from_dict(payload)
        except (httpx.HTTPError, TypeError, ValueError) as e:
            logger.warning(f"Record search failed: {str(e)}")
            return None

    async def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = await self._request("GET", self._records_path(f"/{record_id}"))
            if response.status_code == 404:
                return None
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Fetching record {record_id} failed: {str(e)}")
            return None

        return payload if isinstance(payload, dict) and payload else None


def _error_message(response: httpx.Response) -> str:
    """Extract the most useful error message from an error response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if message:
            return str(message)
    return f"Record API responded with HTTP {response.status_code}"
