"""
Availability store backed by the clinic backend's REST API.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from ..domain.exceptions import ProviderNotFoundError, StoreError
from ..domain.persistence import PersistedAvailability

logger = logging.getLogger(__name__)


class HttpAvailabilityStore:
    """
    Client for the doctor availability endpoints.

    Uses GET /doctors/{id} (availability is a field of the doctor record) and
    PUT /doctors/{id}/availability. Blocking requests run in a worker thread.
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the REST store.

        Args:
            base_url: API root, e.g. https://clinic.example.com/api
            api_token: Optional bearer token sent with every request
            timeout: Request timeout in seconds
            session: Optional requests session (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}
        if api_token:
            self.headers["Authorization"] = f"Bearer {api_token}"

    async def load(self, provider_id: str) -> PersistedAvailability:
        """Fetch the doctor record and return its availability field."""
        return await asyncio.to_thread(self._load_sync, provider_id)

    async def save(self, provider_id: str, data: PersistedAvailability) -> None:
        """Replace the doctor's availability."""
        await asyncio.to_thread(self._save_sync, provider_id, data)

    def _load_sync(self, provider_id: str) -> PersistedAvailability:
        url = f"{self.base_url}/doctors/{provider_id}"
        record = self._request("GET", url, provider_id)

        if not isinstance(record, dict):
            raise StoreError(f"Unexpected response for provider '{provider_id}': {record!r}")

        return record.get("availability") or {}

    def _save_sync(self, provider_id: str, data: PersistedAvailability) -> None:
        url = f"{self.base_url}/doctors/{provider_id}/availability"
        self._request("PUT", url, provider_id, payload={"availability": data})

    def _request(
        self,
        method: str,
        url: str,
        provider_id: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise StoreError(f"Availability request failed: {e}") from e

        if response.status_code == 404:
            raise ProviderNotFoundError(provider_id)

        try:
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            raise StoreError(f"Availability request failed: {e}") from e
        except ValueError as e:
            raise StoreError(f"Availability response is not valid JSON: {e}") from e
