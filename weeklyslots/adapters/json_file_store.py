"""
Availability store backed by a local JSON file.

Useful for running the CLI without the clinic backend, and in tests.
"""

import asyncio
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict

from ..domain.exceptions import ProviderNotFoundError, StoreError
from ..domain.models import WeeklyAvailability
from ..domain.persistence import PersistedAvailability, to_persisted

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    Stores every provider's availability in one JSON document.

    File format:
    {
        "doctor-42": {"monday": [{"start": "09:00", "end": "09:30"}], ...},
        ...
    }
    """

    def __init__(self, path: Path, create_missing: bool = False):
        """
        Initialize the store.

        Args:
            path: Location of the JSON document (created on first save)
            create_missing: Return an empty week for unknown providers instead of raising
        """
        self.path = Path(path)
        self.create_missing = create_missing
        self._write_lock = threading.Lock()

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Invalid JSON in {self.path}: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Could not read {self.path}: {exc}") from exc

        if not isinstance(document, dict):
            raise StoreError(f"{self.path} must contain a JSON object at the root level.")

        return document

    def _write_document(self, document: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Could not write {self.path}: {exc}") from exc

    def _load_sync(self, provider_id: str) -> PersistedAvailability:
        document = self._read_document()

        if provider_id not in document:
            if self.create_missing:
                logger.debug("No record for %s in %s, starting empty", provider_id, self.path)
                return to_persisted(WeeklyAvailability.empty())
            raise ProviderNotFoundError(provider_id)

        return document[provider_id]

    def _save_sync(self, provider_id: str, data: PersistedAvailability) -> None:
        # Read-modify-write of the shared document must not interleave
        with self._write_lock:
            document = self._read_document()
            document[provider_id] = data
            self._write_document(document)
        logger.debug("Wrote availability for %s to %s", provider_id, self.path)

    async def load(self, provider_id: str) -> PersistedAvailability:
        """Return the stored availability for a provider."""
        return await asyncio.to_thread(self._load_sync, provider_id)

    async def save(self, provider_id: str, data: PersistedAvailability) -> None:
        """Replace the stored availability for a provider."""
        await asyncio.to_thread(self._save_sync, provider_id, data)

    def provider_ids(self) -> list:
        """List the providers that have a stored record."""
        return sorted(self._read_document().keys())
