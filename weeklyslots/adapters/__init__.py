"""
Adapters layer - Availability store integrations (local JSON file, clinic REST API).
"""

from .http_store import HttpAvailabilityStore
from .json_file_store import JsonFileStore

__all__ = ["HttpAvailabilityStore", "JsonFileStore"]
