"""
Application services for loading and saving provider availability.

The service coordinates the availability store adapter and the domain-level
marshalling. Editing itself stays in ``SlotScheduler``; the service only
crosses the store boundary, which is the one place that awaits.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Protocol, Tuple

from ..domain.models import DayAvailability, Weekday, WeeklyAvailability
from ..domain.persistence import PersistedAvailability, from_persisted, to_persisted
from ..domain.slot_scheduler import SlotScheduler

logger = logging.getLogger(__name__)


class AvailabilityStoreProtocol(Protocol):
    """Protocol describing the store behaviour needed by the service."""

    async def load(self, provider_id: str) -> PersistedAvailability:
        """Return the persisted availability, raising ProviderNotFoundError if unknown."""

    async def save(self, provider_id: str, data: PersistedAvailability) -> None:
        """Persist the availability, raising StoreError on failure."""


class AvailabilityService:
    """
    Loads and saves WeeklyAvailability values through a store.

    Store errors propagate unchanged and no retries are made; the caller's
    in-memory week is never touched by a failed save.
    """

    def __init__(
        self,
        store: AvailabilityStoreProtocol,
        scheduler: SlotScheduler | None = None,
    ) -> None:
        self._store = store
        self._scheduler = scheduler or SlotScheduler()

    @property
    def scheduler(self) -> SlotScheduler:
        return self._scheduler

    async def load_week(self, provider_id: str) -> WeeklyAvailability:
        """Fetch and unmarshal a provider's weekly availability."""
        data = await self._store.load(provider_id)
        logger.debug("Loaded availability for provider %s", provider_id)
        return from_persisted(data, scheduler=self._scheduler)

    async def save_week(self, provider_id: str, week: WeeklyAvailability) -> PersistedAvailability:
        """
        Marshal and store a provider's weekly availability.

        Returns the payload that was sent to the store.
        """
        payload = to_persisted(week)

        dropped = [
            weekday.value
            for weekday, day in week.items()
            if not day.is_available and day.slots
        ]
        if dropped:
            logger.info(
                "Closed days %s hold slots that will not be persisted", ", ".join(dropped)
            )

        await self._store.save(provider_id, payload)
        logger.debug("Saved availability for provider %s", provider_id)
        return payload

    async def save_day(
        self,
        provider_id: str,
        weekday: Weekday,
        day: DayAvailability,
    ) -> WeeklyAvailability:
        """
        Replace a single weekday in the stored availability.

        The other days are re-read from the store so edits made elsewhere to
        them are kept.
        """
        current = await self.load_week(provider_id)
        updated = current.with_day(weekday, day)
        await self.save_week(provider_id, updated)
        return updated

    async def day_for_date(self, provider_id: str, day: date) -> Tuple[Weekday, DayAvailability]:
        """Return the availability that applies to a calendar date."""
        week = await self.load_week(provider_id)
        weekday = Weekday.from_date(day)
        return weekday, week[weekday]
