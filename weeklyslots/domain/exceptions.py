"""
Domain-specific exception hierarchy for the availability engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TimeRange, TimeSlot


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class FormatError(AvailabilityError):
    """Raised when a clock time, weekday or persisted slot cannot be parsed."""


class InvalidRangeError(AvailabilityError):
    """Raised when a slot or generation range does not start before it ends."""


class OverlapError(AvailabilityError):
    """Raised when a candidate slot intersects a slot already on the day."""

    def __init__(self, candidate: "TimeRange", conflict: "TimeSlot"):
        self.candidate = candidate
        self.conflict = conflict
        super().__init__(
            f"Slot {candidate} overlaps existing slot {conflict.time_range}"
        )


class NoSlotsGeneratedError(AvailabilityError):
    """Raised when a generation range is shorter than the slot duration."""


class StoreError(AvailabilityError):
    """Raised when availability data cannot be loaded from or saved to a store."""


class ProviderNotFoundError(StoreError):
    """Raised when the store holds no record for the requested provider."""

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(f"No availability record for provider '{provider_id}'")
