"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AvailabilityError,
    FormatError,
    InvalidRangeError,
    NoSlotsGeneratedError,
    OverlapError,
    ProviderNotFoundError,
    StoreError,
)
from .models import DayAvailability, TimeRange, TimeSlot, Weekday, WeeklyAvailability
from .persistence import PersistedAvailability, from_persisted, to_persisted
from .slot_scheduler import SlotScheduler, find_conflict, is_valid_slot, overlaps
from .time_format import from_minutes, to_display_12h, to_minutes

__all__ = [
    "AvailabilityError",
    "FormatError",
    "InvalidRangeError",
    "NoSlotsGeneratedError",
    "OverlapError",
    "ProviderNotFoundError",
    "StoreError",
    "DayAvailability",
    "TimeRange",
    "TimeSlot",
    "Weekday",
    "WeeklyAvailability",
    "PersistedAvailability",
    "from_persisted",
    "to_persisted",
    "SlotScheduler",
    "find_conflict",
    "is_valid_slot",
    "overlaps",
    "from_minutes",
    "to_display_12h",
    "to_minutes",
]
