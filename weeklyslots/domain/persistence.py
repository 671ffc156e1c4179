"""
Marshalling between WeeklyAvailability and the persisted availability shape.

Persisted shape (what the availability store keeps per provider):
{
    "monday": [{"start": "09:00", "end": "09:30"}, ...],
    "tuesday": [],
    ...
    "sunday": []
}

An empty list means the day is closed. Slot ids are never persisted.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import FormatError
from .models import DayAvailability, TimeRange, Weekday, WeeklyAvailability
from .slot_scheduler import SlotScheduler
from .time_format import from_minutes, to_minutes

logger = logging.getLogger(__name__)

PersistedAvailability = Dict[str, List[Dict[str, str]]]


class PersistedSlot(BaseModel):
    """
    One stored slot.

    Older records written by the mobile client use ``startTime``/``endTime``
    and carry a stale ``id``; both are accepted and the id is ignored.
    """
    model_config = ConfigDict(extra="ignore")

    start: str = Field(validation_alias=AliasChoices("start", "startTime"))
    end: str = Field(validation_alias=AliasChoices("end", "endTime"))

    @field_validator("start", "end")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Ensure the value is a valid HH:MM time."""
        try:
            to_minutes(value)
        except FormatError as exc:
            raise ValueError(str(exc)) from exc
        return value

    def to_time_range(self) -> TimeRange:
        return TimeRange(start=to_minutes(self.start), end=to_minutes(self.end))


def to_persisted(week: WeeklyAvailability) -> PersistedAvailability:
    """
    Convert a week to the persisted shape.

    Closed days are written as empty lists even when they hold slots.
    """
    persisted: PersistedAvailability = {}

    for weekday, day in week.items():
        if not day.is_available:
            persisted[weekday.value] = []
            continue

        persisted[weekday.value] = [
            {"start": from_minutes(slot.start), "end": from_minutes(slot.end)}
            for slot in day.slots
        ]

    return persisted


def from_persisted(
    data: Optional[Mapping[str, Any]],
    scheduler: Optional[SlotScheduler] = None,
) -> WeeklyAvailability:
    """
    Rebuild a week from the persisted shape.

    A day is open when it has at least one slot. Missing days are closed,
    unknown keys are skipped. Slots receive fresh ids and pass the same
    range and overlap checks as interactive edits.

    Raises:
        FormatError: If the record is not a mapping, a day is not a list or a slot is malformed
        InvalidRangeError: If a stored slot does not start before it ends
        OverlapError: If stored slots of one day intersect
    """
    scheduler = scheduler or SlotScheduler()
    data = data or {}
    if not isinstance(data, Mapping):
        raise FormatError(
            f"Persisted availability must be a mapping of weekdays, got {type(data).__name__}"
        )
    known_keys = {weekday.value for weekday in Weekday}

    for key in data:
        if key not in known_keys:
            logger.warning("Ignoring unknown weekday key in persisted availability: %r", key)

    days: Dict[Weekday, DayAvailability] = {}

    for weekday in Weekday:
        raw_slots = data.get(weekday.value) or []
        if not isinstance(raw_slots, list):
            raise FormatError(
                f"Availability for {weekday.value} must be a list, got {type(raw_slots).__name__}"
            )

        day = DayAvailability(is_available=len(raw_slots) > 0)
        for raw_slot in raw_slots:
            day = scheduler.add_slot(day, _parse_slot(weekday, raw_slot).to_time_range())

        days[weekday] = day

    return WeeklyAvailability(days=days)


def _parse_slot(weekday: Weekday, raw_slot: Any) -> PersistedSlot:
    try:
        return PersistedSlot.model_validate(raw_slot)
    except ValidationError as exc:
        raise FormatError(f"Invalid slot for {weekday.value}: {raw_slot!r}") from exc
