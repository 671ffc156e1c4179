"""
Domain models for weekly availability.

Times are integer minutes since midnight. Every model is immutable; the
scheduler returns new values instead of mutating existing ones.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

from .exceptions import FormatError, InvalidRangeError
from .time_format import MINUTES_PER_DAY, from_minutes, to_display_12h


class Weekday(str, Enum):
    """The seven fixed weekday keys, Monday first."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, text: str) -> "Weekday":
        """
        Resolve a weekday from its full name or three-letter abbreviation.

        Raises:
            FormatError: If the text names no weekday
        """
        key = text.strip().lower()
        for weekday in cls:
            if key == weekday.value or (len(key) == 3 and weekday.value.startswith(key)):
                return weekday
        raise FormatError(f"Unknown weekday: {text!r}")

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        """Return the weekday a calendar date falls on."""
        return list(cls)[day.isoweekday() - 1]


@dataclass(frozen=True)
class TimeRange:
    """
    A clock-time interval ``[start, end)`` within one day.

    Only the bounds are checked here; ordering is the scheduler's job so that
    a reversed range can be rejected with a proper error.
    """
    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start < MINUTES_PER_DAY:
            raise InvalidRangeError(f"Start minute {self.start} is outside the day")
        if not 0 < self.end <= MINUTES_PER_DAY:
            raise InvalidRangeError(f"End minute {self.end} is outside the day")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ends do not count."""
        return self.start < other.end and self.end > other.start

    def format_display(self) -> str:
        return f"{to_display_12h(self.start)} - {to_display_12h(self.end)}"

    def __str__(self) -> str:
        return f"{from_minutes(self.start)} - {from_minutes(self.end)}"


@dataclass(frozen=True)
class TimeSlot:
    """
    A bookable slot on a day.

    The id is session-local and excluded from equality, so two slots with the
    same times compare equal.
    """
    time_range: TimeRange
    id: str = field(compare=False)

    @property
    def start(self) -> int:
        return self.time_range.start

    @property
    def end(self) -> int:
        return self.time_range.end


@dataclass(frozen=True)
class DayAvailability:
    """
    Open/closed flag plus the day's slots in insertion order.

    A closed day may still hold slots; they are dropped when persisted.
    """
    is_available: bool = False
    slots: Tuple[TimeSlot, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "slots", tuple(self.slots))

    def sorted_slots(self) -> Tuple[TimeSlot, ...]:
        """Slots in display order (by start minute)."""
        return tuple(sorted(self.slots, key=lambda slot: slot.start))

    def find_slot_starting_at(self, start_minute: int) -> Optional[TimeSlot]:
        for slot in self.slots:
            if slot.start == start_minute:
                return slot
        return None


@dataclass(frozen=True)
class WeeklyAvailability:
    """
    Seven-day schedule for one provider. Every weekday is always present and
    ``days`` is a read-only view.
    """
    days: Mapping[Weekday, DayAvailability] = field(default_factory=dict)

    def __post_init__(self):
        days = {weekday: self.days.get(weekday, DayAvailability()) for weekday in Weekday}
        object.__setattr__(self, "days", MappingProxyType(days))

    @classmethod
    def empty(cls) -> "WeeklyAvailability":
        """A week with every day closed and no slots."""
        return cls()

    def __getitem__(self, weekday: Weekday) -> DayAvailability:
        return self.days[weekday]

    def __iter__(self) -> Iterator[Weekday]:
        return iter(Weekday)

    def items(self) -> Iterator[Tuple[Weekday, DayAvailability]]:
        for weekday in Weekday:
            yield weekday, self.days[weekday]

    def with_day(self, weekday: Weekday, day: DayAvailability) -> "WeeklyAvailability":
        """Return a new week with one day replaced."""
        days = dict(self.days)
        days[weekday] = day
        return WeeklyAvailability(days=days)
