"""
Core business logic for editing a provider's weekly availability.

Pure domain logic: no I/O, no clock, no shared state. Every operation takes a
value and returns a new one; rejected operations raise and leave the input
untouched.
"""

import uuid
from typing import Callable, Iterable, List, Optional

from .exceptions import InvalidRangeError, NoSlotsGeneratedError, OverlapError
from .models import DayAvailability, TimeRange, TimeSlot, Weekday, WeeklyAvailability


def _uuid_id() -> str:
    return uuid.uuid4().hex


def is_valid_slot(start: int, end: int) -> bool:
    """A slot is valid when it starts before it ends."""
    return start < end


def find_conflict(candidate: TimeRange, existing_slots: Iterable[TimeSlot]) -> Optional[TimeSlot]:
    """Return the first existing slot the candidate intersects, if any."""
    for slot in existing_slots:
        if candidate.overlaps(slot.time_range):
            return slot
    return None


def overlaps(candidate: TimeRange, existing_slots: Iterable[TimeSlot]) -> bool:
    """
    Check whether a candidate intersects any existing slot.

    Half-open intervals: ``09:00-09:30`` and ``09:30-10:00`` do not overlap.
    """
    return find_conflict(candidate, existing_slots) is not None


class SlotScheduler:
    """
    Applies availability edits to days and weeks.

    Operations:
    - add_slot: admit a single slot after range and overlap checks
    - remove_slot: drop a slot by id (unknown ids are ignored)
    - generate_slots: tile a range with equal-length slots, replacing the day
    - toggle_day / set_day_available: change the open flag only
    - copy_day_to_all: clone one day's slots onto every other day
    """

    def __init__(self, id_factory: Callable[[], str] = _uuid_id):
        self._id_factory = id_factory

    def new_slot(self, time_range: TimeRange) -> TimeSlot:
        """Wrap a range in a slot with a fresh id."""
        return TimeSlot(time_range=time_range, id=self._id_factory())

    def add_slot(self, day: DayAvailability, candidate: TimeRange) -> DayAvailability:
        """
        Append a slot to the day.

        Raises:
            InvalidRangeError: If the candidate does not start before it ends
            OverlapError: If the candidate intersects an existing slot
        """
        if not is_valid_slot(candidate.start, candidate.end):
            raise InvalidRangeError(f"Slot {candidate}: end time must be after start time")

        conflict = find_conflict(candidate, day.slots)
        if conflict is not None:
            raise OverlapError(candidate=candidate, conflict=conflict)

        return DayAvailability(
            is_available=day.is_available,
            slots=day.slots + (self.new_slot(candidate),),
        )

    def remove_slot(self, day: DayAvailability, slot_id: str) -> DayAvailability:
        """Remove the slot with the given id; a no-op for unknown ids."""
        return DayAvailability(
            is_available=day.is_available,
            slots=tuple(slot for slot in day.slots if slot.id != slot_id),
        )

    @staticmethod
    def generate_candidates(range_start: int, range_end: int, duration_minutes: int) -> List[TimeRange]:
        """
        Tile ``[range_start, range_end)`` greedily from the left.

        A trailing remainder shorter than the duration is dropped.

        Example:
        Range: 09:00 - 09:50, duration 30
        Result: [09:00-09:30]
        """
        if not is_valid_slot(range_start, range_end):
            raise InvalidRangeError("Generation range: end time must be after start time")
        if duration_minutes <= 0:
            raise InvalidRangeError(
                f"Slot duration must be greater than zero, got {duration_minutes}"
            )

        candidates: List[TimeRange] = []
        cursor = range_start

        while cursor + duration_minutes <= range_end:
            candidates.append(TimeRange(start=cursor, end=cursor + duration_minutes))
            cursor += duration_minutes

        return candidates

    def generate_slots(
        self,
        day: DayAvailability,
        range_start: int,
        range_end: int,
        duration_minutes: int,
    ) -> DayAvailability:
        """
        Replace the day's slots with a tiling of the range and open the day.

        Raises:
            InvalidRangeError: If the range is empty/reversed or the duration is not positive
            NoSlotsGeneratedError: If the range is shorter than one slot
        """
        candidates = self.generate_candidates(range_start, range_end, duration_minutes)

        if not candidates:
            raise NoSlotsGeneratedError(
                f"The time range is too small for {duration_minutes}-minute slots"
            )

        # Build through add_slot so generated slots pass the same overlap gate.
        generated = DayAvailability(is_available=True)
        for candidate in candidates:
            generated = self.add_slot(generated, candidate)

        return generated

    def toggle_day(self, day: DayAvailability) -> DayAvailability:
        """Flip the open flag; slots are kept either way."""
        return self.set_day_available(day, not day.is_available)

    def set_day_available(self, day: DayAvailability, is_available: bool) -> DayAvailability:
        return DayAvailability(is_available=is_available, slots=day.slots)

    def copy_day_to_all(self, source: Weekday, week: WeeklyAvailability) -> WeeklyAvailability:
        """
        Overwrite every other day with copies of the source day's slots.

        Target days are opened when the source has slots and closed otherwise.
        Each copied slot gets its own id. Previous slots on the targets are lost.
        """
        source_slots = week[source].slots
        result = week

        for weekday in Weekday:
            if weekday == source:
                continue

            target = DayAvailability(is_available=len(source_slots) > 0)
            for slot in source_slots:
                target = self.add_slot(target, slot.time_range)

            result = result.with_day(weekday, target)

        return result
