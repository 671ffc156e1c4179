"""
Tests for domain models.
"""

from datetime import date

import pendulum
import pytest

from weeklyslots.domain.exceptions import FormatError, InvalidRangeError
from weeklyslots.domain.models import (
    DayAvailability,
    TimeRange,
    TimeSlot,
    Weekday,
    WeeklyAvailability,
)


class TestWeekday:
    """Tests for the Weekday enum."""

    def test_order_starts_on_monday(self):
        assert [weekday.value for weekday in Weekday] == [
            "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
        ]

    @pytest.mark.parametrize("text", ["monday", "Monday", "MON", " mon "])
    def test_parse(self, text):
        """Test full names and abbreviations are accepted case-insensitively."""
        assert Weekday.parse(text) is Weekday.MONDAY

    @pytest.mark.parametrize("text", ["funday", "mo", ""])
    def test_parse_unknown(self, text):
        with pytest.raises(FormatError):
            Weekday.parse(text)

    def test_from_date(self):
        """Test dates map to the weekday they fall on."""
        assert Weekday.from_date(date(2024, 11, 25)) is Weekday.MONDAY
        assert Weekday.from_date(date(2024, 11, 24)) is Weekday.SUNDAY
        assert Weekday.from_date(pendulum.date(2024, 11, 23)) is Weekday.SATURDAY


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        tr = TimeRange(start=540, end=1020)

        assert tr.duration_minutes() == 480
        assert str(tr) == "09:00 - 17:00"
        assert tr.format_display() == "9:00 AM - 5:00 PM"

    @pytest.mark.parametrize("start, end", [(-1, 60), (1440, 1440), (0, 0), (0, 1441)])
    def test_out_of_day_bounds(self, start, end):
        """Test minutes outside the day are rejected."""
        with pytest.raises(InvalidRangeError):
            TimeRange(start=start, end=end)

    def test_reversed_range_is_representable(self):
        """Ordering is validated by the scheduler, not the model."""
        tr = TimeRange(start=600, end=540)
        assert tr.duration_minutes() == -60

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = TimeRange(start=540, end=720)
        tr2 = TimeRange(start=660, end=840)
        tr3 = TimeRange(start=720, end=900)

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)
        assert not tr3.overlaps(tr1)


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def test_equality_ignores_id(self):
        a = TimeSlot(time_range=TimeRange(540, 570), id="a")
        b = TimeSlot(time_range=TimeRange(540, 570), id="b")

        assert a == b
        assert a.id != b.id

    def test_start_and_end(self):
        slot = TimeSlot(time_range=TimeRange(540, 570), id="a")
        assert (slot.start, slot.end) == (540, 570)


class TestDayAvailability:
    """Tests for DayAvailability model."""

    def test_defaults_to_closed(self):
        day = DayAvailability()
        assert not day.is_available
        assert day.slots == ()

    def test_slots_are_stored_as_tuple(self):
        day = DayAvailability(is_available=True, slots=[TimeSlot(TimeRange(540, 570), id="a")])
        assert isinstance(day.slots, tuple)

    def test_sorted_slots_orders_by_start(self):
        """Test display order is by start time, not insertion."""
        late = TimeSlot(TimeRange(600, 630), id="late")
        early = TimeSlot(TimeRange(540, 570), id="early")
        day = DayAvailability(is_available=True, slots=(late, early))

        assert [slot.id for slot in day.sorted_slots()] == ["early", "late"]
        assert [slot.id for slot in day.slots] == ["late", "early"]

    def test_find_slot_starting_at(self):
        slot = TimeSlot(TimeRange(540, 570), id="a")
        day = DayAvailability(is_available=True, slots=(slot,))

        assert day.find_slot_starting_at(540) is slot
        assert day.find_slot_starting_at(570) is None


class TestWeeklyAvailability:
    """Tests for WeeklyAvailability model."""

    def test_empty_week_has_every_day_closed(self):
        week = WeeklyAvailability.empty()

        assert list(week) == list(Weekday)
        assert all(not day.is_available and not day.slots for _, day in week.items())

    def test_missing_days_are_filled_in(self):
        open_day = DayAvailability(is_available=True, slots=(TimeSlot(TimeRange(540, 570), id="a"),))
        week = WeeklyAvailability(days={Weekday.FRIDAY: open_day})

        assert week[Weekday.FRIDAY] is open_day
        assert week[Weekday.MONDAY] == DayAvailability()
        assert len(week.days) == 7

    def test_with_day_returns_new_week(self):
        """Test replacing a day leaves the original week untouched."""
        week = WeeklyAvailability.empty()
        updated = week.with_day(Weekday.MONDAY, DayAvailability(is_available=True))

        assert updated[Weekday.MONDAY].is_available
        assert not week[Weekday.MONDAY].is_available
        assert updated is not week

    def test_days_cannot_be_mutated(self):
        """Test the days mapping rejects item assignment."""
        week = WeeklyAvailability.empty()

        with pytest.raises(TypeError):
            week.days[Weekday.MONDAY] = DayAvailability(is_available=True)

        assert not week[Weekday.MONDAY].is_available

    def test_equal_weeks_compare_equal(self):
        assert WeeklyAvailability.empty() == WeeklyAvailability(days={})
