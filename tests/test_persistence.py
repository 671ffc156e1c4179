"""
Tests for marshalling weeks to and from the persisted shape.
"""

import logging

import pytest

from weeklyslots.domain.exceptions import FormatError, InvalidRangeError, OverlapError
from weeklyslots.domain.models import DayAvailability, TimeRange, Weekday, WeeklyAvailability
from weeklyslots.domain.persistence import from_persisted, to_persisted
from weeklyslots.domain.slot_scheduler import SlotScheduler


def _open_day(scheduler: SlotScheduler, *ranges) -> DayAvailability:
    day = DayAvailability(is_available=True)
    for start, end in ranges:
        day = scheduler.add_slot(day, TimeRange(start=start, end=end))
    return day


class TestToPersisted:
    """Tests for to_persisted."""

    def test_every_weekday_is_written(self):
        persisted = to_persisted(WeeklyAvailability.empty())

        assert persisted == {weekday.value: [] for weekday in Weekday}

    def test_open_day_written_in_insertion_order(self):
        scheduler = SlotScheduler()
        monday = _open_day(scheduler, (600, 630), (540, 570))
        week = WeeklyAvailability.empty().with_day(Weekday.MONDAY, monday)

        persisted = to_persisted(week)

        assert persisted["monday"] == [
            {"start": "10:00", "end": "10:30"},
            {"start": "09:00", "end": "09:30"},
        ]

    def test_closed_day_drops_slots(self):
        """Test a closed day is written empty even when it holds slots."""
        scheduler = SlotScheduler()
        closed = scheduler.toggle_day(_open_day(scheduler, (540, 570)))
        week = WeeklyAvailability.empty().with_day(Weekday.TUESDAY, closed)

        assert to_persisted(week)["tuesday"] == []

    def test_ids_are_not_persisted(self):
        scheduler = SlotScheduler()
        week = WeeklyAvailability.empty().with_day(Weekday.MONDAY, _open_day(scheduler, (540, 570)))

        assert set(to_persisted(week)["monday"][0]) == {"start", "end"}

    def test_end_of_day_slot(self):
        scheduler = SlotScheduler()
        week = WeeklyAvailability.empty().with_day(Weekday.SUNDAY, _open_day(scheduler, (1380, 1440)))

        assert to_persisted(week)["sunday"] == [{"start": "23:00", "end": "24:00"}]


class TestFromPersisted:
    """Tests for from_persisted."""

    def test_availability_follows_slot_presence(self):
        week = from_persisted({
            "monday": [{"start": "09:00", "end": "09:30"}, {"start": "09:30", "end": "10:00"}],
            "tuesday": [],
        })

        assert week[Weekday.MONDAY].is_available
        assert [str(slot.time_range) for slot in week[Weekday.MONDAY].slots] == [
            "09:00 - 09:30",
            "09:30 - 10:00",
        ]
        assert not week[Weekday.TUESDAY].is_available

    def test_missing_days_are_closed(self):
        week = from_persisted({"friday": [{"start": "08:00", "end": "08:30"}]})

        for weekday, day in week.items():
            if weekday is Weekday.FRIDAY:
                assert day.is_available
            else:
                assert day == DayAvailability()

    @pytest.mark.parametrize("data", [None, {}])
    def test_empty_input_gives_empty_week(self, data):
        assert from_persisted(data) == WeeklyAvailability.empty()

    def test_slots_get_fresh_unique_ids(self):
        week = from_persisted({
            "monday": [{"start": "09:00", "end": "09:30"}],
            "tuesday": [{"start": "09:00", "end": "09:30"}],
        })

        monday_id = week[Weekday.MONDAY].slots[0].id
        tuesday_id = week[Weekday.TUESDAY].slots[0].id

        assert monday_id and tuesday_id
        assert monday_id != tuesday_id

    def test_unknown_keys_are_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            week = from_persisted({"funday": [{"start": "09:00", "end": "09:30"}]})

        assert week == WeeklyAvailability.empty()
        assert "funday" in caplog.text

    def test_accepts_legacy_slot_keys(self):
        """Test records stored with startTime/endTime and an id still load."""
        week = from_persisted({
            "wednesday": [{"id": "wednesday-1700000000000-540", "startTime": "09:00", "endTime": "09:30"}],
        })

        slot = week[Weekday.WEDNESDAY].slots[0]
        assert str(slot.time_range) == "09:00 - 09:30"
        assert slot.id != "wednesday-1700000000000-540"

    @pytest.mark.parametrize(
        "raw_slot",
        [
            {"start": "9am", "end": "09:30"},
            {"start": "09:00"},
            {"start": "25:00", "end": "26:00"},
            "09:00-09:30",
        ],
    )
    def test_malformed_slot_raises_format_error(self, raw_slot):
        with pytest.raises(FormatError):
            from_persisted({"monday": [raw_slot]})

    @pytest.mark.parametrize("data", [["monday"], "monday", 42])
    def test_record_must_be_a_mapping(self, data):
        """Test a stored record that is not a weekday mapping raises FormatError."""
        with pytest.raises(FormatError, match="mapping"):
            from_persisted(data)

    def test_day_must_be_a_list(self):
        with pytest.raises(FormatError):
            from_persisted({"monday": {"start": "09:00", "end": "09:30"}})

    def test_reversed_slot_raises_invalid_range(self):
        with pytest.raises(InvalidRangeError):
            from_persisted({"monday": [{"start": "10:00", "end": "09:00"}]})

    def test_overlapping_slots_raise_overlap_error(self):
        with pytest.raises(OverlapError):
            from_persisted({
                "monday": [{"start": "09:00", "end": "10:00"}, {"start": "09:30", "end": "10:30"}],
            })


class TestRoundTrip:
    """Tests for the save/reload cycle."""

    def test_round_trip_preserves_consistent_week(self):
        """Test round-trip equality when open days have slots and closed days do not."""
        scheduler = SlotScheduler()
        week = (
            WeeklyAvailability.empty()
            .with_day(Weekday.MONDAY, _open_day(scheduler, (540, 570), (600, 660)))
            .with_day(Weekday.THURSDAY, _open_day(scheduler, (780, 840)))
        )

        assert from_persisted(to_persisted(week)) == week

    def test_closed_day_with_slots_is_lost(self):
        """Test a closed day holding slots collapses to closed and empty."""
        scheduler = SlotScheduler()
        closed = scheduler.toggle_day(_open_day(scheduler, (540, 570)))
        week = WeeklyAvailability.empty().with_day(Weekday.MONDAY, closed)

        reloaded = from_persisted(to_persisted(week))

        assert reloaded != week
        assert reloaded[Weekday.MONDAY] == DayAvailability(is_available=False, slots=())

    def test_open_day_without_slots_reloads_closed(self):
        week = WeeklyAvailability.empty().with_day(Weekday.MONDAY, DayAvailability(is_available=True))

        reloaded = from_persisted(to_persisted(week))

        assert not reloaded[Weekday.MONDAY].is_available
