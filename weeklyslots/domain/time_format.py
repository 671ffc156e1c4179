"""
Conversions between clock strings and minutes since midnight.

All interval arithmetic in the engine works on integer minutes; strings only
appear at the edges (persistence, CLI input and display).
"""

import re

from .exceptions import FormatError

MINUTES_PER_DAY = 24 * 60

_CLOCK_PATTERN = re.compile(r"^([0-9]{2}):([0-9]{2})$")


def to_minutes(value: str) -> int:
    """
    Parse a zero-padded 24-hour ``HH:MM`` string into minutes since midnight.

    ``"24:00"`` is accepted as the end of the day (1440).

    Raises:
        FormatError: If the string is malformed or out of range
    """
    match = _CLOCK_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise FormatError(f"Expected a time in HH:MM format, got {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))

    if hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if not 0 <= hours <= 23:
        raise FormatError(f"Hour must be between 00 and 23, got {value!r}")
    if not 0 <= minutes <= 59:
        raise FormatError(f"Minute must be between 00 and 59, got {value!r}")

    return hours * 60 + minutes


def from_minutes(total_minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    if not 0 <= total_minutes <= MINUTES_PER_DAY:
        raise FormatError(
            f"Minutes must be between 0 and {MINUTES_PER_DAY}, got {total_minutes}"
        )
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def to_display_12h(total_minutes: int) -> str:
    """
    Format minutes since midnight for display, e.g. ``1:30 PM``.

    Only meant for presentation; never compare these strings.
    """
    if not 0 <= total_minutes <= MINUTES_PER_DAY:
        raise FormatError(
            f"Minutes must be between 0 and {MINUTES_PER_DAY}, got {total_minutes}"
        )
    hours, minutes = divmod(total_minutes % MINUTES_PER_DAY, 60)
    period = "PM" if hours >= 12 else "AM"
    hours_12 = hours % 12 or 12
    return f"{hours_12}:{minutes:02d} {period}"
