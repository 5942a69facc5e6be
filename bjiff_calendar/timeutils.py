"""
Timestamp conversion between Maoyan epoch milliseconds and calendar tuples.

Calendar tuples are (year, month, day, hour, minute, second) in the local
system time zone and carry no zone information; they are written to the ICS
file as floating local times.
"""

from datetime import datetime
from typing import Tuple

CalendarTuple = Tuple[int, int, int, int, int, int]


def to_calendar_tuple(epoch_millis: int) -> CalendarTuple:
    """Convert epoch milliseconds to a local-time tuple truncated to the minute."""
    moment = datetime.fromtimestamp(epoch_millis / 1000)
    return (moment.year, moment.month, moment.day, moment.hour, moment.minute, 0)


def from_calendar_tuple(value: CalendarTuple) -> datetime:
    """Build a naive local datetime from a calendar tuple.

    Raises:
        ValueError: if the tuple does not have six fields or a field is out of range.
    """
    if len(value) != 6:
        raise ValueError(f"calendar tuple needs 6 fields, got {len(value)}")
    return datetime(*value)
