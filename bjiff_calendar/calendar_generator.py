"""
ICS calendar generation module.

collect_showtimes() gathers the sessions of every successful schedule fetch,
CalendarGenerator serializes CalendarEvents to an RFC 5545 payload, and
write_calendar() publishes the payload into a freshly emptied directory.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from datetime import timezone
from pathlib import Path
from typing import Iterable
from typing import List
from typing import Sequence

from icalendar import Calendar
from icalendar import Event

from bjiff_calendar.coordinator import TaskOutcome
from bjiff_calendar.errors import CalendarGenerationError
from bjiff_calendar.models import CalendarEvent
from bjiff_calendar.models import MovieListing
from bjiff_calendar.models import ScheduleDay
from bjiff_calendar.models import ShowtimeRecord
from bjiff_calendar.settings import OUTPUT_DIR
from bjiff_calendar.settings import OUTPUT_FILENAME
from bjiff_calendar.settings import Settings
from bjiff_calendar.settings import get_settings
from bjiff_calendar.timeutils import from_calendar_tuple

logger = logging.getLogger(__name__)


def collect_showtimes(
    outcomes: Iterable[TaskOutcome[MovieListing, List[ScheduleDay]]],
) -> List[ShowtimeRecord]:
    """Flatten the date-grouped sessions of all successful fetches.

    Failed outcomes contribute nothing. Order follows the outcomes, then the
    date groups and sessions within each response. Identifiers a session
    omits are taken from the catalog entry it was fetched for.
    """
    records: List[ShowtimeRecord] = []
    for outcome in outcomes:
        if not outcome.ok:
            continue
        for day in outcome.result or []:
            records.extend(record.with_listing(outcome.item) for record in day.show_list)
    return records


class CalendarGenerator:
    """Generate ICS calendar content from calendar events.

    Event content is deterministic; only DTSTAMP varies between runs.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def generate_calendar(self, events: Sequence[CalendarEvent]) -> bytes:
        """
        Serialize events to an ICS payload.

        Raises:
            CalendarGenerationError: if any event has an invalid field. No
                partial payload is returned in that case.
        """
        cal = Calendar()
        cal.add('prodid', self.settings.prodid)
        cal.add('version', '2.0')
        cal.add('calscale', 'GREGORIAN')
        cal.add('method', 'PUBLISH')
        cal.add('x-wr-calname', self.settings.calendar_name)
        cal.add('x-wr-caldesc', self.settings.calendar_description)
        cal.add('x-published-ttl', 'PT1H')

        stamp = datetime.now(timezone.utc)
        for position, event in enumerate(events):
            try:
                cal.add_component(self._build_event(event, stamp))
            except (ValueError, TypeError) as e:
                raise CalendarGenerationError(
                    f"event #{position} ({event.title!r}, uid={event.uid}): {e}"
                ) from e

        try:
            payload = cal.to_ical()
        except (ValueError, TypeError) as e:
            raise CalendarGenerationError(f"calendar serialization failed: {e}") from e

        logger.info(f"Generated calendar with {len(events)} events")
        return payload

    @staticmethod
    def _build_event(event: CalendarEvent, stamp: datetime) -> Event:
        start = from_calendar_tuple(event.start)
        end = from_calendar_tuple(event.end)

        ev = Event()
        ev.add('uid', event.uid)
        ev.add('dtstamp', stamp)
        ev.add('summary', event.title)
        ev.add('description', event.description)
        # Naive datetimes serialize as floating local time
        ev.add('dtstart', start)
        ev.add('dtend', end)
        if event.categories:
            ev.add('categories', event.categories)
        ev.add('status', event.status)
        ev.add('x-microsoft-cdo-busystatus', event.busy_status)
        ev.add('location', event.location)
        return ev


def write_calendar(
    payload: bytes,
    output_dir: Path = OUTPUT_DIR,
    filename: str = OUTPUT_FILENAME,
) -> Path:
    """Empty (or create) `output_dir` and write the payload into it."""
    output_dir = Path(output_dir)
    if output_dir.exists():
        for child in output_dir.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    else:
        output_dir.mkdir(parents=True)

    target = output_dir / filename
    target.write_bytes(payload)
    logger.info(f"Wrote {len(payload)} bytes to {target}")
    return target
