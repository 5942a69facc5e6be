"""
BJIFF Showtimes Calendar Exporter.

Fetches the Beijing International Film Festival programme of one theatre
from the Maoyan festival API and writes every screening to an ICS calendar
file for import into calendar applications.

Main Components:
- Scraper: Maoyan catalog and per-movie showtime fetchers over aiohttp
- Coordinator: bounded-concurrency fan-out with an explicit join
- Calendar: ICS generation following RFC 5545 via icalendar
- Pipeline: one-shot fetch, aggregate, serialize and write

Usage:
    # Export ./dist/bjiff.ics
    python -m bjiff_calendar.main

    # Programmatically
    from bjiff_calendar.pipeline import run

    result = await run()
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Public API for external usage
from bjiff_calendar.calendar_generator import CalendarGenerator
from bjiff_calendar.coordinator import run_bounded
from bjiff_calendar.models import CalendarEvent
from bjiff_calendar.models import MovieListing
from bjiff_calendar.models import ShowtimeRecord
from bjiff_calendar.pipeline import run
from bjiff_calendar.scraper.maoyan_scraper import MaoyanScraper

__all__ = [
    "CalendarEvent",
    "CalendarGenerator",
    "MaoyanScraper",
    "MovieListing",
    "ShowtimeRecord",
    "run",
    "run_bounded",
]
