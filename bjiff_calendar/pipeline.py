"""
One-shot export pipeline.

fetch catalog -> bounded per-movie schedule fetches -> join -> map to events
-> serialize -> empty output directory and write.

A failed catalog fetch or calendar serialization aborts the run before the
output directory is touched. A failed schedule fetch only drops that movie.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bjiff_calendar.calendar_generator import CalendarGenerator
from bjiff_calendar.calendar_generator import collect_showtimes
from bjiff_calendar.calendar_generator import write_calendar
from bjiff_calendar.scraper.http_client import HttpClient
from bjiff_calendar.scraper.maoyan_scraper import MaoyanScraper
from bjiff_calendar.settings import MAX_CONCURRENT_REQUESTS
from bjiff_calendar.settings import OUTPUT_DIR
from bjiff_calendar.settings import OUTPUT_FILENAME
from bjiff_calendar.settings import THEATRE_ID
from bjiff_calendar.settings import Settings
from bjiff_calendar.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Summary of one export run."""

    movies: int
    succeeded: int
    failed: int
    events: int
    output_path: Path


async def export_calendar(
    scraper: MaoyanScraper,
    generator: CalendarGenerator,
    theatre_id: str = THEATRE_ID,
    concurrency: int = MAX_CONCURRENT_REQUESTS,
    output_dir: Path = OUTPUT_DIR,
    filename: str = OUTPUT_FILENAME,
) -> RunResult:
    """Run the pipeline with an already constructed scraper and generator."""
    movies = await scraper.fetch_all_movies(theatre_id)
    outcomes = await scraper.fetch_schedules_for(movies, limit=concurrency)

    records = collect_showtimes(outcomes)
    events = [record.to_calendar_event() for record in records]
    payload = generator.generate_calendar(events)
    output_path = write_calendar(payload, output_dir, filename)

    failed = sum(1 for outcome in outcomes if not outcome.ok)
    return RunResult(
        movies=len(movies),
        succeeded=len(outcomes) - failed,
        failed=failed,
        events=len(events),
        output_path=output_path,
    )


async def run(
    settings: Optional[Settings] = None,
    theatre_id: str = THEATRE_ID,
    concurrency: int = MAX_CONCURRENT_REQUESTS,
    output_dir: Path = OUTPUT_DIR,
    filename: str = OUTPUT_FILENAME,
) -> RunResult:
    """Export the festival calendar using a live HTTP session."""
    settings = settings or get_settings()
    async with HttpClient(settings) as client:
        return await export_calendar(
            MaoyanScraper(client),
            CalendarGenerator(settings),
            theatre_id=theatre_id,
            concurrency=concurrency,
            output_dir=output_dir,
            filename=filename,
        )
