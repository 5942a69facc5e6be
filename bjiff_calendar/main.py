"""
Command-line entry point.

    python -m bjiff_calendar.main
    bjiff-calendar

Writes ./dist/bjiff.ics. Fatal errors are logged and re-raised so the process
exits non-zero with a traceback.
"""

import asyncio

import structlog

from bjiff_calendar.pipeline import run
from bjiff_calendar.settings import get_settings


def main() -> None:
    settings = get_settings()
    settings.setup_logging()
    log = structlog.get_logger("bjiff_calendar.main")

    try:
        result = asyncio.run(run(settings))
    except Exception:
        log.exception("export_failed")
        raise

    log.info(
        "export_finished",
        movies=result.movies,
        succeeded=result.succeeded,
        failed=result.failed,
        events=result.events,
        output=str(result.output_path),
    )


if __name__ == "__main__":
    main()
