"""Exception hierarchy for the BJIFF calendar exporter."""

from typing import Optional


class BjiffCalendarError(Exception):
    """Base class for all errors raised by this package."""


class ApiError(BjiffCalendarError):
    """The Maoyan API could not be reached or answered with a non-2xx status."""

    def __init__(self, url: str, status: Optional[int] = None, message: str = "") -> None:
        self.url = url
        self.status = status
        self.message = message
        detail = f"status={status}" if status is not None else "transport error"
        text = f"GET {url} failed ({detail})"
        super().__init__(f"{text}: {message}" if message else text)


class ResponseShapeError(BjiffCalendarError):
    """The response body did not parse into the expected JSON structure."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Unexpected response from {url}: {detail}")


class CalendarGenerationError(BjiffCalendarError):
    """Calendar serialization rejected one of the events."""
