"""
Data models for the BJIFF calendar exporter.

Pydantic models mirror the JSON documents returned by the Maoyan festival
API (camelCase aliases, unknown fields ignored) and the calendar events
derived from them.

Validation is structural only: the nested list fields default to empty and
identifiers are optional, so a renamed or missing list or key yields an empty
or partial result instead of an error.
"""

import logging
import uuid
from typing import Any
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from bjiff_calendar.timeutils import CalendarTuple
from bjiff_calendar.timeutils import to_calendar_tuple

logger = logging.getLogger(__name__)


class ApiModel(BaseModel):
    """Base for models parsed from Maoyan responses."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MovieListing(ApiModel):
    """
    One film offered at the festival theatre.

    No uniqueness is enforced on movie_id; the catalog may list the same film
    in several recommendation groups and each entry is fetched independently.
    """

    id: Optional[str] = Field(
        default=None,
        description="Opaque catalog entry identifier"
    )

    theatre_id: Optional[str] = Field(
        default=None,
        alias="theatreId",
        description="Festival theatre identifier"
    )

    movie_id: Optional[str] = Field(
        default=None,
        alias="movieId",
        description="Maoyan movie identifier"
    )

    movie_name: str = Field(
        default="",
        alias="movieName",
        description="Film title as listed by Maoyan"
    )

    @field_validator("id", "theatre_id", "movie_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        """Maoyan sends identifiers as either numbers or strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ShowtimeRecord(MovieListing):
    """A single screening session with cinema metadata."""

    cinema_name: str = Field(default="", alias="cinemaName")
    city_name: str = Field(default="", alias="cityName")
    cinema_address: str = Field(default="", alias="cinemaAddress")
    hall_name: str = Field(default="", alias="hallName")
    meeting_info: str = Field(
        default="",
        alias="meetingInfo",
        description="Free-form session info (Q&A, meet the director, ...)"
    )

    show_time: int = Field(
        ...,
        alias="showTime",
        description="Session start, epoch milliseconds"
    )

    show_end_time: int = Field(
        ...,
        alias="showEndTime",
        description="Session end, epoch milliseconds"
    )

    @property
    def uid(self) -> str:
        """Stable event UID for this session."""
        movie = self.movie_id or self.movie_name
        key = f"{self.theatre_id}/{movie}/{self.hall_name}/{self.show_time}"
        return f"{uuid.uuid5(uuid.NAMESPACE_URL, key)}@bjiff"

    def with_listing(self, listing: MovieListing) -> "ShowtimeRecord":
        """Fill identifiers the session omits from the catalog entry it was fetched for."""
        missing = {
            field: getattr(listing, field)
            for field in ("theatre_id", "movie_id")
            if getattr(self, field) is None
        }
        if not self.movie_name and listing.movie_name:
            missing["movie_name"] = listing.movie_name
        return self.model_copy(update=missing) if missing else self

    def to_calendar_event(self) -> "CalendarEvent":
        """Project this session onto a calendar event."""
        return CalendarEvent(
            uid=self.uid,
            title=self.movie_name,
            description=f"{self.cinema_name} {self.hall_name}",
            start=to_calendar_tuple(self.show_time),
            end=to_calendar_tuple(self.show_end_time),
            categories=[self.cinema_name],
            location=f"{self.cinema_name} {self.city_name}{self.cinema_address}",
        )


class ScheduleDay(ApiModel):
    """Sessions of one movie grouped under a single show date."""

    show_date: Optional[Any] = Field(default=None, alias="showDate")
    show_list: List[ShowtimeRecord] = Field(default_factory=list, alias="showList")


class ScheduleResponse(ApiModel):
    """Body of the per-movie showtime endpoint."""

    data: List[ScheduleDay] = Field(default_factory=list)


class SubLayer(ApiModel):
    theatre_movie_list: List[MovieListing] = Field(
        default_factory=list,
        alias="theatreMovieList"
    )


class RecommendationGroup(ApiModel):
    theatre_sub_layer_list: List[SubLayer] = Field(
        default_factory=list,
        alias="theatreSubLayerList"
    )


class CatalogResponse(ApiModel):
    """Body of the theatre catalog endpoint."""

    data: List[RecommendationGroup] = Field(default_factory=list)

    def movies(self) -> List[MovieListing]:
        """Flatten groups, sub-layers and movie lists, keeping source order.

        Entries without a movie id cannot be fetched and are skipped.
        """
        movies: List[MovieListing] = []
        for group in self.data:
            for layer in group.theatre_sub_layer_list:
                for movie in layer.theatre_movie_list:
                    if movie.movie_id is None:
                        logger.warning(f"Skipping catalog entry without movieId: id={movie.id} name={movie.movie_name!r}")
                        continue
                    movies.append(movie)
        return movies


class CalendarEvent(BaseModel):
    """
    Calendar-ready projection of one ShowtimeRecord.

    start and end are (year, month, day, hour, minute, second) tuples in
    local time; range checks happen when the calendar is serialized.
    """

    uid: str
    title: str
    description: str
    start: CalendarTuple
    end: CalendarTuple
    categories: List[str] = Field(default_factory=list)
    status: str = "CONFIRMED"
    busy_status: str = "BUSY"
    location: str = ""
