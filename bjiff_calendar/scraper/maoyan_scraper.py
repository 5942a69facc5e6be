"""
Maoyan film festival API scraper.

Fetches the movie catalog of a festival theatre and the per-movie showtimes.
Both calls are single GETs; failures propagate to the caller.
"""

import logging
from typing import List
from typing import Sequence

from pydantic import ValidationError

from bjiff_calendar.coordinator import TaskOutcome
from bjiff_calendar.coordinator import run_bounded
from bjiff_calendar.errors import ResponseShapeError
from bjiff_calendar.models import CatalogResponse
from bjiff_calendar.models import MovieListing
from bjiff_calendar.models import ScheduleDay
from bjiff_calendar.models import ScheduleResponse
from bjiff_calendar.scraper.http_client import HttpClient
from bjiff_calendar.settings import CATALOG_URL
from bjiff_calendar.settings import MAX_CONCURRENT_REQUESTS
from bjiff_calendar.settings import SCHEDULE_URL
from bjiff_calendar.settings import THEATRE_ID

logger = logging.getLogger(__name__)


class MaoyanScraper:
    """Client for the two Maoyan festival endpoints."""

    def __init__(
        self,
        client: HttpClient,
        catalog_url: str = CATALOG_URL,
        schedule_url: str = SCHEDULE_URL,
    ) -> None:
        self.client = client
        self.catalog_url = catalog_url
        self.schedule_url = schedule_url

    async def fetch_all_movies(self, theatre_id: str = THEATRE_ID) -> List[MovieListing]:
        """
        Fetch the theatre catalog and flatten it into one list of movies.

        Raises:
            ApiError: if the request fails
            ResponseShapeError: if the body does not match the catalog shape
        """
        payload = await self.client.get_json(self.catalog_url, {"theatreId": str(theatre_id)})
        try:
            catalog = CatalogResponse.model_validate(payload)
        except ValidationError as e:
            raise ResponseShapeError(self.catalog_url, str(e)) from e

        movies = [
            movie if movie.theatre_id else movie.model_copy(update={"theatre_id": str(theatre_id)})
            for movie in catalog.movies()
        ]
        logger.info(f"Catalog for theatre {theatre_id}: {len(movies)} movies in {len(catalog.data)} groups")
        return movies

    async def fetch_movie_schedules(self, theatre_id: str, movie_id: str) -> List[ScheduleDay]:
        """Fetch showtimes of one movie, grouped by show date."""
        payload = await self.client.get_json(
            self.schedule_url,
            {"theatreId": str(theatre_id), "movieId": str(movie_id)},
        )
        try:
            schedule = ScheduleResponse.model_validate(payload)
        except ValidationError as e:
            raise ResponseShapeError(self.schedule_url, str(e)) from e

        logger.debug(f"Movie {movie_id}: {sum(len(d.show_list) for d in schedule.data)} sessions")
        return schedule.data

    async def fetch_schedules_for(
        self,
        movies: Sequence[MovieListing],
        limit: int = MAX_CONCURRENT_REQUESTS,
    ) -> List[TaskOutcome[MovieListing, List[ScheduleDay]]]:
        """Fetch every movie's showtimes with at most `limit` requests in flight."""

        def report(outcome: TaskOutcome[MovieListing, List[ScheduleDay]]) -> None:
            if not outcome.ok:
                logger.warning(
                    f"Skipping movie {outcome.item.movie_id} ({outcome.item.movie_name}): {outcome.error}"
                )

        return await run_bounded(
            movies,
            lambda movie: self.fetch_movie_schedules(movie.theatre_id, movie.movie_id),
            limit=limit,
            on_completed=report,
        )
