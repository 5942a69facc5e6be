import pytest

from bjiff_calendar.errors import ApiError
from bjiff_calendar.errors import ResponseShapeError
from bjiff_calendar.scraper.maoyan_scraper import MaoyanScraper
from bjiff_calendar.settings import CATALOG_URL
from bjiff_calendar.settings import SCHEDULE_URL

from tests.fakes import FakeHttpClient
from tests.fakes import make_catalog
from tests.fakes import make_movie
from tests.fakes import make_show

# Mark all tests in this file as async
pytestmark = pytest.mark.asyncio


async def test_fetch_all_movies_queries_theatre_and_flattens(scenario_client):
    scraper = MaoyanScraper(scenario_client)

    movies = await scraper.fetch_all_movies()

    assert scenario_client.calls == [(CATALOG_URL, {"theatreId": "97"})]
    assert len(movies) == 1
    assert movies[0].movie_id == "123"
    assert movies[0].movie_name == "Test Film"


async def test_fetch_all_movies_propagates_transport_failure():
    client = FakeHttpClient(ApiError(CATALOG_URL, 500, "Internal Server Error"))

    with pytest.raises(ApiError):
        await MaoyanScraper(client).fetch_all_movies()


async def test_fetch_all_movies_wraps_shape_errors():
    client = FakeHttpClient({"data": [{"theatreSubLayerList": "nope"}]})

    with pytest.raises(ResponseShapeError) as exc_info:
        await MaoyanScraper(client).fetch_all_movies()
    assert exc_info.value.url == CATALOG_URL


async def test_fetch_movie_schedules_returns_date_groups(scenario_client):
    days = await MaoyanScraper(scenario_client).fetch_movie_schedules("97", "123")

    assert scenario_client.calls == [(SCHEDULE_URL, {"theatreId": "97", "movieId": "123"})]
    assert len(days) == 1
    assert days[0].show_list[0].cinema_name == "Cinema A"


async def test_fetch_schedules_for_skips_failed_movies():
    catalog = make_catalog([[make_movie("1", "Good"), make_movie("2", "Broken")]])
    schedules = {"1": [{"showDate": "2023-11-15", "showList": [make_show("1", "Good")]}]}
    client = FakeHttpClient(catalog, schedules, failing={"2"})
    scraper = MaoyanScraper(client)

    movies = await scraper.fetch_all_movies()
    outcomes = await scraper.fetch_schedules_for(movies, limit=5)

    assert [o.ok for o in outcomes] == [True, False]
    assert isinstance(outcomes[1].error, ApiError)
    assert outcomes[0].result[0].show_list[0].movie_name == "Good"


async def test_duplicate_listings_are_fetched_independently():
    catalog = make_catalog([[make_movie("1", "Twice")]], [[make_movie("1", "Twice")]])
    client = FakeHttpClient(catalog, {})
    scraper = MaoyanScraper(client)

    outcomes = await scraper.fetch_schedules_for(await scraper.fetch_all_movies())

    assert len(outcomes) == 2
    assert sum(1 for url, _ in client.calls if url == SCHEDULE_URL) == 2


async def test_catalog_entry_without_theatre_id_uses_queried_theatre():
    catalog = make_catalog([[{"movieId": "5", "movieName": "No Theatre"}]])
    client = FakeHttpClient(catalog, {})
    scraper = MaoyanScraper(client)

    movies = await scraper.fetch_all_movies()
    await scraper.fetch_schedules_for(movies)

    assert movies[0].theatre_id == "97"
    assert client.calls[1] == (SCHEDULE_URL, {"theatreId": "97", "movieId": "5"})
