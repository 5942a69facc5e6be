import pytest

from bjiff_calendar.settings import Settings

from tests.fakes import FakeHttpClient
from tests.fakes import make_catalog
from tests.fakes import make_movie
from tests.fakes import make_show


@pytest.fixture
def settings():
    return Settings(calendar_name="Test Calendar", prodid="-//test//bjiff//EN")


@pytest.fixture
def scenario_client():
    """One group, one sub-layer, one movie with a single session."""
    catalog = make_catalog([[make_movie("123", "Test Film")]])
    schedules = {
        "123": [{"showDate": "2023-11-15", "showList": [make_show("123", "Test Film")]}],
    }
    return FakeHttpClient(catalog, schedules)
