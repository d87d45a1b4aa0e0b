import pytest

from pagewarden.schema.catalog import DEFAULT_CATALOG
from pagewarden.utils.settings import settings
from tests.fakes import FakePage


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch):
    """Shrink every wait so tests run against fakes without real delays."""
    monkeypatch.setattr(settings, "DISMISS_TIMEOUT_SECONDS", 0.2)
    monkeypatch.setattr(settings, "CLICK_TIMEOUT_SECONDS", 0.2)
    monkeypatch.setattr(settings, "BANNER_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "RELOAD_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "TAB_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "SEARCH_START_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "SEARCH_STEP_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "SEARCH_RETRY_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "MAX_RESOLVE_ITERATIONS", 5)
    monkeypatch.setattr(settings, "DIRECT_INJECTION_DOMAINS", ["bing.com"])
    yield settings


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def bing_page():
    return FakePage(url="https://www.bing.com/search?q=weather")
