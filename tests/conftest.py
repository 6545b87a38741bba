import pytest

from multitrack.cache import ResultCache
from multitrack.fetcher import FetchError, PageSnapshot
from multitrack.tracker import Tracker


class FakeFetcher:
    """Returns a canned page, or raises, and counts calls."""

    def __init__(self, body_text="", title="Rastreo", error=None):
        self.body_text = body_text
        self.title = title
        self.error = error
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return PageSnapshot(body_text=self.body_text, title=self.title)


class ManualClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    return ResultCache(clock=clock)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def failing_fetcher():
    return FakeFetcher(error=FetchError("Timeout 30000ms exceeded"))


@pytest.fixture
def make_tracker(cache):
    def _make(fetcher, scrape_enabled=True, oplog=None):
        return Tracker(fetcher, cache=cache, scrape_enabled=scrape_enabled, oplog=oplog)
    return _make
