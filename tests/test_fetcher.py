import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from multitrack import fetcher as fetcher_module
from multitrack.fetcher import LAUNCH_ARGS, FetchError, PageFetcher


class FakePage:
    def __init__(self, body="Entregado", title="Rastreo", goto_error=None, settle_error=None):
        self.body = body
        self._title = title
        self.goto_error = goto_error
        self.settle_error = settle_error
        self.goto_calls = []
        self.load_states = []

    def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        if self.goto_error is not None:
            raise self.goto_error

    def wait_for_load_state(self, state, timeout=None):
        self.load_states.append((state, timeout))
        if self.settle_error is not None:
            raise self.settle_error

    def evaluate(self, script):
        return self.body

    def title(self):
        return self._title


class FakeContext:
    def __init__(self, page):
        self.page = page
        self.closed = False

    def new_page(self):
        return self.page

    def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, page):
        self.context = FakeContext(page)
        self.closed = False
        self.context_kwargs = None

    def new_context(self, **kwargs):
        self.context_kwargs = kwargs
        return self.context

    def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser):
        self.browser = browser
        self.launch_kwargs = None

    def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        return self.browser


class FakePlaywright:
    def __init__(self, page):
        self.chromium = FakeChromium(FakeBrowser(page))

    def __call__(self):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def install(monkeypatch):
    def _install(page):
        playwright = FakePlaywright(page)
        monkeypatch.setattr(fetcher_module, "sync_playwright", playwright)
        return playwright
    return _install


def test_fetch_returns_text_and_title(install):
    page = FakePage(body="Estado de la entrega Entregado", title="FedEx")
    playwright = install(page)

    snapshot = PageFetcher(nav_timeout_ms=1000, settle_timeout_ms=500).fetch("https://example.test/t")

    assert snapshot.body_text == "Estado de la entrega Entregado"
    assert snapshot.title == "FedEx"
    assert page.goto_calls == [("https://example.test/t", "domcontentloaded", 1000)]
    assert page.load_states == [("networkidle", 500)]
    assert playwright.chromium.launch_kwargs == {"headless": True, "args": LAUNCH_ARGS}
    assert playwright.chromium.browser.context_kwargs["locale"] == "es-MX"


def test_settle_timeout_is_not_an_error(install):
    page = FakePage(settle_error=PlaywrightTimeoutError("Timeout 500ms exceeded"))
    install(page)

    snapshot = PageFetcher().fetch("https://example.test/t")
    assert snapshot.body_text == "Entregado"


def test_navigation_failure_becomes_fetch_error(install):
    page = FakePage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
    playwright = install(page)

    with pytest.raises(FetchError, match="ERR_NAME_NOT_RESOLVED"):
        PageFetcher().fetch("https://example.test/t")

    browser = playwright.chromium.browser
    assert browser.closed
    assert browser.context.closed


def test_navigation_timeout_becomes_fetch_error(install):
    install(FakePage(goto_error=PlaywrightTimeoutError("Timeout 30000ms exceeded")))
    with pytest.raises(FetchError):
        PageFetcher().fetch("https://example.test/t")


def test_missing_body_and_title_become_empty(install):
    install(FakePage(body=None, title=None))
    snapshot = PageFetcher().fetch("https://example.test/t")
    assert snapshot.body_text == ""
    assert snapshot.title == ""


def test_browser_closed_after_success(install):
    playwright = install(FakePage())
    PageFetcher(headless=False).fetch("https://example.test/t")
    assert playwright.chromium.browser.closed
    assert playwright.chromium.launch_kwargs["headless"] is False
