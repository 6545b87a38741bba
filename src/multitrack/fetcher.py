"""
Headless page fetch.

Opens a carrier tracking page in Chromium, waits for the DOM, gives the page
a bounded chance to settle its async requests, and returns the visible text
and title. This is the only step of a tracking request that can block for
long; everything it raises is a FetchError.
"""

import logging
from dataclasses import dataclass

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]


class FetchError(RuntimeError):
    """The page could not be loaded or read."""


@dataclass(frozen=True)
class PageSnapshot:
    body_text: str
    title: str


class PageFetcher:
    def __init__(self, nav_timeout_ms=30000, settle_timeout_ms=20000, headless=True,
                 user_agent=DEFAULT_USER_AGENT, locale="es-MX"):
        """
        Args:
            nav_timeout_ms: Hard limit for the navigation itself
            settle_timeout_ms: Best-effort wait for the network to go idle;
                running out of it does not fail the fetch
            headless: Run Chromium without a window
            user_agent: Desktop UA string sent with every request
            locale: Browser locale, which picks the carrier page language
        """
        self.nav_timeout_ms = nav_timeout_ms
        self.settle_timeout_ms = settle_timeout_ms
        self.headless = headless
        self.user_agent = user_agent
        self.locale = locale

    def fetch(self, url) -> PageSnapshot:
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
                try:
                    context = browser.new_context(
                        user_agent=self.user_agent,
                        locale=self.locale,
                        viewport={"width": 1280, "height": 800},
                    )
                    try:
                        return self._read_page(context.new_page(), url)
                    finally:
                        context.close()
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise FetchError(f"Failed to load {url}: {e}") from e

    def _read_page(self, page, url):
        logger.info("Loading %s", url)
        page.goto(url, wait_until="domcontentloaded", timeout=self.nav_timeout_ms)

        # Tracking pages fill in their results asynchronously
        try:
            page.wait_for_load_state("networkidle", timeout=self.settle_timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug("Network did not settle within %d ms for %s", self.settle_timeout_ms, url)

        body_text = page.evaluate("() => document.body ? document.body.innerText : ''")
        title = page.title()
        return PageSnapshot(body_text=body_text or "", title=title or "")
