"""
Tracking orchestrator.

registry -> cache check -> page fetch -> normalize -> extract -> cache write.

Scraping is best-effort all the way down: when it is switched off, or when
the page fetch fails for any reason, the caller still gets the official link
with every extracted field empty. Only bad input surfaces as an error.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .cache import ResultCache, cache_key
from .carriers import build_url, resolve
from .extraction import extract
from .normalizer import normalize
from .oplog import NullRun

logger = logging.getLogger(__name__)

CARRIER_NOT_SUPPORTED = "Carrier not supported"


class TrackingInputError(ValueError):
    """Carrier or code missing from the request."""


@dataclass(frozen=True)
class TrackingResult:
    official_url: Optional[str]
    status: Optional[str] = None
    eta: Optional[str] = None
    eta_date: Optional[str] = None
    delivered_at: Optional[str] = None
    delivered_date: Optional[str] = None
    signed_by: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    title: Optional[str] = None

    def to_dict(self):
        return {
            "officialUrl": self.official_url,
            "status": self.status,
            "eta": self.eta,
            "etaDate": self.eta_date,
            "deliveredAt": self.delivered_at,
            "deliveredDate": self.delivered_date,
            "signedBy": self.signed_by,
            "origin": self.origin,
            "destination": self.destination,
            "title": self.title,
        }


@dataclass(frozen=True)
class TrackOutcome:
    carrier: str
    code: str
    result: TrackingResult
    cached: bool = False
    error: Optional[str] = None

    @property
    def supported(self):
        return self.error != CARRIER_NOT_SUPPORTED


class Tracker:
    def __init__(self, fetcher, cache=None, scrape_enabled=False, oplog=None):
        """
        Args:
            fetcher: Object with fetch(url) returning body_text and title
            cache: ResultCache shared by every request (a fresh one if None)
            scrape_enabled: When False, only official links are returned
            oplog: Optional OperationLog recording each request's steps
        """
        self.fetcher = fetcher
        self.cache = cache if cache is not None else ResultCache()
        self.scrape_enabled = scrape_enabled
        self.oplog = oplog

    def track(self, carrier, code) -> TrackOutcome:
        carrier = (carrier or "").strip()
        code = (code or "").strip()
        if not carrier or not code:
            raise TrackingInputError("Missing parameters: carrier and code")

        profile = resolve(carrier)
        if profile is None:
            logger.info("Unsupported carrier %r", carrier)
            return TrackOutcome(carrier, code, TrackingResult(official_url=None), error=CARRIER_NOT_SUPPORTED)

        run = self.oplog.new_run(profile.id, code) if self.oplog else NullRun()
        url = build_url(profile, code)
        key = cache_key(profile.id, code)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info("💾 Cache hit for %s", key)
            run.log_operation("cache_hit", {"key": key})
            # The URL template may have changed since the entry was written
            return TrackOutcome(carrier, code, replace(cached, official_url=url), cached=True)

        if not self.scrape_enabled:
            run.log_operation("scrape_disabled", {"url": url})
            return TrackOutcome(carrier, code, TrackingResult(official_url=url))

        try:
            page = self.fetcher.fetch(url)
        except Exception as e:
            logger.warning("⚠️  Scrape failed for %s (%s), returning link only: %s", key, url, e)
            run.log_operation("fetch_failed", {"url": url, "error": str(e), "error_type": type(e).__name__},
                              success=False, duration_ms=run.elapsed_ms())
            return TrackOutcome(carrier, code, TrackingResult(official_url=url))

        run.log_operation("fetch_succeeded", {"url": url, "title": page.title}, duration_ms=run.elapsed_ms())

        fields = extract(profile, normalize(page.body_text))
        found = sorted(name for name, value in fields.items() if value is not None)
        run.log_operation("extracted", {"fields_found": found})
        logger.info("Extracted %d field(s) for %s: %s", len(found), key, ", ".join(found) or "none")

        result = TrackingResult(official_url=url, title=page.title or None, **fields)
        self.cache.put(key, result)
        return TrackOutcome(carrier, code, result)
