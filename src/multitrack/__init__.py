"""
Multi-carrier shipment tracking.

Resolves a (carrier, code) pair into the carrier's official tracking URL and a
best-effort status snapshot scraped from the carrier's public tracking page.
"""

from .carriers import resolve, build_url, supported_carriers
from .cache import ResultCache, cache_key
from .extraction import extract, canonicalize_status, parse_date
from .normalizer import normalize
from .tracker import (
    CARRIER_NOT_SUPPORTED,
    TrackOutcome,
    Tracker,
    TrackingInputError,
    TrackingResult,
)

__all__ = [
    "resolve",
    "build_url",
    "supported_carriers",
    "ResultCache",
    "cache_key",
    "extract",
    "canonicalize_status",
    "parse_date",
    "normalize",
    "CARRIER_NOT_SUPPORTED",
    "TrackOutcome",
    "Tracker",
    "TrackingInputError",
    "TrackingResult",
]
