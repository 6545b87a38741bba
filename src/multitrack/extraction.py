"""
Field extraction engine.

Every carrier profile carries an ordered list of FieldRule objects. Each rule
owns an ordered tuple of regex candidates for one output field: the first
candidate that matches wins, and the value is taken from the LAST capture
group of that match. Candidates wrap the value in labelling prefixes
("Entrega estimada", "Estimated delivery") that are themselves captured as
earlier, sometimes optional, groups.

Fields never depend on each other. A page where only the status is found
yields a record with `status` set and everything else None; that is a normal
outcome, not an error.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

# ============================================================================
# STATUS VOCABULARY
# ============================================================================

DELIVERED = "delivered"
OUT_FOR_DELIVERY = "out_for_delivery"
IN_TRANSIT = "in_transit"
PICKED_UP = "picked_up"
DELAYED = "delayed"
UNKNOWN = "unknown"

STATUS_VOCABULARY = (DELIVERED, OUT_FOR_DELIVERY, IN_TRANSIT, PICKED_UP, DELAYED, UNKNOWN)

# Checked in order against the raw status text. Out-for-delivery comes before
# delivered so "listo para entrega" is not read as a finished delivery.
STATUS_KEYWORDS = (
    (OUT_FOR_DELIVERY, (
        r"listo para entrega", r"en reparto", r"en ruta de entrega",
        r"out for delivery", r"on vehicle for delivery",
    )),
    (DELIVERED, (
        r"entregad[oa]", r"delivered",
    )),
    (DELAYED, (
        r"demorad[oa]", r"retrasad[oa]", r"delayed", r"delay",
    )),
    (PICKED_UP, (
        r"recogid[oa]", r"recolectad[oa]", r"picked up", r"received from shipper",
    )),
    (IN_TRANSIT, (
        r"en tr[aá]nsito", r"en camino", r"in transit", r"on the way",
        r"departed", r"arrived",
    )),
)

# Status words a carrier page may show that have no canonical bucket
UNMAPPED_STATUS_KEYWORDS = (
    r"despachad[oa]", r"enviad[oa]", r"recibid[oa]", r"excepci[oó]n",
    r"shipment information received", r"label created", r"shipped",
    r"exception", r"booked", r"on hold",
)

_STATUS_MATCHERS = tuple(
    (status, re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE))
    for status, words in STATUS_KEYWORDS
)

ANY_STATUS_KEYWORD = "|".join(
    [w for _, words in STATUS_KEYWORDS for w in words] + list(UNMAPPED_STATUS_KEYWORDS)
)


def canonicalize_status(raw):
    """
    Map raw status text into the fixed vocabulary.

    Returns None when there is no status text at all and "unknown" when some
    status text was present but matched no canonical bucket.
    """
    if raw is None:
        return None
    text = " ".join(raw.split())
    if not text:
        return None
    for status, matcher in _STATUS_MATCHERS:
        if matcher.search(text):
            return status
    return UNKNOWN


# ============================================================================
# DATES
# ============================================================================

MONTHS = {
    "enero": 1, "ene": 1, "january": 1, "jan": 1,
    "febrero": 2, "feb": 2, "february": 2,
    "marzo": 3, "mar": 3, "march": 3,
    "abril": 4, "abr": 4, "april": 4, "apr": 4,
    "mayo": 5, "may": 5,
    "junio": 6, "jun": 6, "june": 6,
    "julio": 7, "jul": 7, "july": 7,
    "agosto": 8, "ago": 8, "august": 8, "aug": 8,
    "septiembre": 9, "setiembre": 9, "sept": 9, "sep": 9, "september": 9, "set": 9,
    "octubre": 10, "oct": 10, "october": 10,
    "noviembre": 11, "nov": 11, "november": 11,
    "diciembre": 12, "dic": 12, "december": 12, "dec": 12,
}

WEEKDAYS = (
    "lunes", "martes", "miércoles", "miercoles", "jueves", "viernes", "sábado", "sabado", "domingo",
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "lun", "mar", "mié", "mie", "jue", "vie", "sáb", "sab", "dom",
    "mon", "tue", "wed", "thu", "fri", "sat", "sun",
)

# Longest names first inside the alternation
MONTH_NAME = "(?:" + "|".join(sorted(MONTHS, key=len, reverse=True)) + ")"
WEEKDAY_NAME = "(?:" + "|".join(sorted(WEEKDAYS, key=len, reverse=True)) + ")"

NUMERIC_DATE = r"\d{1,2}/\d{1,2}/(?:\d{4}|\d{2})\b"
DAY_MONTH_DATE = r"\d{1,2}(?:\s+de)?\s+" + MONTH_NAME + r"\.?(?:\s+de(?:l)?)?,?\s+\d{4}\b"
MONTH_DAY_DATE = MONTH_NAME + r"\.?\s+\d{1,2},?\s+\d{4}\b"

# Non-capturing on purpose: rules wrap it in their own final group
DATE_SPAN = "(?:" + NUMERIC_DATE + "|" + DAY_MONTH_DATE + "|" + MONTH_DAY_DATE + ")"
OPTIONAL_WEEKDAY = r"(?:" + WEEKDAY_NAME + r"\.?,?\s+)?"

_NUMERIC_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})$")
_DAY_MONTH_RE = re.compile(
    r"^(\d{1,2})(?:\s+de)?\s+([^\W\d_]+)\.?(?:\s+del?)?,?\s+(\d{4})$", re.IGNORECASE
)
_MONTH_DAY_RE = re.compile(r"^([^\W\d_]+)\.?\s+(\d{1,2}),?\s+(\d{4})$", re.IGNORECASE)
_LEADING_WEEKDAY_RE = re.compile(r"^" + WEEKDAY_NAME + r"\.?,?\s+", re.IGNORECASE)


def _make_date(year, month, day):
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(span):
    """
    Parse a captured date span into a date.

    Numeric dates are read day-first (the carrier pages are the Mexican
    Spanish locales). Two-digit years are taken as 20YY. Returns None for
    anything that is not a real calendar date.
    """
    if not span:
        return None
    text = " ".join(span.split()).strip(" .,;:")
    parsed = _parse_plain(text)
    if parsed is None:
        # "Mar" is both martes and marzo, so only drop a weekday as a fallback
        without_weekday = _LEADING_WEEKDAY_RE.sub("", text, count=1)
        if without_weekday != text:
            parsed = _parse_plain(without_weekday)
    return parsed


def _parse_plain(text):
    m = _NUMERIC_RE.match(text)
    if m:
        day, month, year = int(m.group(1)), int(m.group(2)), m.group(3)
        year = 2000 + int(year) if len(year) == 2 else int(year)
        return _make_date(year, month, day)

    m = _DAY_MONTH_RE.match(text)
    if m:
        month = MONTHS.get(m.group(2).lower())
        if month:
            return _make_date(int(m.group(3)), month, int(m.group(1)))
        return None

    m = _MONTH_DAY_RE.match(text)
    if m:
        month = MONTHS.get(m.group(1).lower())
        if month:
            return _make_date(int(m.group(3)), month, int(m.group(2)))
    return None


# ============================================================================
# RULES
# ============================================================================

def clean_text(raw):
    """Collapse whitespace and trim separators left around a captured span."""
    text = " ".join(raw.split()).strip(" .,;:-|")
    return text or None


@dataclass(frozen=True)
class FieldRule:
    field: str
    patterns: Tuple[Pattern, ...]
    canonicalize: Callable[[str], Optional[str]] = clean_text
    reject: Optional[Callable[[str], bool]] = None


def rx(pattern, flags=re.IGNORECASE):
    return re.compile(pattern, flags)


def _final_group(match):
    if match.re.groups == 0:
        return match.group(0)
    value = match.group(match.re.groups)
    if value is not None:
        return value
    # Last group sat in an untaken branch; use the last one that participated
    for index in range(match.re.groups - 1, 0, -1):
        value = match.group(index)
        if value is not None:
            return value
    return None


def apply_rule(rule, text):
    """Run one rule's candidates in order and return the first usable value."""
    for index, pattern in enumerate(rule.patterns):
        try:
            match = pattern.search(text)
            if not match:
                continue
            raw = _final_group(match)
            if raw is None or not raw.strip():
                continue
            if rule.reject is not None and rule.reject(raw):
                logger.debug("Rejected %s candidate %d span %r", rule.field, index, raw)
                continue
            value = rule.canonicalize(raw)
        except Exception as e:
            logger.debug("Candidate %d for %s failed: %s", index, rule.field, e)
            continue
        if value is not None:
            return value
    return None


# Date-bearing fields also get an ISO rendering next to the captured text
DATE_FIELDS = {
    "eta": "eta_date",
    "delivered_at": "delivered_date",
}

RESULT_FIELDS = ("status", "eta", "delivered_at", "signed_by", "origin", "destination")


def extract(profile, text):
    """
    Apply a carrier profile's rules to normalized page text.

    Returns a dict with one key per result field (plus the ISO date keys),
    None wherever nothing matched.
    """
    fields = {name: None for name in RESULT_FIELDS}
    fields.update({iso: None for iso in DATE_FIELDS.values()})
    if not text:
        return fields

    for rule in profile.rules:
        value = apply_rule(rule, text)
        fields[rule.field] = value
        iso_field = DATE_FIELDS.get(rule.field)
        if iso_field and value:
            parsed = parse_date(value)
            fields[iso_field] = parsed.isoformat() if parsed else None
    return fields
