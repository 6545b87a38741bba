"""
Per-carrier rule tables.

Each table is an ordered tuple of FieldRule. Inside a rule, carrier-specific
candidates go first and the shared bilingual candidates follow, so a carrier
layout we know about wins over the generic keyword scan. Order is data: the
tests enumerate it directly.
"""

import re

from .extraction import (
    ANY_STATUS_KEYWORD,
    DATE_SPAN,
    OPTIONAL_WEEKDAY,
    FieldRule,
    canonicalize_status,
    rx,
)
from .normalizer import is_boilerplate

ML = re.IGNORECASE | re.MULTILINE

# Upper-case place names as printed in route banners ("CIUDAD DE MEXICO")
CAPS_PLACE = r"[A-ZÁÉÍÓÚÑÜ][A-ZÁÉÍÓÚÑÜ .,'\-]{1,58}"
AIRPORT = r"[A-Z]{3}"

# ============================================================================
# SHARED CANDIDATES
# ============================================================================

STATUS_LABELED = (
    rx(r"^(estado|estatus|status|estado\s+del\s+env[ií]o|shipment\s+status)"
       r"[ \t]*[:\-]?\s*(" + ANY_STATUS_KEYWORD + r")\b", ML),
)

# Plain keyword scan: Spanish words, then English, then words with no canonical bucket
GENERIC_STATUS_ORDER = (
    r"entregad[oa]",
    r"en tr[aá]nsito",
    r"en camino",
    r"recogid[oa]",
    r"recolectad[oa]",
    r"listo para entrega",
    r"en reparto",
    r"demorad[oa]",
    r"retrasad[oa]",
    r"delivered",
    r"out for delivery",
    r"in transit",
    r"picked up",
    r"delayed",
    r"despachad[oa]",
    r"excepci[oó]n",
    r"shipment information received",
    r"label created",
    r"shipped",
    r"exception",
)

STATUS_GENERIC = tuple(rx(r"\b(" + kw + r")\b") for kw in GENERIC_STATUS_ORDER)

ETA_GENERIC = (
    rx(r"(entrega|llegada)\s+(estimada|prevista|programada)(?:\s+(?:el|para))?"
       r"\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    rx(r"(fecha)\s+(?:de\s+)?(?:entrega|llegada)\s+(estimada|prevista|programada)"
       r"\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    rx(r"(estimated|scheduled|expected)\s+(delivery|arrival)(?:\s+date)?(?:\s+(?:on|by))?"
       r"\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    rx(r"\b(eta)\b\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
)

DELIVERED_AT_GENERIC = (
    rx(r"\b(entregad[oa])(?:\s+(el|on))?\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    rx(r"\b(fecha\s+de\s+entrega)\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    rx(r"\b(delivered)(?:\s+(on))?\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
)

SIGNED_BY_GENERIC = (
    rx(r"\b(firmado\s+por|recibido\s+por|signed\s+for\s+by|signed\s+by|received\s+by)"
       r"[ \t]*[:\-]?\s*([^\n]{2,60}?)[ \t]*$", ML),
)

ORIGIN_GENERIC = (
    rx(r"^(origen|origin|ciudad\s+de\s+origen|enviado\s+desde|ship(?:ped)?\s+from)\b"
       r"[ \t]*[:\-]?\s*([^\n]{2,60}?)[ \t]*$", ML),
)

DESTINATION_GENERIC = (
    rx(r"^(destino|destination|ciudad\s+de\s+destino|enviado\s+a|ship(?:ped)?\s+to)\b"
       r"[ \t]*[:\-]?\s*([^\n]{2,60}?)[ \t]*$", ML),
)

# Route banners are matched case-sensitively: the all-caps rendering is what
# tells them apart from prose mentioning the same words.
DELIVERED_BANNER = rx(
    r"^(ENTREGADO|ENTREGADA|DELIVERED)[ \t]+(?:(?:EN|A|IN|TO)[ \t]+)?(" + CAPS_PLACE + r")[ \t]*$",
    re.MULTILINE,
)
TRANSIT_BANNER = rx(
    r"^(EN[ \t]+TR[AÁ]NSITO|EN[ \t]+CAMINO|IN[ \t]+TRANSIT)(?:[ \t]+(?:A|HACIA|TO))?[ \t]+(" + CAPS_PLACE + r")[ \t]*$",
    re.MULTILINE,
)


def status_rule(*leading):
    return FieldRule(
        "status",
        tuple(leading) + STATUS_LABELED + STATUS_GENERIC,
        canonicalize=canonicalize_status,
    )


def eta_rule(*leading):
    return FieldRule("eta", tuple(leading) + ETA_GENERIC)


def delivered_at_rule(*leading):
    return FieldRule("delivered_at", tuple(leading) + DELIVERED_AT_GENERIC)


def signed_by_rule(*leading):
    return FieldRule("signed_by", tuple(leading) + SIGNED_BY_GENERIC)


def origin_rule(*leading):
    return FieldRule("origin", tuple(leading) + ORIGIN_GENERIC, reject=is_boilerplate)


def destination_rule(*leading):
    return FieldRule("destination", tuple(leading) + DESTINATION_GENERIC, reject=is_boilerplate)


# ============================================================================
# CARRIER TABLES
# ============================================================================

DHL_RULES = (
    status_rule(
        rx(r"^(ENTREGADO|ENTREGADA|DELIVERED|EN[ \t]+TR[AÁ]NSITO|IN[ \t]+TRANSIT)\b", re.MULTILINE),
    ),
    eta_rule(),
    delivered_at_rule(),
    signed_by_rule(
        rx(r"\b(firmado\s+por|signed\s+for\s+by)\s*[:\-]?\s*([^\n]{2,60}?)[ \t]*$", ML),
    ),
    origin_rule(),
    destination_rule(DELIVERED_BANNER, TRANSIT_BANNER),
)

FEDEX_RULES = (
    status_rule(
        rx(r"(estado\s+de\s+la\s+entrega|delivery\s+status)\s*[:\-]?\s*(" + ANY_STATUS_KEYWORD + r")\b"),
    ),
    eta_rule(
        rx(r"(entrega\s+programada|scheduled\s+delivery)(?:\s+para)?\s*[:\-]?\s*"
           + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    ),
    delivered_at_rule(),
    signed_by_rule(),
    # FedEx prints the route as label-only lines followed by the place
    origin_rule(
        rx(r"^(desde|from)[ \t]*:?[ \t]*\n([^\n]{2,60})$", ML),
    ),
    destination_rule(
        rx(r"^(hacia|to)[ \t]*:?[ \t]*\n([^\n]{2,60})$", ML),
    ),
)

UPS_RULES = (
    status_rule(
        rx(r"\b(paquete|package)\s+(?:fue|ha\s+sido|est[aá]|was|has\s+been|is)\s+("
           + ANY_STATUS_KEYWORD + r")\b"),
    ),
    eta_rule(
        rx(r"(entrega\s+prevista|entrega\s+programada|scheduled\s+delivery|estimated\s+delivery)"
           r"(?:\s+para)?\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    ),
    delivered_at_rule(
        rx(r"(entregado\s+el|delivered\s+on)\s*[:\-]?\s*" + OPTIONAL_WEEKDAY + r"(" + DATE_SPAN + r")"),
    ),
    signed_by_rule(),
    origin_rule(),
    destination_rule(),
)

DELTA_CARGO_RULES = (
    status_rule(
        rx(r"\b(latest\s+status|current\s+status)\s*[:\-]?\s*(" + ANY_STATUS_KEYWORD + r")\b"),
    ),
    eta_rule(),
    delivered_at_rule(),
    signed_by_rule(),
    # Air waybills show three-letter airport codes, sometimes as "ATL -> MEX"
    origin_rule(
        rx(r"(?i:origin|origen)\s*[:\-]?\s*(" + AIRPORT + r")\b", 0),
        rx(r"\b(" + AIRPORT + r")(?=\s*(?:->|→|–)\s*" + AIRPORT + r"\b)", 0),
    ),
    destination_rule(
        rx(r"(?i:destination|destino)\s*[:\-]?\s*(" + AIRPORT + r")\b", 0),
        rx(r"\b" + AIRPORT + r"\s*(?:->|→|–)\s*(" + AIRPORT + r")\b", 0),
    ),
)

EXPEDITORS_RULES = (
    status_rule(
        rx(r"(shipment\s+status|estado\s+del\s+embarque)\s*[:\-]?\s*(" + ANY_STATUS_KEYWORD + r")\b"),
    ),
    eta_rule(),
    delivered_at_rule(),
    signed_by_rule(),
    origin_rule(
        rx(r"^(place\s+of\s+receipt|port\s+of\s+loading|puerto\s+de\s+carga)[ \t]*[:\-]?\s*([^\n]{2,60}?)[ \t]*$", ML),
    ),
    destination_rule(
        rx(r"^(place\s+of\s+delivery|port\s+of\s+discharge|puerto\s+de\s+descarga)[ \t]*[:\-]?\s*([^\n]{2,60}?)[ \t]*$", ML),
    ),
)
