"""
Carrier registry.

A closed set of carrier profiles, each with its official tracking URL
template and its ordered extraction rule table. Adding a carrier is a data
change here plus a rule table in rules.py.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import quote

from .extraction import FieldRule
from .rules import (
    DELTA_CARGO_RULES,
    DHL_RULES,
    EXPEDITORS_RULES,
    FEDEX_RULES,
    UPS_RULES,
)


@dataclass(frozen=True)
class CarrierProfile:
    id: str
    name: str
    url_template: str
    rules: Tuple[FieldRule, ...]
    aliases: Tuple[str, ...] = ()


PROFILES = (
    CarrierProfile(
        id="dhl",
        name="DHL",
        # MX-ES site, takes the code as a query parameter
        url_template="https://www.dhl.com/mx-es/home/rastreo.html?tracking-id={code}",
        rules=DHL_RULES,
        aliases=("dhl-express", "dhlexpress", "dhl express"),
    ),
    CarrierProfile(
        id="fedex",
        name="FedEx",
        url_template="https://www.fedex.com/fedextrack/?trknbr={code}&cntry_code=mx_esp",
        rules=FEDEX_RULES,
        aliases=("federal express", "federal-express"),
    ),
    CarrierProfile(
        id="ups",
        name="UPS",
        url_template="https://www.ups.com/track?loc=es_MX&tracknum={code}&requester=ST/",
        rules=UPS_RULES,
        aliases=("united parcel service",),
    ),
    CarrierProfile(
        id="delta-cargo",
        name="Delta Cargo",
        # Air waybill lookup
        url_template="https://www.deltacargo.com/Cargo/trackShipment?airbillnumber={code}",
        rules=DELTA_CARGO_RULES,
        aliases=("delta", "deltacargo", "delta cargo", "delta_cargo"),
    ),
    CarrierProfile(
        id="expeditors",
        name="Expeditors",
        # Public page only offers manual entry, so there is no slot for the code
        url_template="https://www.expeditors.com/tracking",
        rules=EXPEDITORS_RULES,
        aliases=("expd",),
    ),
)


def _key(carrier_id):
    return " ".join((carrier_id or "").lower().split())


_BY_KEY = {}
for _profile in PROFILES:
    for _name in (_profile.id,) + _profile.aliases:
        _BY_KEY[_key(_name)] = _profile
del _profile, _name


def resolve(carrier_id) -> Optional[CarrierProfile]:
    """Look up a carrier by id or alias, ignoring case and surrounding spaces."""
    if not carrier_id:
        return None
    return _BY_KEY.get(_key(carrier_id))


def build_url(profile, code) -> str:
    """Percent-encode the raw code into the carrier's tracking URL."""
    return profile.url_template.format(code=quote(code, safe=""))


def supported_carriers():
    return PROFILES
