import pytest

from multitrack.carriers import PROFILES, build_url, resolve, supported_carriers

ALIASES = {
    "dhl": ["dhl", "DHL", "Dhl", "dhl-express", "DHL Express"],
    "fedex": ["fedex", "FedEx", "FEDEX", "federal express"],
    "ups": ["ups", "UPS", "Ups"],
    "delta-cargo": ["delta", "DELTA", "delta-cargo", "Delta-Cargo", "deltacargo", "DeltaCargo",
                    "delta cargo", "delta_cargo"],
    "expeditors": ["expeditors", "Expeditors", "EXPEDITORS", "expd"],
}


@pytest.mark.parametrize("profile_id,names", ALIASES.items())
def test_resolve_aliases_any_case(profile_id, names):
    profiles = {resolve(name) for name in names}
    assert len(profiles) == 1
    assert profiles.pop().id == profile_id


def test_resolve_trims_whitespace():
    assert resolve("  fedex  ").id == "fedex"
    assert resolve("delta   cargo").id == "delta-cargo"


@pytest.mark.parametrize("name", ["zzz-unknown", "usps", "", None, "dhl2"])
def test_resolve_unknown_returns_none(name):
    assert resolve(name) is None


def test_supported_carriers_are_the_five_profiles():
    ids = [p.id for p in supported_carriers()]
    assert ids == ["dhl", "fedex", "ups", "delta-cargo", "expeditors"]


def test_build_url_encodes_code():
    dhl = resolve("dhl")
    assert build_url(dhl, "1234567890") == (
        "https://www.dhl.com/mx-es/home/rastreo.html?tracking-id=1234567890"
    )
    url = build_url(resolve("fedex"), "12 34/56&x=1")
    assert "trknbr=12%2034%2F56%26x%3D1&" in url


def test_build_url_expeditors_has_no_code_slot():
    assert build_url(resolve("expeditors"), "ABC123") == "https://www.expeditors.com/tracking"


def test_every_profile_has_one_rule_per_field():
    for profile in PROFILES:
        fields = [rule.field for rule in profile.rules]
        assert sorted(fields) == sorted(
            ["status", "eta", "delivered_at", "signed_by", "origin", "destination"]
        ), profile.id
