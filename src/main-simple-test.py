#!/usr/bin/env python3
"""
Simple scrape test for one carrier page.
Opens the official tracking page for a code, prints the normalized text and
what the extraction rules pull out of it. Useful when a carrier redesigns
its page and a rule table needs adjusting.

Usage:
    python src/main-simple-test.py fedex 123456789012
    python src/main-simple-test.py dhl 1234567890 --headed
"""

import sys

from multitrack.carriers import build_url, resolve
from multitrack.extraction import extract
from multitrack.fetcher import FetchError, PageFetcher
from multitrack.normalizer import normalize


def main():
    """Fetch one page and show the extraction result"""
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 2:
        print("Usage: main-simple-test.py <carrier> <code> [--headed]")
        sys.exit(2)

    carrier, code = args
    profile = resolve(carrier)
    if profile is None:
        print(f"❌ Unsupported carrier '{carrier}'")
        sys.exit(1)

    url = build_url(profile, code)
    print(f"🚀 Opening {profile.name} page: {url}")

    fetcher = PageFetcher(headless="--headed" not in sys.argv)
    try:
        page = fetcher.fetch(url)
    except FetchError as e:
        print(f"❌ Fetch failed: {e}")
        sys.exit(1)

    text = normalize(page.body_text)
    print(f"📄 Title: {page.title}")
    print(f"📝 Normalized text ({len(text.splitlines())} lines):")
    print("-" * 40)
    print(text[:3000])
    print("-" * 40)

    fields = extract(profile, text)
    print("🔍 Extracted fields:")
    for name, value in fields.items():
        marker = "✅" if value is not None else "·"
        print(f"  {marker} {name}: {value}")


if __name__ == "__main__":
    main()
