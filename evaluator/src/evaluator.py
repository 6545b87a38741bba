#!/usr/bin/env python3
"""
Black-box evaluation of a running tracker server.
Checks health, a fresh lookup, the cached repeat and the error responses.
"""

import os
import sys
import time

import requests

API_URL = os.environ.get("API_URL", "http://localhost:5000")
CARRIER = os.environ.get("EVAL_CARRIER", "dhl")
CODE = os.environ.get("EVAL_CODE", "1234567890")

FIELDS = ["officialUrl", "status", "eta", "deliveredAt", "signedBy", "origin", "destination", "title"]


def wait_for_api():
    """Wait for the API to be ready"""
    print("⏳ Waiting for API to be ready...")
    for attempt in range(30):
        try:
            response = requests.get(f"{API_URL}/api/health", timeout=5)
            if response.status_code == 200:
                print("✅ API is ready")
                return True
        except requests.RequestException:
            pass
        time.sleep(2)
    print("❌ API not ready after 30 attempts")
    return False


def post_track(carrier, code):
    return requests.post(f"{API_URL}/api/track",
                         json={"carrier": carrier, "code": code},
                         timeout=120)  # a scrape can take up to nav + settle timeouts


def test_fresh_request():
    """First lookup: official link present, all fields present, not from cache"""
    print("\n📦 Testing Fresh Request...")
    start_time = time.time()

    try:
        response = post_track(CARRIER, CODE)
        if response.status_code != 200:
            print(f"❌ Failed: HTTP {response.status_code}")
            return None

        data = response.json()
        execution_time = time.time() - start_time

        missing = [f for f in FIELDS if f not in data]
        if missing:
            print(f"❌ Missing fields: {missing}")
            return None

        if not data.get("officialUrl") or CODE not in data["officialUrl"]:
            print(f"❌ Unexpected officialUrl: {data.get('officialUrl')}")
            return None

        if data.get("cached") is not False:
            print("❌ Should not use cache on fresh request")
            return None

        print(f"✅ Fresh request passed ({execution_time:.1f}s) status={data.get('status')} eta={data.get('eta')}")
        return data

    except Exception as e:
        print(f"❌ Error: {e}")
        return None


def test_cached_request(fresh):
    """Repeat lookup: same fields back. Only scraped results are cached."""
    print("\n💾 Testing Repeat Request...")
    start_time = time.time()

    try:
        response = post_track(CARRIER, CODE)
        if response.status_code != 200:
            print(f"❌ Failed: HTTP {response.status_code}")
            return False

        data = response.json()
        execution_time = time.time() - start_time

        for field in FIELDS:
            if data.get(field) != fresh.get(field):
                print(f"❌ {field} changed: got '{data.get(field)}', expected '{fresh.get(field)}'")
                return False

        print(f"✅ Repeat request passed ({execution_time:.1f}s, cached={data.get('cached')})")
        return True

    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def test_error_responses():
    """Unsupported carrier and missing code are client errors"""
    print("\n🚫 Testing Error Responses...")
    try:
        response = post_track("zzz-unknown", "ABC")
        data = response.json()
        if response.status_code != 400 or data.get("ok") is not False or data.get("carrier") != "zzz-unknown":
            print(f"❌ Unsupported carrier: HTTP {response.status_code} {data}")
            return False

        response = post_track(CARRIER, "")
        if response.status_code != 400:
            print(f"❌ Missing code: HTTP {response.status_code}")
            return False

        print("✅ Error responses passed")
        return True

    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def main():
    print("🧪 Starting Simple Evaluation")
    print("=" * 40)

    if not wait_for_api():
        sys.exit(1)

    tests_passed = 0
    total_tests = 3

    fresh = test_fresh_request()
    if fresh is not None:
        tests_passed += 1
        if test_cached_request(fresh):
            tests_passed += 1

    if test_error_responses():
        tests_passed += 1

    print(f"\n📊 Results: {tests_passed}/{total_tests} tests passed")

    if tests_passed == total_tests:
        print("🎉 All tests passed!")
        sys.exit(0)
    else:
        print("❌ Some tests failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
