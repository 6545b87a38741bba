import logging
import threading
import time

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 10 * 60


def cache_key(carrier, code):
    """Key for a (carrier, code) pair: both trimmed and lowercased."""
    return f"{(carrier or '').strip().lower()}:{(code or '').strip().lower()}"


class ResultCache:
    """
    Caches tracking results so repeated lookups skip the page load.

    Entry structure:
    {
        "dhl:1234567890": {
            "value": TrackingResult(...),
            "expires_at": 1234.5   # clock() + ttl at put time
        }
    }

    Expiry is lazy: an entry is dropped the first time it is read after its
    deadline. Nothing sweeps the dict in the background and there is no
    invalidation call, so a result can be up to `ttl` seconds stale.
    """

    def __init__(self, ttl=CACHE_TTL_SECONDS, clock=time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, key):
        """Return the cached value, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() >= entry["expires_at"]:
                del self._entries[key]
                logger.debug("Cache entry expired for %s", key)
                return None
            return entry["value"]

    def put(self, key, value):
        with self._lock:
            self._entries[key] = {
                "value": value,
                "expires_at": self.clock() + self.ttl,
            }
        logger.debug("Cached result for %s", key)

    def __len__(self):
        with self._lock:
            return len(self._entries)
