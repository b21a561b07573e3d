"""TTL cache for upstream responses."""
import time
from collections import OrderedDict


class TTLCache:
    """Key-value cache with per-key TTL and a bounded entry count.

    Used from a single event loop, so no locking.
    """

    def __init__(self, default_ttl=60, max_entries=1024):
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._store = OrderedDict()

    def get(self, key):
        """Get value if exists and not expired."""
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires = entry
        if time.monotonic() > expires:
            del self._store[key]
            return None
        return value

    def set(self, key, value, ttl=None):
        """Set key with TTL in seconds, evicting the oldest entry when full."""
        ttl = self.default_ttl if ttl is None else ttl
        self._store.pop(key, None)
        self._store[key] = (value, time.monotonic() + ttl)
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)

    def invalidate(self, key):
        self._store.pop(key, None)

    def clear(self):
        self._store.clear()

    def __len__(self):
        return len(self._store)
