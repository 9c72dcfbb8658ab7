"""
In-memory response cache for API documents

Entries expire after a per-entry TTL and the store is bounded by a maximum
entry count, evicting the least recently accessed entry first. Keys are
derived from the endpoint name and a canonical form of the request body, so
two logically identical requests share one entry regardless of how their
bodies were assembled.

Eviction tie-break: when several entries share the oldest access time, the
one inserted first goes. Re-setting a key re-inserts it at the end.
"""

import hashlib
import json
import time
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, Optional

from ..config.settings import get_settings
from ..utils.logger import get_logger


@dataclass
class CacheEntry:
    """A cached document with its creation time, TTL and last access time"""
    data: Dict[str, Any]
    created_at: float
    ttl: float
    last_accessed: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl


class CacheTTL:
    """
    TTLs in seconds per operation class

    Class attributes are the built-in defaults; `from_settings()` reads the
    configured values.
    """
    HOME = 5 * 60
    PLAYLIST = 30 * 60
    ARTIST = 60 * 60
    SEARCH = 2 * 60

    def __init__(self, home: float = HOME, playlist: float = PLAYLIST,
                 artist: float = ARTIST, search: float = SEARCH):
        self.home = home
        self.playlist = playlist
        self.artist = artist
        self.search = search

    @classmethod
    def from_settings(cls) -> 'CacheTTL':
        cache = get_settings().cache
        return cls(cache.home_ttl, cache.playlist_ttl, cache.artist_ttl, cache.search_ttl)


def stable_cache_key(endpoint: str, body: Dict[str, Any]) -> str:
    """
    Build a cache key that ignores key order in the request body

    Args:
        endpoint: API endpoint name, e.g. "browse"
        body: Logical request body (without the client context)

    Returns:
        "{endpoint}:{first 16 bytes of SHA-256 of the canonical body, hex}"
    """
    canonical = json.dumps(body, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{endpoint}:{digest[:32]}"


class ResponseCache:
    """Thread-safe TTL cache with LRU eviction for raw API documents"""

    DEFAULT_MAX_ENTRIES = 50

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, clock: Callable[[], float] = time.time):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = RLock()
        self.logger = get_logger(__name__)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Return the cached document if present and not expired

        An expired entry is removed on the way out. A hit refreshes the
        entry's access time.

        The stored document itself is returned, so callers must treat it as
        read-only.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            now = self._clock()
            if entry.is_expired(now):
                del self._entries[key]
                self.logger.debug(f"Cache expired: {key}")
                return None

            entry.last_accessed = now
            return entry.data

    def set(self, key: str, data: Dict[str, Any], ttl: float) -> None:
        """
        Store a document under key

        Expired entries are purged first, then least recently accessed
        entries are evicted one at a time until there is room.
        """
        with self._lock:
            now = self._clock()
            self._entries.pop(key, None)
            self._evict_expired(now)

            while len(self._entries) >= self.max_entries:
                self._evict_lru()

            self._entries[key] = CacheEntry(data=data, created_at=now, ttl=ttl, last_accessed=now)

    def invalidate(self, prefix: str) -> int:
        """
        Remove every entry whose key starts with prefix

        Returns:
            Number of removed entries
        """
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]

        if doomed:
            self.logger.debug(f"Invalidated {len(doomed)} cache entries with prefix '{prefix}'")
        return len(doomed)

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, int]:
        """Return entry count, expired-but-not-yet-purged count and capacity"""
        with self._lock:
            now = self._clock()
            expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
            return {
                'count': len(self._entries),
                'expired': expired,
                'max_entries': self.max_entries,
            }

    def _evict_expired(self, now: float) -> None:
        expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired_keys:
            del self._entries[key]

    def _evict_lru(self) -> None:
        # min() keeps the first minimum, i.e. the earliest inserted on ties
        oldest_key = min(self._entries, key=lambda k: self._entries[k].last_accessed)
        del self._entries[oldest_key]
        self.logger.debug(f"Cache evicted: {oldest_key}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())
