"""Key/value cache with TTL shared by every worker.

Two backends implement the same small contract:

- ``RedisCache`` when ``REDIS_URL`` is configured (shared across processes)
- ``MemoryCache`` otherwise (process-local, used for development and tests)

Values are stored JSON-serialized, so a cached ``None`` is distinguishable
from a miss. Neither backend supports pattern deletes; callers that need to
invalidate a family of keys record them in a registry set with ``track()``
and remove them later with ``drain()``. Registries expire on their own
(Redis) or lose members whose entries expired (memory), so read-only
traffic cannot grow them without bound.
"""

import json
import logging
import threading
import time

import redis

logger = logging.getLogger(__name__)

# Marker returned by backends when a key is absent or expired
MISSING = object()


class BaseCache:
    """Shared get/get_or_compute logic on top of backend ``_load``/``set``."""

    def _load(self, key):
        raise NotImplementedError

    def set(self, key, value, ttl):
        raise NotImplementedError

    def forget(self, key):
        raise NotImplementedError

    def track(self, registry_key, key, ttl):
        raise NotImplementedError

    def drain(self, registry_key):
        raise NotImplementedError

    def get(self, key, default=None):
        """Return the cached value or ``default`` on a miss."""
        value = self._load(key)
        return default if value is MISSING else value

    def get_or_compute(self, key, ttl, producer):
        """Return the cached value, or call ``producer`` and cache its result.

        Concurrent callers may both miss and both call ``producer``; the last
        write wins.
        """
        value = self._load(key)
        if value is not MISSING:
            return value

        value = producer()
        self.set(key, value, ttl)
        return value


class MemoryCache(BaseCache):
    """Process-local TTL cache guarded by a lock.

    Expired entries are swept on write at most once per ``purge_interval``
    seconds, together with their registry memberships.
    """

    def __init__(self, clock=time.monotonic, purge_interval=60):
        self._clock = clock
        self._purge_interval = purge_interval
        self._next_purge_at = clock() + purge_interval
        self._entries = {}  # key -> (serialized value, expires_at)
        self._registries = {}  # registry key -> set of keys
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def _purge_expired(self, now):
        # Caller holds the lock
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            for members in self._registries.values():
                members.difference_update(expired)
            self._registries = {name: members for name, members in self._registries.items() if members}
        self._next_purge_at = now + self._purge_interval

    def _load(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISSING
            payload, expires_at = entry
            if self._clock() >= expires_at:
                self._entries.pop(key, None)
                return MISSING
        return json.loads(payload)

    def set(self, key, value, ttl):
        payload = json.dumps(value)
        with self._lock:
            now = self._clock()
            if now >= self._next_purge_at:
                self._purge_expired(now)
            self._entries[key] = (payload, now + ttl)

    def forget(self, key):
        with self._lock:
            self._entries.pop(key, None)

    def track(self, registry_key, key, ttl):
        with self._lock:
            self._registries.setdefault(registry_key, set()).add(key)

    def registry_size(self, registry_key):
        with self._lock:
            return len(self._registries.get(registry_key, ()))

    def drain(self, registry_key):
        with self._lock:
            return sorted(self._registries.pop(registry_key, set()))

    def clear(self):
        """Drop every entry and registry."""
        with self._lock:
            self._entries.clear()
            self._registries.clear()


class RedisCache(BaseCache):
    """Redis-backed cache. Invalidation calls are best-effort."""

    def __init__(self, client):
        self._client = client

    def _load(self, key):
        raw = self._client.get(key)
        if raw is None:
            return MISSING
        return json.loads(raw)

    def set(self, key, value, ttl):
        self._client.setex(key, int(ttl), json.dumps(value))

    def forget(self, key):
        try:
            self._client.delete(key)
        except redis.RedisError as e:
            logger.error(f"Redis forget error for {key}: {e}")

    def track(self, registry_key, key, ttl):
        """Add ``key`` to the registry and push the registry's expiry to ``ttl``."""
        try:
            pipe = self._client.pipeline()
            pipe.sadd(registry_key, key)
            pipe.expire(registry_key, int(ttl))
            pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Redis track error for {key}: {e}")

    def drain(self, registry_key):
        try:
            pipe = self._client.pipeline()
            pipe.smembers(registry_key)
            pipe.delete(registry_key)
            members, _ = pipe.execute()
            return sorted(members or [])
        except redis.RedisError as e:
            logger.error(f"Redis drain error for {registry_key}: {e}")
            return []

    def clear(self):
        self._client.flushdb()


def create_cache(redis_url=None):
    """Build the cache backend for the given Redis URL.

    Falls back to a process-local cache when no URL is configured or Redis
    cannot be reached at startup.
    """
    if not redis_url:
        logger.warning("REDIS_URL not set - using process-local translation cache")
        return MemoryCache()

    try:
        client = redis.from_url(redis_url, decode_responses=True)
        # Test connection
        client.ping()
        logger.info("Redis connected successfully")
        return RedisCache(client)
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e} - using process-local translation cache")
        return MemoryCache()
