from __future__ import annotations

import copy
import json
import logging
import threading
import time
import uuid
from typing import Callable, Optional, Protocol

import redis
from redis import Redis

logger = logging.getLogger(__name__)


class StatisticsCache(Protocol):
    """Shared snapshot cache plus an expiring mutual-exclusion lock."""

    def get(self, key: str) -> Optional[dict]:
        raise NotImplementedError

    def put(self, key: str, value: dict, ttl_seconds: int) -> None:
        raise NotImplementedError

    def try_acquire_lock(self, key: str, hold_seconds: int) -> Optional[str]:
        """Return an ownership token, or None when someone else holds the lock."""

        raise NotImplementedError

    def release_lock(self, key: str, token: str) -> None:
        raise NotImplementedError


class InMemoryStatisticsCache(StatisticsCache):
    """Process-wide cache; entries and locks expire against the injected clock.

    Snapshots are copied in and out so readers never share one dict.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._mutex = threading.Lock()
        self._values: dict[str, tuple[dict, float]] = {}
        self._locks: dict[str, tuple[str, float]] = {}

    def get(self, key: str) -> Optional[dict]:
        with self._mutex:
            item = self._values.get(key)
            if not item:
                return None
            value, expires_at = item
            if expires_at <= self._clock():
                del self._values[key]
                return None
            return copy.deepcopy(value)

    def put(self, key: str, value: dict, ttl_seconds: int) -> None:
        with self._mutex:
            self._values[key] = (copy.deepcopy(value), self._clock() + ttl_seconds)

    def try_acquire_lock(self, key: str, hold_seconds: int) -> Optional[str]:
        with self._mutex:
            now = self._clock()
            held = self._locks.get(key)
            if held and held[1] > now:
                return None
            token = uuid.uuid4().hex
            self._locks[key] = (token, now + hold_seconds)
            return token

    def release_lock(self, key: str, token: str) -> None:
        with self._mutex:
            held = self._locks.get(key)
            if held and held[0] == token:
                del self._locks[key]


# Delete the lock only if it still carries our token; an expired lock may
# already belong to another worker.
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class RedisStatisticsCache(StatisticsCache):
    """Cluster-wide cache on Redis.

    Redis failures are logged and degrade to a miss (get), a no-op (put,
    release) or "lock not acquired", so statistics still get computed.
    """

    def __init__(self, client: Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStatisticsCache":
        return cls(Redis(connection_pool=redis.ConnectionPool.from_url(url, decode_responses=True)))

    def get(self, key: str) -> Optional[dict]:
        try:
            value = self.client.get(key)
        except redis.RedisError as e:
            logger.error("Redis get error: %s", e)
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except (TypeError, json.JSONDecodeError):
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

    def put(self, key: str, value: dict, ttl_seconds: int) -> None:
        try:
            self.client.set(key, json.dumps(value), ex=int(ttl_seconds))
        except redis.RedisError as e:
            logger.error("Redis set error: %s", e)

    def try_acquire_lock(self, key: str, hold_seconds: int) -> Optional[str]:
        token = uuid.uuid4().hex
        try:
            acquired = self.client.set(key, token, nx=True, ex=int(hold_seconds))
        except redis.RedisError as e:
            logger.error("Redis lock error: %s", e)
            return None
        return token if acquired else None

    def release_lock(self, key: str, token: str) -> None:
        try:
            self.client.eval(_RELEASE_SCRIPT, 1, key, token)
        except redis.RedisError as e:
            logger.error("Redis unlock error: %s", e)


def cache_from_url(url: Optional[str]) -> StatisticsCache:
    """Redis when a URL is configured, otherwise the in-process cache."""
    if url:
        return RedisStatisticsCache.from_url(url)
    return InMemoryStatisticsCache()