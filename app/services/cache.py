"""In-memory cache regions for auto policy lookups.

Four regions sit in front of the record store:

- ``policies``           by surrogate id, unbounded, manual invalidation only
- ``policy_numbers``     by policy number, unbounded, manual invalidation only
- ``all_policies``       singleton key ``"all"``, unbounded, manual invalidation only
- ``filtered_policies``  by filter signature, bounded (100) and expiring (10 min)

Regions never load anything themselves: a miss is reported to the caller and
the policy service decides whether to read through to the store. Each region
serializes its own mutations; there is no lock spanning regions, so a
multi-region sweep may be observed half-done by a concurrent reader.

Note: state is per process. Can be replaced with Redis later for multi-instance
deployments.
"""
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar
from app.core.config import FILTERED_CACHE_MAX_SIZE, FILTERED_CACHE_TTL_SECONDS
from app.core.logging_config import logger

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

ALL_POLICIES_KEY = "all"


class _Miss:
    """Sentinel returned by ``CacheRegion.get`` when a key is absent."""

    def __repr__(self):
        return "MISS"


MISS = _Miss()


class CacheRegion(Generic[K, V]):
    """A named, thread-safe mapping with optional size bound and write TTL.

    - ``max_size``: once full, ``put`` of a new key silently evicts the
      least-recently-written entry. ``None`` means unbounded.
    - ``ttl_seconds``: an entry written more than ``ttl_seconds`` ago reads as
      a miss and is dropped. Reads do not extend the lifetime. ``None``
      disables expiry.
    - ``clock``: monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        name: str,
        max_size: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.name = name
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # key -> (value, written_at); insertion order == write order
        self._entries: "OrderedDict[K, tuple]" = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def _expired(self, written_at: float, now: float) -> bool:
        return self.ttl_seconds is not None and now - written_at > self.ttl_seconds

    def get(self, key: K):
        """Return the cached value for ``key`` or ``MISS``."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return MISS
            value, written_at = entry
            if self._expired(written_at, self._clock()):
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Cache region {self.name}: entry {key!r} expired")
                return MISS
            self._hits += 1
            return value

    def put(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, overwriting any previous entry."""
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif self.max_size is not None:
                self._purge_expired()
                while len(self._entries) >= self.max_size:
                    evicted, _ = self._entries.popitem(last=False)
                    self._evictions += 1
                    logger.debug(f"Cache region {self.name}: evicted {evicted!r} at capacity")
            self._entries[key] = (value, self._clock())

    def invalidate(self, key: K) -> bool:
        """Drop one entry. Returns whether it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_all(self) -> int:
        """Drop every entry at once. Returns how many were dropped."""
        with self._lock:
            dropped = len(self._entries)
            self._entries = OrderedDict()
        return dropped

    def _purge_expired(self) -> None:
        if self.ttl_seconds is None:
            return
        now = self._clock()
        stale = [key for key, (_, written_at) in self._entries.items() if self._expired(written_at, now)]
        for key in stale:
            del self._entries[key]

    def __len__(self) -> int:
        """Number of live (unexpired) entries."""
        with self._lock:
            self._purge_expired()
            return len(self._entries)

    def __contains__(self, key) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._expired(entry[1], self._clock())

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "size": len(self),
                "max_size": self.max_size,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }


class PolicyCacheRegions:
    """Owns the four policy cache regions and the invalidation rules per mutation.

    | mutation    | by id       | by number | all list | filtered |
    |-------------|-------------|-----------|----------|----------|
    | create      |             |           | clear    | clear    |
    | bulk create |             | clear     | clear    | clear    |
    | update      | repopulate  | clear     | clear    | clear    |
    | delete      | drop one    | clear     | clear    | clear    |
    """

    def __init__(
        self,
        filtered_max_size: int = FILTERED_CACHE_MAX_SIZE,
        filtered_ttl_seconds: Optional[float] = FILTERED_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.by_id: CacheRegion = CacheRegion("policies", clock=clock)
        self.by_policy_number: CacheRegion = CacheRegion("policy_numbers", clock=clock)
        self.all_policies: CacheRegion = CacheRegion("all_policies", clock=clock)
        self.filtered: CacheRegion = CacheRegion(
            "filtered_policies",
            max_size=filtered_max_size,
            ttl_seconds=filtered_ttl_seconds,
            clock=clock,
        )

    @property
    def regions(self):
        return (self.by_id, self.by_policy_number, self.all_policies, self.filtered)

    def on_create(self) -> None:
        self.all_policies.invalidate_all()
        self.filtered.invalidate_all()
        logger.debug("Cache invalidated after create: all_policies, filtered_policies")

    def on_bulk_create(self) -> None:
        self.all_policies.invalidate_all()
        self.filtered.invalidate_all()
        self.by_policy_number.invalidate_all()
        logger.debug("Cache invalidated after bulk create: all_policies, filtered_policies, policy_numbers")

    def on_update(self, policy_id, policy) -> None:
        # Refresh by-id with the stored value; the rest may hold the old version
        self.by_id.put(policy_id, policy)
        self.by_policy_number.invalidate_all()
        self.all_policies.invalidate_all()
        self.filtered.invalidate_all()
        logger.debug(f"Cache refreshed for policy {policy_id}; list and number regions invalidated")

    def on_delete(self, policy_id) -> None:
        self.by_id.invalidate(policy_id)
        self.by_policy_number.invalidate_all()
        self.all_policies.invalidate_all()
        self.filtered.invalidate_all()
        logger.debug(f"Cache invalidated after delete of policy {policy_id}")

    def clear_filtered(self) -> int:
        return self.filtered.invalidate_all()

    def invalidate_all(self) -> Dict[str, int]:
        return {region.name: region.invalidate_all() for region in self.regions}

    def stats(self) -> Dict[str, Dict[str, Any]]:
        return {region.name: region.stats() for region in self.regions}


# Process-wide cache shared by every request handler
POLICY_CACHE = PolicyCacheRegions()
