"""
Result Cache — TTL memoization of calculator outputs

Per-entry lifecycle:
    absent → present(expires_at = now + ttl) → expired → absent

Expiry is lazy: ``get`` deletes an expired entry and reports a miss.
``cleanup_expired`` only reclaims memory; correctness never depends on it.

KEYS:
    "<calculation>:<scope>:<part>…", e.g. "twr:acct-1:12" or "mwr:global:36".
    The second segment is the scope; ``invalidate_scope`` drops every key
    whose scope segment matches, whatever its TTL.

CONCURRENCY:
    Entries live in N shards, each a dict with its own lock, so get/put/delete
    of one key is atomic. ``invalidate_scope`` and ``cleanup_expired`` visit
    the shards one at a time: a concurrent reader can observe a partially
    invalidated scope (at worst one extra miss, never wrong data).
"""

import logging
import sys
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Final, Hashable

from src.core.config import EngineSettings, get_settings

logger = logging.getLogger(__name__)

KEY_SEPARATOR: Final[str] = ":"
GLOBAL_SCOPE: Final[str] = "global"

_MISS: Final[tuple[bool, Any]] = (False, None)


# =============================================================================
# KEYS
# =============================================================================


def cache_key(calculation: str, scope: str, *parts: Hashable) -> str:
    """
    Build a cache key.

    Examples:
        >>> cache_key("twr", "account-123", 12)
        'twr:account-123:12'

    Raises:
        ValueError: separator inside ``calculation`` or ``scope``
    """
    calculation = str(calculation)
    scope = str(scope)
    if KEY_SEPARATOR in calculation or KEY_SEPARATOR in scope:
        raise ValueError(f"calculation and scope must not contain {KEY_SEPARATOR!r}")
    return KEY_SEPARATOR.join([calculation, scope, *(str(p) for p in parts)])


def key_scope(key: str) -> str | None:
    """Scope segment of ``key`` or None for a key without one."""
    segments = key.split(KEY_SEPARATOR, 2)
    return segments[1] if len(segments) > 1 else None


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class CacheStats:
    """Cache observability snapshot; no behavior depends on it."""

    entries: int
    approx_memory_bytes: int
    hits: int
    misses: int
    invalidations: int
    hit_rate: float  # percent, 2 places
    uptime_seconds: float


@dataclass(frozen=True)
class CacheConfig:
    """Default TTL and shard count of a ResultCache."""

    default_ttl_seconds: float = 3600.0
    shard_count: int = 16

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None) -> "CacheConfig":
        settings = settings or get_settings()
        return cls(
            default_ttl_seconds=settings.cache_default_ttl_seconds,
            shard_count=settings.cache_shard_count,
        )


class _Shard:
    __slots__ = ("lock", "entries")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: dict[str, CacheEntry] = {}


# =============================================================================
# CACHE
# =============================================================================


class ResultCache:
    """
    Thread-safe TTL cache for calculation results.

    Construct one instance and pass it to whatever needs it; instances are
    fully independent (no module-level state).
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] | None = None,
    ):
        """
        Args:
            config: TTL/shard settings (default: CacheConfig())
            clock: monotonic seconds source (default: time.monotonic)
        """
        self.config = config or CacheConfig()
        if self.config.shard_count < 1:
            raise ValueError(f"shard_count must be >= 1, got {self.config.shard_count}")
        if self.config.default_ttl_seconds <= 0:
            raise ValueError(f"default_ttl_seconds must be positive, got {self.config.default_ttl_seconds}")

        self._clock = clock or time.monotonic
        self._shards = [_Shard() for _ in range(self.config.shard_count)]

        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._invalidations = 0
        self._started_at = self._clock()

        logger.info("Result cache initialized with %d shards", self.config.shard_count)

    def _shard(self, key: str) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def _record(self, hit: bool) -> None:
        with self._stats_lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    # -------------------------------------------------------------------------
    # single key
    # -------------------------------------------------------------------------

    def get(self, key: str) -> tuple[bool, Any]:
        """
        ``(True, value)`` for a live entry, ``(False, None)`` otherwise.

        An expired entry is removed on the way out.
        """
        shard = self._shard(key)
        now = self._clock()

        with shard.lock:
            entry = shard.entries.get(key)
            if entry is not None and entry.is_expired(now):
                del shard.entries[key]
                logger.debug("Cache expired: %s", key)
                entry = None

        if entry is None:
            self._record(hit=False)
            return _MISS

        self._record(hit=True)
        return True, entry.value

    def put(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` until now + ``ttl`` seconds (default TTL when None)."""
        ttl = self.config.default_ttl_seconds if ttl is None else ttl
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")

        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        shard = self._shard(key)
        with shard.lock:
            shard.entries[key] = entry
        logger.debug("Cached %s (expires in %ss)", key, ttl)

    def delete(self, key: str) -> bool:
        """Remove ``key``; True if it was present."""
        shard = self._shard(key)
        with shard.lock:
            return shard.entries.pop(key, None) is not None

    def get_or_compute(self, key: str, compute: Callable[[], Any], ttl: float | None = None) -> Any:
        """
        Cached value of ``key``, computing and storing it on a miss.

        ``compute`` runs outside any lock; two callers racing on the same
        missing key may both compute, and the later put wins.
        """
        hit, value = self.get(key)
        if hit:
            return value

        value = compute()
        self.put(key, value, ttl)
        return value

    # -------------------------------------------------------------------------
    # bulk
    # -------------------------------------------------------------------------

    def invalidate_scope(self, scope: str) -> int:
        """
        Drop every entry whose scope segment equals ``scope``.

        O(total entries). Returns the number of entries removed.
        """
        scope = str(scope)
        removed = 0
        for shard in self._shards:
            with shard.lock:
                doomed = [k for k in shard.entries if key_scope(k) == scope]
                for k in doomed:
                    del shard.entries[k]
            removed += len(doomed)

        with self._stats_lock:
            self._invalidations += removed

        logger.info("Invalidated %d cache entries for scope %s", removed, scope)
        return removed

    def cleanup_expired(self) -> int:
        """Remove expired entries now; returns how many were removed."""
        now = self._clock()
        removed = 0
        for shard in self._shards:
            with shard.lock:
                doomed = [k for k, e in shard.entries.items() if e.is_expired(now)]
                for k in doomed:
                    del shard.entries[k]
            removed += len(doomed)

        if removed:
            logger.debug("Removed %d expired cache entries", removed)
        return removed

    def clear(self) -> int:
        """Remove every entry; returns how many were removed."""
        removed = 0
        for shard in self._shards:
            with shard.lock:
                removed += len(shard.entries)
                shard.entries.clear()

        logger.info("Cleared all %d cache entries", removed)
        return removed

    # -------------------------------------------------------------------------
    # observability
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total

    def stats(self) -> CacheStats:
        entries = 0
        memory = 0
        for shard in self._shards:
            with shard.lock:
                entries += len(shard.entries)
                memory += sys.getsizeof(shard.entries)
                for entry in shard.entries.values():
                    memory += sys.getsizeof(entry.key) + sys.getsizeof(entry.value)

        with self._stats_lock:
            hits, misses, invalidations = self._hits, self._misses, self._invalidations

        lookups = hits + misses
        hit_rate = round(hits / lookups * 100, 2) if lookups else 0.0

        return CacheStats(
            entries=entries,
            approx_memory_bytes=memory,
            hits=hits,
            misses=misses,
            invalidations=invalidations,
            hit_rate=hit_rate,
            uptime_seconds=self._clock() - self._started_at,
        )
