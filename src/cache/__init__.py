"""Cache — TTL memoization of calculator results with event-driven invalidation.

- Sharded, lock-per-shard TTL cache with lazy expiry
- Scope-keyed invalidation ("calc:scope:…" keys)
- Subscriber mapping transaction/account events to scope deletes
"""

from .result_cache import (
    GLOBAL_SCOPE,
    CacheConfig,
    CacheEntry,
    CacheStats,
    ResultCache,
    cache_key,
    key_scope,
)
from .subscriber import (
    ACCOUNTS_TOPIC,
    TOPICS,
    TRANSACTIONS_TOPIC,
    CacheInvalidationSubscriber,
    DomainEvent,
    EventKind,
)

__all__ = [
    "GLOBAL_SCOPE",
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "ResultCache",
    "cache_key",
    "key_scope",
    "ACCOUNTS_TOPIC",
    "TRANSACTIONS_TOPIC",
    "TOPICS",
    "CacheInvalidationSubscriber",
    "DomainEvent",
    "EventKind",
]
