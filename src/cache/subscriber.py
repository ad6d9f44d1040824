"""
Cache Invalidation Subscriber — Domain events → scope invalidation

The event bus itself is external. It delivers messages from two topics,
``transactions`` and ``accounts``; this subscriber turns each one into
scope deletes on a ResultCache:

    transaction_created | transaction_updated | transaction_deleted
        → invalidate record.account_id
    account_updated
        → invalidate record.id and "global"

Each message only deletes keys, so delivery order across topics does not
matter. Unknown messages are ignored.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Mapping

from src.cache.result_cache import GLOBAL_SCOPE, ResultCache

logger = logging.getLogger(__name__)


TRANSACTIONS_TOPIC: Final[str] = "transactions"
ACCOUNTS_TOPIC: Final[str] = "accounts"
TOPICS: Final[tuple[str, ...]] = (TRANSACTIONS_TOPIC, ACCOUNTS_TOPIC)


class EventKind(str, Enum):
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    ACCOUNT_UPDATED = "account_updated"

    @property
    def topic(self) -> str:
        return ACCOUNTS_TOPIC if self is EventKind.ACCOUNT_UPDATED else TRANSACTIONS_TOPIC


@dataclass(frozen=True)
class DomainEvent:
    """Change notification; ``record`` is the transaction or account touched."""

    kind: EventKind
    record: Any


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


class CacheInvalidationSubscriber:
    """Feeds domain events into ``cache.invalidate_scope``."""

    topics: Final[tuple[str, ...]] = TOPICS

    def __init__(self, cache: ResultCache):
        self.cache = cache

    def scopes_for(self, event: DomainEvent) -> list[str]:
        """Scopes an event invalidates (empty when the record lacks an id)."""
        if event.kind is EventKind.ACCOUNT_UPDATED:
            account_id = _field(event.record, "id")
            scopes = [str(account_id)] if account_id is not None else []
            return scopes + [GLOBAL_SCOPE]

        account_id = _field(event.record, "account_id")
        return [str(account_id)] if account_id is not None else []

    def handle(self, event: DomainEvent) -> int:
        """Apply ``event``; returns the number of cache entries removed."""
        scopes = self.scopes_for(event)
        if not scopes:
            logger.warning("Ignoring %s event without an account id", event.kind.value)
            return 0

        removed = sum(self.cache.invalidate_scope(scope) for scope in scopes)
        logger.debug("%s invalidated %d entries (%s)", event.kind.value, removed, ", ".join(scopes))
        return removed

    def handle_message(self, kind: str | EventKind, record: Any) -> int:
        """Bus-facing entry point: ``(kind, record)`` tuples, unknown kinds ignored."""
        try:
            event_kind = EventKind(kind)
        except ValueError:
            logger.debug("Ignoring unrelated message %r", kind)
            return 0
        return self.handle(DomainEvent(kind=event_kind, record=record))
