"""
Tests for the Cache Invalidation Subscriber

Checked invariants:
1. Transaction events invalidate the owning account's scope
2. account_updated invalidates the account scope and the global scope
3. Unknown or incomplete messages never raise
"""

from datetime import date
from decimal import Decimal

import pytest

from src.cache.result_cache import GLOBAL_SCOPE, CacheConfig, ResultCache
from src.cache.subscriber import (
    ACCOUNTS_TOPIC,
    TRANSACTIONS_TOPIC,
    CacheInvalidationSubscriber,
    DomainEvent,
    EventKind,
)
from src.core.domain import Account, TransactionRecord, TransactionType


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def cache():
    cache = ResultCache(CacheConfig(shard_count=2))
    cache.put("twr:acct-1:12", "a")
    cache.put("mwr:acct-1:12", "b")
    cache.put("twr:acct-2:12", "c")
    cache.put("summary:global", "d")
    return cache


@pytest.fixture
def subscriber(cache):
    return CacheInvalidationSubscriber(cache)


def transaction(account_id="acct-1"):
    return TransactionRecord(
        type=TransactionType.BUY,
        symbol="AAPL",
        quantity=Decimal("1"),
        unit_price=Decimal("100"),
        date=date(2024, 1, 2),
        account_id=account_id,
    )


# =============================================================================
# ROUTING
# =============================================================================


class TestEventKinds:
    def test_topics(self):
        assert EventKind.TRANSACTION_CREATED.topic == TRANSACTIONS_TOPIC
        assert EventKind.TRANSACTION_DELETED.topic == TRANSACTIONS_TOPIC
        assert EventKind.ACCOUNT_UPDATED.topic == ACCOUNTS_TOPIC

    def test_subscriber_topics(self, subscriber):
        assert set(subscriber.topics) == {TRANSACTIONS_TOPIC, ACCOUNTS_TOPIC}


class TestScopes:
    def test_transaction_scope(self, subscriber):
        event = DomainEvent(EventKind.TRANSACTION_UPDATED, transaction())
        assert subscriber.scopes_for(event) == ["acct-1"]

    def test_account_scope_includes_global(self, subscriber):
        event = DomainEvent(EventKind.ACCOUNT_UPDATED, Account(id="acct-2"))
        assert subscriber.scopes_for(event) == ["acct-2", GLOBAL_SCOPE]

    def test_mapping_records(self, subscriber):
        event = DomainEvent(EventKind.TRANSACTION_CREATED, {"account_id": "acct-9"})
        assert subscriber.scopes_for(event) == ["acct-9"]

    def test_transaction_without_account(self, subscriber):
        event = DomainEvent(EventKind.TRANSACTION_CREATED, {"symbol": "AAPL"})
        assert subscriber.scopes_for(event) == []


# =============================================================================
# INVALIDATION
# =============================================================================


class TestHandle:
    @pytest.mark.parametrize(
        "kind",
        [EventKind.TRANSACTION_CREATED, EventKind.TRANSACTION_UPDATED, EventKind.TRANSACTION_DELETED],
    )
    def test_transaction_events(self, subscriber, cache, kind):
        assert subscriber.handle(DomainEvent(kind, transaction())) == 2

        assert cache.get("twr:acct-1:12") == (False, None)
        assert cache.get("twr:acct-2:12") == (True, "c")
        assert cache.get("summary:global") == (True, "d")

    def test_account_updated(self, subscriber, cache):
        removed = subscriber.handle(DomainEvent(EventKind.ACCOUNT_UPDATED, Account(id="acct-2")))

        assert removed == 2
        assert cache.get("twr:acct-2:12") == (False, None)
        assert cache.get("summary:global") == (False, None)
        assert cache.get("twr:acct-1:12") == (True, "a")

    def test_event_without_account_is_ignored(self, subscriber, cache):
        assert subscriber.handle(DomainEvent(EventKind.TRANSACTION_DELETED, {})) == 0
        assert len(cache) == 4

    def test_handle_message(self, subscriber, cache):
        assert subscriber.handle_message("transaction_created", {"account_id": "acct-1"}) == 2
        assert subscriber.handle_message(EventKind.ACCOUNT_UPDATED, {"id": "acct-2"}) == 2
        assert len(cache) == 0

    def test_unknown_message_ignored(self, subscriber, cache):
        assert subscriber.handle_message("price_updated", {"symbol": "AAPL"}) == 0
        assert len(cache) == 4

    def test_repeated_delivery_is_harmless(self, subscriber):
        event = DomainEvent(EventKind.TRANSACTION_CREATED, transaction())
        assert subscriber.handle(event) == 2
        assert subscriber.handle(event) == 0
