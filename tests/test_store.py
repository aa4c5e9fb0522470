"""
tests/test_store.py — Conversation Store Tests
===============================================

Both backends honour the same get/save contract.  The SQL store is
exercised against in-memory SQLite.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from burrito.config import BurritoConfig
from burrito.engine.ledger import award_burrito, award_burritos, promote_admin
from burrito.services.store import (
    InMemoryConversationStore,
    SqlConversationStore,
    build_store,
)

WHEN = datetime(2026, 3, 4, 9, 30)


class TestInMemoryStore:
    def test_get_creates_empty_state(self, store):
        state = store.get("conv-9")
        assert state.conversation_id == "conv-9"
        assert (state.admins, state.awards, state.user_stats) == ([], [], {})
        assert len(store) == 1

    def test_get_returns_same_object(self, store):
        state = store.get("conv-1")
        promote_admin(state, "u-alice")
        store.save(state)
        assert store.get("conv-1") is state
        assert store.get("conv-1").admins == ["u-alice"]

    def test_conversations_are_isolated(self, store):
        award_burrito(store.get("conv-1"), "u-bob", "Bob", "u-alice", "Alice")
        assert store.get("conv-2").awards == []


class TestSqlStore:
    def test_unknown_conversation_starts_empty(self, db_engine):
        state = SqlConversationStore(db_engine).get("conv-1")
        assert state.awards == []
        assert state.admins == []

    def test_round_trip(self, db_engine):
        sql = SqlConversationStore(db_engine)
        state = sql.get("conv-1")
        promote_admin(state, "u-alice")
        award_burritos(state, "u-bob", "Bob", "u-alice", "Alice", 2, "pairing", now=WHEN)
        award_burrito(state, "u-carol", "Carol", "u-bob", "Bob", now=WHEN)
        sql.save(state)

        loaded = sql.get("conv-1")
        assert loaded.admins == ["u-alice"]
        assert [a.id for a in loaded.awards] == [a.id for a in state.awards]
        assert loaded.awards[0].reason == "pairing"
        assert loaded.awards[0].timestamp == WHEN
        assert list(loaded.user_stats) == ["u-bob", "u-alice", "u-carol"]
        assert loaded.user_stats["u-bob"].total_received == 2
        assert loaded.user_stats["u-bob"].total_given == 1

    def test_save_appends_awards_once(self, db_engine):
        sql = SqlConversationStore(db_engine)
        state = sql.get("conv-1")
        award_burrito(state, "u-bob", "Bob", "u-alice", "Alice")
        sql.save(state)
        sql.save(state)

        state = sql.get("conv-1")
        award_burrito(state, "u-bob", "Bobby", "u-alice", "Alice")
        sql.save(state)

        loaded = sql.get("conv-1")
        assert len(loaded.awards) == 2
        assert loaded.user_stats["u-bob"].total_received == 2
        assert loaded.user_stats["u-bob"].user_name == "Bobby"

    def test_admins_are_not_duplicated(self, db_engine):
        sql = SqlConversationStore(db_engine)
        state = sql.get("conv-1")
        promote_admin(state, "u-alice")
        sql.save(state)
        state = sql.get("conv-1")
        promote_admin(state, "u-bob")
        sql.save(state)
        assert sql.get("conv-1").admins == ["u-alice", "u-bob"]


class TestBuildStore:
    def test_memory_is_default(self):
        cfg = BurritoConfig(bot_name="Burrito Bot", bot_prefix="!")
        assert isinstance(build_store(cfg), InMemoryConversationStore)

    def test_database_needs_engine(self, db_engine):
        cfg = BurritoConfig(bot_name="Burrito Bot", bot_prefix="!", store="database")
        with pytest.raises(RuntimeError):
            build_store(cfg)
        assert isinstance(build_store(cfg, db_engine), SqlConversationStore)
