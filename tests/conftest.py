"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from burrito.database.models import Base
from burrito.engine.events import IncomingMessage, Mention
from burrito.engine.state import ConversationState
from burrito.services.burrito_service import BurritoService
from burrito.services.store import InMemoryConversationStore


# Helper to run async tests without pytest-asyncio
def run_async(coro):
    """Run an async coroutine in a new event loop."""
    return asyncio.run(coro)


def make_message(
    text: str,
    *,
    user_id: str = "u-alice",
    user_name: str = "Alice",
    conversation_id: str = "conv-1",
    is_group: bool = False,
    mentions: tuple[Mention, ...] = (),
) -> IncomingMessage:
    return IncomingMessage(
        text=text,
        user_id=user_id,
        user_name=user_name,
        conversation_id=conversation_id,
        is_group=is_group,
        mentions=mentions,
    )


class ReplyRecorder:
    """Reply sink that remembers everything it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[str] = []

    async def __call__(self, text: str) -> None:
        self.sent.append(text)


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all Burrito tables.

    Uses StaticPool so the worker threads behind ``run_db`` share the
    same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def store() -> InMemoryConversationStore:
    return InMemoryConversationStore()


@pytest.fixture
def service(store) -> BurritoService:
    return BurritoService(store)


@pytest.fixture
def state() -> ConversationState:
    return ConversationState(conversation_id="conv-1")


@pytest.fixture
def replies() -> ReplyRecorder:
    return ReplyRecorder()
