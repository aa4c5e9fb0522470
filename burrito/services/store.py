"""
burrito.services.store — Conversation Store Backends
=====================================================

The service layer only ever calls ``get`` and ``save``; which backend
sits behind them is decided once at startup.

- :class:`InMemoryConversationStore` — process-lifetime dict (default).
- :class:`SqlConversationStore` — same contract on top of SQLAlchemy.

``save`` is called after every mutation.  For the in-memory store the
state object is already the stored one, so it is a re-registration.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import select

from burrito.database.engine import get_session
from burrito.database.models import (
    AwardRow,
    Conversation,
    ConversationAdmin,
    UserStatsRow,
)
from burrito.engine.state import Award, ConversationState, UserStats

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from burrito.config import BurritoConfig

logger = logging.getLogger(__name__)

__all__ = [
    "ConversationStore",
    "InMemoryConversationStore",
    "SqlConversationStore",
    "build_store",
]


class ConversationStore(Protocol):
    def get(self, conversation_id: str) -> ConversationState: ...

    def save(self, state: ConversationState) -> None: ...


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------
class InMemoryConversationStore:
    """Thread-safe dict of conversation states.  Nothing survives a restart."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._data: dict[str, ConversationState] = {}

    @staticmethod
    def _key(conversation_id: str) -> str:
        return f"burrito-data-{conversation_id}"

    def get(self, conversation_id: str) -> ConversationState:
        key = self._key(conversation_id)
        with self._lock:
            state = self._data.get(key)
            if state is None:
                state = ConversationState(conversation_id=conversation_id)
                self._data[key] = state
                logger.debug("Created state for conversation %s", conversation_id)
            return state

    def save(self, state: ConversationState) -> None:
        with self._lock:
            self._data[self._key(state.conversation_id)] = state

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------
class SqlConversationStore:
    """Maps :class:`ConversationState` to the tables in
    :mod:`burrito.database.models`.

    ``get`` returns detached domain objects; ``save`` writes them back.
    Awards are append-only, so only ids not yet stored are inserted.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, conversation_id: str) -> ConversationState:
        with get_session(self._engine) as session:
            conv = session.get(Conversation, conversation_id)
            if conv is None:
                session.add(Conversation(id=conversation_id))
                logger.debug("Created conversation row %s", conversation_id)
                return ConversationState(conversation_id=conversation_id)

            return ConversationState(
                conversation_id=conversation_id,
                admins=[a.user_id for a in conv.admins],
                awards=[
                    Award(
                        id=row.id,
                        recipient_id=row.recipient_id,
                        recipient_name=row.recipient_name,
                        giver_id=row.giver_id,
                        giver_name=row.giver_name,
                        conversation_id=row.conversation_id,
                        timestamp=row.timestamp,
                        reason=row.reason,
                    )
                    for row in conv.awards
                ],
                user_stats={
                    row.user_id: UserStats(
                        user_id=row.user_id,
                        user_name=row.user_name,
                        total_received=row.total_received,
                        total_given=row.total_given,
                        last_updated=row.last_updated,
                    )
                    for row in conv.user_stats
                },
            )

    def save(self, state: ConversationState) -> None:
        cid = state.conversation_id
        with get_session(self._engine) as session:
            conv = session.get(Conversation, cid)
            if conv is None:
                conv = Conversation(id=cid)
                session.add(conv)
                session.flush()

            known_admins = {a.user_id for a in conv.admins}
            for position, user_id in enumerate(state.admins):
                if user_id not in known_admins:
                    conv.admins.append(ConversationAdmin(user_id=user_id, position=position))

            stored_ids = set(
                session.scalars(select(AwardRow.id).where(AwardRow.conversation_id == cid))
            )
            for seq, award in enumerate(state.awards):
                if award.id in stored_ids:
                    continue
                session.add(AwardRow(
                    id=award.id,
                    seq=seq,
                    conversation_id=cid,
                    recipient_id=award.recipient_id,
                    recipient_name=award.recipient_name,
                    giver_id=award.giver_id,
                    giver_name=award.giver_name,
                    reason=award.reason,
                    timestamp=award.timestamp,
                ))

            for position, stats in enumerate(state.user_stats.values()):
                session.merge(UserStatsRow(
                    conversation_id=cid,
                    user_id=stats.user_id,
                    user_name=stats.user_name,
                    total_received=stats.total_received,
                    total_given=stats.total_given,
                    last_updated=stats.last_updated,
                    position=position,
                ))


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
def build_store(cfg: BurritoConfig, engine: Engine | None = None) -> ConversationStore:
    """Pick the backend named by ``cfg.store``."""
    if cfg.store == "database":
        if engine is None:
            raise RuntimeError("store: database requires a database engine")
        logger.info("Using SQL conversation store")
        return SqlConversationStore(engine)
    logger.info("Using in-memory conversation store (state is lost on restart)")
    return InMemoryConversationStore()
