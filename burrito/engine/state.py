"""
burrito.engine.state — Conversation Domain Types
=================================================

Plain dataclasses for one conversation's burrito bookkeeping.  Stores
hand these out and take them back; the ledger and report modules read
and mutate them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

__all__ = ["Award", "ConversationState", "UserStats"]


@dataclass(frozen=True, slots=True)
class Award:
    """One burrito handed from a giver to a recipient.  Never mutated."""

    id: str
    recipient_id: str
    recipient_name: str
    giver_id: str
    giver_name: str
    conversation_id: str
    timestamp: datetime
    reason: str | None = None


@dataclass(slots=True)
class UserStats:
    """Running totals for one user within one conversation."""

    user_id: str
    user_name: str
    total_received: int = 0
    total_given: int = 0
    last_updated: datetime = field(default_factory=datetime.now)


@dataclass(slots=True)
class ConversationState:
    """Root aggregate: admins, the award ledger, and per-user stats.

    ``user_stats`` keeps insertion order, which is the tie order of the
    leaderboard.
    """

    conversation_id: str
    admins: list[str] = field(default_factory=list)
    awards: list[Award] = field(default_factory=list)
    user_stats: dict[str, UserStats] = field(default_factory=dict)
