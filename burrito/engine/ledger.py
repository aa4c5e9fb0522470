"""
burrito.engine.ledger — Award Ledger & Stats Aggregator
========================================================

Records awards and keeps ``UserStats`` counters in step with the ledger.
Pure with respect to I/O: every function mutates the given
:class:`ConversationState` in place and nothing else.

Self-award prevention is NOT done here.  The service layer must reject
those before calling :func:`award_burrito`.
"""

from __future__ import annotations

import logging
import random
import string
import time
from datetime import datetime

from burrito.engine.state import Award, ConversationState, UserStats

logger = logging.getLogger(__name__)

__all__ = [
    "award_burrito",
    "award_burritos",
    "is_admin",
    "new_award_id",
    "promote_admin",
]

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_award_id() -> str:
    """``"<epoch millis>-<9 base36 chars>"``, unique enough for one process."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}-{suffix}"


def _touch_stats(
    state: ConversationState, user_id: str, user_name: str, now: datetime
) -> UserStats:
    stats = state.user_stats.get(user_id)
    if stats is None:
        stats = UserStats(user_id=user_id, user_name=user_name, last_updated=now)
        state.user_stats[user_id] = stats
    # Names drift; last write wins
    stats.user_name = user_name
    stats.last_updated = now
    return stats


def award_burrito(
    state: ConversationState,
    recipient_id: str,
    recipient_name: str,
    giver_id: str,
    giver_name: str,
    reason: str | None = None,
    *,
    now: datetime | None = None,
) -> Award:
    """Append one award and bump the recipient/giver counters."""
    now = now or datetime.now()
    award = Award(
        id=new_award_id(),
        recipient_id=recipient_id,
        recipient_name=recipient_name,
        giver_id=giver_id,
        giver_name=giver_name,
        conversation_id=state.conversation_id,
        timestamp=now,
        reason=reason,
    )
    state.awards.append(award)

    _touch_stats(state, recipient_id, recipient_name, now).total_received += 1
    _touch_stats(state, giver_id, giver_name, now).total_given += 1
    return award


def award_burritos(
    state: ConversationState,
    recipient_id: str,
    recipient_name: str,
    giver_id: str,
    giver_name: str,
    quantity: int = 1,
    reason: str | None = None,
    *,
    now: datetime | None = None,
) -> list[Award]:
    """Record *quantity* separate awards (one per 🌯)."""
    awards = [
        award_burrito(
            state, recipient_id, recipient_name, giver_id, giver_name, reason, now=now
        )
        for _ in range(max(quantity, 0))
    ]
    logger.info(
        "Recorded %d burrito(s) %s → %s in %s",
        len(awards), giver_name, recipient_name, state.conversation_id,
    )
    return awards


def is_admin(user_id: str, state: ConversationState) -> bool:
    return user_id in state.admins


def promote_admin(state: ConversationState, user_id: str) -> bool:
    """Add *user_id* to the admin list.  Returns False if already there."""
    if user_id in state.admins:
        return False
    state.admins.append(user_id)
    return True
