"""
burrito.engine.reports — Period Reports, Leaderboard & Stats Text
==================================================================

Read-only views over a :class:`ConversationState`.  Each function returns
the reply text; sending it is the caller's job.

Report tallies are keyed by *display name*: two ids that share a name
are counted together.  The leaderboard is keyed by user id.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from burrito.constants import (
    LEADERBOARD_SIZE,
    REPORT_TOP_N,
    burritos,
    rank_label,
)
from burrito.engine.periods import Period, period_key
from burrito.engine.state import Award, ConversationState, UserStats

__all__ = [
    "admin_user_stats",
    "awards_in_period",
    "generate_report",
    "rank_users",
    "show_leaderboard",
    "tally_by_name",
    "user_stats_summary",
]

NO_AWARDS_YET = (
    "\U0001f32f No burritos have been awarded yet! "
    "Be the first to give someone a burrito!"
)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
def awards_in_period(
    state: ConversationState, period: Period, reference_date: datetime
) -> list[Award]:
    key = period_key(reference_date, period)
    return [a for a in state.awards if period_key(a.timestamp, period) == key]


def tally_by_name(names: Iterable[str], limit: int) -> list[tuple[str, int]]:
    """Count occurrences, highest first.  Ties keep first-seen order."""
    counts: dict[str, int] = {}
    for name in names:
        counts[name] = counts.get(name, 0) + 1
    # sorted() is stable, also with reverse=True
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]


def rank_users(state: ConversationState, limit: int = LEADERBOARD_SIZE) -> list[UserStats]:
    """UserStats by ``total_received`` descending; ties in insertion order."""
    return sorted(
        state.user_stats.values(), key=lambda s: s.total_received, reverse=True
    )[:limit]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
def generate_report(
    state: ConversationState,
    period: Period,
    reference_date: datetime | None = None,
) -> str:
    """Summarise the awards that fall in the same *period* as *reference_date*."""
    reference_date = reference_date or datetime.now()
    awards = awards_in_period(state, period, reference_date)

    if not awards:
        return f"\U0001f4ca No burritos were awarded during this {period.value} period."

    lines = [
        f"\U0001f4ca **{period.value.capitalize()} Burrito Report**",
        f"\U0001f4c5 Period: {period_key(reference_date, period)}",
        f"\U0001f32f Total Burritos Awarded: {len(awards)}",
        "",
    ]

    top_recipients = tally_by_name((a.recipient_name for a in awards), REPORT_TOP_N)
    lines.append("\U0001f3c6 **Top Burrito Recipients:**")
    for index, (name, count) in enumerate(top_recipients):
        lines.append(f"{rank_label(index)} {name}: {burritos(count)}")
    lines.append("")

    top_givers = tally_by_name((a.giver_name for a in awards), REPORT_TOP_N)
    lines.append("\U0001f91d **Most Generous Burrito Givers:**")
    for index, (name, count) in enumerate(top_givers):
        lines.append(f"{rank_label(index)} {name}: {burritos(count)} given")

    return "\n".join(lines)


def show_leaderboard(state: ConversationState) -> str:
    ranked = rank_users(state)
    if not ranked:
        return NO_AWARDS_YET

    lines = ["\U0001f3c6 **Burrito Leaderboard** \U0001f3c6", ""]
    for index, stats in enumerate(ranked):
        lines.append(f"{rank_label(index)} {stats.user_name}: {burritos(stats.total_received)}")
    return "\n".join(lines)


def user_stats_summary(state: ConversationState, user_id: str, user_name: str) -> str:
    """Reply for ``my burritos``."""
    stats = state.user_stats.get(user_id)
    if stats is None:
        return (
            f"\U0001f32f {user_name}, you haven't received any burritos yet! "
            "Keep up the good work! \U0001f4aa"
        )
    return (
        f"\U0001f32f {user_name}, you have received {burritos(stats.total_received)} "
        f"and given {burritos(stats.total_given)}!"
    )


def admin_user_stats(state: ConversationState, name: str) -> str:
    """Reply for ``/admin stats``.  Looks the user up by display name."""
    wanted = name.strip().lower()
    stats = next(
        (s for s in state.user_stats.values() if s.user_name.lower() == wanted),
        None,
    )
    if stats is None:
        return f"❌ No burrito stats found for {name}"
    return (
        f"\U0001f4ca **Stats for {stats.user_name}:**\n"
        f"\U0001f32f Burritos Received: {stats.total_received}\n"
        f"\U0001f91d Burritos Given: {stats.total_given}\n"
        f"\U0001f4c5 Last Updated: {stats.last_updated:%Y-%m-%d}"
    )
