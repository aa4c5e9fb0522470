"""
burrito.constants — Shared Constants & Helpers
================================================

Single source of truth for the reward glyph, medal presentation, and the
small text helpers every reply builder needs.  Import from here instead of
duplicating in the parser, reports, and service layer.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Reward glyph
# ---------------------------------------------------------------------------
BURRITO_EMOJI = "\U0001f32f"  # 🌯

# Reason recorded for awards triggered purely by emoji
EMOJI_AWARD_REASON = "emoji award"

# ---------------------------------------------------------------------------
# Rank presentation (leaderboard + reports)
# ---------------------------------------------------------------------------
RANK_BADGES: list[str] = ["\U0001f947", "\U0001f948", "\U0001f949"]  # 🥇🥈🥉

LEADERBOARD_SIZE = 10
REPORT_TOP_N = 5

# ---------------------------------------------------------------------------
# Parser vocabulary
# ---------------------------------------------------------------------------
AWARD_VERBS: tuple[str, ...] = ("give", "award", "grant")

# Filler words that are never treated as a recipient in emoji-only awards
EMOJI_NAME_STOPWORDS: frozenset[str] = frozenset({
    "great",
    "good",
    "nice",
    "awesome",
    "amazing",
    "excellent",
    "well",
    "done",
    "work",
    "job",
    "thanks",
    "thank",
    "you",
})


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------
def rank_label(index: int) -> str:
    """Medal for the first three places (0-based *index*), ``"N."`` after."""
    if index < len(RANK_BADGES):
        return RANK_BADGES[index]
    return f"{index + 1}."


def burritos(count: int) -> str:
    """``"1 burrito"`` / ``"3 burritos"``."""
    return f"{count} burrito{'s' if count != 1 else ''}"


def count_burrito_emojis(text: str) -> int:
    """Number of 🌯 glyphs in *text*."""
    return text.count(BURRITO_EMOJI)
