"""
burrito.engine.parser — Message → Intent
=========================================

Pure classification of one :class:`IncomingMessage` into exactly one
intent.  No state, no I/O: admin gating and the self-award guard belong
to the service layer, which consumes the intent.

Rules run in a fixed order and the first one that fully matches wins:

  1. ``/makeadmin``                 → MakeAdmin
  2. ``/debug``                     → DebugInfo
  3. ``/admin …``                   → AdminCommand
  4. ``give <at>X</at> a burrito``  → AwardIntent(MENTION)   (groups only)
  5. ``give X a burrito``           → AwardIntent(NAME)
  6. ``Nice one X! 🌯🌯``           → AwardIntent(EMOJI)
  7. ``my burritos``                → MyStats
  8. ``burrito leaderboard``        → ShowLeaderboard
  9. ``help``                       → Help
 10. ``hello``                      → Greeting
 11. anything else                  → Fallback

A rule that cannot produce a complete intent returns ``None`` and the
next rule is tried.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Callable
from dataclasses import dataclass

from burrito.constants import (
    AWARD_VERBS,
    BURRITO_EMOJI,
    EMOJI_AWARD_REASON,
    EMOJI_NAME_STOPWORDS,
    count_burrito_emojis,
)
from burrito.engine.events import IncomingMessage
from burrito.engine.identity import synthesize_user_id
from burrito.engine.periods import Period, parse_period

__all__ = [
    "AdminAction",
    "AdminCommand",
    "AwardIntent",
    "AwardSource",
    "DebugInfo",
    "Fallback",
    "Greeting",
    "Help",
    "Intent",
    "MakeAdmin",
    "MyStats",
    "ShowLeaderboard",
    "parse_message",
]


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------
class AwardSource(enum.StrEnum):
    MENTION = "mention"
    NAME = "name"
    EMOJI = "emoji"


class AdminAction(enum.StrEnum):
    REPORT = "report"
    STATS = "stats"
    LEADERBOARD = "leaderboard"
    ADD = "add"
    HELP = "help"


@dataclass(frozen=True, slots=True)
class MakeAdmin:
    pass


@dataclass(frozen=True, slots=True)
class DebugInfo:
    pass


@dataclass(frozen=True, slots=True)
class AdminCommand:
    """``/admin <action> …``.  ``period`` is None when missing or invalid."""

    action: AdminAction
    period: Period | None = None
    target_name: str | None = None


@dataclass(frozen=True, slots=True)
class AwardIntent:
    recipient_id: str
    recipient_name: str
    quantity: int
    source: AwardSource
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class MyStats:
    pass


@dataclass(frozen=True, slots=True)
class ShowLeaderboard:
    pass


@dataclass(frozen=True, slots=True)
class Help:
    # Exact "commands": the general card with chat type + admin status inline
    general: bool = False


@dataclass(frozen=True, slots=True)
class Greeting:
    pass


@dataclass(frozen=True, slots=True)
class Fallback:
    pass


Intent = (
    MakeAdmin
    | DebugInfo
    | AdminCommand
    | AwardIntent
    | MyStats
    | ShowLeaderboard
    | Help
    | Greeting
    | Fallback
)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
MAKE_ADMIN_COMMANDS = ("/makeadmin", "/makemeadmin")
DEBUG_COMMANDS = ("/debug", "/info")
ADMIN_PREFIX = "/admin"
STATS_PHRASES = ("my burritos", "burrito count")
LEADERBOARD_PHRASES = ("burrito leaderboard", "top burritos")
HELP_PHRASES = ("help", "what can you do")
HELP_COMMANDS = ("help", "commands")

_VERBS = "|".join(AWARD_VERBS)

_MENTION_TOKEN = re.compile(r"<at>([^<]+)</at>", re.IGNORECASE)
_MENTION_AWARD = re.compile(
    rf"\b(?:{_VERBS})\s+(<at>[^<]+</at>)\s+(?:a\s+)?burrito", re.IGNORECASE
)
_NAME_AWARD = re.compile(
    rf"\b(?:{_VERBS})\s+([a-z0-9\s_-]+?)\s+(?:a\s+)?burrito", re.IGNORECASE
)
_ANY_AWARD = re.compile(rf"\b(?:{_VERBS})\s+.*?\bburrito", re.IGNORECASE | re.DOTALL)
_REASON = re.compile(r"\bfor\s+(.+)$", re.IGNORECASE | re.DOTALL)

_NAME_AFTER_PREPOSITION = re.compile(r"(?:\b(?:for|to)\s+|@\s*)([a-z0-9_-]+)", re.IGNORECASE)
_NAME_BEFORE_EMOJI = re.compile(rf"([a-z0-9_-]+)[\s!.,]*{BURRITO_EMOJI}", re.IGNORECASE)
_LEADING_NAME = re.compile(r"^([a-z0-9_-]+)\s", re.IGNORECASE)

_GREETING = re.compile(r"\b(?:hello|hi|hey)\b")


def _reason_after(text: str, pos: int) -> str | None:
    match = _REASON.search(text, pos)
    if match is None:
        return None
    return match.group(1).strip() or None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
def _make_admin(message: IncomingMessage) -> MakeAdmin | None:
    return MakeAdmin() if message.lowered in MAKE_ADMIN_COMMANDS else None


def _debug(message: IncomingMessage) -> DebugInfo | None:
    return DebugInfo() if message.lowered in DEBUG_COMMANDS else None


def _admin(message: IncomingMessage) -> AdminCommand | None:
    tokens = message.lowered.split()
    if not tokens or tokens[0] != ADMIN_PREFIX:
        return None

    try:
        action = AdminAction(tokens[1]) if len(tokens) > 1 else AdminAction.HELP
    except ValueError:
        action = AdminAction.HELP

    if action is AdminAction.REPORT:
        return AdminCommand(action, period=parse_period(tokens[2] if len(tokens) > 2 else None))

    if action in (AdminAction.STATS, AdminAction.ADD):
        mention = _MENTION_TOKEN.search(message.text)
        if mention is not None:
            return AdminCommand(action, target_name=mention.group(1).strip())
        if action is AdminAction.STATS:
            # Personal chats have no mentions: "/admin stats Sam"
            parts = message.text.strip().split(maxsplit=2)
            if len(parts) == 3:
                name = parts[2].strip().lstrip("@").strip()
                return AdminCommand(action, target_name=name or None)
        return AdminCommand(action)

    return AdminCommand(action)


def _mention_award(message: IncomingMessage) -> AwardIntent | None:
    if not message.is_group:
        return None
    match = _MENTION_AWARD.search(message.text)
    if match is None:
        return None

    token = match.group(1)
    mention = next((m for m in message.mentions if m.text == token), None)
    if mention is None:
        return None

    return AwardIntent(
        recipient_id=mention.user_id,
        recipient_name=mention.display_name,
        quantity=1,
        source=AwardSource.MENTION,
        reason=_reason_after(message.text, match.end()),
    )


def _name_award(message: IncomingMessage) -> AwardIntent | None:
    match = _NAME_AWARD.search(message.text)
    if match is None:
        return None

    name = match.group(1).strip()
    if not name or "<at>" in name or "@" in name:
        return None

    return AwardIntent(
        recipient_id=synthesize_user_id(name),
        recipient_name=name,
        quantity=max(1, count_burrito_emojis(message.text)),
        source=AwardSource.NAME,
        reason=_reason_after(message.text, match.end()),
    )


def _emoji_candidate(message: IncomingMessage) -> str:
    text = message.text.strip()
    for pattern in (_NAME_AFTER_PREPOSITION, _NAME_BEFORE_EMOJI):
        match = pattern.search(text)
        if match is not None:
            return match.group(1).strip()
    if not message.lowered.startswith(AWARD_VERBS):
        match = _LEADING_NAME.search(text)
        if match is not None:
            return match.group(1).strip()
    return ""


def _emoji_award(message: IncomingMessage) -> AwardIntent | None:
    quantity = count_burrito_emojis(message.text)
    # Any "give ... burrito" phrase vetoes the emoji rule, e.g. "give @sam a burrito 🌯"
    # in a personal chat falls through to Fallback instead of awarding "sam a burrito"
    if quantity == 0 or _ANY_AWARD.search(message.text):
        return None

    name = _emoji_candidate(message)
    if len(name) <= 1 or name.lower() in EMOJI_NAME_STOPWORDS:
        return None

    return AwardIntent(
        recipient_id=synthesize_user_id(name),
        recipient_name=name,
        quantity=quantity,
        source=AwardSource.EMOJI,
        reason=EMOJI_AWARD_REASON,
    )


def _my_stats(message: IncomingMessage) -> MyStats | None:
    lowered = message.lowered
    return MyStats() if any(p in lowered for p in STATS_PHRASES) else None


def _leaderboard(message: IncomingMessage) -> ShowLeaderboard | None:
    lowered = message.lowered
    return ShowLeaderboard() if any(p in lowered for p in LEADERBOARD_PHRASES) else None


def _help(message: IncomingMessage) -> Help | None:
    lowered = message.lowered
    if lowered in HELP_COMMANDS or any(p in lowered for p in HELP_PHRASES):
        return Help(general=lowered == "commands")
    return None


def _greeting(message: IncomingMessage) -> Greeting | None:
    return Greeting() if _GREETING.search(message.lowered) else None


RULES: list[Callable[[IncomingMessage], Intent | None]] = [
    _make_admin,
    _debug,
    _admin,
    _mention_award,
    _name_award,
    _emoji_award,
    _my_stats,
    _leaderboard,
    _help,
    _greeting,
]


def parse_message(message: IncomingMessage) -> Intent:
    """Return the intent of the first matching rule, else :class:`Fallback`."""
    for rule in RULES:
        intent = rule(message)
        if intent is not None:
            return intent
    return Fallback()
