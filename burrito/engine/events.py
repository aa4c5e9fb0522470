"""
burrito.engine.events — Inbound Event Envelopes
================================================

Every chat-platform event is normalized into one of these dataclasses
before the parser or the service layer sees it.  Nothing here knows
about Discord.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

__all__ = ["IncomingMessage", "MembersAdded", "Mention", "ReplySink"]

# Outbound capability: send one plain-text reply
ReplySink = Callable[[str], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class Mention:
    """A structured mention: the literal markup in the text and its target.

    The markup is ``<at>Display Name</at>``; transports rewrite their own
    mention syntax into it.
    """

    text: str
    user_id: str

    @property
    def display_name(self) -> str:
        return self.text.removeprefix("<at>").removesuffix("</at>")


@dataclass(frozen=True, slots=True)
class IncomingMessage:
    """A text message addressed to (or overheard by) the bot."""

    text: str
    user_id: str
    user_name: str
    conversation_id: str
    is_group: bool = False
    mentions: tuple[Mention, ...] = field(default_factory=tuple)

    @property
    def lowered(self) -> str:
        return self.text.strip().lower()

    @property
    def chat_label(self) -> str:
        return "group chat" if self.is_group else "personal chat"


@dataclass(frozen=True, slots=True)
class MembersAdded:
    """The bot was added to a conversation.

    ``actor_id`` is whoever triggered the add, when the platform tells us.
    """

    conversation_id: str
    actor_id: str | None = None
    is_group: bool = True
