"""
burrito.services.burrito_service — Intent Dispatch & Reply Sequencing
======================================================================

The effectful half of the bot.  For every inbound event:

1. Take the per-conversation lock (one message at a time per chat).
2. Load the conversation state from the store.
3. Parse the text into an intent (pure, :mod:`burrito.engine.parser`).
4. Run the handler: admin gating, self-award guard, ledger update or
   report rendering.
5. Save the state if the handler changed it.
6. Send the replies in order, awaiting each one.

Any exception inside one message is logged and answered with a generic
apology; the next message is handled normally.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from burrito.constants import count_burrito_emojis
from burrito.database.engine import run_db
from burrito.engine import reports
from burrito.engine.events import IncomingMessage, MembersAdded, ReplySink
from burrito.engine.ledger import award_burritos, is_admin, promote_admin
from burrito.engine.parser import (
    AdminAction,
    AdminCommand,
    AwardIntent,
    AwardSource,
    DebugInfo,
    Fallback,
    Greeting,
    Help,
    Intent,
    MakeAdmin,
    MyStats,
    ShowLeaderboard,
    parse_message,
)
from burrito.engine.state import ConversationState
from burrito.services import messages

if TYPE_CHECKING:
    from burrito.services.store import ConversationStore

logger = logging.getLogger(__name__)


@dataclass
class Outcome:
    """What a handler wants sent, and whether it changed the state."""

    replies: list[str] = field(default_factory=list)
    mutated: bool = False


class BurritoService:
    """Dialogue orchestrator shared by every transport.

    Parameters
    ----------
    store:
        Any :class:`ConversationStore` backend.
    auto_admin_on_join:
        Make whoever adds the bot to an admin-less group its first admin.
    """

    def __init__(self, store: ConversationStore, *, auto_admin_on_join: bool = True) -> None:
        self.store = store
        self.auto_admin_on_join = auto_admin_on_join
        # One lock per conversation id ever seen; grows with the in-memory store
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._handlers: dict[type, Callable[[ConversationState, IncomingMessage, Intent], Outcome]] = {
            MakeAdmin: self._on_make_admin,
            DebugInfo: self._on_debug,
            AdminCommand: self._on_admin,
            AwardIntent: self._on_award,
            MyStats: self._on_my_stats,
            ShowLeaderboard: self._on_leaderboard,
            Help: self._on_help,
            Greeting: self._on_greeting,
            Fallback: self._on_fallback,
        }

    # -----------------------------------------------------------------------
    # Async entry points
    # -----------------------------------------------------------------------
    async def handle_message(self, message: IncomingMessage, send: ReplySink) -> None:
        """Process one message end-to-end.  Never raises."""
        logger.debug(
            "Message from %s (%s) in %s: %r",
            message.user_name, message.user_id, message.chat_label, message.text,
        )
        try:
            async with self._locks[message.conversation_id]:
                state = await run_db(self.store.get, message.conversation_id)
                outcome = self.dispatch(state, message)
                if outcome.mutated:
                    await run_db(self.store.save, state)
                for reply in outcome.replies:
                    await send(reply)
        except Exception:
            logger.exception(
                "Error handling message from %s in %s",
                message.user_id,
                message.conversation_id,
                extra={"conversation_id": message.conversation_id,
                       "user_id": message.user_id},
            )
            await self._send_quietly(send, messages.GENERIC_ERROR)

    async def handle_members_added(self, event: MembersAdded, send: ReplySink) -> None:
        """Bootstrap the first admin and greet a group the bot just joined."""
        try:
            async with self._locks[event.conversation_id]:
                state = await run_db(self.store.get, event.conversation_id)
                if state.admins or not event.is_group:
                    return
                if self.auto_admin_on_join and event.actor_id:
                    promote_admin(state, event.actor_id)
                    await run_db(self.store.save, state)
                    logger.info(
                        "Bootstrapped %s as first admin of %s",
                        event.actor_id, event.conversation_id,
                    )
                await send(messages.WELCOME)
        except Exception:
            logger.exception(
                "Error handling members-added in %s", event.conversation_id,
                extra={"conversation_id": event.conversation_id},
            )

    @staticmethod
    async def _send_quietly(send: ReplySink, text: str) -> None:
        try:
            await send(text)
        except Exception:
            logger.exception("Failed to deliver error reply")

    # -----------------------------------------------------------------------
    # Sync dispatch (unit-testable without a reply sink)
    # -----------------------------------------------------------------------
    def dispatch(self, state: ConversationState, message: IncomingMessage) -> Outcome:
        intent = parse_message(message)
        logger.debug("Parsed %r as %s", message.text, type(intent).__name__)
        return self._handlers[type(intent)](state, message, intent)

    # -- setup / info -------------------------------------------------------
    def _on_make_admin(self, state, message, intent) -> Outcome:
        if promote_admin(state, message.user_id):
            logger.info("%s promoted to admin in %s", message.user_id, state.conversation_id)
            return Outcome([messages.made_admin(message.user_name, message.user_id)], mutated=True)
        return Outcome([messages.already_admin(message.user_name, message.user_id)])

    def _on_debug(self, state, message, intent) -> Outcome:
        return Outcome([messages.debug_info(
            user_name=message.user_name,
            user_id=message.user_id,
            is_group=message.is_group,
            conversation_id=message.conversation_id,
            is_admin=is_admin(message.user_id, state),
            admin_count=len(state.admins),
        )])

    # -- admin --------------------------------------------------------------
    def _on_admin(self, state, message, intent: AdminCommand) -> Outcome:
        if not is_admin(message.user_id, state):
            logger.info(
                "Denied /admin %s for non-admin %s in %s",
                intent.action, message.user_id, state.conversation_id,
            )
            return Outcome([messages.NOT_ADMIN])

        if intent.action is AdminAction.REPORT:
            if intent.period is None:
                return Outcome([messages.INVALID_PERIOD])
            return Outcome([reports.generate_report(state, intent.period)])

        if intent.action is AdminAction.STATS:
            if not intent.target_name:
                return Outcome([messages.STATS_USAGE])
            return Outcome([reports.admin_user_stats(state, intent.target_name)])

        if intent.action is AdminAction.LEADERBOARD:
            return Outcome([reports.show_leaderboard(state)])

        if intent.action is AdminAction.ADD:
            if not intent.target_name:
                return Outcome([messages.ADD_USAGE])
            return Outcome([messages.ADD_NEEDS_SETUP])

        return Outcome([messages.ADMIN_HELP])

    # -- awards -------------------------------------------------------------
    @staticmethod
    def _is_self_award(message: IncomingMessage, intent: AwardIntent) -> bool:
        if intent.recipient_id == message.user_id:
            return True
        return (
            intent.source is not AwardSource.MENTION
            and intent.recipient_name.lower() == message.user_name.lower()
        )

    def _on_award(self, state, message, intent: AwardIntent) -> Outcome:
        if self._is_self_award(message, intent):
            logger.info("Rejected self-award by %s in %s", message.user_id, state.conversation_id)
            rejection = (
                messages.SELF_EMOJI_AWARD_REJECTED
                if intent.source is AwardSource.EMOJI
                else messages.SELF_AWARD_REJECTED
            )
            return Outcome([rejection])

        award_burritos(
            state,
            intent.recipient_id,
            intent.recipient_name,
            message.user_id,
            message.user_name,
            intent.quantity,
            intent.reason,
        )

        if intent.source is AwardSource.MENTION:
            confirmation = messages.mention_award_confirmation(
                intent.recipient_name, message.user_name, intent.reason,
            )
        elif intent.source is AwardSource.NAME:
            confirmation = messages.name_award_confirmation(
                intent.recipient_name,
                message.user_name,
                intent.quantity,
                count_burrito_emojis(message.text),
                intent.reason,
                message.chat_label,
            )
        else:
            confirmation = messages.emoji_award_confirmation(
                intent.recipient_name, message.user_name, intent.quantity, message.chat_label,
            )

        replies = [confirmation]
        stats = state.user_stats.get(intent.recipient_id)
        if stats is not None:
            replies.append(messages.recipient_total(intent.recipient_name, stats.total_received))
        return Outcome(replies, mutated=True)

    # -- queries ------------------------------------------------------------
    def _on_my_stats(self, state, message, intent) -> Outcome:
        return Outcome([reports.user_stats_summary(state, message.user_id, message.user_name)])

    def _on_leaderboard(self, state, message, intent) -> Outcome:
        return Outcome([reports.show_leaderboard(state)])

    def _on_help(self, state, message, intent: Help) -> Outcome:
        admin = is_admin(message.user_id, state)
        if intent.general:
            return Outcome([messages.general_help_text(is_group=message.is_group, is_admin=admin)])
        return Outcome([messages.help_text(is_group=message.is_group, is_admin=admin)])

    def _on_greeting(self, state, message, intent) -> Outcome:
        return Outcome([messages.greeting_text(is_group=message.is_group)])

    def _on_fallback(self, state, message, intent) -> Outcome:
        return Outcome([messages.fallback_text(is_group=message.is_group)])
