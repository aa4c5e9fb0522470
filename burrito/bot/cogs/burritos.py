"""
burrito.bot.cogs.burritos — Discord ⇄ BurritoService bridge
============================================================

Listens for messages and guild joins, normalizes them into
:mod:`burrito.engine.events`, and lets :class:`BurritoService` decide
what to say.

Discord specifics handled here:
- Guild channels are group conversations; DMs are personal ones.
  The conversation id is the channel id.
- In guild channels the bot only answers when it is @mentioned (like a
  bot added to a group chat); the bot's own mention is stripped.
- User mentions ``<@id>`` are rewritten to ``<at>Display Name</at>`` so
  the parser can match them against the mention list.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from burrito.engine.events import IncomingMessage, MembersAdded, Mention

if TYPE_CHECKING:
    from burrito.bot.core import BurritoBot

logger = logging.getLogger(__name__)


def _mention_pattern(user_id: int) -> re.Pattern[str]:
    return re.compile(rf"<@!?{user_id}>")


def to_incoming_message(
    message: discord.Message, bot_user_id: int | None = None
) -> IncomingMessage:
    """Build an :class:`IncomingMessage` from a Discord message."""
    text = message.content
    mentions: list[Mention] = []

    for member in message.mentions:
        pattern = _mention_pattern(member.id)
        if bot_user_id is not None and member.id == bot_user_id:
            text = pattern.sub("", text)
            continue
        token = f"<at>{member.display_name}</at>"
        # Callable replacement: display names may contain backslashes
        text = pattern.sub(lambda _m: token, text)
        mentions.append(Mention(text=token, user_id=str(member.id)))

    return IncomingMessage(
        text=" ".join(text.split()),
        user_id=str(message.author.id),
        user_name=message.author.display_name or str(message.author.id),
        conversation_id=str(message.channel.id),
        is_group=message.guild is not None,
        mentions=tuple(mentions),
    )


def pick_welcome_channel(guild: discord.Guild) -> discord.TextChannel | None:
    """System channel if we can post there, else the first writable one."""
    me = guild.me
    candidates = [guild.system_channel, *guild.text_channels]
    for channel in candidates:
        if channel is None:
            continue
        if me is None or channel.permissions_for(me).send_messages:
            return channel
    return None


class Burritos(commands.Cog, name="Burritos"):
    """Burrito awards, stats, and admin reports over plain chat messages."""

    def __init__(self, bot: BurritoBot) -> None:
        self.bot = bot

    def _addressed_to_bot(self, message: discord.Message) -> bool:
        if message.guild is None:
            return True
        return self.bot.user is not None and self.bot.user in message.mentions

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or not message.content:
            return
        if not self._addressed_to_bot(message):
            return

        bot_id = self.bot.user.id if self.bot.user else None
        incoming = to_incoming_message(message, bot_id)
        await self.bot.service.handle_message(incoming, message.channel.send)

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info("Joined guild %s (ID: %s)", guild.name, guild.id)
        channel = pick_welcome_channel(guild)
        if channel is None:
            logger.warning("No writable text channel in guild %s, skipping welcome", guild.id)
            return

        actor_id = await self._find_inviter(guild)
        event = MembersAdded(
            conversation_id=str(channel.id),
            actor_id=actor_id,
            is_group=True,
        )
        await self.bot.service.handle_members_added(event, channel.send)

    async def _find_inviter(self, guild: discord.Guild) -> str | None:
        """Who added the bot, from the audit log (needs View Audit Log)."""
        if self.bot.user is None:
            return None
        try:
            async for entry in guild.audit_logs(limit=5, action=discord.AuditLogAction.bot_add):
                target = entry.target
                if target is not None and target.id == self.bot.user.id and entry.user:
                    return str(entry.user.id)
        except discord.Forbidden:
            logger.info("Cannot read audit log in guild %s; no bootstrap admin", guild.id)
        except discord.HTTPException:
            logger.exception("Audit log lookup failed in guild %s", guild.id)
        return None


async def setup(bot: BurritoBot) -> None:
    await bot.add_cog(Burritos(bot))
