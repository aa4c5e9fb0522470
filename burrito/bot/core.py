"""
burrito.bot.core — Bot Instance & Cog Loader
=============================================

Defines :class:`BurritoBot`, a ``commands.Bot`` subclass that:

1. Stores the shared config (``bot.cfg``) and the platform-neutral
   :class:`BurritoService` (``bot.service``) so cogs can reach them.
2. Loads every cog listed in :data:`EXTENSIONS` on startup.

The bot itself holds no burrito logic.  Cogs translate Discord objects
into :mod:`burrito.engine.events` and hand them to the service.
"""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from burrito.config import BurritoConfig
from burrito.services.burrito_service import BurritoService

logger = logging.getLogger(__name__)

# Cog modules to load on startup.
EXTENSIONS: list[str] = [
    "burrito.bot.cogs.burritos",
]


class BurritoBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    cfg:
        The parsed :class:`BurritoConfig` from ``config.yaml``.
    service:
        The dialogue orchestrator every cog forwards events to.
    """

    def __init__(self, cfg: BurritoConfig, service: BurritoService) -> None:
        intents = discord.Intents.default()
        intents.message_content = True    # Privileged: we parse message text
        intents.presences = False

        super().__init__(
            command_prefix=cfg.bot_prefix,
            intents=intents,
            description=f"{cfg.bot_name}: peer recognition with burritos",
        )

        self.cfg = cfg
        self.service = service

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all cog extensions.  A broken cog is logged, not fatal."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        assert self.user is not None  # guaranteed after on_ready
        logger.info(
            "Logged in as %s (ID: %s) in %d guild(s)",
            self.user.name, self.user.id, len(self.guilds),
        )
