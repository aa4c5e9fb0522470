"""
burrito.bot.__main__ — Entry point for ``python -m burrito.bot``
================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (soft settings) and configure logging.
3. Build the conversation store (in-memory, or SQL if configured).
4. Create the BurritoService and the BurritoBot.
5. Start the bot; this blocks inside the asyncio event loop.

Run with::

    python -m burrito.bot
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from burrito.bot.core import BurritoBot
from burrito.config import load_config
from burrito.database.engine import create_db_engine, init_db
from burrito.services.burrito_service import BurritoService
from burrito.services.store import build_store

logger = logging.getLogger("burrito")


def main() -> None:
    """Bootstrap and run the Burrito bot."""

    # 1. Environment variables (secrets).
    load_dotenv()

    # 2. Soft configuration + logging.
    cfg = load_config(os.getenv("BURRITO_CONFIG", "config.yaml"))
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.info("Config loaded: bot=%s store=%s", cfg.bot_name, cfg.store)

    token = os.getenv("DISCORD_TOKEN")
    if not token or token == "your-discord-bot-token-here":
        logger.critical(
            "DISCORD_TOKEN is not set.  "
            "Copy .env.example → .env and paste your bot token."
        )
        sys.exit(1)

    # 3. Store.
    engine = None
    if cfg.store == "database":
        engine = create_db_engine()
        init_db(engine)
    store = build_store(cfg, engine)

    # 4. Service + bot.
    service = BurritoService(store, auto_admin_on_join=cfg.auto_admin_on_join)
    bot = BurritoBot(cfg=cfg, service=service)

    # 5. Run (blocks until Ctrl+C or SIGTERM).
    logger.info("Starting Burrito bot…")
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
