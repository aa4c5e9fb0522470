"""
burrito.database.engine — Database Connection & Async Helper
=============================================================

Only the SQL conversation store touches the database.  SQLAlchemy is
synchronous, so the service layer reaches every store through
:func:`run_db`, which ships the call to a worker thread and keeps the
bot's event loop responsive.

Usage::

    from burrito.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    # Inside an async method:
    state = await run_db(store.get, conversation_id)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from burrito.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` from *url* or ``DATABASE_URL``.

    Raises
    ------
    RuntimeError
        If neither is set.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Set it in .env or switch config.yaml to `store: memory`."
        )

    engine = create_engine(
        url,
        echo=False,
        pool_pre_ping=True,   # Reconnect stale connections automatically
        pool_recycle=3600,
    )
    logger.info("Database engine created → %s", engine.url.host or engine.url.drivername)
    return engine


def init_db(engine: Engine) -> None:
    """Create all tables.  Safe to call on every startup."""
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that commits on success and rolls back
    on exception.
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a synchronous store/DB function on a background thread."""
    return await asyncio.to_thread(func, *args, **kwargs)
