"""
burrito.config — YAML Configuration Loader
===========================================

Reads ``config.yaml`` for the soft settings of the bot (display name,
command prefix, which conversation store to use).  Secrets such as the
Discord token and the database URL stay in ``.env``.

Usage::

    from burrito.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.bot_name)          # "Burrito Bot"
    print(cfg.store)             # "memory"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

STORE_BACKENDS: tuple[str, ...] = ("memory", "database")


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BurritoConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    bot_name: str

    # Discord
    bot_prefix: str

    # Storage backend: "memory" (default) or "database" (needs DATABASE_URL)
    store: str = "memory"

    # Whoever adds the bot to a group with no admins becomes the first admin
    auto_admin_on_join: bool = True

    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> BurritoConfig:
    """Read *path* and return a :class:`BurritoConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    ValueError
        If ``store`` names an unknown backend.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    store = str(raw.get("store", "memory")).lower()
    if store not in STORE_BACKENDS:
        raise ValueError(
            f"Unknown store backend {store!r}; expected one of {STORE_BACKENDS}"
        )

    return BurritoConfig(
        bot_name=raw["bot_name"],
        bot_prefix=raw["bot_prefix"],
        store=store,
        auto_admin_on_join=bool(raw.get("auto_admin_on_join", True)),
        log_level=str(raw.get("log_level", "INFO")).upper(),
    )
