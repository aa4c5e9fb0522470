"""
burrito.engine.identity — Pseudo-identities for typed names
============================================================

When someone writes ``give Sam a burrito`` there is no platform user
behind "Sam", only text.  We derive a stable id from the name so the
same spelling always lands on the same stats entry.  Two people with the
same name share an id, and one person typed two ways gets two ids.

Swap :func:`synthesize_user_id` for a directory lookup when one exists.
"""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")

NAME_ID_PREFIX = "demo-user-"


def synthesize_user_id(name: str) -> str:
    """``"Mary Jane"`` → ``"demo-user-mary-jane"``."""
    return NAME_ID_PREFIX + _WHITESPACE.sub("-", name.strip().lower())
