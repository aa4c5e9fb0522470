"""
Burrito Bot — Peer Recognition for Group Chats
===============================================
Lets members of a conversation award each other burritos, keeps per-user
totals, and gives admins daily/weekly/monthly/yearly reports.

Package layout::

    burrito/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Emoji, medals, stop words, text helpers
    ├── engine/
    │   ├── events.py      # IncomingMessage / Mention / MembersAdded
    │   ├── state.py       # Award, UserStats, ConversationState
    │   ├── ledger.py      # Award recording + stats bookkeeping
    │   ├── identity.py    # Pseudo-ids for name-only awards
    │   ├── parser.py      # Text → Intent (pure)
    │   ├── periods.py     # Period keys for reports
    │   └── reports.py     # Period reports, leaderboard, stats text
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # ORM models for the SQL store
    ├── services/
    │   ├── store.py           # ConversationStore backends
    │   ├── messages.py        # Canned reply text
    │   └── burrito_service.py # Intent dispatch + reply sequencing
    └── bot/
        ├── core.py        # Bot subclass, cog loader
        └── cogs/
            └── burritos.py  # Discord message → IncomingMessage
"""

__version__ = "0.1.0"
