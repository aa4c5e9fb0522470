"""
burrito.database.models — SQLAlchemy 2.0 Data Models
=====================================================

Schema for the optional SQL conversation store.  The in-memory store
needs none of this.

Tables:
- conversations        — one row per chat context
- conversation_admins  — ordered admin list per conversation
- awards               — append-only burrito ledger
- user_stats           — per-conversation running totals
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Burrito ORM models."""


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------
class Conversation(Base):
    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    admins: Mapped[list[ConversationAdmin]] = relationship(
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="ConversationAdmin.position",
    )
    awards: Mapped[list[AwardRow]] = relationship(
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="AwardRow.seq",
    )
    user_stats: Mapped[list[UserStatsRow]] = relationship(
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="UserStatsRow.position",
    )

    def __repr__(self) -> str:
        return f"<Conversation id={self.id!r}>"


class ConversationAdmin(Base):
    __tablename__ = "conversation_admins"

    conversation_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("conversations.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    conversation: Mapped[Conversation] = relationship(back_populates="admins")


# ---------------------------------------------------------------------------
# Awards (append-only ledger)
# ---------------------------------------------------------------------------
class AwardRow(Base):
    __tablename__ = "awards"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Insertion order; timestamps can collide within one multi-burrito award
    seq: Mapped[int] = mapped_column(Integer, default=0)
    conversation_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    recipient_id: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient_name: Mapped[str] = mapped_column(String(255), nullable=False)
    giver_id: Mapped[str] = mapped_column(String(255), nullable=False)
    giver_name: Mapped[str] = mapped_column(String(255), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    conversation: Mapped[Conversation] = relationship(back_populates="awards")

    __table_args__ = (
        Index("ix_awards_conversation_seq", "conversation_id", "seq"),
        Index("ix_awards_timestamp", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<AwardRow id={self.id} {self.giver_name!r}→{self.recipient_name!r}>"


# ---------------------------------------------------------------------------
# UserStats (per-conversation counters)
# ---------------------------------------------------------------------------
class UserStatsRow(Base):
    __tablename__ = "user_stats"

    conversation_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("conversations.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_received: Mapped[int] = mapped_column(Integer, default=0)
    total_given: Mapped[int] = mapped_column(Integer, default=0)
    last_updated: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    # First-seen order, used as the leaderboard tie order
    position: Mapped[int] = mapped_column(Integer, default=0)

    conversation: Mapped[Conversation] = relationship(back_populates="user_stats")

    def __repr__(self) -> str:
        return f"<UserStatsRow user={self.user_id!r} received={self.total_received}>"
