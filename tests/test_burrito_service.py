"""
tests/test_burrito_service.py — Dialogue Orchestrator Tests
============================================================

End-to-end through :class:`BurritoService` with the in-memory store and
a recording reply sink.
"""

from __future__ import annotations

import asyncio

from conftest import ReplyRecorder, make_message, run_async

from burrito.engine.events import MembersAdded, Mention
from burrito.services import messages
from burrito.services.burrito_service import BurritoService
from burrito.services.store import InMemoryConversationStore


class CountingStore(InMemoryConversationStore):
    def __init__(self) -> None:
        super().__init__()
        self.saves = 0

    def save(self, state) -> None:
        self.saves += 1
        super().save(state)


class BrokenStore:
    def get(self, conversation_id):
        raise RuntimeError("disk on fire")

    def save(self, state):
        raise AssertionError("save must not be reached")


def _say(service, replies, text, **kwargs):
    run_async(service.handle_message(make_message(text, **kwargs), replies))


# ---------------------------------------------------------------------------
# Awards
# ---------------------------------------------------------------------------
class TestAwards:
    def test_name_award_in_personal_chat(self, service, store, replies):
        _say(service, replies, "give Sam a burrito for great debugging")

        state = store.get("conv-1")
        assert len(state.awards) == 1
        award = state.awards[0]
        assert (award.recipient_id, award.giver_id) == ("demo-user-sam", "u-alice")
        assert award.reason == "great debugging"

        assert replies.sent == [
            "\U0001f32f Burrito awarded in personal chat! Sam received 1 burrito "
            "from Alice for: great debugging",
            "\U0001f3c6 Sam now has 1 burrito!",
        ]

    def test_name_award_with_emoji_bonus(self, service, store, replies):
        _say(service, replies, "give Sarah a burrito 🌯🌯🌯")
        assert store.get("conv-1").user_stats["demo-user-sarah"].total_received == 3
        assert "(3 🌯 emojis = 3 burritos!)" in replies.sent[0]
        assert replies.sent[1] == "\U0001f3c6 Sarah now has 3 burritos!"

    def test_emoji_award(self, service, store, replies):
        _say(service, replies, "Amazing work Tina! 🌯🌯")

        awards = store.get("conv-1").awards
        assert len(awards) == 2
        assert {a.reason for a in awards} == {"emoji award"}
        assert replies.sent[0].startswith("\U0001f32f Emoji burrito award in personal chat! Tina")
        assert replies.sent[1] == "\U0001f3c6 Tina now has 2 burritos!"

    def test_mention_award_in_group(self, service, store, replies):
        sam = Mention(text="<at>Sam Lee</at>", user_id="u-sam")
        _say(
            service, replies, "give <at>Sam Lee</at> a burrito for the demo",
            is_group=True, mentions=(sam,),
        )
        assert store.get("conv-1").user_stats["u-sam"].total_received == 1
        assert replies.sent[0] == (
            "\U0001f32f Burrito awarded! Sam Lee received a burrito from Alice for: the demo"
        )

    def test_totals_accumulate(self, service, replies):
        _say(service, replies, "give Sam a burrito")
        _say(service, replies, "give Sam a burrito", user_id="u-bob", user_name="Bob")
        assert replies.sent[-1] == "\U0001f3c6 Sam now has 2 burritos!"


class TestSelfAward:
    def test_by_name(self, service, store, replies):
        _say(service, replies, "give alice a burrito")
        assert replies.sent == [messages.SELF_AWARD_REJECTED]
        assert store.get("conv-1").awards == []

    def test_by_mention_id(self, service, store, replies):
        me = Mention(text="<at>Ali</at>", user_id="u-alice")
        _say(service, replies, "give <at>Ali</at> a burrito", is_group=True, mentions=(me,))
        assert replies.sent == [messages.SELF_AWARD_REJECTED]
        assert store.get("conv-1").user_stats == {}

    def test_by_emoji(self, service, store, replies):
        _say(service, replies, "Alice 🌯🌯")
        assert replies.sent == [messages.SELF_EMOJI_AWARD_REJECTED]
        assert store.get("conv-1").awards == []


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class TestAdmin:
    def test_make_admin_is_idempotent(self, service, store, replies):
        _say(service, replies, "/makeadmin")
        _say(service, replies, "/makeadmin")

        assert store.get("conv-1").admins == ["u-alice"]
        assert replies.sent[0].startswith("\U0001f451 Success! You (Alice) are now an admin!")
        assert replies.sent[1].startswith("\U0001f451 You (Alice) are already an admin!")

    def test_non_admin_is_denied(self, service, store, replies):
        _say(service, replies, "give Sam a burrito", user_id="u-bob", user_name="Bob")
        before = list(store.get("conv-1").awards)

        _say(service, replies, "/admin report daily")

        assert replies.sent[-1] == messages.NOT_ADMIN
        assert store.get("conv-1").awards == before

    def test_report_for_admin(self, service, replies):
        _say(service, replies, "/makeadmin")
        _say(service, replies, "give Sam a burrito", user_id="u-bob", user_name="Bob")
        _say(service, replies, "/admin report daily")

        report = replies.sent[-1]
        assert report.startswith("\U0001f4ca **Daily Burrito Report**")
        assert "\U0001f947 Sam: 1 burrito" in report
        assert "\U0001f947 Bob: 1 burrito given" in report

    def test_report_with_bad_period(self, service, replies):
        _say(service, replies, "/makeadmin")
        _say(service, replies, "/admin report hourly")
        assert replies.sent[-1] == messages.INVALID_PERIOD

    def test_stats_and_usage(self, service, replies):
        _say(service, replies, "/makeadmin")
        _say(service, replies, "give Sam a burrito")
        _say(service, replies, "/admin stats sam")
        assert "Burritos Received: 1" in replies.sent[-1]

        _say(service, replies, "/admin stats")
        assert replies.sent[-1] == messages.STATS_USAGE

    def test_add_needs_setup(self, service, replies):
        _say(service, replies, "/makeadmin")
        _say(service, replies, "/admin add Sam")
        assert replies.sent[-1] == messages.ADD_USAGE
        _say(service, replies, "/admin add <at>Sam</at>")
        assert replies.sent[-1] == messages.ADD_NEEDS_SETUP

    def test_unknown_subcommand_shows_admin_help(self, service, replies):
        _say(service, replies, "/makeadmin")
        _say(service, replies, "/admin purge")
        assert replies.sent[-1] == messages.ADMIN_HELP

    def test_debug_reports_admin_status(self, service, replies):
        _say(service, replies, "/debug", is_group=True)
        assert "**Admin:** No" in replies.sent[-1]
        assert "**Chat Type:** Group Chat" in replies.sent[-1]
        assert "**Admins Count:** 0" in replies.sent[-1]


# ---------------------------------------------------------------------------
# Queries and small talk
# ---------------------------------------------------------------------------
class TestQueries:
    def test_my_burritos_round_trip(self, service, replies):
        _say(service, replies, "my burritos")
        assert "haven't received any burritos yet" in replies.sent[-1]

        _say(service, replies, "give Alice a burrito", user_id="u-bob", user_name="Bob")
        # Recipient id is synthesized from the name, not the real user id
        _say(service, replies, "my burritos", user_id="demo-user-alice")
        assert "received 1 burrito and given 0 burritos" in replies.sent[-1]

    def test_leaderboard(self, service, replies):
        _say(service, replies, "burrito leaderboard")
        assert replies.sent[-1].startswith("\U0001f32f No burritos have been awarded yet!")

    def test_help_varies_by_chat_and_admin(self, service, replies):
        _say(service, replies, "help", is_group=True)
        assert replies.sent[-1] == messages.GROUP_HELP

        _say(service, replies, "/makeadmin")
        _say(service, replies, "help")
        assert replies.sent[-1] == messages.PERSONAL_HELP + messages.ADMIN_HELP_SUFFIX

    def test_general_help(self, service, replies):
        _say(service, replies, "commands", is_group=True)
        assert "**Chat Type:** Group Chat" in replies.sent[-1]

    def test_greeting_and_fallback(self, service, replies):
        _say(service, replies, "hello")
        assert replies.sent[-1] == messages.PERSONAL_GREETING
        _say(service, replies, "lunch?", is_group=True)
        assert replies.sent[-1] == messages.GROUP_FALLBACK


# ---------------------------------------------------------------------------
# Persistence and failure isolation
# ---------------------------------------------------------------------------
class TestPersistence:
    def test_saves_only_after_mutation(self, replies):
        store = CountingStore()
        service = BurritoService(store)

        _say(service, replies, "help")
        _say(service, replies, "burrito leaderboard")
        assert store.saves == 0

        _say(service, replies, "give Sam a burrito")
        _say(service, replies, "/makeadmin")
        assert store.saves == 2

    def test_sql_store_behind_service(self, db_engine, replies):
        from burrito.services.store import SqlConversationStore

        service = BurritoService(SqlConversationStore(db_engine))
        _say(service, replies, "give Sam a burrito")
        _say(service, replies, "give Sam a burrito", user_id="u-bob", user_name="Bob")
        assert replies.sent[-1] == "\U0001f3c6 Sam now has 2 burritos!"

    def test_store_error_becomes_apology(self, replies):
        service = BurritoService(BrokenStore())
        _say(service, replies, "give Sam a burrito")
        assert replies.sent == [messages.GENERIC_ERROR]

    def test_next_message_still_handled(self, service, store, replies):
        calls = []

        async def flaky_send(text: str) -> None:
            calls.append(text)
            if len(calls) == 1:
                raise ConnectionError("gateway hiccup")

        run_async(service.handle_message(make_message("hello"), flaky_send))
        run_async(service.handle_message(make_message("hello"), replies))

        assert calls == [messages.PERSONAL_GREETING, messages.GENERIC_ERROR]
        assert replies.sent == [messages.PERSONAL_GREETING]

    def test_concurrent_messages_in_one_conversation(self, service, store):
        replies = ReplyRecorder()

        async def both():
            await asyncio.gather(
                service.handle_message(make_message("give Sam a burrito"), replies),
                service.handle_message(
                    make_message("give Sam a burrito", user_id="u-bob", user_name="Bob"),
                    replies,
                ),
            )

        run_async(both())

        assert store.get("conv-1").user_stats["demo-user-sam"].total_received == 2
        # Each message's two replies stay together
        assert replies.sent[1] == "\U0001f3c6 Sam now has 1 burrito!"
        assert replies.sent[3] == "\U0001f3c6 Sam now has 2 burritos!"

    def test_conversations_are_independent(self, service, store, replies):
        _say(service, replies, "/makeadmin", conversation_id="conv-a")
        _say(service, replies, "/admin leaderboard", conversation_id="conv-b")
        assert replies.sent[-1] == messages.NOT_ADMIN
        assert store.get("conv-b").admins == []


# ---------------------------------------------------------------------------
# Members added
# ---------------------------------------------------------------------------
class TestMembersAdded:
    def test_bootstraps_first_admin_and_welcomes(self, service, store, replies):
        run_async(service.handle_members_added(
            MembersAdded(conversation_id="conv-1", actor_id="u-owner"), replies,
        ))
        assert store.get("conv-1").admins == ["u-owner"]
        assert replies.sent == [messages.WELCOME]

    def test_noop_when_admins_exist(self, service, store, replies):
        _say(service, replies, "/makeadmin")
        replies.sent.clear()

        run_async(service.handle_members_added(
            MembersAdded(conversation_id="conv-1", actor_id="u-owner"), replies,
        ))
        assert store.get("conv-1").admins == ["u-alice"]
        assert replies.sent == []

    def test_noop_for_personal_chat(self, service, store, replies):
        run_async(service.handle_members_added(
            MembersAdded(conversation_id="conv-1", actor_id="u-owner", is_group=False),
            replies,
        ))
        assert store.get("conv-1").admins == []
        assert replies.sent == []

    def test_welcome_without_promotion_when_disabled(self, store, replies):
        service = BurritoService(store, auto_admin_on_join=False)
        run_async(service.handle_members_added(
            MembersAdded(conversation_id="conv-1", actor_id="u-owner"), replies,
        ))
        assert store.get("conv-1").admins == []
        assert replies.sent == [messages.WELCOME]

    def test_unknown_actor_still_welcomes(self, service, store, replies):
        run_async(service.handle_members_added(MembersAdded(conversation_id="conv-1"), replies))
        assert store.get("conv-1").admins == []
        assert replies.sent == [messages.WELCOME]
