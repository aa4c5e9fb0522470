"""
burrito.services.messages — Reply text builders
================================================

All user-facing wording lives here so the service layer only supplies
data.  Replies are plain text with light Markdown (``**bold**``), which
renders on Discord and degrades gracefully elsewhere.
"""

from __future__ import annotations

from burrito.constants import BURRITO_EMOJI, burritos

GENERIC_ERROR = "Sorry, I encountered an error. Please try again!"

SELF_AWARD_REJECTED = "\U0001f6ab Nice try, but you can't give yourself a burrito!"
SELF_EMOJI_AWARD_REJECTED = "\U0001f6ab Nice try, but you can't give yourself burritos!"

NOT_ADMIN = (
    "❌ You are not an admin of this burrito tracking system.\n\n"
    '\U0001f4a1 **Tip:** Use "/makeadmin" to become an admin, '
    "or ask an existing admin to add you."
)

ADMIN_HELP = (
    "❌ **Admin Commands:**\n"
    "• `/admin report daily/weekly/monthly/yearly` - Generate reports\n"
    "• `/admin stats @username` - Get user stats\n"
    "• `/admin add @username` - Add admin (needs setup)\n"
    "• `/admin leaderboard` - Show leaderboard"
)

INVALID_PERIOD = (
    "❌ Please specify a valid period: daily, weekly, monthly, or yearly\n"
    "Example: `/admin report weekly`"
)

STATS_USAGE = "❌ Please mention a user to get stats: `/admin stats @username`"
ADD_USAGE = "❌ Please mention a user to add as admin: `/admin add @username`"
ADD_NEEDS_SETUP = (
    "⚠️ Admin management requires integration with a user directory. "
    "This feature needs additional setup."
)

GROUP_HELP = (
    "\U0001f916 **Burrito Bot Commands:**\n\n"
    "**Awarding Burritos:**\n"
    '• "give @username a burrito" - Award with @mention\n'
    '• "give John a burrito" - Award by name\n'
    f'• "give Sarah a burrito {BURRITO_EMOJI * 3}" - Multiple burritos with emojis!\n'
    f'• "Great work Mike! {BURRITO_EMOJI * 2}" - Emoji-only awards\n'
    '• "give Sarah a burrito for great work" - Award with reason\n\n'
    "**Stats:**\n"
    '• "my burritos" - See your burrito count\n'
    '• "burrito leaderboard" - See top burrito earners\n\n'
    "**Admin Commands:**\n"
    '• "/admin report daily/weekly/monthly/yearly" - Get reports\n'
    '• "/admin stats @username" - Get user stats\n'
    '• "/admin leaderboard" - Show leaderboard\n\n'
    f"{BURRITO_EMOJI} More emojis = more burritos!"
)

PERSONAL_HELP = (
    "\U0001f916 **Burrito Bot - Personal Chat:**\n\n"
    "**Awarding Burritos:**\n"
    '• "give John a burrito" - Award by name\n'
    f'• "give Sarah a burrito {BURRITO_EMOJI * 3}" - Multiple burritos with emojis!\n'
    f'• "Amazing work Alice! {BURRITO_EMOJI * 2}" - Emoji-only awards\n'
    '• "give Mike a burrito for excellent work" - Award with reason\n\n'
    "**Stats & Info:**\n"
    '• "my burritos" - Check your burrito count\n'
    '• "burrito leaderboard" - See top burrito earners\n'
    '• "/makeadmin" - Become an admin\n'
    '• "/debug" - Show debug info\n\n'
    "**Admin Commands:**\n"
    '• "/admin report daily/weekly/monthly/yearly" - Get reports\n'
    '• "/admin stats username" - Get user stats\n'
    '• "/admin leaderboard" - Show leaderboard\n\n'
    f"{BURRITO_EMOJI} More emojis = more burritos!"
)

ADMIN_HELP_SUFFIX = "\n\n\U0001f451 **You are an admin!** You can use all admin commands."

GROUP_GREETING = (
    f"{BURRITO_EMOJI} Hello! I'm here to help track burritos in your team. "
    'Say "help" to see what I can do!'
)
PERSONAL_GREETING = (
    f"{BURRITO_EMOJI} Hello! Add me to a group chat to start tracking burritos for your team!"
)

GROUP_FALLBACK = (
    f'{BURRITO_EMOJI} Try saying "help" to see what I can do, or give burritos: '
    '"give John a burrito", "give @user a burrito", '
    f'or "Great work Sarah! {BURRITO_EMOJI * 3}"!'
)
PERSONAL_FALLBACK = (
    f"{BURRITO_EMOJI} **Personal Chat Commands:**\n"
    '• "give John a burrito" - Award burritos by name!\n'
    f'• "give Alice a burrito {BURRITO_EMOJI * 3}" - Multiple burritos with emojis!\n'
    f'• "Amazing work Bob! {BURRITO_EMOJI * 2}" - Emoji-only awards\n'
    '• "help" - Show all commands\n'
    '• "my burritos" - Check your stats\n'
    '• "burrito leaderboard" - See rankings\n'
    '• "/makeadmin" - Become admin\n\n'
    f"\U0001f389 **More {BURRITO_EMOJI} emojis = more burritos!**"
)

WELCOME = (
    f"{BURRITO_EMOJI} **Welcome to Burrito Bot!** {BURRITO_EMOJI}\n\n"
    "I'm here to help track burritos in your team! Here's how to get started:\n\n"
    "**Award Burritos:**\n"
    '• Type: "give @username a burrito"\n'
    '• Add a reason: "give @username a burrito for great work!"\n\n'
    "**Check Stats:**\n"
    '• "my burritos" - See your burrito count\n'
    '• "burrito leaderboard" - See top earners\n\n'
    "**Admin Features:**\n"
    "• `/admin report daily/weekly/monthly/yearly`\n"
    "• `/admin stats @username`\n\n"
    "Start recognizing great work with burritos! \U0001f389"
)


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _chat_type(is_group: bool) -> str:
    return "Group Chat" if is_group else "Personal Chat"


def help_text(*, is_group: bool, is_admin: bool) -> str:
    text = GROUP_HELP if is_group else PERSONAL_HELP
    if is_admin:
        text += ADMIN_HELP_SUFFIX
    return text


def general_help_text(*, is_group: bool, is_admin: bool) -> str:
    """The ``commands`` card: everything on one page plus who you are."""
    return (
        f"{BURRITO_EMOJI} **Burrito Bot Help:**\n\n"
        "**Basic Commands:**\n"
        '• "hello" - Greet the bot\n'
        '• "help" - Show this message\n\n'
        "**Awarding Burritos:**\n"
        '• "give John a burrito" - Award by name (works everywhere!)\n'
        '• "give @username a burrito" - Award by mention (group chats)\n'
        f'• "give Sarah a burrito {BURRITO_EMOJI * 3}" - Multiple burritos with emojis!\n'
        f'• "Great job Mike! {BURRITO_EMOJI * 2}" - Emoji-only burrito awards\n'
        '• "give Sarah a burrito for great work" - Award with reason\n\n'
        "**Stats:**\n"
        '• "my burritos" - Check your count\n'
        '• "burrito leaderboard" - See rankings\n\n'
        "**Admin Commands:**\n"
        '• "/admin report daily" - Get reports\n'
        '• "/admin stats username" - User stats\n\n'
        f"\U0001f916 **Chat Type:** {_chat_type(is_group)}\n"
        f"\U0001f451 **Admin Status:** {_yes_no(is_admin)}\n\n"
        f"\U0001f4a1 **Pro Tip:** More {BURRITO_EMOJI} emojis = more burritos awarded!"
    )


def greeting_text(*, is_group: bool) -> str:
    return GROUP_GREETING if is_group else PERSONAL_GREETING


def fallback_text(*, is_group: bool) -> str:
    return GROUP_FALLBACK if is_group else PERSONAL_FALLBACK


def made_admin(user_name: str, user_id: str) -> str:
    return (
        f"\U0001f451 Success! You ({user_name}) are now an admin!\n"
        f"\U0001f194 Your User ID: {user_id}\n"
        "\U0001f527 You can now use all admin commands."
    )


def already_admin(user_name: str, user_id: str) -> str:
    return (
        f"\U0001f451 You ({user_name}) are already an admin!\n"
        f"\U0001f194 Your User ID: {user_id}"
    )


def debug_info(
    *,
    user_name: str,
    user_id: str,
    is_group: bool,
    conversation_id: str,
    is_admin: bool,
    admin_count: int,
) -> str:
    return (
        "\U0001f50d **Debug Info:**\n"
        f"\U0001f464 **User:** {user_name}\n"
        f"\U0001f194 **User ID:** {user_id}\n"
        f"\U0001f4ac **Chat Type:** {_chat_type(is_group)}\n"
        f"\U0001f5e8️ **Conversation ID:** {conversation_id}\n"
        f"\U0001f451 **Admin:** {_yes_no(is_admin)}\n"
        f"\U0001f4ca **Admins Count:** {admin_count}"
    )


def mention_award_confirmation(recipient: str, giver: str, reason: str | None) -> str:
    reason_text = f" for: {reason}" if reason else ""
    return (
        f"{BURRITO_EMOJI} Burrito awarded! {recipient} received a burrito "
        f"from {giver}{reason_text}"
    )


def name_award_confirmation(
    recipient: str,
    giver: str,
    quantity: int,
    emoji_count: int,
    reason: str | None,
    chat_label: str,
) -> str:
    reason_text = f" for: {reason}" if reason else ""
    plural = "s" if quantity != 1 else ""
    emoji_bonus = ""
    if emoji_count > 0:
        emoji_plural = "s" if emoji_count != 1 else ""
        emoji_bonus = (
            f" ({emoji_count} {BURRITO_EMOJI} emoji{emoji_plural} = {burritos(quantity)}!)"
        )
    return (
        f"{BURRITO_EMOJI} Burrito{plural} awarded in {chat_label}! {recipient} received "
        f"{burritos(quantity)} from {giver}{reason_text}{emoji_bonus}"
    )


def emoji_award_confirmation(recipient: str, giver: str, quantity: int, chat_label: str) -> str:
    emoji_plural = "s" if quantity != 1 else ""
    return (
        f"{BURRITO_EMOJI} Emoji burrito award in {chat_label}! {recipient} received "
        f"{burritos(quantity)} from {giver} ({quantity} {BURRITO_EMOJI} emoji{emoji_plural}!)"
    )


def recipient_total(recipient: str, total: int) -> str:
    return f"\U0001f3c6 {recipient} now has {burritos(total)}!"
