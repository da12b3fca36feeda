"""
Guild-related utilities.

Drafts are stored per guild; the guild ID doubles as the session key the
auto captain watcher polls with.
"""


def normalize_guild_id(guild_id: int | None) -> int:
    """
    Normalize guild ID for state lookups.

    Guild IDs are normalized to 0 for None values (DMs, tests).

    Examples:
        >>> normalize_guild_id(123456789)
        123456789
        >>> normalize_guild_id(None)
        0
    """
    return guild_id if guild_id is not None else 0


def mention(user_id: int | None) -> str:
    """Discord mention markup for a user ID."""
    return f"<@{user_id}>" if user_id is not None else "nobody"
