"""
Discord adapter for the draft announcer.

Posts countdown and status messages into the draft's channel or thread.
"""

from __future__ import annotations

import discord

from services.interfaces import IAnnouncer

MESSAGE_LIMIT = 2000


def _fit(text: str) -> str:
    if len(text) <= MESSAGE_LIMIT:
        return text
    return text[: MESSAGE_LIMIT - 3] + "..."


class ChannelAnnouncer(IAnnouncer):
    """Announces into a discord.abc.Messageable (text channel, thread, DM)."""

    def __init__(
        self,
        channel: discord.abc.Messageable,
        allowed_mentions: discord.AllowedMentions | None = None,
    ):
        self.channel = channel
        # Ping players, never roles or @everyone
        self.allowed_mentions = allowed_mentions or discord.AllowedMentions(
            everyone=False, roles=False, users=True
        )

    async def post(self, text: str) -> discord.Message:
        return await self.channel.send(_fit(text), allowed_mentions=self.allowed_mentions)

    async def edit(self, handle: discord.Message, text: str) -> None:
        await handle.edit(content=_fit(text), allowed_mentions=self.allowed_mentions)
