"""
Main Discord bot entry for the pickup game draft engine.

Command handlers live outside this repository; they reach the draft services
through the attributes set by ServiceContainer.expose_to_bot().
"""

from config import DISCORD_BOT_TOKEN, LOG_LEVEL
from infrastructure.logging_setup import configure_logging

# Configure logging BEFORE importing discord to prevent duplicate handlers
logger = configure_logging(LOG_LEVEL)

# Now import discord after logging is configured
import discord
from discord.ext import commands

from domain.models.draft import DraftSession
from infrastructure.service_container import ServiceContainer
from utils.discord_announcer import ChannelAnnouncer

# Bot setup

intents = discord.Intents.default()
intents.members = True

bot = commands.Bot(command_prefix="!", intents=intents)

# Lazy-initialized service container
_container: ServiceContainer | None = None


def announcer_for(guild_id: int, session: DraftSession) -> ChannelAnnouncer | None:
    """Announce in the channel or thread the draft was started from."""
    try:
        channel_id = int(session.thread_key)
    except (TypeError, ValueError):
        return None
    channel = bot.get_channel(channel_id)
    if channel is None:
        logger.debug(f"Channel {channel_id} for draft {session.session_id} not cached")
        return None
    return ChannelAnnouncer(channel)


async def _init_services():
    """Initialize all services via ServiceContainer (lazy, idempotent)."""
    global _container

    if _container is not None:
        return

    _container = ServiceContainer(announcer_provider=announcer_for)
    await _container.initialize()
    _container.expose_to_bot(bot)


@bot.event
async def setup_hook():
    await _init_services()


@bot.event
async def on_ready():
    """Called when bot is ready."""
    logger.info(f"{bot.user} connected. Guilds: {len(bot.guilds)}")


def main():
    """Run the bot."""
    if not DISCORD_BOT_TOKEN:
        print("ERROR: DISCORD_BOT_TOKEN not found!")
        return

    try:
        # Pass log_handler=None to prevent discord.py from adding its own handler
        bot.run(DISCORD_BOT_TOKEN, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
    except Exception as exc:
        logger.error(f"Bot crashed: {exc}", exc_info=True)


if __name__ == "__main__":
    main()
