"""
Process-wide logging configuration.

Call configure_logging() once at startup, before importing discord, so
discord.py does not install its own handler first.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _PyNaClFilter(logging.Filter):
    """Filter out the PyNaCl warning from discord.py (voice support isn't needed)."""

    def filter(self, record):
        return "PyNaCl is not installed" not in record.getMessage()


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Configure the root logger and return the application logger.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level. Unknown
               names fall back to INFO.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        force=True,  # Override any existing handlers (e.g., from discord.py)
    )
    logging.getLogger("discord.client").addFilter(_PyNaClFilter())

    # discord.py adds its own handler to the 'discord' logger on import
    discord_logger = logging.getLogger("discord")
    discord_logger.handlers.clear()
    discord_logger.setLevel(logging.INFO)

    return logging.getLogger("pug_bot")
