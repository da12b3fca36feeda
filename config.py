"""
Centralized configuration for the pickup-game draft bot.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_choice(env_var: str, default: str, choices: set[str]) -> str:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Game mode bounds (capacity must also be even)
GAME_MODE_MIN_CAPACITY = 2
GAME_MODE_MAX_CAPACITY = 24

# Auto captain countdown: random captains are assigned once the deadline passes
AUTO_CAPTAIN_ENABLED = _parse_bool("AUTO_CAPTAIN_ENABLED", True)
AUTO_CAPTAIN_DEADLINE_SECONDS = _parse_float("AUTO_CAPTAIN_DEADLINE_SECONDS", 30.0)
AUTO_CAPTAIN_TICK_SECONDS = _parse_float("AUTO_CAPTAIN_TICK_SECONDS", 1.0)

# "restore" moves picked players back to the roster and restarts the countdown;
# "history" only clears pick history and drops drafts that still have players on teams
DRAFT_RESET_MODE = _parse_choice("DRAFT_RESET_MODE", "restore", {"history", "restore"})

# Completed drafts kept in memory per guild (oldest are discarded first)
COMPLETED_DRAFT_HISTORY_LIMIT = _parse_int("COMPLETED_DRAFT_HISTORY_LIMIT", 20)
