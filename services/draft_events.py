"""
Draft lifecycle signals.

Listeners are called after the store lock has been released, so they may
post messages or start background tasks.
"""

import logging
from typing import Callable

from domain.models.draft import DraftSession

logger = logging.getLogger("pug_bot.services.draft_events")

DraftListener = Callable[[int, DraftSession], None]


class DraftEvents:
    """Registry of listeners for the two draft transitions."""

    def __init__(self):
        self._drafting_started: list[DraftListener] = []
        self._completed: list[DraftListener] = []

    def on_drafting_started(self, listener: DraftListener) -> None:
        """Call `listener(guild_id, session)` when a draft's second captain is set."""
        self._drafting_started.append(listener)

    def on_completed(self, listener: DraftListener) -> None:
        """Call `listener(guild_id, session)` when both teams are full."""
        self._completed.append(listener)

    def emit_drafting_started(self, guild_id: int, session: DraftSession) -> None:
        logger.info(f"Drafting started for {session.session_id} (guild {guild_id})")
        self._emit(self._drafting_started, guild_id, session)

    def emit_completed(self, guild_id: int, session: DraftSession) -> None:
        self._emit(self._completed, guild_id, session)

    def _emit(self, listeners: list[DraftListener], guild_id: int, session: DraftSession) -> None:
        for listener in list(listeners):
            try:
                listener(guild_id, session)
            except Exception:
                logger.exception(
                    f"Draft listener {getattr(listener, '__name__', listener)!r} failed "
                    f"for {session.session_id}"
                )
