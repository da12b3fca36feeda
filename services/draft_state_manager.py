"""
Draft state management.

Handles in-memory state for filled and completed drafts, separated from
business logic. Supports several filled drafts per guild: they are picked one
at a time, front of the queue first.

Thread Safety:
    All state sits behind a single ReadWriteLock. Readers (snapshots, views)
    share it; mutations go through guild_drafts(), which holds the write lock
    for the whole block. Never perform I/O while inside guild_drafts().
"""

import logging
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generator

from config import COMPLETED_DRAFT_HISTORY_LIMIT
from domain.models.draft import DraftSession, SessionSnapshot
from services.interfaces import IPersistedSessionReader
from utils.guild import normalize_guild_id
from utils.rw_lock import ReadWriteLock

logger = logging.getLogger("pug_bot.services.draft_state_manager")


@dataclass
class GuildDrafts:
    """
    Drafts belonging to one guild.

    pending: filled drafts waiting to be (or being) picked; front is current
    completed: finished drafts, most recent last
    """

    guild_id: int
    history_limit: int = COMPLETED_DRAFT_HISTORY_LIMIT
    pending: deque[DraftSession] = field(default_factory=deque)
    completed: list[DraftSession] = field(default_factory=list)

    @property
    def current(self) -> DraftSession | None:
        return self.pending[0] if self.pending else None

    def enqueue(self, session: DraftSession) -> int:
        """Queue a filled draft. Returns its position (0 = picking now)."""
        self.pending.append(session)
        return len(self.pending) - 1

    def complete_current(self) -> DraftSession:
        """Move the current draft into completed history."""
        session = self.pending.popleft()
        self.completed.append(session)
        if len(self.completed) > self.history_limit:
            del self.completed[: len(self.completed) - self.history_limit]
        logger.info(f"Draft {session.session_id} completed (guild {self.guild_id})")
        return session

    def cancel_current(self) -> DraftSession | None:
        if not self.pending:
            return None
        session = self.pending.popleft()
        logger.info(f"Draft {session.session_id} cancelled (guild {self.guild_id})")
        return session

    def discard(self, session: DraftSession) -> bool:
        """Drop a specific draft from the pending queue."""
        for queued in self.pending:
            if queued.session_id == session.session_id:
                self.pending.remove(queued)
                return True
        return False

    def restore_latest_completed(self) -> DraftSession | None:
        """Pull the most recently completed draft back to the front of the queue."""
        if not self.completed:
            return None
        session = self.completed.pop()
        self.pending.appendleft(session)
        logger.info(f"Draft {session.session_id} restored from history (guild {self.guild_id})")
        return session


class DraftStateManager(IPersistedSessionReader):
    """
    Manages in-memory state for drafts.

    Responsibilities:
    - Store filled drafts per guild (queue, front is current)
    - Keep a bounded history of completed drafts
    - Serve read-only snapshots to the auto captain watcher

    Structure: dict[guild_id, GuildDrafts]
    """

    def __init__(self, completed_history_limit: int = COMPLETED_DRAFT_HISTORY_LIMIT):
        self._guilds: dict[int, GuildDrafts] = {}
        self._lock = ReadWriteLock()
        self.completed_history_limit = completed_history_limit

    @contextmanager
    def guild_drafts(self, guild_id: int | None) -> Generator[GuildDrafts, None, None]:
        """
        Hold the write lock and yield the guild's drafts for mutation.

        Example:
            with state_manager.guild_drafts(guild_id) as drafts:
                session = drafts.current
                outcome = session.pick(3)
        """
        normalized = normalize_guild_id(guild_id)
        with self._lock.write():
            drafts = self._guilds.get(normalized)
            if drafts is None:
                drafts = GuildDrafts(guild_id=normalized, history_limit=self.completed_history_limit)
                self._guilds[normalized] = drafts
            yield drafts

    @contextmanager
    def read_guild_drafts(self, guild_id: int | None) -> Generator[GuildDrafts | None, None, None]:
        """Hold the read lock and yield the guild's drafts (None if the guild has none)."""
        with self._lock.read():
            yield self._guilds.get(normalize_guild_id(guild_id))

    def add_session(self, guild_id: int | None, session: DraftSession) -> int:
        """
        Queue a new draft for a guild.

        Returns:
            Queue position (0 means the draft is current)
        """
        with self.guild_drafts(guild_id) as drafts:
            position = drafts.enqueue(session)
        logger.info(
            f"Queued draft {session.session_id} for {session.game_mode.label} "
            f"(guild {normalize_guild_id(guild_id)}, position {position})"
        )
        return position

    def get_session(self, guild_id: int | None = None) -> DraftSession | None:
        """
        Get the draft currently being picked in a guild.

        The returned object is live; mutate it only inside guild_drafts().
        """
        with self.read_guild_drafts(guild_id) as drafts:
            return drafts.current if drafts else None

    def has_active_draft(self, guild_id: int | None = None) -> bool:
        return self.get_session(guild_id) is not None

    def get_pending_count(self, guild_id: int | None = None) -> int:
        with self.read_guild_drafts(guild_id) as drafts:
            return len(drafts.pending) if drafts else 0

    def get_completed(self, guild_id: int | None = None, limit: int | None = None) -> list[DraftSession]:
        """Completed drafts for a guild, most recent first."""
        with self.read_guild_drafts(guild_id) as drafts:
            if drafts is None:
                return []
            recent = list(reversed(drafts.completed))
        return recent[:limit] if limit is not None else recent

    def clear_state(self, guild_id: int | None) -> list[DraftSession]:
        """
        Drop every pending draft for a guild.

        Returns:
            The drafts that were dropped
        """
        normalized = normalize_guild_id(guild_id)
        with self.guild_drafts(normalized) as drafts:
            dropped = list(drafts.pending)
            drafts.pending.clear()
        if dropped:
            logger.info(f"Cleared {len(dropped)} pending draft(s) for guild {normalized}")
        return dropped

    def fetch_current(self, session_key: int | None) -> SessionSnapshot | None:
        """Snapshot of the guild's current draft, or None if there is none."""
        with self.read_guild_drafts(session_key) as drafts:
            if drafts is None or drafts.current is None:
                return None
            return drafts.current.snapshot()
