"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts between the draft services
and the collaborators they are wired to (session storage, the channel the
draft is announced in, match history).

Usage:
    class MyAnnouncer(IAnnouncer):
        async def post(self, text: str) -> Any:
            ...

Benefits:
- Clear contracts for service methods
- Easier mocking in tests
- Documentation of expected behavior
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domain.models.draft import CompletedDraft, DraftSession, PickOutcome, SessionSnapshot
    from domain.models.game_mode import GameMode
    from domain.models.player import Player
    from services.captain_service import CaptainAssignment
    from services.draft_service import DraftView
    from services.result import Result


class IPersistedSessionReader(ABC):
    """Read-only view of the current draft for a session key."""

    @abstractmethod
    def fetch_current(self, session_key: int | None) -> "SessionSnapshot | None":
        """Snapshot of the current draft, or None when no draft is active."""
        ...


class IAnnouncer(ABC):
    """Posts and edits short status messages in the draft's channel."""

    @abstractmethod
    async def post(self, text: str) -> Any:
        """Post a message. Returns a handle accepted by edit()."""
        ...

    @abstractmethod
    async def edit(self, handle: Any, text: str) -> None:
        """Replace the text of a previously posted message."""
        ...


class IMatchHistory(ABC):
    """Receives drafts once both teams are full."""

    @abstractmethod
    def record_completed(self, draft: "CompletedDraft") -> None:
        """Store the final teams of a completed draft."""
        ...


class ICaptainService(ABC):
    """Interface for captain assignment."""

    @abstractmethod
    def assign_captain(
        self,
        guild_id: int | None,
        target_id: int | None = None,
        expected_thread_key: str | None = None,
    ) -> "Result[CaptainAssignment]":
        """Make `target_id` captain, or draw random captains when it is omitted."""
        ...


class IDraftService(ABC):
    """Interface for the draft lifecycle."""

    @abstractmethod
    def create_session(
        self,
        guild_id: int | None,
        game_mode: "GameMode",
        players: "list[Player | int]",
        thread_key: str | None = None,
    ) -> "Result[DraftSession]":
        """Start a draft for a filled queue."""
        ...

    @abstractmethod
    def set_captain(self, guild_id: int | None, player_id: int) -> "Result[CaptainAssignment]":
        """Volunteer a player as captain."""
        ...

    @abstractmethod
    def auto_captain(
        self, guild_id: int | None, expected_thread_key: str | None = None
    ) -> "Result[CaptainAssignment]":
        """Fill the open captain slots at random, optionally only for one thread's draft."""
        ...

    @abstractmethod
    def pick(
        self, guild_id: int | None, player_number: int, picker_id: int | None = None
    ) -> "Result[PickOutcome]":
        """Pick one undrafted player by number."""
        ...

    @abstractmethod
    def reset(self, guild_id: int | None) -> "Result[DraftSession]":
        """Reset the current (or most recently completed) draft."""
        ...

    @abstractmethod
    def get_draft_view(self, guild_id: int | None) -> "DraftView | None":
        """Read-only view of the current draft."""
        ...
