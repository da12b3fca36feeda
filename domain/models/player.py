"""
Player domain model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone


@dataclass(frozen=True, eq=False)
class Player:
    """
    A participant pulled out of a filled queue.

    Two players are the same player when their Discord IDs match; the join
    timestamp is informational and only used by queue collaborators.
    """

    discord_id: int
    joined_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def time_elapsed_since_join(self, now: datetime | None = None) -> timedelta:
        """Time since this player joined the queue."""
        return (now or datetime.now(timezone.utc)) - self.joined_at

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Player):
            return self.discord_id == other.discord_id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.discord_id)
