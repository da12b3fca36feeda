"""
Game mode domain model.
"""

from dataclasses import dataclass, field

from config import GAME_MODE_MAX_CAPACITY, GAME_MODE_MIN_CAPACITY


@dataclass(frozen=True, eq=False)
class GameMode:
    """
    A registered game mode, e.g. "CTF" with 10 players.

    Identity is the lower-cased label: "CTF" and "ctf" are the same mode.
    """

    label: str
    capacity: int
    key: str = field(init=False)

    def __post_init__(self):
        if not self.label or not self.label.strip():
            raise ValueError("Game mode label cannot be empty.")
        if (
            not isinstance(self.capacity, int)
            or self.capacity % 2 != 0
            or not GAME_MODE_MIN_CAPACITY <= self.capacity <= GAME_MODE_MAX_CAPACITY
        ):
            raise ValueError(
                f"Game mode capacity must be an even number between "
                f"{GAME_MODE_MIN_CAPACITY} and {GAME_MODE_MAX_CAPACITY}, got {self.capacity}."
            )
        object.__setattr__(self, "key", self.label.lower())

    @property
    def team_size(self) -> int:
        return self.capacity // 2

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GameMode):
            return self.key == other.key
        if isinstance(other, str):
            return self.key == other.lower()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key
