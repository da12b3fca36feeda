"""
Team colour domain model.
"""

from enum import Enum


class TeamColor(Enum):
    """The two sides of a pickup game."""

    BLUE = "blue"
    RED = "red"

    @property
    def opposite(self) -> "TeamColor":
        return TeamColor.RED if self is TeamColor.BLUE else TeamColor.BLUE

    @property
    def label(self) -> str:
        return self.value.capitalize()
