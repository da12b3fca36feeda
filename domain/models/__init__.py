"""
Domain models - pure data structures representing business entities.

Note: the draft session lives in domain/models/draft.py and is imported from
there directly: from domain.models.draft import DraftSession
"""

from domain.models.game_mode import GameMode
from domain.models.player import Player
from domain.models.team import TeamColor

__all__ = ["GameMode", "Player", "TeamColor"]
