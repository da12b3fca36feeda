"""
Captain selection policy.

Contains pure domain logic deciding who becomes captain of which team.
No side effects: the plan is applied to the session by the captain service.
"""

import random
from dataclasses import dataclass

from domain.exceptions import (
    CaptainSpotsFilledError,
    ForeignUserError,
    InvalidPlayerNumberError,
    IsCaptainAlreadyError,
    NoCaptainCandidatesError,
)
from domain.models.draft import DraftSession
from domain.models.team import TeamColor


@dataclass(frozen=True)
class CaptainPick:
    """One planned captain assignment."""

    player_id: int
    team: TeamColor


class CaptainSelectionService:
    """
    Pure domain logic for captain assignment.

    Handles:
    - Explicit volunteers (/captain): coin flip for colour when both slots are open
    - Random captains (/autocaptain, countdown expiry): uniform draw among
      undrafted players who have not opted out
    """

    def __init__(self, rng: random.Random | None = None):
        """
        Initialize captain selection.

        Args:
            rng: Random source for draws and coin flips. Inject a seeded
                 random.Random for reproducible tests.
        """
        self.rng = rng or random.Random()

    def plan(self, session: DraftSession, target_id: int | None = None) -> list[CaptainPick]:
        """
        Decide the captain assignments for a session.

        Algorithm:
        - Both slots filled: error carrying both captains
        - One slot open: the target (or a random eligible player) takes it
        - Both slots open: the target gets a coin-flipped colour, or two
          random eligible players are drawn and a coin flip decides who is blue

        Args:
            session: Draft session to plan for (not mutated)
            target_id: Optional Discord ID of a volunteer

        Returns:
            Ordered list of CaptainPick to apply

        Raises:
            CaptainSpotsFilledError: Both teams already have captains
            IsCaptainAlreadyError: Target already captains a team
            ForeignUserError: Target is not in the draft
            InvalidPlayerNumberError: Target has already been picked
            NoCaptainCandidatesError: Not enough eligible players for a random draw
        """
        blue_captain, red_captain = session.blue_captain, session.red_captain
        if blue_captain is not None and red_captain is not None:
            raise CaptainSpotsFilledError(blue_captain, red_captain)

        open_teams = [
            team for team in (TeamColor.BLUE, TeamColor.RED) if session.captain_of(team) is None
        ]

        if target_id is not None:
            self._validate_target(session, target_id)
            if len(open_teams) == 1:
                return [CaptainPick(target_id, open_teams[0])]
            return [CaptainPick(target_id, self.coinflip())]

        candidates = self.eligible_candidates(session)
        if len(open_teams) == 1:
            if not candidates:
                raise NoCaptainCandidatesError("No players are available to be captain.")
            return [CaptainPick(self.rng.choice(candidates), open_teams[0])]

        if len(candidates) < 2:
            raise NoCaptainCandidatesError(
                f"Need at least 2 players available to captain, but only {len(candidates)} are."
            )
        first, second = self.rng.sample(candidates, 2)
        first_team = self.coinflip()
        return [CaptainPick(first, first_team), CaptainPick(second, first_team.opposite)]

    def eligible_candidates(self, session: DraftSession) -> list[int]:
        """Undrafted players who have not opted out of captaincy."""
        captains = {session.blue_captain, session.red_captain} - {None}
        return [
            entry.player_id
            for entry in session.roster
            if entry.player_id not in captains
            and entry.player_id not in session.captain_opt_outs
        ]

    def coinflip(self) -> TeamColor:
        """Flip a fair coin between the two colours."""
        return self.rng.choice((TeamColor.BLUE, TeamColor.RED))

    def _validate_target(self, session: DraftSession, target_id: int) -> None:
        if target_id == session.blue_captain:
            raise IsCaptainAlreadyError("You are already captain of blue team.")
        if target_id == session.red_captain:
            raise IsCaptainAlreadyError("You are already captain of red team.")
        if not session.contains_player(target_id):
            raise ForeignUserError("User trying to become captain is not a player in this pug.")
        if all(entry.player_id != target_id for entry in session.roster):
            raise InvalidPlayerNumberError("That player has already been picked for a team.")
