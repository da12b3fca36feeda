"""
Draft session domain model.

A draft session splits a filled roster into two teams. The first player
placed on each team is that team's captain; afterwards captains pick in the
order given by the session's pick sequence until the roster is empty.
"""

import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable

from domain.exceptions import (
    CaptainSpotsFilledError,
    ForeignUserError,
    HistoryInvariantViolation,
    InvalidPlayerNumberError,
    IsCaptainAlreadyError,
    PickSequenceInvariantViolation,
    PlayersExhaustedError,
    TeamHasCaptainError,
)
from domain.models.game_mode import GameMode
from domain.models.player import Player
from domain.models.team import TeamColor
from domain.services.pick_sequence import generate_pick_sequence, is_balanced


class DraftPhase(Enum):
    """Phases of the draft process."""

    AWAITING_CAPTAINS = "awaiting_captains"  # 0 or 1 captains assigned
    DRAFTING = "drafting"  # Both captains assigned, picks ongoing
    COMPLETED = "completed"  # Roster empty


class PickActionKind(Enum):
    CAPTAIN = "captain"
    PLAYER = "player"


class ResetMode(Enum):
    """
    How reset() treats team membership.

    HISTORY_ONLY clears pick history and leaves picked players on their teams.
    RESTORE_ROSTER also moves every team member back into the roster.
    """

    HISTORY_ONLY = "history"
    RESTORE_ROSTER = "restore"


class CaptainOutcome(Enum):
    """What happens after a captain has been set."""

    NEED_BLUE_CAPTAIN = "need_blue_captain"
    NEED_RED_CAPTAIN = "need_red_captain"
    START_PICKING_BLUE = "start_picking_blue"
    START_PICKING_RED = "start_picking_red"
    # Two player modes: both players become captains and the draft is over
    TWO_PLAYER_AUTO_PICK = "two_player_auto_pick"


class PickOutcome(Enum):
    """Which team picks next, or whether picking is complete."""

    BLUE_TURN = "blue_turn"
    RED_TURN = "red_turn"
    COMPLETE = "complete"


@dataclass(frozen=True)
class RosterEntry:
    """A drafted or undrafted player with their stable 1-based pick number."""

    number: int
    player_id: int


@dataclass(frozen=True)
class PickAction:
    """One entry of the pick history."""

    kind: PickActionKind
    team: TeamColor
    pick_number: int


@dataclass(frozen=True)
class SessionSnapshot:
    """The externally visible state the auto captain watcher polls."""

    last_reset: datetime | None
    open_captain_slots: int
    thread_key: str


@dataclass
class CompletedDraft:
    """Final teams of a finished draft, handed to match history."""

    game_mode: str
    thread_key: str
    created_at: datetime
    completed_at: datetime
    blue_captain_id: int
    blue_team_ids: list[int]
    red_captain_id: int
    red_team_ids: list[int]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary format for serialization."""
        return {
            "game_mode": self.game_mode,
            "thread_key": self.thread_key,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "blue_captain_id": self.blue_captain_id,
            "blue_team_ids": self.blue_team_ids,
            "red_captain_id": self.red_captain_id,
            "red_team_ids": self.red_team_ids,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DraftSession:
    """
    Represents one in-progress (or just completed) draft.

    Tracks:
    - The undrafted roster and both teams (captain = first member)
    - Pick sequence and pick history
    - Captain opt-outs for random captaining
    - Reset marker and owning thread, polled by the auto captain watcher

    Mutate only through set_captain(), pick() and reset(). Each of them
    validates fully before touching any state.
    """

    game_mode: GameMode
    pick_sequence: list[TeamColor]
    roster: list[RosterEntry]
    blue_team: list[RosterEntry] = field(default_factory=list)
    red_team: list[RosterEntry] = field(default_factory=list)
    pick_history: list[PickAction] = field(default_factory=list)
    captains_assigned: int = 0
    captain_opt_outs: set[int] = field(default_factory=set)
    last_reset: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    thread_key: str = ""

    def __post_init__(self):
        if not self.thread_key:
            self.thread_key = self.session_id

    @classmethod
    def create(
        cls,
        game_mode: GameMode,
        players: Iterable[Player | int],
        pick_sequence: list[TeamColor] | None = None,
        thread_key: str | None = None,
        rng: random.Random | None = None,
    ) -> "DraftSession":
        """
        Create a session from a filled queue.

        Players are numbered 1..n in the order given.

        Args:
            game_mode: The filled game mode
            players: Players (or their Discord IDs) in queue order
            pick_sequence: Precomputed pick sequence (generated when omitted)
            thread_key: Identity of the thread that owns this draft
            rng: Random source for sequence generation

        Raises:
            ValueError: If the roster does not match the game mode or the
                        pick sequence is malformed
        """
        player_ids = [p.discord_id if isinstance(p, Player) else int(p) for p in players]
        if len(set(player_ids)) != len(player_ids):
            raise ValueError("A player cannot appear twice in the same draft.")
        if len(player_ids) != game_mode.capacity:
            raise ValueError(
                f"{game_mode.label} needs {game_mode.capacity} players, got {len(player_ids)}."
            )

        if pick_sequence is None:
            pick_sequence = generate_pick_sequence(game_mode.capacity, rng=rng)
        elif len(pick_sequence) != game_mode.capacity or not is_balanced(pick_sequence):
            raise ValueError("Pick sequence must give each team exactly half of the picks.")

        return cls(
            game_mode=game_mode,
            pick_sequence=list(pick_sequence),
            roster=[RosterEntry(number, pid) for number, pid in enumerate(player_ids, start=1)],
            thread_key=str(thread_key) if thread_key is not None else "",
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def remaining(self) -> list[RosterEntry]:
        """Undrafted players, in pick number order."""
        return list(self.roster)

    @property
    def blue_captain(self) -> int | None:
        return self.blue_team[0].player_id if self.blue_team else None

    @property
    def red_captain(self) -> int | None:
        return self.red_team[0].player_id if self.red_team else None

    def captain_of(self, team: TeamColor) -> int | None:
        return self.blue_captain if team is TeamColor.BLUE else self.red_captain

    def team_entries(self, team: TeamColor) -> list[RosterEntry]:
        return self.blue_team if team is TeamColor.BLUE else self.red_team

    def team_ids(self, team: TeamColor) -> list[int]:
        return [entry.player_id for entry in self.team_entries(team)]

    @property
    def open_captain_slots(self) -> int:
        return 2 - self.captains_assigned

    @property
    def is_completed(self) -> bool:
        """Check whether every player has been placed on a full team."""
        team_size = self.game_mode.team_size
        return (
            not self.roster
            and len(self.pick_history) == self.game_mode.capacity
            and len(self.blue_team) == team_size
            and len(self.red_team) == team_size
        )

    @property
    def phase(self) -> DraftPhase:
        if self.is_completed:
            return DraftPhase.COMPLETED
        if self.captains_assigned == 2:
            return DraftPhase.DRAFTING
        return DraftPhase.AWAITING_CAPTAINS

    @property
    def next_team(self) -> TeamColor | None:
        """Team whose captain picks next, None while captains are missing or when done."""
        if self.captains_assigned < 2:
            return None
        index = len(self.pick_history)
        if index >= len(self.pick_sequence) or not self.roster:
            return None
        return self.pick_sequence[index]

    @property
    def currently_picking_captain(self) -> int | None:
        """Get the ID of the captain whose turn it is to pick."""
        team = self.next_team
        return self.captain_of(team) if team is not None else None

    @property
    def picks_remaining_this_turn(self) -> int:
        """Get how many consecutive picks the current captain has."""
        team = self.next_team
        if team is None:
            return 0
        count = 0
        for turn in self.pick_sequence[len(self.pick_history):]:
            if turn is not team:
                break
            count += 1
        return min(count, len(self.roster))

    def contains_player(self, player_id: int) -> bool:
        """Check if a player is in this draft (roster or either team)."""
        return any(
            entry.player_id == player_id
            for entry in (*self.roster, *self.blue_team, *self.red_team)
        )

    def all_player_ids(self) -> list[int]:
        entries = sorted((*self.roster, *self.blue_team, *self.red_team), key=lambda e: e.number)
        return [entry.player_id for entry in entries]

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            last_reset=self.last_reset,
            open_captain_slots=self.open_captain_slots,
            thread_key=self.thread_key,
        )

    def to_completed(self, completed_at: datetime | None = None) -> CompletedDraft:
        """Build the match history record for a finished draft."""
        if not self.is_completed:
            raise ValueError("Draft is not complete yet.")
        return CompletedDraft(
            game_mode=self.game_mode.label,
            thread_key=self.thread_key,
            created_at=self.created_at,
            completed_at=completed_at or _utcnow(),
            blue_captain_id=self.blue_captain,
            blue_team_ids=self.team_ids(TeamColor.BLUE),
            red_captain_id=self.red_captain,
            red_team_ids=self.team_ids(TeamColor.RED),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_captain(self, player_id: int, team: TeamColor | None = None) -> CaptainOutcome:
        """
        Make a player captain of a team.

        The first successful call fills one captain slot and the second call
        fills the other. When `team` is omitted the open colour is used, or
        the colour at the current pick sequence position if both are open.

        Args:
            player_id: Discord ID of the player to make captain
            team: Colour to captain (must be open)

        Returns:
            CaptainOutcome describing which captain is still needed or who
            picks first

        Raises:
            CaptainSpotsFilledError: Both teams already have a captain
            IsCaptainAlreadyError: The player already captains a team
            ForeignUserError: The player is not in this draft
            InvalidPlayerNumberError: The player has already been picked
            TeamHasCaptainError: `team` was given and already has a captain
        """
        blue_captain, red_captain = self.blue_captain, self.red_captain
        if blue_captain is not None and red_captain is not None:
            raise CaptainSpotsFilledError(blue_captain, red_captain)

        if player_id == blue_captain:
            raise IsCaptainAlreadyError("You are already captain of blue team.")
        if player_id == red_captain:
            raise IsCaptainAlreadyError("You are already captain of red team.")

        if not self.contains_player(player_id):
            raise ForeignUserError("User trying to become captain is not a player in this pug.")

        index = next(
            (i for i, entry in enumerate(self.roster) if entry.player_id == player_id), None
        )
        if index is None:
            raise InvalidPlayerNumberError("That player has already been picked for a team.")

        if team is not None and self.captain_of(team) is not None:
            raise TeamHasCaptainError(team.label, self.captain_of(team))

        self._check_history()
        target = team or self._acting_team()
        self._ensure_sequence_slots()

        self._assign(index, target)
        self._assign_last_remaining()
        return self._captain_outcome()

    def pick(self, player_number: int) -> PickOutcome:
        """
        Move the player with `player_number` onto the team whose turn it is.

        While a captain slot is open the pick fills it. If a single player
        remains afterwards they are placed automatically.

        Returns:
            PickOutcome for the team that picks next, or COMPLETE

        Raises:
            PlayersExhaustedError: No undrafted players remain
            InvalidPlayerNumberError: No undrafted player has that number
            HistoryInvariantViolation: Pick history disagrees with the teams
            PickSequenceInvariantViolation: The pick sequence has no slot left
        """
        if not self.roster:
            raise PlayersExhaustedError("Every player has already been picked.")

        index = next(
            (i for i, entry in enumerate(self.roster) if entry.number == player_number), None
        )
        if index is None:
            raise InvalidPlayerNumberError(f"{player_number} is not a valid pick")

        self._check_history()
        team = self._acting_team()
        self._ensure_sequence_slots()

        self._assign(index, team)
        self._assign_last_remaining()
        return self._pick_outcome()

    def reset(self, mode: ResetMode = ResetMode.RESTORE_ROSTER, now: datetime | None = None) -> None:
        """
        Clear pick history and stamp the reset marker.

        With RESTORE_ROSTER (the default) every team member returns to the
        roster in pick number order and both captain slots reopen. With
        HISTORY_ONLY team membership is left as it was, so a session with
        anyone on a team can no longer be picked from afterwards.
        """
        self.last_reset = now or _utcnow()
        if mode is ResetMode.RESTORE_ROSTER:
            self.roster.extend(self.blue_team)
            self.roster.extend(self.red_team)
            self.roster.sort(key=lambda entry: entry.number)
            self.blue_team.clear()
            self.red_team.clear()
            self.captains_assigned = 0
        self.pick_history.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_history(self) -> None:
        placed = len(self.blue_team) + len(self.red_team)
        if len(self.pick_history) != placed:
            raise HistoryInvariantViolation(
                f"Pick history has {len(self.pick_history)} entries but {placed} players are on teams."
            )

    def _acting_team(self, history_length: int | None = None) -> TeamColor:
        index = len(self.pick_history) if history_length is None else history_length
        if index >= len(self.pick_sequence):
            raise PickSequenceInvariantViolation(
                f"Out of bounds access at index {index} in pick sequence"
            )
        # An open captain slot is always filled before regular picks resume
        if self.captains_assigned < 2:
            if self.blue_team and not self.red_team:
                return TeamColor.RED
            if self.red_team and not self.blue_team:
                return TeamColor.BLUE
        return self.pick_sequence[index]

    def _ensure_sequence_slots(self) -> None:
        # This assignment plus the automatic last pick, if it will trigger
        needed = 2 if len(self.roster) == 2 else 1
        available = len(self.pick_sequence) - len(self.pick_history)
        if available < needed:
            raise PickSequenceInvariantViolation(
                f"Pick sequence has {available} slots left but {needed} are needed"
            )

    def _assign(self, roster_index: int, team: TeamColor) -> None:
        entry = self.roster.pop(roster_index)
        self.team_entries(team).append(entry)
        if self.captains_assigned < 2:
            self.pick_history.append(PickAction(PickActionKind.CAPTAIN, team, entry.number))
            self.captains_assigned += 1
        else:
            self.pick_history.append(PickAction(PickActionKind.PLAYER, team, entry.number))

    def _assign_last_remaining(self) -> None:
        while len(self.roster) == 1:
            self._assign(0, self._acting_team())

    def _pick_outcome(self) -> PickOutcome:
        index = len(self.pick_history)
        if not self.roster or index >= len(self.pick_sequence):
            return PickOutcome.COMPLETE
        team = self._acting_team(index)
        return PickOutcome.BLUE_TURN if team is TeamColor.BLUE else PickOutcome.RED_TURN

    def _captain_outcome(self) -> CaptainOutcome:
        if self.is_completed:
            return CaptainOutcome.TWO_PLAYER_AUTO_PICK
        if self.captains_assigned < 2:
            if self.blue_team:
                return CaptainOutcome.NEED_RED_CAPTAIN
            return CaptainOutcome.NEED_BLUE_CAPTAIN
        if self._pick_outcome() is PickOutcome.BLUE_TURN:
            return CaptainOutcome.START_PICKING_BLUE
        return CaptainOutcome.START_PICKING_RED
