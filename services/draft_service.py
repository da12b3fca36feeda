"""
Draft lifecycle service.

Entry points the command layer calls once a queue fills: creating a draft,
captaining, picking, resetting and cancelling. Every method returns a Result;
domain exceptions never escape to the command layer.

All session mutations happen inside DraftStateManager.guild_drafts() (the
store's write lock). Listeners, match history and countdown watchers run
after the lock is released.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from config import DRAFT_RESET_MODE
from domain.exceptions import DraftError, DraftInvariantViolation
from domain.models.draft import (
    DraftPhase,
    DraftSession,
    PickOutcome,
    ResetMode,
    RosterEntry,
)
from domain.models.game_mode import GameMode
from domain.models.player import Player
from domain.models.team import TeamColor
from services import error_codes
from services.captain_service import CaptainAssignment, CaptainService
from services.draft_errors import draft_error_result
from services.draft_events import DraftEvents
from services.draft_state_manager import DraftStateManager
from services.interfaces import IDraftService, IMatchHistory
from services.result import Result
from utils import draft_messages
from utils.guild import normalize_guild_id

logger = logging.getLogger("pug_bot.services.draft_service")

WatcherSpawner = Callable[[int, DraftSession], Any]


@dataclass(frozen=True)
class DraftView:
    """Read-only picture of a draft for display."""

    session_id: str
    thread_key: str
    game_mode: str
    phase: DraftPhase
    blue_team: tuple[RosterEntry, ...]
    red_team: tuple[RosterEntry, ...]
    remaining: tuple[RosterEntry, ...]
    blue_captain_id: int | None
    red_captain_id: int | None
    next_team: TeamColor | None
    currently_picking_captain: int | None
    picks_remaining_this_turn: int
    queued_drafts: int

    @classmethod
    def from_session(cls, session: DraftSession, queued_drafts: int = 0) -> "DraftView":
        return cls(
            session_id=session.session_id,
            thread_key=session.thread_key,
            game_mode=session.game_mode.label,
            phase=session.phase,
            blue_team=tuple(session.blue_team),
            red_team=tuple(session.red_team),
            remaining=tuple(session.remaining),
            blue_captain_id=session.blue_captain,
            red_captain_id=session.red_captain,
            next_team=session.next_team,
            currently_picking_captain=session.currently_picking_captain,
            picks_remaining_this_turn=session.picks_remaining_this_turn,
            queued_drafts=queued_drafts,
        )


class DraftService(IDraftService):
    """
    Orchestrates drafts for every guild.

    Drafts that fill while another is being picked wait in the guild's queue
    and become current (with their own countdown) when the one ahead of them
    completes or is cancelled.
    """

    def __init__(
        self,
        state_manager: DraftStateManager,
        captain_service: CaptainService,
        match_history: IMatchHistory | None = None,
        watcher_spawner: WatcherSpawner | None = None,
        reset_mode: ResetMode | str = DRAFT_RESET_MODE,
        rng: random.Random | None = None,
    ):
        """
        Initialize the draft service.

        Args:
            state_manager: Per-guild draft store
            captain_service: Applies captain assignments
            match_history: Receives completed drafts (optional)
            watcher_spawner: Called with (guild_id, session) when a draft with
                             open captain slots becomes current
            reset_mode: ResetMode or its config value ("history" / "restore")
            rng: Random source for pick sequences
        """
        self.state_manager = state_manager
        self.captain_service = captain_service
        self.match_history = match_history
        self.watcher_spawner = watcher_spawner
        self.reset_mode = ResetMode(reset_mode)
        self.rng = rng or random.Random()
        # Guild-wide /nocapt preferences, applied to every new draft
        self._captain_opt_outs: dict[int, set[int]] = {}

        self.events.on_completed(self._handle_completed)

    @property
    def events(self) -> DraftEvents:
        return self.captain_service.events

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_session(
        self,
        guild_id: int | None,
        game_mode: GameMode,
        players: list[Player | int],
        thread_key: str | None = None,
    ) -> Result[DraftSession]:
        """
        Start a draft for a filled queue.

        Two player modes are resolved immediately (both players become
        captains of random colours). Otherwise a countdown is started if the
        draft is current.
        """
        normalized = normalize_guild_id(guild_id)
        try:
            session = DraftSession.create(game_mode, players, thread_key=thread_key, rng=self.rng)
        except ValueError as exc:
            logger.debug(f"Rejected draft for {game_mode} (guild {normalized}): {exc}")
            return Result.fail(str(exc), code=error_codes.VALIDATION_ERROR)

        opt_outs = self._captain_opt_outs.get(normalized, set())
        session.captain_opt_outs = {pid for pid in session.all_player_ids() if pid in opt_outs}

        position = self.state_manager.add_session(normalized, session)
        if position == 0:
            self._on_became_current(normalized, session)
        return Result.ok(session)

    def cancel_session(self, guild_id: int | None) -> Result[DraftSession]:
        """Drop the current draft (e.g. a player left) and promote the next one."""
        normalized = normalize_guild_id(guild_id)
        with self.state_manager.guild_drafts(normalized) as drafts:
            session = drafts.cancel_current()
            next_session = drafts.current
        if session is None:
            return Result.fail("There is no draft in progress.", code=error_codes.NO_ACTIVE_DRAFT)
        if next_session is not None:
            self._on_became_current(normalized, next_session)
        return Result.ok(session)

    def reset(self, guild_id: int | None) -> Result[DraftSession]:
        """
        Reset the current draft.

        In restore mode every picked player returns to the roster and a new
        countdown starts; with no draft in progress the most recently
        completed draft is pulled back and reset instead.

        History mode only clears the pick history. A draft with players still
        on teams cannot continue after that, so it is dropped and the next
        queued draft becomes current. Completed drafts are not reopened.
        """
        normalized = normalize_guild_id(guild_id)
        restored = False
        dropped = False
        next_session = None
        with self.state_manager.guild_drafts(normalized) as drafts:
            session = drafts.current
            if session is None:
                if self.reset_mode is not ResetMode.RESTORE_ROSTER:
                    if drafts.completed:
                        return Result.fail(
                            "Completed drafts can only be reset in restore mode.",
                            code=error_codes.RESET_UNAVAILABLE,
                        )
                    return Result.fail("There is nothing to reset.", code=error_codes.NO_ACTIVE_DRAFT)
                session = drafts.restore_latest_completed()
                restored = session is not None
            if session is None:
                return Result.fail("There is nothing to reset.", code=error_codes.NO_ACTIVE_DRAFT)
            session.reset(self.reset_mode, now=datetime.now(timezone.utc))
            stranded = len(session.blue_team) + len(session.red_team)
            if stranded:
                drafts.discard(session)
                dropped = True
                next_session = drafts.current

        logger.info(
            f"Draft {session.session_id} reset (guild {normalized}, mode {self.reset_mode.value}"
            f"{', restored from history' if restored else ''})"
        )
        if dropped:
            logger.warning(
                f"Draft {session.session_id} was reset with {stranded} player(s) still on teams "
                f"and can no longer be picked; dropping it (guild {normalized})"
            )
            if next_session is not None:
                self._on_became_current(normalized, next_session)
        elif session.open_captain_slots:
            self._on_became_current(normalized, session)
        return Result.ok(session)

    # ------------------------------------------------------------------
    # Captains
    # ------------------------------------------------------------------

    def set_captain(self, guild_id: int | None, player_id: int) -> Result[CaptainAssignment]:
        return self.captain_service.assign_captain(guild_id, player_id)

    def auto_captain(
        self, guild_id: int | None, expected_thread_key: str | None = None
    ) -> Result[CaptainAssignment]:
        return self.captain_service.assign_captain(guild_id, expected_thread_key=expected_thread_key)

    def opt_out_of_captaincy(self, guild_id: int | None, player_id: int) -> Result[None]:
        """Exclude a player from random captain draws in this guild."""
        normalized = normalize_guild_id(guild_id)
        self._captain_opt_outs.setdefault(normalized, set()).add(player_id)
        with self.state_manager.guild_drafts(normalized) as drafts:
            for session in drafts.pending:
                if session.contains_player(player_id):
                    session.captain_opt_outs.add(player_id)
        logger.info(f"Player {player_id} opted out of random captaincy (guild {normalized})")
        return Result.ok()

    def opt_in_to_captaincy(self, guild_id: int | None, player_id: int) -> Result[None]:
        """Make a player eligible for random captain draws again."""
        normalized = normalize_guild_id(guild_id)
        self._captain_opt_outs.get(normalized, set()).discard(player_id)
        with self.state_manager.guild_drafts(normalized) as drafts:
            for session in drafts.pending:
                session.captain_opt_outs.discard(player_id)
        logger.info(f"Player {player_id} opted back in to random captaincy (guild {normalized})")
        return Result.ok()

    def is_opted_out(self, guild_id: int | None, player_id: int) -> bool:
        return player_id in self._captain_opt_outs.get(normalize_guild_id(guild_id), set())

    # ------------------------------------------------------------------
    # Picks
    # ------------------------------------------------------------------

    def pick(
        self, guild_id: int | None, player_number: int, picker_id: int | None = None
    ) -> Result[PickOutcome]:
        """
        Pick the undrafted player with `player_number`.

        When `picker_id` is given it must be the captain whose turn it is.
        Without it (admin override) the pick goes to whichever team is due,
        filling an open captain slot first.
        """
        normalized = normalize_guild_id(guild_id)

        with self.state_manager.guild_drafts(normalized) as drafts:
            session = drafts.current
            if session is None:
                return Result.fail("There is no draft in progress.", code=error_codes.NO_ACTIVE_DRAFT)

            if picker_id is not None:
                failure = self._check_turn(session, picker_id)
                if failure is not None:
                    logger.debug(f"Pick by {picker_id} rejected (guild {normalized}): {failure.error}")
                    return failure

            captains_before = session.captains_assigned
            try:
                outcome = session.pick(player_number)
            except DraftInvariantViolation as exc:
                drafts.discard(session)
                logger.error(
                    f"Dropping draft {session.session_id} (guild {normalized}) "
                    f"after invariant violation: {exc}",
                    exc_info=True,
                )
                return draft_error_result(exc)
            except DraftError as exc:
                logger.debug(f"Pick {player_number} rejected (guild {normalized}): {exc}")
                return draft_error_result(exc)

            started = captains_before < 2 and session.captains_assigned == 2
            completed = session.is_completed
            if completed:
                drafts.complete_current()

        logger.info(
            f"Pick {player_number} applied to {session.session_id} (guild {normalized}): {outcome.value}"
        )
        if started:
            self.events.emit_drafting_started(normalized, session)
        if completed:
            self.events.emit_completed(normalized, session)
        return Result.ok(outcome)

    def pick_many(
        self, guild_id: int | None, picker_id: int, numbers: list[int]
    ) -> Result[list[PickOutcome]]:
        """
        Apply several picks in order for one captain.

        Stops at the first rejected number (the failure carries the numbers
        already applied in details["picked"]) or once the draft completes.
        """
        if not numbers:
            return Result.fail("No player numbers given.", code=error_codes.VALIDATION_ERROR)

        outcomes: list[PickOutcome] = []
        picked: list[int] = []
        for number in numbers:
            result = self.pick(guild_id, number, picker_id=picker_id)
            if not result.success:
                details = dict(result.details or {})
                details["picked"] = picked
                return Result.fail(result.error, code=result.error_code, details=details)
            outcomes.append(result.value)
            picked.append(number)
            if result.value is PickOutcome.COMPLETE:
                break
        return Result.ok(outcomes)

    def _check_turn(self, session: DraftSession, picker_id: int) -> Result | None:
        if session.captains_assigned < 2:
            return Result.fail(
                "Captains are needed before picking can start.", code=error_codes.CAPTAINS_NEEDED
            )
        if picker_id not in (session.blue_captain, session.red_captain):
            return Result.fail("You are not a captain.", code=error_codes.NOT_CAPTAIN)
        current = session.currently_picking_captain
        # With no turn to check, session.pick() reports the real problem
        if current is not None and current != picker_id:
            return Result.fail(draft_messages.not_your_turn(current), code=error_codes.NOT_YOUR_TURN)
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_draft_view(self, guild_id: int | None) -> DraftView | None:
        with self.state_manager.read_guild_drafts(guild_id) as drafts:
            if drafts is None or drafts.current is None:
                return None
            return DraftView.from_session(drafts.current, queued_drafts=len(drafts.pending) - 1)

    def get_session(self, guild_id: int | None) -> DraftSession | None:
        return self.state_manager.get_session(guild_id)

    def get_completed_drafts(self, guild_id: int | None, limit: int | None = None) -> list[DraftSession]:
        return self.state_manager.get_completed(guild_id, limit=limit)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_became_current(self, guild_id: int, session: DraftSession) -> None:
        if session.game_mode.capacity == 2:
            result = self.auto_captain(guild_id)
            if not result.success:
                logger.warning(
                    f"Could not resolve two player draft {session.session_id}: {result.error}"
                )
            return
        self._spawn_watcher(guild_id, session)

    def _spawn_watcher(self, guild_id: int, session: DraftSession) -> None:
        if self.watcher_spawner is None:
            return
        self.watcher_spawner(guild_id, session)

    def _handle_completed(self, guild_id: int, session: DraftSession) -> None:
        logger.info(
            f"Draft {session.session_id} complete (guild {guild_id}): "
            f"blue={session.team_ids(TeamColor.BLUE)} red={session.team_ids(TeamColor.RED)}"
        )
        if self.match_history is not None:
            try:
                self.match_history.record_completed(session.to_completed())
            except Exception:
                logger.exception(f"Failed to record completed draft {session.session_id}")

        next_session = self.state_manager.get_session(guild_id)
        if next_session is not None:
            self._on_became_current(guild_id, next_session)
