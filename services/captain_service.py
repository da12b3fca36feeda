"""
Captain assignment.

Applies the captain selection policy to a guild's current draft under the
store's write lock. Both /captain volunteers and the auto captain countdown
go through assign_captain().
"""

import logging
from dataclasses import dataclass

from domain.exceptions import DraftError, DraftInvariantViolation
from domain.models.draft import CaptainOutcome, DraftSession
from domain.services.captain_selection import CaptainSelectionService
from services import error_codes
from services.draft_errors import draft_error_result
from services.draft_events import DraftEvents
from services.draft_state_manager import DraftStateManager
from services.interfaces import ICaptainService
from services.result import Result
from utils.guild import normalize_guild_id

logger = logging.getLogger("pug_bot.services.captain_service")


@dataclass(frozen=True)
class CaptainAssignment:
    """Result of a successful captain assignment."""

    outcome: CaptainOutcome
    blue_captain_id: int | None
    red_captain_id: int | None
    assigned_ids: tuple[int, ...]
    session_id: str

    @property
    def draft_completed(self) -> bool:
        return self.outcome is CaptainOutcome.TWO_PLAYER_AUTO_PICK


class CaptainService(ICaptainService):
    """
    Handles captain assignment for the current draft of a guild.

    Emits drafting-started exactly once per draft (on the call that fills the
    second captain slot), followed by completed for two player modes, both
    after the store lock is released.
    """

    def __init__(
        self,
        state_manager: DraftStateManager,
        selector: CaptainSelectionService | None = None,
        events: DraftEvents | None = None,
    ):
        self.state_manager = state_manager
        self.selector = selector or CaptainSelectionService()
        self.events = events or DraftEvents()

    def assign_captain(
        self,
        guild_id: int | None,
        target_id: int | None = None,
        expected_thread_key: str | None = None,
    ) -> Result[CaptainAssignment]:
        """
        Make `target_id` captain, or fill the open slots at random.

        When `expected_thread_key` is given the assignment only applies if the
        current draft still belongs to that thread (DRAFT_REPLACED otherwise).

        Returns:
            Result.ok(CaptainAssignment) on success
            Result.fail(error_message, code) when no draft is active or the
            assignment is rejected
        """
        normalized = normalize_guild_id(guild_id)

        with self.state_manager.guild_drafts(normalized) as drafts:
            session = drafts.current
            if session is None:
                return Result.fail("There is no draft in progress.", code=error_codes.NO_ACTIVE_DRAFT)
            if expected_thread_key is not None and session.thread_key != expected_thread_key:
                logger.debug(
                    f"Captain assignment for {expected_thread_key} skipped (guild {normalized}): "
                    f"current draft is {session.thread_key}"
                )
                return Result.fail(
                    "The draft this was meant for is no longer current.",
                    code=error_codes.DRAFT_REPLACED,
                )

            captains_before = session.captains_assigned
            previous = {session.blue_captain, session.red_captain}
            try:
                plan = self.selector.plan(session, target_id)
                outcome = None
                for captain in plan:
                    # A two player draft finishes on its first captain
                    if session.is_completed:
                        break
                    outcome = session.set_captain(captain.player_id, captain.team)
            except DraftInvariantViolation as exc:
                drafts.discard(session)
                logger.error(
                    f"Dropping draft {session.session_id} (guild {normalized}) "
                    f"after invariant violation: {exc}",
                    exc_info=True,
                )
                return draft_error_result(exc)
            except DraftError as exc:
                logger.debug(f"Captain assignment rejected (guild {normalized}): {exc}")
                return draft_error_result(exc)

            started = captains_before < 2 and session.captains_assigned == 2
            completed = session.is_completed
            if completed:
                drafts.complete_current()

            assignment = CaptainAssignment(
                outcome=outcome,
                blue_captain_id=session.blue_captain,
                red_captain_id=session.red_captain,
                assigned_ids=tuple(
                    cid
                    for cid in (session.blue_captain, session.red_captain)
                    if cid is not None and cid not in previous
                ),
                session_id=session.session_id,
            )

        logger.info(
            f"Captain(s) {list(assignment.assigned_ids)} assigned for {session.session_id} "
            f"(guild {normalized}, {'volunteer' if target_id is not None else 'random'}): "
            f"{assignment.outcome.value}"
        )
        if started:
            self.events.emit_drafting_started(normalized, session)
        if completed:
            self.events.emit_completed(normalized, session)
        return Result.ok(assignment)

    def eligible_captains(self, guild_id: int | None) -> list[int]:
        """Players who could be drawn as random captain right now."""
        with self.state_manager.read_guild_drafts(guild_id) as drafts:
            session: DraftSession | None = drafts.current if drafts else None
            if session is None:
                return []
            return self.selector.eligible_candidates(session)
