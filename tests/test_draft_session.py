"""
Tests for the DraftSession state machine.

Uses the 10 player sequence [B, R, R, B, B, R, R, B, B, R] with players
1001..1010 numbered 1..10.
"""

import copy
from datetime import datetime, timezone

import pytest

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
from domain.models.draft import (
    CaptainOutcome,
    DraftPhase,
    DraftSession,
    PickActionKind,
    PickOutcome,
    ResetMode,
    RosterEntry,
)
from domain.models.game_mode import GameMode
from domain.models.player import Player
from domain.models.team import TeamColor
from tests.conftest import make_session

B, R = TeamColor.BLUE, TeamColor.RED


def _state(session: DraftSession):
    return (
        list(session.roster),
        list(session.blue_team),
        list(session.red_team),
        list(session.pick_history),
        session.captains_assigned,
        session.last_reset,
    )


@pytest.fixture
def drafting(session):
    """Session with 1001 captaining blue and 1002 captaining red."""
    session.set_captain(1001)
    session.set_captain(1002)
    return session


class TestCreate:
    def test_numbers_players_in_order(self, session):
        assert [entry.number for entry in session.roster] == list(range(1, 11))
        assert [entry.player_id for entry in session.roster] == list(range(1001, 1011))
        assert session.phase is DraftPhase.AWAITING_CAPTAINS
        assert session.open_captain_slots == 2

    def test_accepts_player_objects(self):
        players = [Player(1), Player(2)]
        session = DraftSession.create(GameMode("duel", 2), players)
        assert session.all_player_ids() == [1, 2]

    def test_thread_key_defaults_to_session_id(self, session):
        assert session.thread_key == session.session_id

    def test_thread_key_given(self):
        session = DraftSession.create(GameMode("duel", 2), [1, 2], thread_key=555)
        assert session.thread_key == "555"

    def test_generates_balanced_sequence(self):
        session = DraftSession.create(GameMode("ctf", 12), range(1, 13))
        assert len(session.pick_sequence) == 12
        assert session.pick_sequence.count(B) == 6

    def test_rejects_wrong_roster_size(self):
        with pytest.raises(ValueError):
            DraftSession.create(GameMode("ctf", 10), range(1, 10))

    def test_rejects_duplicate_players(self):
        with pytest.raises(ValueError):
            DraftSession.create(GameMode("duel", 2), [7, 7])

    def test_rejects_unbalanced_sequence(self):
        with pytest.raises(ValueError):
            DraftSession.create(GameMode("4v", 4), [1, 2, 3, 4], pick_sequence=[B, R, B, B])


class TestSetCaptain:
    def test_first_captain_takes_first_sequence_colour(self, session):
        outcome = session.set_captain(1005)

        assert outcome is CaptainOutcome.NEED_RED_CAPTAIN
        assert session.blue_captain == 1005
        assert session.captains_assigned == 1
        assert session.pick_history[0].kind is PickActionKind.CAPTAIN
        assert session.pick_history[0].pick_number == 5
        assert all(entry.player_id != 1005 for entry in session.roster)

    def test_second_captain_takes_open_colour(self, session):
        session.set_captain(1005)
        outcome = session.set_captain(1003)

        assert outcome is CaptainOutcome.START_PICKING_RED
        assert session.red_captain == 1003
        assert session.phase is DraftPhase.DRAFTING
        assert session.open_captain_slots == 0

    def test_explicit_team(self, session):
        outcome = session.set_captain(1004, team=R)
        assert outcome is CaptainOutcome.NEED_BLUE_CAPTAIN
        assert session.red_captain == 1004
        assert session.set_captain(1006) is CaptainOutcome.START_PICKING_RED
        assert session.blue_captain == 1006

    def test_explicit_team_already_captained(self, session):
        session.set_captain(1001, team=B)
        before = copy.deepcopy(_state(session))

        with pytest.raises(TeamHasCaptainError) as exc_info:
            session.set_captain(1002, team=B)

        assert exc_info.value.captain_id == 1001
        assert exc_info.value.team_label == "Blue"
        assert _state(session) == before

    def test_repeat_is_captain_already_without_mutation(self, session):
        session.set_captain(1001)
        before = copy.deepcopy(_state(session))

        with pytest.raises(IsCaptainAlreadyError):
            session.set_captain(1001)

        assert _state(session) == before

    def test_spots_filled_for_any_caller(self, drafting):
        before = copy.deepcopy(_state(drafting))
        for caller in (1001, 1002, 1005, 99999):
            with pytest.raises(CaptainSpotsFilledError) as exc_info:
                drafting.set_captain(caller)
            assert exc_info.value.blue_captain_id == 1001
            assert exc_info.value.red_captain_id == 1002
        assert _state(drafting) == before

    def test_foreign_user(self, session):
        with pytest.raises(ForeignUserError):
            session.set_captain(424242)
        assert session.captains_assigned == 0

    def test_two_player_mode_completes(self):
        session = make_session(2, pick_sequence=[R, B])
        outcome = session.set_captain(1002)

        assert outcome is CaptainOutcome.TWO_PLAYER_AUTO_PICK
        assert session.red_captain == 1002
        assert session.blue_captain == 1001
        assert session.is_completed
        assert [a.kind for a in session.pick_history] == [PickActionKind.CAPTAIN] * 2


class TestPick:
    def test_picks_follow_sequence(self, drafting):
        assert drafting.currently_picking_captain == 1002
        assert drafting.picks_remaining_this_turn == 1

        assert drafting.pick(3) is PickOutcome.BLUE_TURN
        assert drafting.team_ids(R) == [1002, 1003]
        assert drafting.pick(4) is PickOutcome.BLUE_TURN
        assert drafting.pick(5) is PickOutcome.RED_TURN
        assert drafting.pick_history[-1].kind is PickActionKind.PLAYER

    def test_full_draft_auto_picks_last_player(self, drafting):
        for number in (3, 4, 5, 6, 7, 8):
            drafting.pick(number)
        assert len(drafting.roster) == 2

        outcome = drafting.pick(9)

        assert outcome is PickOutcome.COMPLETE
        assert drafting.roster == []
        assert drafting.team_ids(B) == [1001, 1004, 1005, 1008, 1009]
        assert drafting.team_ids(R) == [1002, 1003, 1006, 1007, 1010]
        assert drafting.is_completed
        assert drafting.phase is DraftPhase.COMPLETED
        assert drafting.next_team is None
        assert drafting.currently_picking_captain is None

    def test_team_sizes_and_disjointness(self, drafting):
        for number in (3, 4, 5, 6, 7, 8, 9):
            drafting.pick(number)
            ids = drafting.all_player_ids()
            assert len(ids) == 10
            assert len(set(ids)) == 10
            assert len(drafting.pick_history) == len(drafting.blue_team) + len(drafting.red_team)

    def test_invalid_number(self, drafting):
        before = copy.deepcopy(_state(drafting))
        with pytest.raises(InvalidPlayerNumberError):
            drafting.pick(42)
        with pytest.raises(InvalidPlayerNumberError):
            drafting.pick(1)  # blue captain, already on a team
        assert _state(drafting) == before

    def test_players_exhausted(self, drafting):
        for number in (3, 4, 5, 6, 7, 8, 9):
            drafting.pick(number)
        with pytest.raises(PlayersExhaustedError):
            drafting.pick(10)

    def test_pick_fills_open_captain_slots(self, session):
        """Picking before captains exist designates captains by position."""
        assert session.pick(7) is PickOutcome.RED_TURN
        assert session.blue_captain == 1007
        assert session.pick(2) is PickOutcome.RED_TURN
        assert session.red_captain == 1002
        assert session.captains_assigned == 2
        assert [a.kind for a in session.pick_history] == [PickActionKind.CAPTAIN] * 2

    def test_short_sequence_is_invariant_violation(self):
        game_mode = GameMode("4v", 4)
        session = DraftSession(
            game_mode=game_mode,
            pick_sequence=[B, R],
            roster=[RosterEntry(n, 100 + n) for n in range(1, 5)],
        )
        session.set_captain(101)
        session.set_captain(102)
        before = copy.deepcopy(_state(session))

        with pytest.raises(PickSequenceInvariantViolation):
            session.pick(3)

        assert _state(session) == before

    def test_missing_slot_for_last_pick_is_detected_up_front(self):
        game_mode = GameMode("4v", 4)
        session = DraftSession(
            game_mode=game_mode,
            pick_sequence=[B, R, R],
            roster=[RosterEntry(n, 100 + n) for n in range(1, 5)],
        )
        session.set_captain(101)
        session.set_captain(102)

        with pytest.raises(PickSequenceInvariantViolation):
            session.pick(3)
        assert len(session.roster) == 2


class TestReset:
    def test_history_only_keeps_teams(self, drafting):
        drafting.pick(3)
        stamp = datetime(2024, 6, 1, tzinfo=timezone.utc)

        drafting.reset(ResetMode.HISTORY_ONLY, now=stamp)

        assert drafting.pick_history == []
        assert drafting.last_reset == stamp
        assert drafting.team_ids(B) == [1001]
        assert drafting.team_ids(R) == [1002, 1003]
        assert drafting.captains_assigned == 2

    def test_restore_roster_is_the_default(self, drafting):
        drafting.pick(3)
        drafting.reset()
        assert drafting.pick_history == []
        assert drafting.blue_team == []
        assert len(drafting.roster) == 10
        assert drafting.last_reset is not None

    def test_history_only_then_pick_detects_mismatch(self, drafting):
        drafting.pick(3)
        drafting.reset(ResetMode.HISTORY_ONLY)
        before = copy.deepcopy(_state(drafting))

        with pytest.raises(HistoryInvariantViolation):
            drafting.pick(4)

        assert _state(drafting) == before

    def test_history_only_before_any_captain_is_harmless(self, session):
        session.reset(ResetMode.HISTORY_ONLY)
        assert session.set_captain(1001) is CaptainOutcome.NEED_RED_CAPTAIN

    def test_restore_roster(self, drafting):
        drafting.pick(3)
        drafting.pick(4)

        drafting.reset(ResetMode.RESTORE_ROSTER)

        assert [entry.number for entry in drafting.roster] == list(range(1, 11))
        assert drafting.blue_team == []
        assert drafting.red_team == []
        assert drafting.pick_history == []
        assert drafting.captains_assigned == 0
        assert drafting.open_captain_slots == 2
        assert drafting.set_captain(1004) is CaptainOutcome.NEED_RED_CAPTAIN

    def test_reset_changes_marker_each_time(self, session):
        session.reset(now=datetime(2024, 1, 1, tzinfo=timezone.utc))
        first = session.snapshot()
        session.reset(now=datetime(2024, 1, 2, tzinfo=timezone.utc))
        assert session.snapshot().last_reset != first.last_reset


class TestAccessors:
    def test_snapshot(self, session):
        snapshot = session.snapshot()
        assert snapshot.open_captain_slots == 2
        assert snapshot.last_reset is None
        assert snapshot.thread_key == session.thread_key

    def test_contains_player(self, drafting):
        assert drafting.contains_player(1001)
        assert drafting.contains_player(1010)
        assert not drafting.contains_player(5)

    def test_next_team_none_while_awaiting_captains(self, session):
        assert session.next_team is None
        assert session.picks_remaining_this_turn == 0

    def test_picks_remaining_this_turn(self, drafting):
        for number in (3, 4, 5, 6, 7):
            drafting.pick(number)
        assert drafting.next_team is B
        assert drafting.picks_remaining_this_turn == 2

        drafting.pick(8)
        assert drafting.picks_remaining_this_turn == 1

    def test_to_completed(self, drafting):
        for number in (3, 4, 5, 6, 7, 8, 9):
            drafting.pick(number)
        record = drafting.to_completed()
        assert record.blue_captain_id == 1001
        assert record.red_team_ids == [1002, 1003, 1006, 1007, 1010]
        assert record.to_dict()["game_mode"] == "10v"

    def test_to_completed_requires_completion(self, session):
        with pytest.raises(ValueError):
            session.to_completed()
