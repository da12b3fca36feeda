"""
Tests for the captain selection policy.
"""

import random
from collections import Counter

import pytest

from domain.exceptions import (
    CaptainSpotsFilledError,
    ForeignUserError,
    IsCaptainAlreadyError,
    NoCaptainCandidatesError,
)
from domain.models.team import TeamColor
from domain.services.captain_selection import CaptainPick, CaptainSelectionService
from tests.conftest import TEST_SEED, make_session


@pytest.fixture
def selector():
    return CaptainSelectionService(rng=random.Random(TEST_SEED))


class TestRandomCaptains:
    def test_two_distinct_captains_on_opposite_teams(self, selector, session):
        plan = selector.plan(session)

        assert len(plan) == 2
        assert plan[0].player_id != plan[1].player_id
        assert {plan[0].team, plan[1].team} == {TeamColor.BLUE, TeamColor.RED}
        assert all(session.contains_player(pick.player_id) for pick in plan)

    def test_plan_does_not_mutate(self, selector, session):
        selector.plan(session)
        assert session.captains_assigned == 0
        assert len(session.roster) == 10

    def test_opted_out_players_never_drawn(self, selector, session):
        session.captain_opt_outs = set(range(1001, 1009))
        for _ in range(50):
            plan = selector.plan(session)
            assert {pick.player_id for pick in plan} == {1009, 1010}

    def test_not_enough_candidates(self, selector, session):
        session.captain_opt_outs = set(range(1001, 1010))
        with pytest.raises(NoCaptainCandidatesError):
            selector.plan(session)

    def test_fills_remaining_slot_only(self, selector, session):
        session.set_captain(1001, team=TeamColor.RED)
        plan = selector.plan(session)

        assert len(plan) == 1
        assert plan[0].team is TeamColor.BLUE
        assert plan[0].player_id != 1001

    def test_remaining_slot_with_everyone_opted_out(self, selector, session):
        session.set_captain(1001)
        session.captain_opt_outs = set(range(1002, 1011))
        with pytest.raises(NoCaptainCandidatesError):
            selector.plan(session)

    def test_draw_covers_every_candidate(self, selector, session):
        counts = Counter()
        for _ in range(1000):
            for pick in selector.plan(session):
                counts[pick.player_id] += 1
        assert set(counts) == set(range(1001, 1011))

    def test_both_colours_reachable_for_first_draw(self, selector, session):
        colours = {selector.plan(session)[0].team for _ in range(100)}
        assert colours == {TeamColor.BLUE, TeamColor.RED}


class TestVolunteer:
    def test_target_gets_open_slot(self, selector, session):
        session.set_captain(1001)
        assert selector.plan(session, 1004) == [CaptainPick(1004, TeamColor.RED)]

    def test_target_coinflip_when_both_open(self, selector, session):
        plan = selector.plan(session, 1003)
        assert len(plan) == 1
        assert plan[0].player_id == 1003
        assert plan[0].team in (TeamColor.BLUE, TeamColor.RED)

    def test_target_already_captain(self, selector, session):
        session.set_captain(1001)
        with pytest.raises(IsCaptainAlreadyError):
            selector.plan(session, 1001)

    def test_target_not_in_draft(self, selector, session):
        with pytest.raises(ForeignUserError):
            selector.plan(session, 5)

    def test_opted_out_target_may_still_volunteer(self, selector, session):
        session.captain_opt_outs = {1003}
        assert selector.plan(session, 1003)[0].player_id == 1003


class TestSpotsFilled:
    def test_raises_with_both_captains(self, selector, session):
        session.set_captain(1001)
        session.set_captain(1002)
        for target in (None, 1001, 1005, 4242):
            with pytest.raises(CaptainSpotsFilledError) as exc_info:
                selector.plan(session, target)
            assert (exc_info.value.blue_captain_id, exc_info.value.red_captain_id) == (1001, 1002)

    def test_two_player_plan(self, selector):
        session = make_session(2, pick_sequence=[TeamColor.BLUE, TeamColor.RED])
        plan = selector.plan(session)
        assert {pick.player_id for pick in plan} == {1001, 1002}
