"""
Tests for GameMode and Player domain models.
"""

from datetime import datetime, timedelta, timezone

import pytest

from domain.models.game_mode import GameMode
from domain.models.player import Player
from domain.models.team import TeamColor


class TestGameMode:
    def test_key_is_lowercased_label(self):
        mode = GameMode("CTF", 10)
        assert mode.key == "ctf"
        assert mode.label == "CTF"
        assert str(mode) == "ctf"

    def test_team_size(self):
        assert GameMode("duel", 2).team_size == 1
        assert GameMode("ctf", 10).team_size == 5

    def test_equality_is_case_insensitive(self):
        assert GameMode("CTF", 10) == GameMode("ctf", 10)
        assert hash(GameMode("CTF", 10)) == hash(GameMode("ctf", 10))
        assert len({GameMode("CTF", 10), GameMode("Ctf", 10)}) == 1

    def test_equality_against_strings(self):
        assert GameMode("CTF", 10) == "ctf"
        assert GameMode("ctf", 10) == "CTF"
        assert GameMode("ctf", 10) != "tdm"

    def test_different_labels_differ(self):
        assert GameMode("ctf", 10) != GameMode("tdm", 10)

    @pytest.mark.parametrize("capacity", [0, 1, 7, 26, 100])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(ValueError):
            GameMode("ctf", capacity)

    def test_empty_label(self):
        with pytest.raises(ValueError):
            GameMode("  ", 10)

    @pytest.mark.parametrize("capacity", [2, 4, 10, 24])
    def test_bounds_accepted(self, capacity):
        assert GameMode("mode", capacity).capacity == capacity


class TestPlayer:
    def test_equality_by_discord_id(self):
        earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert Player(1, earlier) == Player(1)
        assert Player(1) != Player(2)
        assert len({Player(1), Player(1, earlier)}) == 1

    def test_time_elapsed_since_join(self):
        joined = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        player = Player(42, joined_at=joined)
        now = joined + timedelta(minutes=5)
        assert player.time_elapsed_since_join(now) == timedelta(minutes=5)

    def test_time_elapsed_defaults_to_now(self):
        player = Player(42)
        assert player.time_elapsed_since_join() >= timedelta(0)


class TestTeamColor:
    def test_opposite(self):
        assert TeamColor.BLUE.opposite is TeamColor.RED
        assert TeamColor.RED.opposite is TeamColor.BLUE

    def test_label(self):
        assert TeamColor.BLUE.label == "Blue"
