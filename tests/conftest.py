"""
Pytest fixtures for tests.

This module provides centralized constants and fixtures to reduce duplication
across the test suite. Import TEST_GUILD_ID from here instead of defining it locally.
"""

import random

import pytest

from domain.models.draft import DraftSession
from domain.models.game_mode import GameMode
from domain.models.team import TeamColor
from domain.services.captain_selection import CaptainSelectionService
from services.captain_service import CaptainService
from services.draft_service import DraftService
from services.draft_state_manager import DraftStateManager
from services.interfaces import IAnnouncer, IMatchHistory


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================
# Use these instead of defining TEST_GUILD_ID locally in each test file.

TEST_GUILD_ID = 12345
"""Standard guild ID for single-guild tests. Import and use this constant."""

TEST_GUILD_ID_SECONDARY = 67890
"""Secondary guild ID for multi-guild isolation tests."""

TEST_SEED = 1337

B, R = TeamColor.BLUE, TeamColor.RED

TEN_PLAYER_SEQUENCE = [B, R, R, B, B, R, R, B, B, R]
"""Pick sequence for a 10 player draft starting with blue."""


def player_ids(count: int, start: int = 1001) -> list[int]:
    """Discord IDs for a filled queue."""
    return list(range(start, start + count))


def make_session(capacity: int = 10, pick_sequence=None, start: int = 1001) -> DraftSession:
    """Build a draft with players numbered 1..capacity (IDs start, start+1, ...)."""
    if pick_sequence is None and capacity == 10:
        pick_sequence = TEN_PLAYER_SEQUENCE
    return DraftSession.create(
        GameMode(f"{capacity}v", capacity),
        player_ids(capacity, start),
        pick_sequence=pick_sequence,
        rng=random.Random(TEST_SEED),
    )


# =============================================================================
# FAKES
# =============================================================================


class FakeMessage:
    """Stand-in for a posted message handle."""

    def __init__(self, text: str):
        self.text = text
        self.history = [text]


class FakeAnnouncer(IAnnouncer):
    """Records posts and edits instead of talking to Discord."""

    def __init__(self):
        self.posts: list[FakeMessage] = []
        self.edits: list[tuple[FakeMessage, str]] = []

    async def post(self, text: str) -> FakeMessage:
        message = FakeMessage(text)
        self.posts.append(message)
        return message

    async def edit(self, handle: FakeMessage, text: str) -> None:
        handle.text = text
        handle.history.append(text)
        self.edits.append((handle, text))

    @property
    def texts(self) -> list[str]:
        return [message.history[0] for message in self.posts]


class FailingAnnouncer(IAnnouncer):
    """Announcer whose every call fails, as when the channel was deleted."""

    async def post(self, text: str):
        raise RuntimeError("channel unavailable")

    async def edit(self, handle, text: str) -> None:
        raise RuntimeError("channel unavailable")


class FakeClock:
    """Monotonic clock advanced by the fake sleep."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []
        self.on_sleep = None

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_sleep is not None:
            self.on_sleep(len(self.sleeps))


class RecordingMatchHistory(IMatchHistory):
    def __init__(self):
        self.records = []

    def record_completed(self, draft) -> None:
        self.records.append(draft)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def rng():
    """Seeded random source so draws are reproducible."""
    return random.Random(TEST_SEED)


@pytest.fixture
def session():
    """A fresh 10 player draft (blue first, players 1001..1010)."""
    return make_session(10)


@pytest.fixture
def state_manager():
    """Create a fresh DraftStateManager instance."""
    return DraftStateManager()


@pytest.fixture
def captain_service(state_manager, rng):
    return CaptainService(state_manager, selector=CaptainSelectionService(rng=rng))


@pytest.fixture
def match_history():
    return RecordingMatchHistory()


@pytest.fixture
def draft_service(state_manager, captain_service, match_history, rng):
    """DraftService without countdown watchers, restore-mode resets."""
    return DraftService(
        state_manager,
        captain_service,
        match_history=match_history,
        reset_mode="restore",
        rng=rng,
    )


@pytest.fixture
def fake_announcer():
    return FakeAnnouncer()


@pytest.fixture
def fake_clock():
    return FakeClock()
