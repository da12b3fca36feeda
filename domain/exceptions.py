"""
Domain exceptions raised by the draft engine.

Every draft operation validates before it mutates, so when one of these is
raised the session is unchanged. Services translate them into Result
failures with the codes in services/error_codes.py.
"""


class DraftError(ValueError):
    """Base exception for all draft-related errors."""


class ForeignUserError(DraftError):
    """Raised when the player is not part of the draft."""


class IsCaptainAlreadyError(DraftError):
    """Raised when the player already captains one of the teams."""


class TeamHasCaptainError(DraftError):
    """Raised when a specific colour is requested but that team already has a captain."""

    def __init__(self, team_label: str, captain_id: int):
        super().__init__(f"{team_label} team already has a captain.")
        self.team_label = team_label
        self.captain_id = captain_id


class CaptainSpotsFilledError(DraftError):
    """Raised when both teams already have a captain."""

    def __init__(self, blue_captain_id: int, red_captain_id: int):
        super().__init__("Captains have already been selected.")
        self.blue_captain_id = blue_captain_id
        self.red_captain_id = red_captain_id


class InvalidPlayerNumberError(DraftError):
    """Raised when no undrafted player has the given pick number."""


class PlayersExhaustedError(DraftError):
    """Raised when a pick is attempted but no undrafted players remain."""


class NoCaptainCandidatesError(DraftError):
    """Raised when random captaining finds nobody eligible."""


class DraftInvariantViolation(DraftError):
    """
    Internal consistency failure.

    Points at a construction bug upstream (e.g. a malformed pick sequence).
    Fatal to the session, never to the process.
    """


class PickSequenceInvariantViolation(DraftInvariantViolation):
    """Raised when the pick sequence has no slot for the requested pick."""


class HistoryInvariantViolation(DraftInvariantViolation):
    """Raised when pick history no longer matches team membership."""
