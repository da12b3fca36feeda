"""
Translation of domain draft exceptions into service Results.
"""

from domain.exceptions import (
    CaptainSpotsFilledError,
    DraftError,
    ForeignUserError,
    HistoryInvariantViolation,
    InvalidPlayerNumberError,
    IsCaptainAlreadyError,
    NoCaptainCandidatesError,
    PickSequenceInvariantViolation,
    PlayersExhaustedError,
    TeamHasCaptainError,
)
from services import error_codes
from services.result import Result

_ERROR_CODES: dict[type[DraftError], str] = {
    ForeignUserError: error_codes.FOREIGN_USER,
    IsCaptainAlreadyError: error_codes.IS_CAPTAIN_ALREADY,
    CaptainSpotsFilledError: error_codes.CAPTAIN_SPOTS_FILLED,
    TeamHasCaptainError: error_codes.TEAM_HAS_CAPTAIN,
    InvalidPlayerNumberError: error_codes.INVALID_PLAYER_NUMBER,
    PlayersExhaustedError: error_codes.PLAYERS_EXHAUSTED,
    NoCaptainCandidatesError: error_codes.NO_CAPTAIN_CANDIDATES,
    PickSequenceInvariantViolation: error_codes.PICK_SEQUENCE_INVARIANT_VIOLATION,
    HistoryInvariantViolation: error_codes.HISTORY_INVARIANT_VIOLATION,
}


def error_code_for(exc: DraftError) -> str:
    """Most specific error code for a draft exception (STATE_ERROR if unmapped)."""
    for exc_type in type(exc).__mro__:
        code = _ERROR_CODES.get(exc_type)
        if code is not None:
            return code
    return error_codes.STATE_ERROR


def draft_error_result(exc: DraftError) -> Result:
    """
    Build a failed Result for a draft exception.

    CaptainSpotsFilledError carries both captains in `details`;
    TeamHasCaptainError carries the team and its captain.
    """
    details = None
    if isinstance(exc, CaptainSpotsFilledError):
        details = {
            "blue_captain_id": exc.blue_captain_id,
            "red_captain_id": exc.red_captain_id,
        }
    elif isinstance(exc, TeamHasCaptainError):
        details = {"team": exc.team_label.lower(), "captain_id": exc.captain_id}
    return Result.fail(str(exc), code=error_code_for(exc), details=details)
