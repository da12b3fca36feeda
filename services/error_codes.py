"""
Standard error codes for service layer.

These error codes allow command handlers to programmatically handle
specific error conditions without parsing error message text.

Usage:
    from services.error_codes import NO_ACTIVE_DRAFT
    from services.result import Result

    if session is None:
        return Result.fail("There is no draft in progress.", code=NO_ACTIVE_DRAFT)
"""

# General errors
VALIDATION_ERROR = "validation_error"
STATE_ERROR = "state_error"

# Draft state errors
NO_ACTIVE_DRAFT = "no_active_draft"
PLAYERS_EXHAUSTED = "players_exhausted"
DRAFT_REPLACED = "draft_replaced"
RESET_UNAVAILABLE = "reset_unavailable"
INVALID_PLAYER_NUMBER = "invalid_player_number"

# Captain errors
FOREIGN_USER = "foreign_user"
IS_CAPTAIN_ALREADY = "is_captain_already"
CAPTAIN_SPOTS_FILLED = "captain_spots_filled"
TEAM_HAS_CAPTAIN = "team_has_captain"
NO_CAPTAIN_CANDIDATES = "no_captain_candidates"

# Pick turn errors
CAPTAINS_NEEDED = "captains_needed"
NOT_CAPTAIN = "not_captain"
NOT_YOUR_TURN = "not_your_turn"

# Invariant violations (session is dropped)
PICK_SEQUENCE_INVARIANT_VIOLATION = "pick_sequence_invariant_violation"
HISTORY_INVARIANT_VIOLATION = "history_invariant_violation"
