"""
Short status strings posted while a draft runs.
"""

from domain.models.draft import CaptainOutcome, DraftSession, PickOutcome
from domain.models.team import TeamColor
from utils.guild import mention

RANDOM_CAPTAIN_FAILURE = "Failed to assign random captains. Sorry, try captaining yourselves."

# Keyed by WatcherOutcome value
COUNTDOWN_CANCEL_REASONS = {
    "session_gone": "Pug was either cancelled/completed",
    "session_replaced": "Some new pug has replaced the one this timer was meant for",
    "reset": "Countdown cancelled because the pug was reset",
    "captains_filled": "Countdown cancelled because captain positions have been occupied",
}


def strike(text: str) -> str:
    return f"~~{text}~~"


def italic(text: str) -> str:
    return f"_{text}_"


def countdown(seconds_left: float) -> str:
    """Countdown line, e.g. 'Auto captains in about `29` seconds'."""
    return f"Auto captains in about `{max(int(seconds_left), 0)}` seconds"


def countdown_cancelled(last_text: str, reason_key: str) -> str:
    """Strike through the countdown and explain why it stopped."""
    reason = COUNTDOWN_CANCEL_REASONS.get(reason_key, "Countdown cancelled")
    return f"{strike(last_text)}\n{italic(reason)}"


def countdown_expired(deadline_seconds: float) -> str:
    return f"Random captain assignment because it's been more than {int(deadline_seconds)} seconds"


def captains_announcement(
    outcome: CaptainOutcome, blue_captain_id: int | None, red_captain_id: int | None
) -> str:
    """Status line after a captain assignment."""
    if outcome is CaptainOutcome.NEED_BLUE_CAPTAIN:
        return f"{mention(red_captain_id)} is captain of Red team. Blue team needs a captain."
    if outcome is CaptainOutcome.NEED_RED_CAPTAIN:
        return f"{mention(blue_captain_id)} is captain of Blue team. Red team needs a captain."
    captains = (
        f"Blue captain: {mention(blue_captain_id)} | Red captain: {mention(red_captain_id)}"
    )
    if outcome is CaptainOutcome.TWO_PLAYER_AUTO_PICK:
        return f"{captains}\nTeams are set."
    first = TeamColor.BLUE if outcome is CaptainOutcome.START_PICKING_BLUE else TeamColor.RED
    first_captain = blue_captain_id if first is TeamColor.BLUE else red_captain_id
    return f"{captains}\n{mention(first_captain)} ({first.label}) picks first."


def pick_announcement(outcome: PickOutcome, session: DraftSession) -> str:
    """Status line after a pick."""
    if outcome is PickOutcome.COMPLETE:
        return "Teams are set."
    picks = session.picks_remaining_this_turn
    suffix = "s" if picks != 1 else ""
    return f"{mention(session.currently_picking_captain)} to pick ({picks} pick{suffix})."


def not_your_turn(captain_id: int | None) -> str:
    return f"Ignored - {mention(captain_id)} to pick"


def teams_summary(session: DraftSession) -> str:
    """One line per team, captain first."""
    lines = []
    for team in (TeamColor.BLUE, TeamColor.RED):
        members = ", ".join(mention(pid) for pid in session.team_ids(team)) or "-"
        lines.append(f"**{team.label}**: {members}")
    return "\n".join(lines)
