"""
Pick sequence generation.

A pick sequence lists which team acts at each step of a draft. Index 0 and
the first slot of the other colour are taken by the captains; every slot
after that is a regular pick. Captains alternate double picks between the
opening and closing single picks, giving the 1-2-2-...-2-1 pattern.
"""

import random

from config import GAME_MODE_MAX_CAPACITY, GAME_MODE_MIN_CAPACITY
from domain.models.team import TeamColor


def generate_pick_sequence(capacity: int, rng: random.Random | None = None) -> list[TeamColor]:
    """
    Generate the pick sequence for a draft of `capacity` players.

    The starting colour is the only random draw; everything after it is
    fixed. For 2 players this just decides which colour each captain lands on.

    Args:
        capacity: Total number of players (even, 2-24)
        rng: Optional random source (defaults to the module-level generator)

    Returns:
        List of TeamColor of length `capacity`, half of each colour

    Raises:
        ValueError: If capacity is odd or out of range
    """
    if capacity % 2 != 0 or not GAME_MODE_MIN_CAPACITY <= capacity <= GAME_MODE_MAX_CAPACITY:
        raise ValueError(f"Cannot build a pick sequence for {capacity} players.")

    chooser = rng or random
    sequence = [chooser.choice((TeamColor.BLUE, TeamColor.RED))]

    while len(sequence) < capacity - 1:
        opposite = sequence[-1].opposite
        sequence.extend((opposite, opposite))

    # Closing single pick goes to whichever colour is short a slot
    if sequence.count(TeamColor.BLUE) < sequence.count(TeamColor.RED):
        sequence.append(TeamColor.BLUE)
    else:
        sequence.append(TeamColor.RED)

    return sequence


def is_balanced(sequence: list[TeamColor]) -> bool:
    """Check that both colours own exactly half of the sequence."""
    return sequence.count(TeamColor.BLUE) == sequence.count(TeamColor.RED)
