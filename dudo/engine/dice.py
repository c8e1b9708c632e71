"""
Dudo - Dice Rolling

All rolls draw from an explicit random.Random so matches can be replayed
from a seed.
"""

import random

from dudo.engine.base import DIE_FACES


def roll_die(rng: random.Random) -> int:
    """Roll a single D6."""
    return rng.randint(1, DIE_FACES)


def roll_dice(count: int, rng: random.Random) -> tuple[int, ...]:
    """Roll `count` D6 dice.

    Args:
        count: Number of dice to roll
        rng: Random source

    Returns:
        Tuple of face values
    """
    if count < 0:
        raise ValueError(f"Cannot roll a negative number of dice, got {count}.")
    return tuple(roll_die(rng) for _ in range(count))


def make_rng(seed: int | None = None) -> random.Random:
    """Create a dedicated random source, seeded when a seed is given."""
    return random.Random(seed)
