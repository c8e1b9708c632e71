"""
Dudo - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random
from typing import Callable, Sequence

import pytest

from dudo.engine.base import Bid, MatchConfig, Player
from dudo.engine.match import Match


# =============================================================================
# RANDOMNESS
# =============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(1234)


# =============================================================================
# MATCH FIXTURES
# =============================================================================

def rig_match(
    dice: Sequence[Sequence[int]],
    *,
    current_bid: Bid | None = None,
    bidder: int | None = None,
    turn: int = 0,
    names: Sequence[str] | None = None,
    seed: int = 0,
) -> Match:
    """
    Build a match mid-round with fixed dice.

    Args:
        dice: Dice for each seat; an empty sequence marks an eliminated player
        current_bid: Bid on the table (bidder defaults to the seat before `turn`)
        bidder: Seat that made current_bid
        turn: Seat whose turn it is
        names: Seat names (defaults to P0, P1, ...)
        seed: Seed for the match RNG
    """
    names = tuple(names) if names is not None else tuple(f"P{i}" for i in range(len(dice)))
    config = MatchConfig(player_names=names, starting_dice=max(len(d) for d in dice) or 1)
    match = Match(config, seed=seed)
    match.players = [
        Player(name=name, dice_count=len(d), dice=tuple(d), is_automated=(i == len(dice) - 1))
        for i, (name, d) in enumerate(zip(names, dice))
    ]
    match.round_active = True
    match.round_number = 1
    match.current_turn_index = turn
    if current_bid is not None:
        match.current_bid = current_bid
        match.last_bidder_index = bidder if bidder is not None else (turn - 1) % len(dice)
        match.bid_history = [current_bid]
    return match


@pytest.fixture
def rigged() -> Callable[..., Match]:
    """Factory for matches with fixed dice (see rig_match)."""
    return rig_match


@pytest.fixture
def two_player_match() -> Match:
    """Fresh seeded two-player match with 5 dice each, round not started."""
    return Match(MatchConfig(player_names=("Alice", "Bot"), starting_dice=5), seed=42)


@pytest.fixture
def scenario_a_dice() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Two hands of 5 dice holding exactly three fours/aces combined."""
    return ((4, 2, 3, 5, 6), (1, 4, 2, 6, 5))
