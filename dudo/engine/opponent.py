"""
Dudo - AI Opponent

Chooses between raising, calling and declaring spot on for an automated
player. The opponent only reads the match; the caller applies the action.

Decision policy:
    - No bid yet: open with a small quantity on a non-Ace face
    - Bid well above the expected count: call
    - Bid at the expected count: occasionally declare spot on
    - Otherwise: make the minimal legal raise, or call if none exists
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dudo.engine.actions import Action, Call, Raise, SpotOn
from dudo.engine.base import DIE_FACES, WILD_FACE, Bid
from dudo.engine.rules import DudoRules
from dudo.engine.validators import validate_probability, validate_starting_dice

if TYPE_CHECKING:
    from dudo.engine.match import Match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpponentProfile:
    """
    Tuning knobs for an AI opponent.

    Attributes:
        name: Display name of the opponent
        starting_dice: Dice the opponent brings to a match (1-10)
        call_margin: How far a bid may exceed the estimate before calling
        spot_on_chance: Probability of declaring spot on when the bid is close
        spot_on_window: Distance from the estimate that counts as close
        raise_quantity_bias: Probability of raising quantity before face
    """
    name: str = "Rival"
    starting_dice: int = 5
    call_margin: int = 1
    spot_on_chance: float = 0.10
    spot_on_window: int = 0
    raise_quantity_bias: float = 0.0

    def __post_init__(self) -> None:
        """Validate profile values."""
        validate_starting_dice(self.starting_dice)
        validate_probability(self.spot_on_chance, "spot_on_chance")
        validate_probability(self.raise_quantity_bias, "raise_quantity_bias")
        if self.call_margin < 0:
            raise ValueError(f"call_margin cannot be negative, got {self.call_margin}.")
        if self.spot_on_window < 0:
            raise ValueError(f"spot_on_window cannot be negative, got {self.spot_on_window}.")


CAUTIOUS = OpponentProfile(name="Cautious", call_margin=0, spot_on_chance=0.05)
BALANCED = OpponentProfile(name="Balanced")
RECKLESS = OpponentProfile(
    name="Reckless",
    call_margin=3,
    spot_on_chance=0.15,
    spot_on_window=1,
    raise_quantity_bias=0.6,
)

PROFILES: dict[str, OpponentProfile] = {
    "cautious": CAUTIOUS,
    "balanced": BALANCED,
    "reckless": RECKLESS,
}


def get_profile(name: str) -> OpponentProfile:
    """Look up a built-in profile by name (case-insensitive)."""
    try:
        return PROFILES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown opponent profile {name!r}; choose one of {sorted(PROFILES)}."
        ) from None


class OpponentEngine:
    """Stateless decision heuristic for automated players."""

    OPENING_MAX_QUANTITY = 3
    WILD_MATCH_PROBABILITY = 1 / 6
    # A plain face matches itself or an Ace
    PLAIN_MATCH_PROBABILITY = 2 / 6

    @classmethod
    def estimate_matches(cls, face: int, total_dice_in_play: int) -> int:
        """Expected number of dice on the table matching `face`."""
        p = cls.WILD_MATCH_PROBABILITY if face == WILD_FACE else cls.PLAIN_MATCH_PROBABILITY
        return round(total_dice_in_play * p)

    @classmethod
    def opening_bid(cls, total_dice_in_play: int, rng: random.Random) -> Bid:
        """A conservative first bid: 1-3 dice of a random non-Ace face."""
        quantity = min(rng.randint(1, cls.OPENING_MAX_QUANTITY), max(1, total_dice_in_play))
        face = rng.randint(DudoRules.LOWEST_PLAIN_FACE, DIE_FACES)
        return Bid(quantity, face)

    @classmethod
    def decide(
        cls,
        match: Match,
        profile: OpponentProfile = BALANCED,
        rng: random.Random | None = None,
    ) -> Action:
        """
        Choose an action for the player whose turn it is.

        Args:
            match: Match to read (never modified)
            profile: Opponent tuning
            rng: Random source (defaults to the match's)

        Returns:
            Raise with a legal bid, Call or SpotOn
        """
        rng = rng if rng is not None else match.rng
        total = match.total_dice_in_play()
        current = match.current_bid

        if current is None:
            bid = cls._ensure_legal(None, cls.opening_bid(total, rng), total)
            logger.debug("%s opens with %s", profile.name, bid)
            return Raise(bid)

        estimate = cls.estimate_matches(current.face, total)
        gap = current.quantity - estimate

        if gap > profile.call_margin:
            logger.debug("%s calls %s (estimate %d)", profile.name, current, estimate)
            return Call()

        if abs(gap) <= profile.spot_on_window and rng.random() < profile.spot_on_chance:
            logger.debug("%s declares spot on for %s (estimate %d)", profile.name, current, estimate)
            return SpotOn()

        prefer_quantity = profile.raise_quantity_bias > 0 and rng.random() < profile.raise_quantity_bias
        bid = DudoRules.minimal_raise(current, total, prefer_quantity=prefer_quantity)
        if bid is None:
            logger.debug("%s has no legal raise over %s and calls", profile.name, current)
            return Call()

        logger.debug("%s raises %s to %s", profile.name, current, bid)
        return Raise(bid)

    @classmethod
    def _ensure_legal(cls, current: Bid | None, candidate: Bid, total: int) -> Bid:
        if DudoRules.is_legal(current, candidate, total):
            return candidate
        fallback = DudoRules.minimal_raise(current, total)
        return fallback if fallback is not None else candidate
