"""
Dudo - Round Resolution

Resolves a Call or a Spot-On against the hidden dice. Resolution is pure:
the resolver reports who loses a die and who opens the next round, and the
Match applies the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from dudo.engine.base import WILD_FACE, Bid, Player
from dudo.engine.errors import NoActiveBid
from dudo.engine.rules import DudoRules

if TYPE_CHECKING:
    from dudo.engine.match import Match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallResult:
    """
    Outcome of a Call.

    Attributes:
        bid: The bid that was challenged
        caller_index: Player who called
        bidder_index: Player who made the bid
        matched_count: Dice on the table matching the bid
        bid_held: Whether the bid was true (matched_count >= quantity)
        loser_index: Player who loses a die (and opens the next round)
        revealed: Every player's dice at the time of the call
    """
    bid: Bid
    caller_index: int
    bidder_index: int
    matched_count: int
    bid_held: bool
    loser_index: int
    revealed: tuple[tuple[int, ...], ...]

    @property
    def next_opener(self) -> int:
        return self.loser_index


@dataclass(frozen=True)
class SpotOnResult:
    """
    Outcome of a Spot-On.

    Attributes:
        bid: The bid that was challenged
        caller_index: Player who declared spot on
        bidder_index: Player who made the bid
        matched_count: Dice on the table matching the bid
        exact: Whether the count matched the bid exactly
        loser_index: The caller on a miss, None when exact
        next_opener: Bidder when exact, caller otherwise
        revealed: Every player's dice at the time of the call
    """
    bid: Bid
    caller_index: int
    bidder_index: int
    matched_count: int
    exact: bool
    loser_index: int | None
    next_opener: int
    revealed: tuple[tuple[int, ...], ...]


class RoundResolver:
    """Stateless resolution of challenges and game-over checks."""

    @classmethod
    def _require_bid(cls, match: Match) -> tuple[Bid, int]:
        if match.current_bid is None or match.last_bidder_index is None:
            raise NoActiveBid("There is no bid to challenge.")
        return match.current_bid, match.last_bidder_index

    @classmethod
    def resolve_call(cls, match: Match) -> CallResult:
        """
        Resolve a Call made by the current turn holder.

        If the bid holds the caller loses a die, otherwise the bidder does.

        Raises:
            NoActiveBid: If no bid has been made this round
        """
        bid, bidder = cls._require_bid(match)
        caller = match.current_turn_index
        matched = DudoRules.count_matching(match.players, bid.face)
        held = matched >= bid.quantity
        loser = caller if held else bidder

        logger.debug(
            "Call on %s by seat %d: %d matching, bid %s",
            bid, caller, matched, "held" if held else "failed",
        )
        return CallResult(
            bid=bid,
            caller_index=caller,
            bidder_index=bidder,
            matched_count=matched,
            bid_held=held,
            loser_index=loser,
            revealed=cls.reveal(match.players),
        )

    @classmethod
    def resolve_spot_on(cls, match: Match) -> SpotOnResult:
        """
        Resolve a Spot-On declared by the current turn holder.

        An exact count cancels the round with no die lost and the bidder
        opens next; otherwise the caller loses a die and opens next.

        Raises:
            NoActiveBid: If no bid has been made this round
        """
        bid, bidder = cls._require_bid(match)
        caller = match.current_turn_index
        matched = DudoRules.count_matching(match.players, bid.face)
        exact = matched == bid.quantity

        logger.debug(
            "Spot on %s by seat %d: %d matching, %s",
            bid, caller, matched, "exact" if exact else "missed",
        )
        return SpotOnResult(
            bid=bid,
            caller_index=caller,
            bidder_index=bidder,
            matched_count=matched,
            exact=exact,
            loser_index=None if exact else caller,
            next_opener=bidder if exact else caller,
            revealed=cls.reveal(match.players),
        )

    @classmethod
    def reveal(cls, players: Sequence[Player]) -> tuple[tuple[int, ...], ...]:
        """Snapshot of every player's dice (empty for eliminated players)."""
        return tuple(() if p.eliminated else tuple(p.dice) for p in players)

    @classmethod
    def format_reveal(cls, players: Sequence[Player]) -> str:
        """Readable summary of all active players' dice, Aces shown as 'A'."""
        parts = []
        for player in players:
            if player.eliminated:
                continue
            parts.append(f"{player.name}: {format_dice(player.dice)}")
        return "; ".join(parts)

    @classmethod
    def is_over(cls, players: Sequence[Player]) -> bool:
        """True when at most one player still has dice."""
        return sum(1 for p in players if not p.eliminated) <= 1

    @classmethod
    def winner(cls, players: Sequence[Player]) -> Player | None:
        """The last player with dice, or None while more than one remain."""
        remaining = [p for p in players if not p.eliminated]
        if len(remaining) == 1:
            return remaining[0]
        return None


def format_dice(dice: Sequence[int], hidden: bool = False) -> str:
    """
    Render dice for display.

    Args:
        dice: Face values
        hidden: Show every die as '?'

    Returns:
        Space-separated faces with Aces as 'A', or a dash for no dice
    """
    if not dice:
        return "-"
    if hidden:
        return " ".join("?" for _ in dice)
    return " ".join("A" if d == WILD_FACE else str(d) for d in dice)
