"""
Dudo - Bidding Rules

Counting dice against a bid and deciding whether a proposed bid legally
follows the current one. All methods are stateless class methods operating
on Bid and Player data.

Bidding Rules:
    - Opening bid: any quantity up to the table maximum, never on Aces
    - Same class (non-Aces): raise the quantity, or keep it and raise the face
    - Onto Aces: exactly half the current quantity, rounded up
    - Aces to Aces: raise the quantity
    - Off Aces: exactly double the quantity plus one, or the table maximum
      when that would exceed it
    - Quantity at the table maximum: keep it and raise the face
"""

import math
from typing import Iterable

from dudo.engine.base import (
    DIE_FACES,
    WILD_FACE,
    Bid,
    LegalityResult,
    Player,
    Violation,
    face_name,
)


class DudoRules:
    """
    Stateless rule engine for Dudo bidding.

    All methods are class methods operating on immutable data.
    """

    LOWEST_PLAIN_FACE = WILD_FACE + 1
    OPENING_BID = Bid(quantity=1, face=LOWEST_PLAIN_FACE)

    # Tiebreak ranks used by bid_strength()
    _WILD_TIEBREAK = DIE_FACES + 1

    @classmethod
    def count_matching(cls, players: Iterable[Player], face: int) -> int:
        """
        Count dice across all active players that match a face.

        Aces also count toward any non-Ace face. A bid on Aces counts
        only Aces.

        Args:
            players: Players at the table (eliminated ones are skipped)
            face: Face value being checked

        Returns:
            Number of matching dice
        """
        count = 0
        for player in players:
            if player.eliminated:
                continue
            for die in player.dice:
                if die == face or (face != WILD_FACE and die == WILD_FACE):
                    count += 1
        return count

    @classmethod
    def total_dice_in_play(cls, players: Iterable[Player]) -> int:
        """Total dice held by non-eliminated players (the table maximum)."""
        return sum(p.dice_count for p in players if not p.eliminated)

    @classmethod
    def aces_threshold(cls, quantity: int) -> int:
        """Exact quantity required when switching onto Aces."""
        return math.ceil(quantity / 2)

    @classmethod
    def off_aces_threshold(cls, quantity: int) -> int:
        """Exact quantity required when switching off Aces."""
        return quantity * 2 + 1

    @classmethod
    def is_legal(
        cls,
        current: Bid | None,
        proposed: Bid,
        total_dice_in_play: int,
    ) -> LegalityResult:
        """
        Check whether a proposed bid may follow the current bid.

        Args:
            current: Bid on the table, or None for an opening bid
            proposed: Bid being made
            total_dice_in_play: Dice remaining across active players

        Returns:
            LegalityResult with a reason describing the rule broken and the
            minimum bid that would satisfy it
        """
        if not proposed.is_valid():
            return LegalityResult.reject(
                Violation.INVALID_VALUES,
                f"Invalid bid values: quantity must be at least 1 and face 1-{DIE_FACES}, "
                f"got quantity {proposed.quantity} and face {proposed.face}",
            )

        if proposed.quantity > total_dice_in_play:
            return LegalityResult.reject(
                Violation.EXCEEDS_TABLE_MAXIMUM,
                f"Cannot bid more than the table maximum of {total_dice_in_play}",
            )

        if current is None:
            if proposed.is_wild:
                return cls._illegal(
                    f"Opening bid cannot be Aces; minimum bid is {cls.OPENING_BID}"
                )
            return LegalityResult.ok()

        if current.quantity >= total_dice_in_play:
            return cls._check_saturated(current, proposed, total_dice_in_play)

        if not current.is_wild and not proposed.is_wild:
            return cls._check_plain(current, proposed)
        if not current.is_wild and proposed.is_wild:
            return cls._check_onto_aces(current, proposed)
        if current.is_wild and proposed.is_wild:
            return cls._check_aces(current, proposed)
        return cls._check_off_aces(current, proposed, total_dice_in_play)

    @classmethod
    def _illegal(cls, reason: str) -> LegalityResult:
        return LegalityResult.reject(Violation.ILLEGAL_RAISE, reason)

    @classmethod
    def _check_saturated(cls, current: Bid, proposed: Bid, total: int) -> LegalityResult:
        if current.face >= DIE_FACES:
            return cls._illegal(
                f"{current} is the highest possible bid at the table maximum of {total}; "
                "call or declare spot on"
            )
        if proposed.quantity != current.quantity or proposed.face <= current.face:
            minimum = Bid(current.quantity, current.face + 1)
            return cls._illegal(
                f"Quantity is already at the table maximum ({total}); keep the quantity "
                f"and increase the face value above {current.face}: minimum bid is {minimum}"
            )
        return LegalityResult.ok()

    @classmethod
    def _check_plain(cls, current: Bid, proposed: Bid) -> LegalityResult:
        if proposed.quantity > current.quantity:
            return LegalityResult.ok()
        if proposed.quantity == current.quantity and proposed.face > current.face:
            return LegalityResult.ok()

        if proposed.quantity == current.quantity:
            reason = f"Must increase face value above {current.face} or quantity above {current.quantity}"
        elif proposed.face > current.face:
            reason = f"Cannot decrease quantity below {current.quantity} when increasing face value"
        else:
            reason = (
                f"Must increase quantity above {current.quantity} or "
                f"(with same quantity) increase face value above {current.face}"
            )
        minimum = Bid(current.quantity, current.face + 1) if current.face < DIE_FACES \
            else Bid(current.quantity + 1, cls.LOWEST_PLAIN_FACE)
        return cls._illegal(f"{reason}; minimum bid is {minimum}")

    @classmethod
    def _check_onto_aces(cls, current: Bid, proposed: Bid) -> LegalityResult:
        required = cls.aces_threshold(current.quantity)
        if proposed.quantity == required:
            return LegalityResult.ok()
        return cls._illegal(
            f"Switching to Aces requires exactly {Bid(required, WILD_FACE)} "
            f"(half of {current.quantity}, rounded up)"
        )

    @classmethod
    def _check_aces(cls, current: Bid, proposed: Bid) -> LegalityResult:
        if proposed.quantity > current.quantity:
            return LegalityResult.ok()
        return cls._illegal(
            f"Must increase quantity above {current.quantity} Aces; "
            f"minimum bid is {Bid(current.quantity + 1, WILD_FACE)}"
        )

    @classmethod
    def _check_off_aces(cls, current: Bid, proposed: Bid, total: int) -> LegalityResult:
        required = cls.off_aces_threshold(current.quantity)
        if proposed.quantity == required:
            return LegalityResult.ok()
        if required > total and proposed.quantity == total:
            return LegalityResult.ok()

        if required > total:
            return cls._illegal(
                f"Leaving Aces requires {required} (double {current.quantity} plus 1), "
                f"which exceeds the table; bid the table maximum of {total} instead"
            )
        return cls._illegal(
            f"Leaving Aces requires exactly {required} (double {current.quantity} plus 1); "
            f"minimum bid is {Bid(required, cls.LOWEST_PLAIN_FACE)}"
        )

    @classmethod
    def bid_strength(cls, bid: Bid, total_dice_in_play: int) -> tuple[int, int]:
        """
        Comparable weight of a bid at a table of the given size.

        One Ace weighs as two plain dice. Bids at the table maximum outrank
        everything else and are ordered by face. Every legal raise has a
        strictly greater strength than the bid it follows.

        Returns:
            (level, tiebreak) tuple
        """
        if bid.quantity >= total_dice_in_play:
            return (2 * total_dice_in_play + 1, bid.face)
        if bid.is_wild:
            return (2 * bid.quantity, cls._WILD_TIEBREAK)
        return (bid.quantity, bid.face)

    @classmethod
    def legal_raises(cls, current: Bid | None, total_dice_in_play: int) -> list[Bid]:
        """
        Every bid that may legally follow `current`, weakest first.

        Args:
            current: Bid on the table, or None for an opening bid
            total_dice_in_play: Dice remaining across active players

        Returns:
            List of legal bids (empty when no raise exists)
        """
        candidates = [
            Bid(quantity, face)
            for quantity in range(1, total_dice_in_play + 1)
            for face in range(1, DIE_FACES + 1)
        ]
        legal = [b for b in candidates if cls.is_legal(current, b, total_dice_in_play)]
        return sorted(legal, key=lambda b: cls.bid_strength(b, total_dice_in_play))

    @classmethod
    def minimal_raise(
        cls,
        current: Bid | None,
        total_dice_in_play: int,
        prefer_quantity: bool = False,
    ) -> Bid | None:
        """
        Smallest sensible legal raise above `current`.

        Off Aces a face increase is preferred over a quantity increase
        (unless `prefer_quantity` is set); on Aces the quantity goes up by one.

        Args:
            current: Bid on the table, or None for an opening bid
            total_dice_in_play: Dice remaining across active players
            prefer_quantity: Try raising the quantity before the face

        Returns:
            A legal Bid, or None if no legal raise exists
        """
        if total_dice_in_play < 1:
            return None
        if current is None:
            return cls.OPENING_BID

        for candidate in cls._raise_candidates(current, total_dice_in_play, prefer_quantity):
            if cls.is_legal(current, candidate, total_dice_in_play):
                return candidate

        raises = cls.legal_raises(current, total_dice_in_play)
        return raises[0] if raises else None

    @classmethod
    def _raise_candidates(cls, current: Bid, total: int, prefer_quantity: bool) -> list[Bid]:
        if current.quantity >= total:
            if current.face < DIE_FACES:
                return [Bid(current.quantity, current.face + 1)]
            return []

        if current.is_wild:
            off_aces = min(cls.off_aces_threshold(current.quantity), total)
            return [
                Bid(current.quantity + 1, WILD_FACE),
                Bid(off_aces, cls.LOWEST_PLAIN_FACE),
            ]

        candidates = []
        if current.face < DIE_FACES:
            candidates.append(Bid(current.quantity, current.face + 1))
            candidates.append(Bid(current.quantity + 1, current.face))
        else:
            candidates.append(Bid(current.quantity + 1, cls.LOWEST_PLAIN_FACE))
        if prefer_quantity:
            candidates.reverse()
        candidates.append(Bid(cls.aces_threshold(current.quantity), WILD_FACE))
        return candidates

    @classmethod
    def describe(cls, bid: Bid | None) -> str:
        """Display text for a bid, or a placeholder when there is none."""
        if bid is None:
            return "no bid"
        return f"{bid.quantity} {face_name(bid.face)}"
