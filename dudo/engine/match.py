"""
Dudo - Match State

The mutable aggregate for one match: players, their dice, the current bid,
whose turn it is and the event log. Every change to a match goes through
the methods here; the rules, resolver and opponent only read it.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from dudo.engine.actions import Action, Call, Raise, SpotOn
from dudo.engine.base import Bid, MatchConfig, Player, face_name
from dudo.engine.dice import make_rng, roll_dice
from dudo.engine.errors import GameOver, NoActiveBid, RoundNotActive, error_for
from dudo.engine.events import EventLog, GameEvent
from dudo.engine.opponent import BALANCED, OpponentEngine, OpponentProfile
from dudo.engine.resolver import CallResult, RoundResolver, SpotOnResult, format_dice
from dudo.engine.rules import DudoRules

logger = logging.getLogger(__name__)


class Match:
    """
    A single Dudo match between two or more players.

    Dice and AI choices draw from one injected random source so a match can
    be replayed from its seed.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        profile: OpponentProfile = BALANCED,
    ) -> None:
        self.config = config if config is not None else MatchConfig()
        self.rng = rng if rng is not None else make_rng(seed)
        self.profile = profile
        self.players: list[Player] = [
            Player(name=name, dice_count=self.config.starting_dice, is_automated=automated)
            for name, automated in zip(self.config.player_names, self.config.automated)
        ]
        self.log = EventLog(self.config.log_capacity)
        self.current_bid: Bid | None = None
        self.last_bidder_index: int | None = None
        self.current_turn_index = 0
        self.round_active = False
        self.round_number = 0
        self.bid_history: list[Bid] = []

    # -- Queries ---------------------------------------------------------

    def current_player(self) -> Player:
        return self.players[self.current_turn_index]

    def total_dice_in_play(self) -> int:
        return DudoRules.total_dice_in_play(self.players)

    def active_players(self) -> list[Player]:
        return [p for p in self.players if not p.eliminated]

    def is_game_over(self) -> bool:
        return RoundResolver.is_over(self.players)

    def winner(self) -> Player | None:
        """The remaining player once the match is over."""
        return RoundResolver.winner(self.players)

    def suggest_bid(self) -> Bid | None:
        """Minimal legal bid for the player to act, for pre-filling a bid picker."""
        return DudoRules.minimal_raise(self.current_bid, self.total_dice_in_play())

    # -- Round lifecycle -------------------------------------------------

    def start_round(self) -> None:
        """
        Roll fresh dice for every active player and open bidding.

        Raises:
            GameOver: If only one player has dice left
        """
        if self.is_game_over():
            raise GameOver("The match is over; restart to play again.")

        for player in self.active_players():
            player.dice = roll_dice(player.dice_count, self.rng)

        if self.players[self.current_turn_index].eliminated:
            self.current_turn_index = self._next_active_index(self.current_turn_index)

        self.current_bid = None
        self.last_bidder_index = None
        self.bid_history = []
        self.round_active = True
        self.round_number += 1

        opener = self.current_player()
        logger.info("Round %d started, %s opens", self.round_number, opener.name)
        self.log.append(
            GameEvent.ROUND_STARTED,
            f"New round started. {opener.name} goes first.",
            player_index=self.current_turn_index,
            round=self.round_number,
        )

    def place_bid(self, quantity: int, face: int) -> Bid:
        """
        Place a bid for the player whose turn it is.

        Returns:
            The bid now on the table

        Raises:
            RoundNotActive: If no round is in progress
            InvalidBidValues / ExceedsTableMaximum / IllegalRaise: If the bid
                does not legally follow the current bid
        """
        self._require_round()
        bid = Bid(quantity=quantity, face=face)
        result = DudoRules.is_legal(self.current_bid, bid, self.total_dice_in_play())
        if not result.legal:
            logger.debug("Rejected bid %s from seat %d: %s", bid, self.current_turn_index, result.reason)
            raise error_for(result.violation, result.reason)

        bidder = self.current_turn_index
        self.current_bid = bid
        self.last_bidder_index = bidder
        self.bid_history.append(bid)
        self.log.append(
            GameEvent.BID_PLACED,
            f"{self.players[bidder].name} bids {bid}",
            player_index=bidder,
            quantity=bid.quantity,
            face=bid.face,
        )
        self.current_turn_index = self._next_active_index(bidder)
        return bid

    def call(self) -> CallResult:
        """
        The current player challenges the bid (Dudo).

        Raises:
            NoActiveBid: If no bid has been made this round
            RoundNotActive: If the round has already been resolved
        """
        self._require_challengeable()
        result = RoundResolver.resolve_call(self)
        self.round_active = False

        caller = self.players[result.caller_index]
        loser = self.players[result.loser_index]
        verdict = (
            f"Bid was correct! {loser.name} loses a die!"
            if result.bid_held
            else f"Bid was wrong! {loser.name} loses a die!"
        )
        self.log.append(
            GameEvent.CALL_RESOLVED,
            f"{caller.name} calls {result.bid}! Revealed {RoundResolver.format_reveal(self.players)}. "
            f"Actual count: {result.matched_count} {face_name(result.bid.face)}. {verdict}",
            player_index=result.caller_index,
            matched=result.matched_count,
            held=result.bid_held,
            loser=result.loser_index,
        )
        logger.info(
            "Round %d: call on %s, %d matching, %s loses a die",
            self.round_number, result.bid, result.matched_count, loser.name,
        )

        self._remove_die(result.loser_index)
        self._set_opener(result.next_opener)
        return result

    def spot_on(self) -> SpotOnResult:
        """
        The current player claims the bid is exact.

        Raises:
            NoActiveBid: If no bid has been made this round
            RoundNotActive: If the round has already been resolved
        """
        self._require_challengeable()
        result = RoundResolver.resolve_spot_on(self)
        self.round_active = False

        caller = self.players[result.caller_index]
        verdict = (
            "Spot on! No one loses a die."
            if result.exact
            else f"Wrong! {caller.name} loses a die!"
        )
        self.log.append(
            GameEvent.SPOT_ON_RESOLVED,
            f"{caller.name} calls spot on for {result.bid}! "
            f"Revealed {RoundResolver.format_reveal(self.players)}. "
            f"Actual count: {result.matched_count} {face_name(result.bid.face)}. {verdict}",
            player_index=result.caller_index,
            matched=result.matched_count,
            exact=result.exact,
        )
        logger.info(
            "Round %d: spot on for %s, %d matching, %s",
            self.round_number, result.bid, result.matched_count, "exact" if result.exact else "missed",
        )

        if result.loser_index is not None:
            self._remove_die(result.loser_index)
        self._set_opener(result.next_opener)
        return result

    # -- AI --------------------------------------------------------------

    def ai_decision(self, profile: OpponentProfile | None = None) -> Action:
        """Ask the opponent engine what the current player should do."""
        return OpponentEngine.decide(self, profile or self.profile, rng=self.rng)

    def apply(self, action: Action) -> Bid | CallResult | SpotOnResult:
        """Apply an action for the current player."""
        if isinstance(action, Raise):
            return self.place_bid(action.bid.quantity, action.bid.face)
        if isinstance(action, Call):
            return self.call()
        if isinstance(action, SpotOn):
            return self.spot_on()
        raise TypeError(f"Unknown action: {action!r}")

    # -- Presentation ----------------------------------------------------

    def snapshot(self, viewer_index: int | None = None) -> dict[str, Any]:
        """
        Plain-data view of the match for a presentation layer.

        While a round is active, dice of players other than `viewer_index`
        are hidden. With no viewer every player's dice are shown.
        """
        winner = self.winner() if self.is_game_over() else None
        players = []
        for index, player in enumerate(self.players):
            hidden = self.round_active and viewer_index is not None and index != viewer_index
            players.append({
                "name": player.name,
                "dice_count": player.dice_count,
                "dice": format_dice(player.dice, hidden=hidden),
                "is_automated": player.is_automated,
                "eliminated": player.eliminated,
            })

        bid = self.current_bid
        return {
            "round_number": self.round_number,
            "round_active": self.round_active,
            "current_turn_index": self.current_turn_index,
            "current_bid": None if bid is None else {"quantity": bid.quantity, "face": bid.face},
            "current_bid_text": DudoRules.describe(bid),
            "last_bidder_index": self.last_bidder_index,
            "total_dice_in_play": self.total_dice_in_play(),
            "players": players,
            "log": self.log.messages(),
            "game_over": winner is not None,
            "winner": None if winner is None else winner.name,
        }

    def restart(self) -> None:
        """Reset every player to the starting dice and clear the table."""
        for player in self.players:
            player.dice_count = self.config.starting_dice
            player.dice = ()
            player.eliminated = False
        self.current_bid = None
        self.last_bidder_index = None
        self.current_turn_index = 0
        self.round_active = False
        self.round_number = 0
        self.bid_history = []
        self.log.clear()
        logger.info("Match restarted with %d dice each", self.config.starting_dice)

    # -- Internals -------------------------------------------------------

    def _require_round(self) -> None:
        if not self.round_active:
            raise RoundNotActive("No round is in progress; start a new round first.")

    def _require_challengeable(self) -> None:
        if self.current_bid is None:
            raise NoActiveBid("There is no bid to challenge.")
        self._require_round()

    def _next_active_index(self, index: int) -> int:
        """Next non-eliminated seat after `index`, wrapping around the table."""
        count = len(self.players)
        for step in range(1, count + 1):
            candidate = (index + step) % count
            if not self.players[candidate].eliminated:
                return candidate
        return index

    def _set_opener(self, index: int) -> None:
        if self.players[index].eliminated:
            index = self._next_active_index(index)
        self.current_turn_index = index

    def _remove_die(self, index: int) -> None:
        player = self.players[index]
        player.lose_die()
        self.log.append(
            GameEvent.DIE_LOST,
            f"{player.name} has {player.dice_count} dice left.",
            player_index=index,
            dice_left=player.dice_count,
        )
        if player.eliminated:
            logger.info("%s is out of dice", player.name)
            self.log.append(
                GameEvent.PLAYER_ELIMINATED,
                f"{player.name} has lost all dice!",
                player_index=index,
            )

        winner = self.winner()
        if winner is not None:
            logger.info("%s wins the match", winner.name)
            self.log.append(
                GameEvent.GAME_WON,
                f"{winner.name} wins!",
                player_index=self.players.index(winner),
            )
