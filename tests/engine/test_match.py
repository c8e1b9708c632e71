"""
Dudo - Match State Tests

Tests for the Match aggregate: round lifecycle, bidding, challenges,
turn order, and the presentation view.
"""

import random

import pytest

from dudo.engine.actions import Call, Raise, SpotOn
from dudo.engine.base import Bid, MatchConfig, Violation
from dudo.engine.errors import (
    DudoError,
    ExceedsTableMaximum,
    GameOver,
    IllegalBid,
    IllegalRaise,
    InvalidBidValues,
    NoActiveBid,
    RoundNotActive,
)
from dudo.engine.events import GameEvent
from dudo.engine.match import Match
from dudo.engine.resolver import CallResult, SpotOnResult
from dudo.engine.rules import DudoRules


# === Construction ===


class TestMatchSetup:
    """Tests for a freshly created match."""

    def test_players_from_config(self, two_player_match):
        names = [p.name for p in two_player_match.players]
        assert names == ["Alice", "Bot"]
        assert [p.dice_count for p in two_player_match.players] == [5, 5]
        assert [p.is_automated for p in two_player_match.players] == [False, True]

    def test_initial_state(self, two_player_match):
        assert two_player_match.current_bid is None
        assert two_player_match.last_bidder_index is None
        assert two_player_match.current_turn_index == 0
        assert two_player_match.round_active is False
        assert two_player_match.round_number == 0
        assert len(two_player_match.log) == 0

    def test_default_config(self):
        match = Match(seed=1)
        assert len(match.players) == 2
        assert match.total_dice_in_play() == 10

    def test_injected_rng_is_used(self):
        rng = random.Random(5)
        match = Match(rng=rng)
        assert match.rng is rng


# === Round lifecycle ===


class TestStartRound:
    """Tests for Match.start_round()."""

    def test_rolls_dice_for_every_player(self, two_player_match):
        two_player_match.start_round()
        for player in two_player_match.players:
            assert len(player.dice) == player.dice_count == 5
            assert all(1 <= d <= 6 for d in player.dice)

    def test_opens_round(self, two_player_match):
        two_player_match.start_round()
        assert two_player_match.round_active is True
        assert two_player_match.round_number == 1
        assert two_player_match.current_bid is None
        assert two_player_match.last_bidder_index is None

    def test_logs_opener(self, two_player_match):
        two_player_match.start_round()
        entry = two_player_match.log.latest()
        assert entry.event == GameEvent.ROUND_STARTED
        assert entry.message == "New round started. Alice goes first."

    def test_skips_eliminated_players(self, rigged):
        match = rigged([(2, 3), (), (4, 5)])
        match.round_active = False
        match.start_round()
        assert match.players[1].dice == ()
        assert len(match.players[0].dice) == 2
        assert len(match.players[2].dice) == 2

    def test_eliminated_opener_passes_turn(self, rigged):
        match = rigged([(2, 3), (), (4, 5)], turn=1)
        match.round_active = False
        match.start_round()
        assert match.current_turn_index == 2

    def test_restarting_clears_bid(self, two_player_match):
        two_player_match.start_round()
        two_player_match.place_bid(2, 3)
        two_player_match.round_active = False
        two_player_match.start_round()
        assert two_player_match.current_bid is None
        assert two_player_match.bid_history == []

    def test_consecutive_rounds_roll_independently(self):
        match = Match(MatchConfig(player_names=("A", "B"), starting_dice=10), seed=3)
        match.start_round()
        first = [p.dice for p in match.players]
        match.start_round()
        second = [p.dice for p in match.players]
        assert first != second
        assert match.current_bid is None
        assert match.round_number == 2

    def test_same_seed_same_dice(self):
        a = Match(seed=99)
        b = Match(seed=99)
        a.start_round()
        b.start_round()
        assert [p.dice for p in a.players] == [p.dice for p in b.players]

    def test_game_over_raises(self, rigged):
        match = rigged([(2, 3), ()])
        with pytest.raises(GameOver):
            match.start_round()


# === Bidding ===


class TestPlaceBid:
    """Tests for Match.place_bid()."""

    def test_opening_bid(self, two_player_match):
        two_player_match.start_round()
        bid = two_player_match.place_bid(3, 4)
        assert bid == Bid(3, 4)
        assert two_player_match.current_bid == Bid(3, 4)
        assert two_player_match.last_bidder_index == 0
        assert two_player_match.current_turn_index == 1
        assert two_player_match.bid_history == [Bid(3, 4)]

    def test_logs_bid(self, two_player_match):
        two_player_match.start_round()
        two_player_match.place_bid(3, 4)
        entry = two_player_match.log.latest()
        assert entry.event == GameEvent.BID_PLACED
        assert entry.message == "Alice bids 3 4s"
        assert entry.player_index == 0

    def test_turn_wraps(self, two_player_match):
        two_player_match.start_round()
        two_player_match.place_bid(3, 4)
        two_player_match.place_bid(3, 5)
        assert two_player_match.current_turn_index == 0
        assert two_player_match.last_bidder_index == 1

    def test_turn_skips_eliminated(self, rigged):
        match = rigged([(2, 3), (), (4, 5)], turn=0)
        match.place_bid(1, 3)
        assert match.current_turn_index == 2
        match.place_bid(1, 4)
        assert match.current_turn_index == 0

    def test_illegal_raise(self, two_player_match):
        two_player_match.start_round()
        two_player_match.place_bid(3, 4)
        with pytest.raises(IllegalRaise, match="minimum bid is 3 5s") as excinfo:
            two_player_match.place_bid(3, 3)
        assert excinfo.value.violation == Violation.ILLEGAL_RAISE
        assert "Must increase face value" in excinfo.value.reason

    def test_rejected_bid_leaves_state_unchanged(self, two_player_match):
        two_player_match.start_round()
        two_player_match.place_bid(3, 4)
        log_size = len(two_player_match.log)
        with pytest.raises(IllegalBid):
            two_player_match.place_bid(2, 4)
        assert two_player_match.current_bid == Bid(3, 4)
        assert two_player_match.current_turn_index == 1
        assert len(two_player_match.log) == log_size

    def test_opening_aces_rejected(self, two_player_match):
        two_player_match.start_round()
        with pytest.raises(IllegalRaise, match="Opening bid cannot be Aces"):
            two_player_match.place_bid(2, 1)

    @pytest.mark.parametrize("quantity,face", [(0, 3), (2, 7), (-1, 1), (2.5, 3), (True, 3), (2, 4.0)])
    def test_invalid_values(self, two_player_match, quantity, face):
        two_player_match.start_round()
        with pytest.raises(InvalidBidValues) as excinfo:
            two_player_match.place_bid(quantity, face)
        assert excinfo.value.violation == Violation.INVALID_VALUES

    def test_fractional_bid_leaves_table_empty(self, two_player_match):
        two_player_match.start_round()
        with pytest.raises(InvalidBidValues):
            two_player_match.place_bid(2.5, 3)
        assert two_player_match.current_bid is None
        assert two_player_match.suggest_bid() == Bid(1, 2)

    def test_exceeds_table_maximum(self, two_player_match):
        two_player_match.start_round()
        with pytest.raises(ExceedsTableMaximum, match="table maximum of 10"):
            two_player_match.place_bid(11, 3)

    def test_errors_are_value_errors(self, two_player_match):
        two_player_match.start_round()
        with pytest.raises(ValueError):
            two_player_match.place_bid(11, 3)
        with pytest.raises(DudoError):
            two_player_match.place_bid(0, 3)

    def test_bid_outside_round(self, two_player_match):
        with pytest.raises(RoundNotActive):
            two_player_match.place_bid(1, 2)

    def test_scenario_b_jump_to_aces(self, rigged):
        match = rigged([(2, 3, 4, 5, 6), (2, 3, 4, 5, 6)], current_bid=Bid(4, 3), bidder=1, turn=0)
        assert match.place_bid(2, 1) == Bid(2, 1)

    def test_scenario_c_table_maximum_exception(self, rigged):
        match = rigged([(2, 3, 4), (2, 3, 4)], current_bid=Bid(3, 1), bidder=1, turn=0)
        assert match.total_dice_in_play() == 6
        with pytest.raises(IllegalRaise):
            match.place_bid(5, 4)
        assert match.place_bid(6, 4) == Bid(6, 4)


# === Challenges ===


class TestCall:
    """Tests for Match.call()."""

    def test_scenario_a_true_bid_caller_loses(self, rigged, scenario_a_dice):
        match = rigged(scenario_a_dice, current_bid=Bid(3, 4), bidder=0, turn=1)
        result = match.call()
        assert isinstance(result, CallResult)
        assert result.bid_held is True
        assert [p.dice_count for p in match.players] == [5, 4]
        assert match.current_turn_index == 1
        assert match.round_active is False

    def test_false_bid_bidder_loses(self, rigged, scenario_a_dice):
        match = rigged(scenario_a_dice, current_bid=Bid(4, 4), bidder=0, turn=1)
        match.call()
        assert [p.dice_count for p in match.players] == [4, 5]
        assert match.current_turn_index == 0

    @pytest.mark.parametrize("quantity", [1, 2, 3, 4, 5, 6])
    def test_exactly_one_die_removed(self, rigged, scenario_a_dice, quantity):
        match = rigged(scenario_a_dice, current_bid=Bid(quantity, 4), bidder=0, turn=1)
        before = match.total_dice_in_play()
        match.call()
        assert match.total_dice_in_play() == before - 1

    def test_logs_summary(self, rigged, scenario_a_dice):
        match = rigged(scenario_a_dice, current_bid=Bid(3, 4), bidder=0, turn=1)
        match.call()
        resolved = match.log.of_type(GameEvent.CALL_RESOLVED)
        assert len(resolved) == 1
        message = resolved[0].message
        assert "P1 calls 3 4s!" in message
        assert "P0: 4 2 3 5 6" in message
        assert "P1: A 4 2 6 5" in message
        assert "Actual count: 3 4s" in message
        assert "Bid was correct! P1 loses a die!" in message
        assert match.log.latest().event == GameEvent.DIE_LOST

    def test_no_bid(self, two_player_match):
        two_player_match.start_round()
        with pytest.raises(NoActiveBid):
            two_player_match.call()

    def test_no_bid_before_first_round(self, two_player_match):
        with pytest.raises(NoActiveBid):
            two_player_match.call()

    def test_second_call_rejected(self, rigged, scenario_a_dice):
        match = rigged(scenario_a_dice, current_bid=Bid(3, 4), bidder=0, turn=1)
        match.call()
        with pytest.raises(RoundNotActive):
            match.call()
        assert match.total_dice_in_play() == 9


class TestSpotOn:
    """Tests for Match.spot_on()."""

    def test_exact_no_die_lost_bidder_opens(self, rigged, scenario_a_dice):
        match = rigged(scenario_a_dice, current_bid=Bid(3, 4), bidder=0, turn=1)
        result = match.spot_on()
        assert isinstance(result, SpotOnResult)
        assert result.exact is True
        assert match.total_dice_in_play() == 10
        assert match.current_turn_index == 0
        assert match.round_active is False
        assert "Spot on! No one loses a die." in match.log.latest().message

    @pytest.mark.parametrize("quantity", [2, 4])
    def test_miss_caller_loses_and_opens(self, rigged, scenario_a_dice, quantity):
        match = rigged(scenario_a_dice, current_bid=Bid(quantity, 4), bidder=0, turn=1)
        result = match.spot_on()
        assert result.exact is False
        assert [p.dice_count for p in match.players] == [5, 4]
        assert match.current_turn_index == 1
        assert match.round_active is False
        resolved = match.log.of_type(GameEvent.SPOT_ON_RESOLVED)[0]
        assert "Wrong! P1 loses a die!" in resolved.message

    def test_no_bid(self, two_player_match):
        two_player_match.start_round()
        with pytest.raises(NoActiveBid):
            two_player_match.spot_on()


# === Elimination and game over ===


class TestElimination:
    """Tests for losing the last die and ending the match."""

    def test_scenario_d_last_die_ends_match(self, rigged):
        match = rigged([(4,), (2, 3)], current_bid=Bid(1, 4), bidder=1, turn=0)
        match.call()
        loser = match.players[0]
        assert loser.dice_count == 0
        assert loser.eliminated is True
        assert match.is_game_over() is True
        assert match.winner() is match.players[1]
        assert match.log.of_type(GameEvent.PLAYER_ELIMINATED)[0].message == "P0 has lost all dice!"
        assert match.log.latest().event == GameEvent.GAME_WON
        assert match.log.latest().message == "P1 wins!"

    def test_eliminated_player_not_rolled_or_counted(self, rigged):
        match = rigged([(4,), (2, 3), (5, 6)], current_bid=Bid(1, 4), bidder=2, turn=0)
        match.call()
        assert match.is_game_over() is False
        assert match.winner() is None
        match.start_round()
        assert match.players[0].dice == ()
        assert match.total_dice_in_play() == 4
        assert DudoRules.count_matching(match.players, 1) == DudoRules.count_matching(match.players[1:], 1)

    def test_eliminated_loser_passes_opening(self, rigged):
        match = rigged([(4,), (2, 3), (5, 6)], current_bid=Bid(1, 4), bidder=2, turn=0)
        match.call()
        assert match.current_turn_index == 1

    def test_missed_spot_on_can_eliminate(self, rigged):
        match = rigged([(2, 2), (3,)], current_bid=Bid(3, 2), bidder=0, turn=1)
        match.spot_on()
        assert match.players[1].eliminated is True
        assert match.winner().name == "P0"


# === Actions and AI ===


class TestApplyAndAI:
    """Tests for Match.apply() and Match.ai_decision()."""

    def test_apply_raise(self, two_player_match):
        two_player_match.start_round()
        assert two_player_match.apply(Raise(Bid(2, 5))) == Bid(2, 5)

    def test_apply_call(self, rigged, scenario_a_dice):
        match = rigged(scenario_a_dice, current_bid=Bid(3, 4), bidder=0, turn=1)
        assert isinstance(match.apply(Call()), CallResult)

    def test_apply_spot_on(self, rigged, scenario_a_dice):
        match = rigged(scenario_a_dice, current_bid=Bid(3, 4), bidder=0, turn=1)
        assert isinstance(match.apply(SpotOn()), SpotOnResult)

    def test_apply_unknown(self, two_player_match):
        with pytest.raises(TypeError, match="Unknown action"):
            two_player_match.apply("raise")  # type: ignore[arg-type]

    def test_ai_opening_is_legal(self, two_player_match):
        two_player_match.start_round()
        action = two_player_match.ai_decision()
        assert isinstance(action, Raise)
        assert DudoRules.is_legal(None, action.bid, 10).legal is True

    @pytest.mark.parametrize("seed", range(10))
    def test_full_ai_match_conserves_dice(self, seed):
        config = MatchConfig(player_names=("A", "B", "C"), starting_dice=3, automated=(True, True, True))
        match = Match(config, seed=seed)
        rounds = 0
        while not match.is_game_over():
            rounds += 1
            assert rounds < 500
            match.start_round()
            before = match.total_dice_in_play()
            result = None
            while match.round_active:
                result = match.apply(match.ai_decision())
            lost = before - match.total_dice_in_play()
            if isinstance(result, SpotOnResult) and result.exact:
                assert lost == 0
            else:
                assert lost == 1
        assert match.winner() is not None
        assert sum(1 for p in match.players if not p.eliminated) == 1


# === Presentation helpers ===


class TestSuggestBid:
    """Tests for Match.suggest_bid()."""

    def test_opening_suggestion(self, two_player_match):
        two_player_match.start_round()
        assert two_player_match.suggest_bid() == Bid(1, 2)

    def test_suggestion_follows_current_bid(self, two_player_match):
        two_player_match.start_round()
        two_player_match.place_bid(3, 4)
        assert two_player_match.suggest_bid() == Bid(3, 5)


class TestSnapshot:
    """Tests for Match.snapshot()."""

    def test_hides_opponent_dice_during_round(self, rigged):
        match = rigged([(1, 2, 3), (4, 5, 6)], current_bid=Bid(2, 3), bidder=0, turn=1)
        view = match.snapshot(viewer_index=0)
        assert view["players"][0]["dice"] == "A 2 3"
        assert view["players"][1]["dice"] == "? ? ?"
        assert view["current_bid"] == {"quantity": 2, "face": 3}
        assert view["current_bid_text"] == "2 3s"
        assert view["total_dice_in_play"] == 6
        assert view["game_over"] is False
        assert view["winner"] is None

    def test_reveals_after_resolution(self, rigged):
        match = rigged([(1, 2, 3), (4, 5, 6)], current_bid=Bid(2, 3), bidder=0, turn=1)
        match.call()
        view = match.snapshot(viewer_index=0)
        assert view["players"][1]["dice"] == "4 5 6"
        assert view["round_active"] is False
        assert view["log"][0] == match.log.messages()[0]

    def test_no_viewer_shows_all(self, rigged):
        match = rigged([(1, 2, 3), (4, 5, 6)])
        view = match.snapshot()
        assert view["players"][1]["dice"] == "4 5 6"
        assert view["current_bid"] is None
        assert view["current_bid_text"] == "no bid"

    def test_winner_reported(self, rigged):
        match = rigged([(4,), (2, 3)], current_bid=Bid(1, 4), bidder=1, turn=0)
        match.call()
        view = match.snapshot()
        assert view["game_over"] is True
        assert view["winner"] == "P1"


class TestEventLogCap:
    """The match log never grows beyond its capacity."""

    def test_capacity_respected(self):
        config = MatchConfig(player_names=("A", "B"), starting_dice=10, log_capacity=3)
        match = Match(config, seed=8)
        match.start_round()
        for quantity in range(1, 7):
            match.place_bid(quantity, 2)
        assert len(match.log) == 3
        assert match.log.messages()[0] == "B bids 6 2s"


class TestRestart:
    """Tests for Match.restart()."""

    def test_restores_dice_and_clears_state(self, rigged):
        match = rigged([(4,), (2, 3)], current_bid=Bid(1, 4), bidder=1, turn=0)
        match.call()
        match.restart()
        assert [p.dice_count for p in match.players] == [2, 2]
        assert not any(p.eliminated for p in match.players)
        assert match.current_bid is None
        assert match.round_number == 0
        assert len(match.log) == 0
        match.start_round()
        assert match.round_active is True
