"""
Dudo - Command Line Harness

Play a match in the terminal against the AI, or watch two AIs play.

    python -m dudo                 # human vs AI
    python -m dudo --auto --seed 7 # AI vs AI, reproducible
"""

from __future__ import annotations

import argparse
import logging
from typing import Callable, Sequence

from dudo.config.settings import Settings, configure_logging, get_settings
from dudo.engine import (
    Bid,
    Call,
    DudoError,
    Match,
    MatchConfig,
    Raise,
    SpotOn,
    get_profile,
)
from dudo.engine.actions import Action
from dudo.engine.events import GameEvent
from dudo.engine.resolver import format_dice

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  b Q F   bid Q dice showing face F (1 = Aces), e.g. "b 3 4"
  call    challenge the current bid (Dudo)
  spot    claim the current bid is exact (Spot On)
  quit    leave the match
"""

# Rounds beyond this in auto mode indicate a stuck match
MAX_AUTO_ROUNDS = 500


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dudo", description="Play Dudo (Perudo) in the terminal.")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible dice")
    parser.add_argument("--dice", type=int, default=None, help="starting dice per player")
    parser.add_argument("--profile", default=None, help="AI opponent profile (cautious, balanced, reckless)")
    parser.add_argument("--name", default="Player", help="your name at the table")
    parser.add_argument("--auto", action="store_true", help="let two AIs play each other")
    return parser


def parse_command(text: str) -> Action | None:
    """
    Turn a typed command into an action.

    Returns:
        The action, or None for quit

    Raises:
        ValueError: If the command is not recognised
    """
    parts = text.strip().lower().split()
    if not parts:
        raise ValueError("Empty command.")

    verb = parts[0]
    if verb in ("q", "quit", "exit"):
        return None
    if verb in ("c", "call", "dudo"):
        return Call()
    if verb in ("s", "spot", "spoton"):
        return SpotOn()
    if verb in ("b", "bid") and len(parts) == 3:
        try:
            return Raise(Bid(int(parts[1]), int(parts[2])))
        except ValueError:
            raise ValueError("Bid needs two integers: quantity and face.") from None
    raise ValueError(f"Unrecognised command: {text.strip()!r}")


def _announce_round_end(match: Match, out: Callable[[str], None]) -> None:
    for player in match.players:
        out(f"  {player.name}: {player.dice_count} dice")


def run_auto(match: Match, out: Callable[[str], None] = print) -> str:
    """Play AI against AI until one player is left. Returns the winner's name."""
    while not match.is_game_over():
        if match.round_number >= MAX_AUTO_ROUNDS:
            raise RuntimeError(f"Match did not finish within {MAX_AUTO_ROUNDS} rounds.")
        match.start_round()
        out(match.log.latest().message)
        while match.round_active:
            actor = match.current_player()
            action = match.ai_decision()
            match.apply(action)
            out(f"{actor.name}: {action}")
        out(_resolution_message(match))
        _announce_round_end(match, out)

    winner = match.winner()
    out(f"{winner.name} WINS!")
    return winner.name


def run_interactive(
    match: Match,
    human_index: int = 0,
    input_fn: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
) -> str | None:
    """Play a human seat against the AI. Returns the winner's name, or None on quit."""
    out(HELP_TEXT)
    while not match.is_game_over():
        match.start_round()
        out(match.log.latest().message)
        human = match.players[human_index]
        out(f"Your dice: {format_dice(human.dice)}")

        while match.round_active:
            actor = match.current_player()
            if actor.is_automated:
                action = match.ai_decision()
                match.apply(action)
                out(f"{actor.name}: {action}")
                continue

            out(f"Current bid: {match.snapshot()['current_bid_text']}")
            suggestion = match.suggest_bid()
            prompt = f"(e.g. b {suggestion.quantity} {suggestion.face}) > " if suggestion else "(call or spot) > "
            try:
                action = parse_command(input_fn(prompt))
            except ValueError as exc:
                out(f"INVALID: {exc}")
                continue
            if action is None:
                out("Goodbye.")
                return None
            try:
                match.apply(action)
            except DudoError as exc:
                out(f"INVALID: {exc}")

        out(_resolution_message(match))
        _announce_round_end(match, out)

    winner = match.winner()
    out(f"{winner.name} WINS!")
    return winner.name


def _resolution_message(match: Match) -> str:
    """The log line describing how the last round was resolved."""
    for entry in match.log:
        if entry.event in (GameEvent.CALL_RESOLVED, GameEvent.SPOT_ON_RESOLVED):
            return entry.message
    return ""


def make_match(args: argparse.Namespace, settings: Settings) -> Match:
    profile = get_profile(args.profile or settings.opponent_profile)
    if args.dice is not None:
        starting_dice = args.dice
    elif "starting_dice" in settings.model_fields_set:
        starting_dice = settings.starting_dice
    else:
        starting_dice = profile.starting_dice
    seed = args.seed if args.seed is not None else settings.rng_seed

    if args.auto:
        names = (f"{profile.name} A", f"{profile.name} B")
        automated = (True, True)
    else:
        names = (args.name, profile.name)
        automated = (False, True)

    config = MatchConfig(
        player_names=names,
        starting_dice=starting_dice,
        automated=automated,
        log_capacity=settings.log_capacity,
    )
    return Match(config, seed=seed, profile=profile)


def main(
    argv: Sequence[str] | None = None,
    input_fn: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    try:
        match = make_match(args, settings)
    except ValueError as exc:
        out(f"error: {exc}")
        return 2

    logger.debug("Starting match: %s", [p.name for p in match.players])
    if args.auto:
        run_auto(match, out)
    else:
        try:
            run_interactive(match, input_fn=input_fn, out=out)
        except (EOFError, KeyboardInterrupt):
            out("Goodbye.")
    return 0
