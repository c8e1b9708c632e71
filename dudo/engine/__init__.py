"""
Dudo Game Engine.

Pure Python game logic with zero UI dependencies.
Handles bid legality, dice counting, round resolution and the AI opponent.
"""

from dudo.engine.actions import Action, Call, Raise, SpotOn
from dudo.engine.base import (
    DIE_FACES,
    WILD_FACE,
    Bid,
    LegalityResult,
    MatchConfig,
    Player,
    Violation,
)
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
from dudo.engine.events import EventLog, GameEvent, LogEntry
from dudo.engine.match import Match
from dudo.engine.opponent import PROFILES, OpponentEngine, OpponentProfile, get_profile
from dudo.engine.resolver import CallResult, RoundResolver, SpotOnResult
from dudo.engine.rules import DudoRules

__all__ = [
    # Constants
    "DIE_FACES",
    "WILD_FACE",
    # Data Classes
    "Bid",
    "LegalityResult",
    "MatchConfig",
    "Player",
    "CallResult",
    "SpotOnResult",
    "LogEntry",
    # Actions
    "Action",
    "Raise",
    "Call",
    "SpotOn",
    # Enums
    "GameEvent",
    "Violation",
    # Errors
    "DudoError",
    "IllegalBid",
    "InvalidBidValues",
    "ExceedsTableMaximum",
    "IllegalRaise",
    "NoActiveBid",
    "RoundNotActive",
    "GameOver",
    # Engines
    "DudoRules",
    "RoundResolver",
    "OpponentEngine",
    "OpponentProfile",
    "PROFILES",
    "get_profile",
    "EventLog",
    "Match",
]
