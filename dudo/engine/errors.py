"""
Dudo - Engine Errors

Every error here is recoverable: the match is left unchanged and the same
actor may retry.
"""

from dudo.engine.base import Violation


class DudoError(ValueError):
    """Base class for rejected player intents."""


class IllegalBid(DudoError):
    """A bid was rejected by the legality rules."""

    violation = Violation.ILLEGAL_RAISE

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidBidValues(IllegalBid):
    """Quantity is not positive or face is outside 1-6."""

    violation = Violation.INVALID_VALUES


class ExceedsTableMaximum(IllegalBid):
    """Quantity is greater than the dice remaining in play."""

    violation = Violation.EXCEEDS_TABLE_MAXIMUM


class IllegalRaise(IllegalBid):
    """The bid does not legally follow the current bid."""

    violation = Violation.ILLEGAL_RAISE


class NoActiveBid(DudoError):
    """Call or Spot-On with nothing to challenge."""


class RoundNotActive(DudoError):
    """An intent arrived while no round is in progress."""


class GameOver(DudoError):
    """The match already has a winner."""


_BY_VIOLATION: dict[Violation, type[IllegalBid]] = {
    Violation.INVALID_VALUES: InvalidBidValues,
    Violation.EXCEEDS_TABLE_MAXIMUM: ExceedsTableMaximum,
    Violation.ILLEGAL_RAISE: IllegalRaise,
}


def error_for(violation: Violation, reason: str) -> IllegalBid:
    """Build the exception matching a legality violation."""
    return _BY_VIOLATION[violation](reason)
