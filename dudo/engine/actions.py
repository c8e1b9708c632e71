"""
Dudo - Player Actions

The closed set of moves a player can make on their turn. Only a raise
carries data.
"""

from dataclasses import dataclass
from typing import Union

from dudo.engine.base import Bid


@dataclass(frozen=True)
class Raise:
    """Place a higher bid."""
    bid: Bid

    def __str__(self) -> str:
        return f"raise to {self.bid}"


@dataclass(frozen=True)
class Call:
    """Challenge the current bid as an overstatement (Dudo)."""

    def __str__(self) -> str:
        return "call"


@dataclass(frozen=True)
class SpotOn:
    """Claim the current bid is exactly right."""

    def __str__(self) -> str:
        return "spot on"


Action = Union[Raise, Call, SpotOn]
