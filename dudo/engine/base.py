"""
Dudo - Game Engine Base Classes

This module defines the foundational data structures used throughout the
engine. Bids and configuration are immutable (frozen dataclasses); players
are mutable and owned exclusively by a Match.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from dudo.config.settings import Settings


WILD_FACE = 1
DIE_FACES = 6
FACE_RANGE = range(1, DIE_FACES + 1)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def face_name(face: int) -> str:
    """Display name for a face value ("Aces" for the wildcard face)."""
    return "Aces" if face == WILD_FACE else f"{face}s"


class Violation(Enum):
    """Reasons a proposed bid can be rejected."""
    INVALID_VALUES = auto()
    EXCEEDS_TABLE_MAXIMUM = auto()
    ILLEGAL_RAISE = auto()


@dataclass(frozen=True)
class Bid:
    """
    A claim that at least `quantity` dice across the table show `face`.

    Attributes:
        quantity: Number of dice claimed
        face: Face value claimed (1 = Aces)
    """
    quantity: int
    face: int

    def is_valid(self) -> bool:
        """True when quantity is a positive integer and face an integer 1-6."""
        return (
            _is_int(self.quantity) and _is_int(self.face)
            and self.quantity > 0 and self.face in FACE_RANGE
        )

    @property
    def is_wild(self) -> bool:
        """True for a bid on Aces."""
        return self.face == WILD_FACE

    def __str__(self) -> str:
        return f"{self.quantity} {face_name(self.face)}"


@dataclass(frozen=True)
class LegalityResult:
    """
    Outcome of checking a proposed bid against the current one.

    Attributes:
        legal: Whether the bid may be placed
        reason: Human-readable explanation (empty when legal)
        violation: Which rule was broken, if any
    """
    legal: bool
    reason: str = ""
    violation: Violation | None = None

    def __bool__(self) -> bool:
        return self.legal

    @classmethod
    def ok(cls) -> "LegalityResult":
        return cls(legal=True)

    @classmethod
    def reject(cls, violation: Violation, reason: str) -> "LegalityResult":
        return cls(legal=False, reason=reason, violation=violation)


@dataclass
class Player:
    """
    A seat at the table.

    Attributes:
        name: Display name
        dice_count: Dice still owned
        is_automated: Whether the AI drives this player
        dice: Faces rolled this round (replaced wholesale on each roll)
        eliminated: True once the player has no dice left
    """
    name: str
    dice_count: int
    is_automated: bool = False
    dice: tuple[int, ...] = field(default_factory=tuple)
    eliminated: bool = False

    def __post_init__(self) -> None:
        if self.dice_count < 0:
            raise ValueError(f"Dice count cannot be negative, got {self.dice_count}.")
        if self.dice:
            from dudo.engine.validators import validate_dice_values

            self.dice = validate_dice_values(self.dice, expected_count=self.dice_count)
        self.eliminated = self.dice_count == 0

    def lose_die(self) -> None:
        """Remove one die, eliminating the player at zero."""
        self.dice_count = max(0, self.dice_count - 1)
        if self.dice_count == 0:
            self.eliminated = True
            self.dice = ()


@dataclass(frozen=True)
class MatchConfig:
    """
    Configuration for a match.

    Attributes:
        player_names: Seat names in turn order
        starting_dice: Dice each player starts with (1-10)
        automated: Per-seat AI flags (defaults to the last seat being the AI)
        log_capacity: Maximum number of entries kept in the event log
    """
    player_names: tuple[str, ...] = ("Player", "AI")
    starting_dice: int = 5
    automated: tuple[bool, ...] | None = None
    log_capacity: int = 20

    def __post_init__(self) -> None:
        """Validate configuration."""
        # Imported lazily to avoid a cycle (validators depend on base).
        from dudo.engine.validators import (
            validate_log_capacity,
            validate_player_names,
            validate_starting_dice,
        )

        object.__setattr__(self, "player_names", validate_player_names(self.player_names))
        validate_starting_dice(self.starting_dice)
        validate_log_capacity(self.log_capacity)

        if self.automated is None:
            flags = tuple(i == len(self.player_names) - 1 for i in range(len(self.player_names)))
            object.__setattr__(self, "automated", flags)
        else:
            object.__setattr__(self, "automated", tuple(bool(a) for a in self.automated))
            if len(self.automated) != len(self.player_names):
                raise ValueError(
                    f"Expected {len(self.player_names)} automation flags, got {len(self.automated)}."
                )

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        player_names: Sequence[str] = ("Player", "AI"),
        automated: Sequence[bool] | None = None,
    ) -> "MatchConfig":
        """Build a config from application settings."""
        return cls(
            player_names=tuple(player_names),
            starting_dice=settings.starting_dice,
            automated=tuple(automated) if automated is not None else None,
            log_capacity=settings.log_capacity,
        )
