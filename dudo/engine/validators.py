"""
Dudo - Input Validation Utilities

Provides validation functions for engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Sequence

from dudo.engine.base import DIE_FACES


MAX_STARTING_DICE = 10


def validate_dice_values(values: Sequence[int], expected_count: int | None = None) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Sequence of dice values to validate
        expected_count: Exact number of dice required (None = any)

    Returns:
        Validated values as a tuple

    Raises:
        ValueError: If validation fails
    """
    values_tuple = tuple(values)

    if expected_count is not None and len(values_tuple) != expected_count:
        raise ValueError(f"Expected {expected_count} dice, got {len(values_tuple)}.")

    for i, value in enumerate(values_tuple):
        if not isinstance(value, int):
            raise ValueError(f"Die value at index {i} must be an integer, got {type(value).__name__}.")
        if not (1 <= value <= DIE_FACES):
            raise ValueError(
                f"Die value at index {i} is {value}, must be between 1 and {DIE_FACES}."
            )

    return values_tuple


def validate_player_names(names: Sequence[str]) -> tuple[str, ...]:
    """
    Validate the seat names of a match.

    Args:
        names: Names in turn order

    Returns:
        Validated names as a tuple

    Raises:
        ValueError: If fewer than 2 names, any name is blank, or names repeat
    """
    names_tuple = tuple(names)

    if len(names_tuple) < 2:
        raise ValueError(f"At least 2 players required, got {len(names_tuple)}.")

    for i, name in enumerate(names_tuple):
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Player name at index {i} must be a non-empty string.")

    if len(set(names_tuple)) != len(names_tuple):
        raise ValueError("Player names must be unique.")

    return names_tuple


def validate_starting_dice(count: int) -> int:
    """
    Validate the number of dice each player starts with.

    Raises:
        ValueError: If count is not 1-10
    """
    if not isinstance(count, int):
        raise ValueError(f"Starting dice must be an integer, got {type(count).__name__}.")

    if not (1 <= count <= MAX_STARTING_DICE):
        raise ValueError(f"Starting dice must be 1-{MAX_STARTING_DICE}, got {count}.")

    return count


def validate_log_capacity(capacity: int) -> int:
    """Validate an event log capacity (must be a positive integer)."""
    if not isinstance(capacity, int):
        raise ValueError(f"Log capacity must be an integer, got {type(capacity).__name__}.")

    if capacity < 1:
        raise ValueError(f"Log capacity must be positive, got {capacity}.")

    return capacity


def validate_probability(value: float, name: str) -> float:
    """Validate that a value lies in [0, 1]."""
    if not (0.0 <= value <= 1.0):
        raise ValueError(f"{name} must be between 0 and 1, got {value}.")
    return value
