"""
Dudo - Match Event Log

Event types and the bounded log a presentation layer reads to narrate the
match. Entries are kept newest first; once the log is full the oldest entry
is dropped.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterator

from dudo.engine.validators import validate_log_capacity


class GameEvent(Enum):
    """Events that can occur during a match."""

    ROUND_STARTED = auto()
    BID_PLACED = auto()
    CALL_RESOLVED = auto()
    SPOT_ON_RESOLVED = auto()
    DIE_LOST = auto()
    PLAYER_ELIMINATED = auto()
    GAME_WON = auto()


@dataclass(frozen=True)
class LogEntry:
    """A single line in the match log."""

    event: GameEvent
    message: str
    player_index: int | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class EventLog:
    """Bounded, newest-first log of match events."""

    def __init__(self, capacity: int = 20) -> None:
        self._capacity = validate_log_capacity(capacity)
        self._entries: deque[LogEntry] = deque(maxlen=self._capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(
        self,
        event: GameEvent,
        message: str,
        player_index: int | None = None,
        **data: Any,
    ) -> LogEntry:
        """Record an event, dropping the oldest entry when full."""
        entry = LogEntry(event=event, message=message, player_index=player_index, data=data)
        # appendleft on a bounded deque discards from the right (oldest)
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> tuple[LogEntry, ...]:
        """All entries, newest first."""
        return tuple(self._entries)

    def messages(self) -> list[str]:
        """All messages, newest first."""
        return [entry.message for entry in self._entries]

    def latest(self) -> LogEntry | None:
        return self._entries[0] if self._entries else None

    def of_type(self, event: GameEvent) -> list[LogEntry]:
        """Entries of a given event type, newest first."""
        return [entry for entry in self._entries if entry.event == event]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)
