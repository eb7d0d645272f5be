"""
Memory Store - Bounded in-memory sequences of events and thoughts.

Append-only except for maintenance. After every append the capacity
enforcer trims each sequence from the front (oldest insertion first) by
exactly its excess. The trim ignores relevance and confidence: an old but
highly relevant thought is dropped before a recent low-value one.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Event, Thought


class MemoryStore:
    """Owns the event and thought sequences in insertion order."""

    def __init__(self, max_events: int, max_thoughts: int):
        self.max_events = max_events
        self.max_thoughts = max_thoughts
        self._events: list[Event] = []
        self._thoughts: list[Thought] = []

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    @property
    def thoughts(self) -> tuple[Thought, ...]:
        return tuple(self._thoughts)

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def thought_count(self) -> int:
        return len(self._thoughts)

    def append(self, event: Event, thoughts: Iterable[Thought] = ()) -> tuple[int, int]:
        """
        Append an event and its derived thoughts, then enforce limits.

        Returns:
            (events_trimmed, thoughts_trimmed)
        """
        self._events.append(event)
        self._thoughts.extend(thoughts)
        return self.enforce_limits()

    def load(self, events: Iterable[Event], thoughts: Iterable[Thought]) -> tuple[int, int]:
        """Bulk-append restored state, then enforce limits."""
        self._events.extend(events)
        self._thoughts.extend(thoughts)
        return self.enforce_limits()

    def enforce_limits(self) -> tuple[int, int]:
        """Drop the oldest items of any sequence above its maximum."""
        events_excess = max(0, len(self._events) - self.max_events)
        if events_excess:
            del self._events[:events_excess]

        thoughts_excess = max(0, len(self._thoughts) - self.max_thoughts)
        if thoughts_excess:
            del self._thoughts[:thoughts_excess]

        return events_excess, thoughts_excess

    def replace(
        self,
        *,
        events: Iterable[Event] | None = None,
        thoughts: Iterable[Thought] | None = None,
    ) -> None:
        """Swap in maintained sequences. Only maintenance calls this."""
        if events is not None:
            self._events = list(events)
        if thoughts is not None:
            self._thoughts = list(thoughts)
        self.enforce_limits()

    def clear(self) -> None:
        self._events.clear()
        self._thoughts.clear()
