"""
Persistence extension points.

The engine never performs I/O itself. A collaborator may supply an object
implementing MemoryPersistence: ``load_initial_state`` is called once when
the MemorySystem is built, and ``persist_state`` whenever the caller asks
the system to persist.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .models import Event, Thought


@runtime_checkable
class MemoryPersistence(Protocol):
    """Interface for restoring and saving the two memory collections."""

    def load_initial_state(self) -> tuple[list[Event], list[Thought]]:
        """Return previously stored (events, thoughts) in insertion order."""

    def persist_state(self, events: Sequence[Event], thoughts: Sequence[Thought]) -> None:
        """Save a snapshot of both collections."""


class NullPersistence:
    """Starts empty and discards snapshots."""

    def load_initial_state(self) -> tuple[list[Event], list[Thought]]:
        return [], []

    def persist_state(self, events: Sequence[Event], thoughts: Sequence[Thought]) -> None:
        return None
