"""
Forgetting Curve - Probabilistic removal of aged memories.

Items at or before the cutoff (now - 30 days) are evaluated; newer items
are always kept without consuming a random draw. For each evaluated item:

    p_event   = decay * days_since / 30
    p_thought = decay * days_since / 30 - confidence * 0.3

and the item is kept iff a uniform draw ``r`` in [0, 1) satisfies
``r > p``. The probability is not clamped, so p < 0 always keeps and
p >= 1 always drops.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from .models import Event, Thought

SECONDS_PER_DAY = 86400


class RandomSource(Protocol):
    """Anything with ``random.Random.random``'s signature."""

    def random(self) -> float: ...


@dataclass(frozen=True)
class ForgettingConstants:
    """Tunable constants for the forgetting curve."""

    CUTOFF_DAYS: int = 30
    DECAY_HORIZON_DAYS: float = 30.0
    CONFIDENCE_RETENTION_BONUS: float = 0.3


DEFAULT_CONSTANTS = ForgettingConstants()


@dataclass
class ForgettingResult:
    events: list[Event]
    thoughts: list[Thought]
    events_forgotten: int = 0
    thoughts_forgotten: int = 0


class ForgettingEngine:
    """Apply the forgetting curve to the store's sequences."""

    def __init__(
        self,
        decay: float,
        rng: RandomSource | None = None,
        constants: ForgettingConstants = DEFAULT_CONSTANTS,
    ):
        self.decay = decay
        self.rng = rng if rng is not None else random.Random()
        self.constants = constants

    def cutoff(self, now: datetime) -> datetime:
        return now - timedelta(days=self.constants.CUTOFF_DAYS)

    def _age_probability(self, timestamp: datetime, now: datetime) -> float:
        days = (now - timestamp).total_seconds() / SECONDS_PER_DAY
        return self.decay * days / self.constants.DECAY_HORIZON_DAYS

    def event_forget_probability(self, event: Event, now: datetime) -> float:
        return self._age_probability(event.timestamp, now)

    def thought_forget_probability(self, thought: Thought, now: datetime) -> float:
        bonus = thought.confidence * self.constants.CONFIDENCE_RETENTION_BONUS
        return self._age_probability(thought.timestamp, now) - bonus

    def apply(
        self,
        events: Sequence[Event],
        thoughts: Sequence[Thought],
        now: datetime,
    ) -> ForgettingResult:
        """
        Filter both sequences, events first, preserving order.

        One draw is taken per evaluated item, in store order.
        """
        cutoff = self.cutoff(now)

        kept_events = [
            event
            for event in events
            if event.timestamp > cutoff
            or self.rng.random() > self.event_forget_probability(event, now)
        ]
        kept_thoughts = [
            thought
            for thought in thoughts
            if thought.timestamp > cutoff
            or self.rng.random() > self.thought_forget_probability(thought, now)
        ]

        return ForgettingResult(
            events=kept_events,
            thoughts=kept_thoughts,
            events_forgotten=len(events) - len(kept_events),
            thoughts_forgotten=len(thoughts) - len(kept_thoughts),
        )
