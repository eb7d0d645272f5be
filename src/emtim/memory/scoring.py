"""
Memory Relevance Scoring - Rank events and thoughts for a query.

Word-overlap relevance blended with linear recency decay:

    event   = 0.3 * recency + 0.7 * overlap
    thought = 0.2 * recency + 0.6 * overlap + 0.2 * confidence

where ``recency = max(0, 1 - days_since / 30)`` and ``overlap`` is the
fraction of query words found as substrings of the item's lowercased text.
An empty query contributes zero overlap.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from .models import Event, Thought
from .specialization import Specialization

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class ScoringConstants:
    """Weights and limits for relevance scoring."""

    RECENCY_HORIZON_DAYS: float = 30.0

    EVENT_RECENCY_WEIGHT: float = 0.3
    EVENT_OVERLAP_WEIGHT: float = 0.7

    THOUGHT_RECENCY_WEIGHT: float = 0.2
    THOUGHT_OVERLAP_WEIGHT: float = 0.6
    THOUGHT_CONFIDENCE_WEIGHT: float = 0.2

    MAX_EVENTS: int = 5
    MAX_THOUGHTS: int = 10


DEFAULT_CONSTANTS = ScoringConstants()


def tokenize(text: str) -> list[str]:
    """Lowercase and split on whitespace."""
    return text.lower().split()


def days_since(timestamp: datetime, now: datetime) -> float:
    return (now - timestamp).total_seconds() / SECONDS_PER_DAY


def recency_score(
    timestamp: datetime,
    now: datetime,
    constants: ScoringConstants = DEFAULT_CONSTANTS,
) -> float:
    return max(0.0, 1.0 - days_since(timestamp, now) / constants.RECENCY_HORIZON_DAYS)


def overlap_score(query_words: Sequence[str], text: str) -> float:
    """Fraction of query words appearing as substrings of ``text``."""
    if not query_words:
        return 0.0
    matching = sum(1 for word in query_words if word in text)
    return matching / len(query_words)


def score_event(
    event: Event,
    query_words: Sequence[str],
    now: datetime,
    constants: ScoringConstants = DEFAULT_CONSTANTS,
) -> float:
    c = constants
    return (
        c.EVENT_RECENCY_WEIGHT * recency_score(event.timestamp, now, c)
        + c.EVENT_OVERLAP_WEIGHT * overlap_score(query_words, event.searchable_text)
    )


def score_thought(
    thought: Thought,
    query_words: Sequence[str],
    now: datetime,
    constants: ScoringConstants = DEFAULT_CONSTANTS,
) -> float:
    c = constants
    return (
        c.THOUGHT_RECENCY_WEIGHT * recency_score(thought.timestamp, now, c)
        + c.THOUGHT_OVERLAP_WEIGHT * overlap_score(query_words, thought.content.lower())
        + c.THOUGHT_CONFIDENCE_WEIGHT * thought.confidence
    )


def rank_events(
    events: Iterable[Event],
    query: str,
    now: datetime,
    limit: int = DEFAULT_CONSTANTS.MAX_EVENTS,
    constants: ScoringConstants = DEFAULT_CONSTANTS,
) -> list[Event]:
    """
    Return the top ``limit`` events by descending score.

    Ties keep insertion order (Python's sort is stable).
    """
    query_words = tokenize(query)
    scored = [(score_event(e, query_words, now, constants), e) for e in events]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [event for _, event in scored[:limit]]


def rank_thoughts(
    thoughts: Iterable[Thought],
    specialization: Specialization,
    query: str,
    now: datetime,
    limit: int = DEFAULT_CONSTANTS.MAX_THOUGHTS,
    constants: ScoringConstants = DEFAULT_CONSTANTS,
) -> list[Thought]:
    """
    Return the top ``limit`` thoughts visible to ``specialization``.

    A thought is visible when it belongs to the specialization, or when it
    has no owner and its category is one of the specialization's categories.
    """
    query_words = tokenize(query)
    scored = [
        (score_thought(t, query_words, now, constants), t)
        for t in thoughts
        if t.visible_to(specialization)
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [thought for _, thought in scored[:limit]]
