"""
Memory Insights - Read-only statistics over the store.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from .models import NO_RECENT_ACTIVITY, Event, MemoryInsights, Thought

UNKNOWN_SPECIALIZATION = "Unknown"
RECENT_WINDOW = timedelta(hours=24)


def specialization_distribution(thoughts: Sequence[Thought]) -> dict[str, int]:
    """Count thoughts per specialization label; ownerless ones go under "Unknown"."""
    distribution: dict[str, int] = {}
    for thought in thoughts:
        key = thought.specialization.label if thought.specialization else UNKNOWN_SPECIALIZATION
        distribution[key] = distribution.get(key, 0) + 1
    return distribution


def activity_summary(
    events: Sequence[Event],
    thoughts: Sequence[Thought],
    now: datetime,
    window: timedelta = RECENT_WINDOW,
) -> str:
    """One-line description of what was stored inside ``window``."""
    recent_events = sum(1 for e in events if now - e.timestamp < window)
    recent_thoughts = sum(1 for t in thoughts if now - t.timestamp < window)

    if not recent_events and not recent_thoughts:
        return NO_RECENT_ACTIVITY

    parts = []
    if recent_events:
        parts.append(f"{recent_events} conversation(s) processed")
    if recent_thoughts:
        parts.append(f"{recent_thoughts} insight(s) extracted")
    return f"Recent activity: {', '.join(parts)} in the last 24 hours."


def compute_insights(
    events: Sequence[Event],
    thoughts: Sequence[Thought],
    max_events: int,
    now: datetime,
) -> MemoryInsights:
    # Utilization tracks the event limit only.
    return MemoryInsights(
        total_events=len(events),
        total_thoughts=len(thoughts),
        memory_utilization=len(events) / max_events * 100.0,
        specialization_distribution=specialization_distribution(thoughts),
        recent_activity_summary=activity_summary(events, thoughts, now),
    )
