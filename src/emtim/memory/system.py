"""
Memory System - Serialized facade over store, scoring and maintenance.

Operations:
- record: store one exchange and the thoughts extracted from it
- query: rank events and thoughts for a specialization
- maintain: forgetting curve, then consolidation
- insights: read-only statistics

Every operation holds a single asyncio.Lock for its whole duration, so no
caller observes a half-appended exchange and maintenance runs exclusively.
None of the operations await anything while holding the lock.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

import pydantic
import structlog

from .config import MemorySystemConfig
from .consolidation import ConsolidationHandler
from .errors import ValidationError
from .extraction import extract_all
from .forgetting import ForgettingEngine, RandomSource
from .insights import compute_insights
from .models import (
    AgentOutput,
    ConversationContext,
    Event,
    MaintenanceReport,
    MemoryContext,
    MemoryInsights,
    utc_now,
)
from .persistence import MemoryPersistence, NullPersistence
from .scoring import DEFAULT_CONSTANTS, rank_events, rank_thoughts
from .specialization import Specialization
from .store import MemoryStore

logger = structlog.get_logger()

DEFAULT_TOKEN_BUDGET = 2000


class MemorySystem:
    """
    Bounded, decaying, self-consolidating memory for specialized agents.

    Usage:
        memory = MemorySystem.development()

        context = await memory.query(Specialization.CORTEX, "user question")
        event = await memory.record(
            "user question",
            "system answer",
            agent_outputs,
            {"curiosity": 0.8},
        )

        # Periodically, on the caller's schedule
        report = await memory.maintain()
    """

    def __init__(
        self,
        config: MemorySystemConfig | None = None,
        *,
        rng: RandomSource | None = None,
        clock: Callable[[], datetime] = utc_now,
        persistence: MemoryPersistence | None = None,
    ):
        """
        Initialize the memory system.

        Args:
            config: Limits and tuning (defaults to MemorySystemConfig())
            rng: Random source for the forgetting curve (seedable for tests)
            clock: Returns the current timezone-aware time
            persistence: Optional load/save collaborator
        """
        self.config = config or MemorySystemConfig()
        self.clock = clock
        self.persistence = persistence or NullPersistence()

        self.store = MemoryStore(
            max_events=self.config.max_events_in_memory,
            max_thoughts=self.config.max_thoughts_in_memory,
        )
        self.forgetting = ForgettingEngine(decay=self.config.forgetting_curve_decay, rng=rng)
        self.consolidation = ConsolidationHandler(
            similarity_threshold=self.config.thought_similarity_threshold,
        )

        self._lock = asyncio.Lock()
        self.last_maintenance_at: datetime | None = None

        self._load_initial_state()

    # Presets

    @classmethod
    def development(cls, **kwargs: Any) -> MemorySystem:
        """Small limits and gentle decay for local work and tests."""
        return cls(MemorySystemConfig.preset("development"), **kwargs)

    @classmethod
    def production(cls, **kwargs: Any) -> MemorySystem:
        return cls(MemorySystemConfig.preset("production"), **kwargs)

    @classmethod
    def lightweight(cls, **kwargs: Any) -> MemorySystem:
        """Minimal footprint; consolidation disabled."""
        return cls(MemorySystemConfig.preset("lightweight"), **kwargs)

    # Public operations

    async def record(
        self,
        user_input: str,
        system_response: str,
        agent_outputs: Sequence[AgentOutput] = (),
        emotional_context: dict[str, float] | None = None,
        conversation_context: ConversationContext | None = None,
    ) -> Event:
        """
        Store one exchange and the thoughts extracted from its agent outputs.

        Args:
            user_input: What the user said
            system_response: The integrated reply
            agent_outputs: Per-specialization outputs, in agent order
            emotional_context: Emotion name to intensity in [0, 1]
            conversation_context: Recent history (accepted, not stored)

        Returns:
            The created Event

        Raises:
            ValidationError: If the input is empty or malformed. Nothing is
                stored in that case.
        """
        async with self._lock:
            start = time.perf_counter()
            now = self.clock()

            event = self._build_event(
                user_input, system_response, agent_outputs, emotional_context or {}, now
            )
            thoughts = extract_all(event.agent_outputs, now)

            events_trimmed, thoughts_trimmed = self.store.append(event, thoughts)

            logger.info(
                "Memory stored",
                event_id=str(event.id),
                thoughts_extracted=len(thoughts),
                events=self.store.event_count,
                thoughts=self.store.thought_count,
                events_trimmed=events_trimmed,
                thoughts_trimmed=thoughts_trimmed,
                recent_exchanges=(
                    len(conversation_context.recent_exchanges) if conversation_context else 0
                ),
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )
            return event

    async def query(
        self,
        specialization: Specialization | str,
        query_text: str,
        token_budget: int = DEFAULT_TOKEN_BUDGET,
    ) -> MemoryContext:
        """
        Retrieve memories relevant to ``query_text`` for one specialization.

        Returns at most 5 events and 10 thoughts. ``token_budget`` is
        accepted for interface stability but does not change the limits.
        """
        specialization = Specialization.parse(specialization)

        async with self._lock:
            start = time.perf_counter()
            now = self.clock()

            events = rank_events(
                self.store.events, query_text, now, limit=DEFAULT_CONSTANTS.MAX_EVENTS
            )
            thoughts = rank_thoughts(
                self.store.thoughts,
                specialization,
                query_text,
                now,
                limit=DEFAULT_CONSTANTS.MAX_THOUGHTS,
            )

            logger.debug(
                "Memory retrieved",
                specialization=specialization.label,
                events=len(events),
                thoughts=len(thoughts),
                token_budget=token_budget,
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
            )

            return MemoryContext(
                events=events,
                thoughts=thoughts,
                time_window=self.config.maintenance_interval,
            )

    async def maintain(self) -> MaintenanceReport:
        """
        Apply the forgetting curve, then consolidate similar thoughts.

        Holds exclusive access for the whole pass.
        """
        async with self._lock:
            start = time.perf_counter()
            now = self.clock()
            report = MaintenanceReport(
                started_at=now,
                events_before=self.store.event_count,
                thoughts_before=self.store.thought_count,
            )
            logger.info(
                "Starting memory maintenance",
                events=report.events_before,
                thoughts=report.thoughts_before,
            )

            forgotten = self.forgetting.apply(self.store.events, self.store.thoughts, now)
            report.events_forgotten = forgotten.events_forgotten
            report.thoughts_forgotten = forgotten.thoughts_forgotten

            thoughts = forgotten.thoughts
            if self.config.consolidation_enabled:
                consolidated = self.consolidation.consolidate(thoughts)
                thoughts = consolidated.thoughts
                report.consolidation_groups = len(consolidated.groups)
                report.thoughts_consolidated = consolidated.merged_away

            self.store.replace(events=forgotten.events, thoughts=thoughts)
            self.last_maintenance_at = now

            report.events_after = self.store.event_count
            report.thoughts_after = self.store.thought_count
            report.completed_at = self.clock()
            report.duration_seconds = time.perf_counter() - start

            logger.info(
                "Memory maintenance complete",
                events_before=report.events_before,
                events_after=report.events_after,
                thoughts_before=report.thoughts_before,
                thoughts_after=report.thoughts_after,
                events_forgotten=report.events_forgotten,
                thoughts_forgotten=report.thoughts_forgotten,
                consolidation_groups=report.consolidation_groups,
                duration_seconds=round(report.duration_seconds, 3),
            )
            return report

    async def insights(self) -> MemoryInsights:
        async with self._lock:
            return compute_insights(
                self.store.events,
                self.store.thoughts,
                max_events=self.config.max_events_in_memory,
                now=self.clock(),
            )

    async def persist(self) -> None:
        """Hand a consistent snapshot to the persistence collaborator."""
        async with self._lock:
            self.persistence.persist_state(self.store.events, self.store.thoughts)

    # Internals

    def _load_initial_state(self) -> None:
        events, thoughts = self.persistence.load_initial_state()
        events_trimmed, thoughts_trimmed = self.store.load(events, thoughts)
        logger.debug(
            "Loaded stored memories",
            events=self.store.event_count,
            thoughts=self.store.thought_count,
            events_trimmed=events_trimmed,
            thoughts_trimmed=thoughts_trimmed,
        )

    def _build_event(
        self,
        user_input: str,
        system_response: str,
        agent_outputs: Sequence[AgentOutput],
        emotional_context: dict[str, float],
        now: datetime,
    ) -> Event:
        if not user_input or not user_input.strip():
            raise ValidationError("user_input must not be empty")
        if not system_response or not system_response.strip():
            raise ValidationError("system_response must not be empty")

        try:
            return Event(
                timestamp=now,
                user_input=user_input,
                system_response=system_response,
                emotional_context=emotional_context,
                agent_outputs=list(agent_outputs),
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid exchange: {e}") from e
