"""
Pydantic models for the EMTiM memory engine.

Two linked collections are kept in memory:
- Event: one complete user/system exchange with per-specialization outputs
- Thought: a short insight extracted from an agent output

Events and thoughts are immutable once created; maintenance replaces them
rather than editing them in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .specialization import Specialization


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with the engine clock."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AgentOutput(BaseModel):
    """Response produced by one specialized agent for an exchange."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    specialization: Specialization
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    processing_time: float | None = Field(default=None, ge=0.0)  # seconds
    temperature: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class Event(BaseModel):
    """
    Episodic record of one exchange.

    Created once per ``record`` call and never mutated. Removed only by
    forgetting or by capacity trimming.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=utc_now)
    user_input: str
    system_response: str
    emotional_context: Mapping[str, float] = Field(default_factory=dict)
    agent_outputs: tuple[AgentOutput, ...] = ()

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @field_validator("emotional_context")
    @classmethod
    def validate_intensities(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        """Ensure every emotion intensity is within [0, 1], then freeze the mapping."""
        for emotion, intensity in v.items():
            if not 0.0 <= intensity <= 1.0:
                raise ValueError(
                    f"Emotion intensity must be between 0.0 and 1.0, got {emotion}={intensity}"
                )
        return MappingProxyType(dict(v))

    @field_serializer("emotional_context")
    def serialize_emotional_context(self, v: Mapping[str, float]) -> dict[str, float]:
        return dict(v)

    @property
    def searchable_text(self) -> str:
        return f"{self.user_input} {self.system_response}".lower()


class Thought(BaseModel):
    """
    Inductive insight extracted from agent output.

    ``specialization`` is None for thoughts that are classified by category
    membership alone.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=utc_now)
    content: str
    category: str
    specialization: Specialization | None = None
    confidence: float = Field(ge=0.0, le=1.0, default=1.0)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    def visible_to(self, specialization: Specialization) -> bool:
        """Whether retrieval for ``specialization`` may return this thought."""
        if self.specialization is not None:
            return self.specialization == specialization
        return specialization.owns_category(self.category)


class ConversationExchange(BaseModel):
    """A single prior user/system turn supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    user_input: str
    system_response: str
    timestamp: datetime = Field(default_factory=utc_now)
    emotional_tone: str | None = None

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class ConversationContext(BaseModel):
    """Recent conversation history accompanying a ``record`` call."""

    model_config = ConfigDict(frozen=True)

    recent_exchanges: list[ConversationExchange] = Field(default_factory=list)
    total_exchanges: int = Field(default=0, ge=0)
    time_span: timedelta | None = None


class MemoryContext(BaseModel):
    """Ranked memories returned to an agent before it runs."""

    model_config = ConfigDict(frozen=True)

    events: list[Event] = Field(default_factory=list)
    thoughts: list[Thought] = Field(default_factory=list)
    time_window: timedelta | None = None

    @property
    def is_empty(self) -> bool:
        return not self.events and not self.thoughts


NO_RECENT_ACTIVITY = "no recent activity"


class MemoryInsights(BaseModel):
    """Read-only statistics over the store."""

    model_config = ConfigDict(frozen=True)

    total_events: int = 0
    total_thoughts: int = 0
    memory_utilization: float = 0.0  # percent of max_events_in_memory
    specialization_distribution: dict[str, int] = Field(default_factory=dict)
    recent_activity_summary: str = NO_RECENT_ACTIVITY


@dataclass
class MaintenanceReport:
    """Report from one maintenance pass."""

    # Timing
    started_at: datetime = field(default_factory=utc_now)
    completed_at: datetime | None = None
    duration_seconds: float = 0.0

    # Sizes
    events_before: int = 0
    events_after: int = 0
    thoughts_before: int = 0
    thoughts_after: int = 0

    # Forgetting
    events_forgotten: int = 0
    thoughts_forgotten: int = 0

    # Consolidation
    consolidation_groups: int = 0
    thoughts_consolidated: int = 0

    @property
    def events_removed(self) -> int:
        return self.events_before - self.events_after

    @property
    def thoughts_removed(self) -> int:
        return self.thoughts_before - self.thoughts_after
