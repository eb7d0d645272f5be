"""
EMTiM Memory Engine

Episodic memory with temporal integration for multi-agent systems.

Architecture:
- Store: bounded event and thought sequences with FIFO capacity trimming
- Scoring: recency + word-overlap relevance per specialization
- Forgetting: age and confidence weighted probabilistic removal
- Consolidation: greedy merge of near-duplicate thoughts
- Insights: read-only statistics
"""

from emtim.memory.config import MemorySystemConfig, load_config
from emtim.memory.errors import ConfigurationError, EmtimError, ValidationError
from emtim.memory.models import (
    AgentOutput,
    ConversationContext,
    ConversationExchange,
    Event,
    MaintenanceReport,
    MemoryContext,
    MemoryInsights,
    Thought,
)
from emtim.memory.persistence import MemoryPersistence, NullPersistence
from emtim.memory.specialization import Specialization
from emtim.memory.system import MemorySystem

__all__ = [
    "MemorySystem",
    "MemorySystemConfig",
    "load_config",
    "Specialization",
    "AgentOutput",
    "Event",
    "Thought",
    "ConversationContext",
    "ConversationExchange",
    "MemoryContext",
    "MemoryInsights",
    "MaintenanceReport",
    "MemoryPersistence",
    "NullPersistence",
    "EmtimError",
    "ValidationError",
    "ConfigurationError",
]
