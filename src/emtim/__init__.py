"""
EMTiM: Episodic Memory with Temporal Integration and Metacognition

A bounded, decaying, self-consolidating memory for multi-agent AI systems:
- Stores complete exchanges with emotional context
- Extracts and categorizes insights from agent responses
- Retrieves memories ranked for each agent specialization
- Forgets old memories and merges redundant ones during maintenance
"""

__version__ = "1.0.0"

PACKAGE_INFO = {
    "name": "emtim",
    "version": __version__,
    "description": "Episodic Memory with Temporal Integration and Metacognition for Multi-Agent AI Systems",
    "license": "MIT",
}

from emtim.memory import (
    AgentOutput,
    Event,
    MemorySystem,
    MemorySystemConfig,
    Specialization,
    Thought,
)

__all__ = [
    "MemorySystem",
    "MemorySystemConfig",
    "Specialization",
    "AgentOutput",
    "Event",
    "Thought",
    "PACKAGE_INFO",
]
