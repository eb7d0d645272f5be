"""
Specializations - The seven cognitive agent types served by the memory system.

Each specialization carries a fixed set of thought categories used to
classify extracted thoughts and to filter retrieval, plus descriptive
metadata the orchestrator uses when building agent prompts.
"""

from __future__ import annotations

from enum import Enum

from .errors import ValidationError


class Specialization(str, Enum):
    """
    Cognitive focus of an agent.

    Members are totally ordered by their declaration index:
    cortex < seer < oracle < house < prudence < day-dream < conscience.
    """

    CORTEX = "Cortex"
    SEER = "Seer"
    ORACLE = "Oracle"
    HOUSE = "House"
    PRUDENCE = "Prudence"
    DAY_DREAM = "Day-Dream"
    CONSCIENCE = "Conscience"

    @property
    def label(self) -> str:
        return self.value

    @property
    def order(self) -> int:
        return _ORDER.index(self)

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def description(self) -> str:
        """General role of the agent."""
        return _DESCRIPTIONS[self]

    @property
    def memory_specialization(self) -> str:
        """What this agent looks for when retrieving memories."""
        return _MEMORY_SPECIALIZATIONS[self]

    @property
    def default_temperature(self) -> float:
        return _TEMPERATURES[self]

    @property
    def thought_categories(self) -> list[str]:
        """Ordered category tags; the first one labels extracted thoughts."""
        return list(_CATEGORIES[self])

    @property
    def primary_category(self) -> str:
        return _CATEGORIES[self][0]

    def owns_category(self, category: str) -> bool:
        return category in _CATEGORIES[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Specialization):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Specialization):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Specialization):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Specialization):
            return NotImplemented
        return self.order >= other.order

    @classmethod
    def parse(cls, value: Specialization | str) -> Specialization:
        """
        Resolve a specialization from a member, its label or its name.

        Accepts "Day-Dream", "day-dream", "day_dream" and "DAY_DREAM" alike.

        Raises:
            ValidationError: If the value names no specialization.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValidationError(f"Unknown specialization: {value!r}")


_ORDER: tuple[Specialization, ...] = tuple(Specialization)

_ICONS = {
    Specialization.CORTEX: "🧠",
    Specialization.SEER: "👁️",
    Specialization.ORACLE: "🔮",
    Specialization.HOUSE: "🏛️",
    Specialization.PRUDENCE: "⚖️",
    Specialization.DAY_DREAM: "💭",
    Specialization.CONSCIENCE: "🤔",
}

_DESCRIPTIONS = {
    Specialization.CORTEX: "Analytical and creative processing capacity",
    Specialization.SEER: "Pattern recognition and intuitive understanding",
    Specialization.ORACLE: "Strategic thinking and future planning",
    Specialization.HOUSE: "Implementation and practical execution",
    Specialization.PRUDENCE: "Risk assessment and caution level",
    Specialization.DAY_DREAM: "Creative associations and memory exploration",
    Specialization.CONSCIENCE: "Ethical consideration and moral awareness",
}

_MEMORY_SPECIALIZATIONS = {
    Specialization.CORTEX: "Emotional processing and basic meaning analysis",
    Specialization.SEER: "Pattern recognition and predictive analysis",
    Specialization.ORACLE: "Strategic planning and probability assessment",
    Specialization.HOUSE: "Practical implementation and resource management",
    Specialization.PRUDENCE: "Risk assessment and constraint identification",
    Specialization.DAY_DREAM: "Creative connections and associative thinking",
    Specialization.CONSCIENCE: "Ethical evaluation and moral guidance",
}

_TEMPERATURES = {
    Specialization.CORTEX: 0.7,
    Specialization.SEER: 0.4,
    Specialization.ORACLE: 0.3,
    Specialization.HOUSE: 0.4,
    Specialization.PRUDENCE: 0.3,
    Specialization.DAY_DREAM: 0.8,
    Specialization.CONSCIENCE: 0.6,
}

_CATEGORIES: dict[Specialization, tuple[str, ...]] = {
    Specialization.CORTEX: ("emotional", "meaning", "interpretation", "context"),
    Specialization.SEER: ("pattern", "prediction", "trend", "future", "insight"),
    Specialization.ORACLE: ("strategy", "planning", "probability", "decision", "outcome"),
    Specialization.HOUSE: ("implementation", "practical", "resource", "constraint", "execution"),
    Specialization.PRUDENCE: ("risk", "caution", "safety", "boundary", "limitation"),
    Specialization.DAY_DREAM: ("creative", "association", "metaphor", "connection", "inspiration"),
    Specialization.CONSCIENCE: ("ethical", "moral", "responsibility", "value", "principle"),
}
