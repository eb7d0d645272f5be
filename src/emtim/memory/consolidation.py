"""
Memory Consolidation - Merge near-duplicate thoughts.

Single greedy pass over the thought sequence. Each unprocessed thought
seeds a group and absorbs every other unprocessed thought that
is similar to the seed (same category, Jaccard word similarity at or
above the threshold). Similarity is only checked against the seed, so the
grouping is not transitive and depends on scan order.

Groups of two or more collapse into a single thought:
- content: member contents joined with " | " in discovery order
- confidence: min(1.0, mean confidence * 1.1)
- timestamp: newest member timestamp
- category and specialization: taken from the seed
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .models import Thought

CONTENT_SEPARATOR = " | "
CONSOLIDATION_BOOST = 1.1


def word_set(text: str) -> set[str]:
    return set(text.lower().split())


def jaccard_similarity(a: str, b: str) -> float:
    """Jaccard similarity of lowercase whitespace-token sets (0.0 when both are empty)."""
    words_a = word_set(a)
    words_b = word_set(b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


@dataclass
class ConsolidationResult:
    thoughts: list[Thought]
    groups: list[list[Thought]] = field(default_factory=list)  # merged groups only

    @property
    def merged_away(self) -> int:
        return sum(len(group) - 1 for group in self.groups)


class ConsolidationHandler:
    """Greedy, order-dependent thought consolidation."""

    def __init__(self, similarity_threshold: float = 0.85):
        self.similarity_threshold = similarity_threshold

    def are_similar(self, first: Thought, second: Thought) -> bool:
        if first.category != second.category:
            return False
        return jaccard_similarity(first.content, second.content) >= self.similarity_threshold

    def find_groups(self, thoughts: Sequence[Thought]) -> list[list[Thought]]:
        """Partition thoughts into groups in seed order; singletons included."""
        groups: list[list[Thought]] = []
        processed: set[int] = set()

        for i, seed in enumerate(thoughts):
            if i in processed:
                continue
            processed.add(i)
            group = [seed]

            for j, other in enumerate(thoughts):
                if j in processed:
                    continue
                if self.are_similar(seed, other):
                    group.append(other)
                    processed.add(j)

            groups.append(group)

        return groups

    def merge(self, group: Sequence[Thought]) -> Thought:
        """Collapse a group of similar thoughts into one."""
        seed = group[0]
        average_confidence = sum(t.confidence for t in group) / len(group)
        return Thought(
            timestamp=max(t.timestamp for t in group),
            content=CONTENT_SEPARATOR.join(t.content for t in group),
            category=seed.category,
            specialization=seed.specialization,
            confidence=min(1.0, average_confidence * CONSOLIDATION_BOOST),
        )

    def consolidate(self, thoughts: Sequence[Thought]) -> ConsolidationResult:
        consolidated: list[Thought] = []
        merged_groups: list[list[Thought]] = []

        for group in self.find_groups(thoughts):
            if len(group) > 1:
                consolidated.append(self.merge(group))
                merged_groups.append(group)
            else:
                consolidated.append(group[0])

        return ConsolidationResult(thoughts=consolidated, groups=merged_groups)
