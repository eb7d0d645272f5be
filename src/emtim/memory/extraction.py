"""
Thought Extraction - Split agent outputs into candidate thoughts.

Sentence-level heuristic: content is split on ". " and every trimmed
sentence longer than MIN_SENTENCE_LENGTH characters becomes one thought,
filed under the producing specialization's primary category.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .models import AgentOutput, Thought

SENTENCE_SEPARATOR = ". "
MIN_SENTENCE_LENGTH = 10
EXTRACTED_CONFIDENCE = 0.8


def split_sentences(content: str) -> list[str]:
    """Return trimmed sentences long enough to stand as thoughts."""
    sentences = []
    for piece in content.split(SENTENCE_SEPARATOR):
        sentence = piece.strip()
        if len(sentence) > MIN_SENTENCE_LENGTH:
            sentences.append(sentence)
    return sentences


def extract_thoughts(output: AgentOutput, now: datetime | None = None) -> list[Thought]:
    """Extract one thought per qualifying sentence of an agent output."""
    category = output.specialization.primary_category
    extra = {"timestamp": now} if now is not None else {}
    return [
        Thought(
            content=sentence,
            category=category,
            specialization=output.specialization,
            confidence=EXTRACTED_CONFIDENCE,
            **extra,
        )
        for sentence in split_sentences(output.content)
    ]


def extract_all(outputs: Iterable[AgentOutput], now: datetime | None = None) -> list[Thought]:
    """Extract thoughts from every output, preserving output order."""
    thoughts: list[Thought] = []
    for output in outputs:
        thoughts.extend(extract_thoughts(output, now))
    return thoughts
