"""Tests for the MemorySystem facade."""

import asyncio
import random
from datetime import datetime, timedelta

import pytest

from emtim.memory import (
    AgentOutput,
    ConversationContext,
    Event,
    MemorySystem,
    MemorySystemConfig,
    Specialization,
    Thought,
    ValidationError,
)

SCENARIO_OUTPUT = (
    "I sense curiosity. This is a thoughtful response about emotions "
    "and context awareness indeed."
)


class RecordingPersistence:
    """Persistence collaborator that restores a fixed state and keeps snapshots."""

    def __init__(self, events=(), thoughts=()):
        self.initial = (list(events), list(thoughts))
        self.load_calls = 0
        self.snapshots = []

    def load_initial_state(self):
        self.load_calls += 1
        return self.initial

    def persist_state(self, events, thoughts):
        self.snapshots.append((list(events), list(thoughts)))


@pytest.fixture
def memory(clock):
    return MemorySystem.development(clock=clock, rng=random.Random(0))


class TestRecord:
    """Tests for MemorySystem.record."""

    @pytest.mark.asyncio
    async def test_record_scenario(self, memory):
        """A single exchange stores one event and its extracted thoughts."""
        event = await memory.record(
            "How are you feeling today?",
            "I'm doing well, thank you.",
            [AgentOutput(specialization=Specialization.CORTEX, content=SCENARIO_OUTPUT)],
            {"curiosity": 0.8},
            ConversationContext(),
        )

        assert event.user_input == "How are you feeling today?"
        assert event.system_response == "I'm doing well, thank you."
        assert event.emotional_context == {"curiosity": 0.8}
        assert len(event.agent_outputs) == 1

        insights = await memory.insights()
        assert insights.total_events == 1
        assert insights.total_thoughts >= 1
        assert insights.specialization_distribution == {"Cortex": insights.total_thoughts}

    @pytest.mark.asyncio
    async def test_record_uses_clock(self, memory, clock):
        event = await memory.record("question", "answer")

        assert event.timestamp == clock.now

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "user_input,system_response",
        [("", "answer"), ("   ", "answer"), ("question", ""), ("question", "\n")],
    )
    async def test_empty_text_rejected(self, memory, user_input, system_response):
        with pytest.raises(ValidationError):
            await memory.record(user_input, system_response)

        insights = await memory.insights()
        assert insights.total_events == 0

    @pytest.mark.asyncio
    async def test_invalid_emotion_rejected_without_mutation(self, memory):
        outputs = [AgentOutput(specialization=Specialization.SEER, content=SCENARIO_OUTPUT)]

        with pytest.raises(ValidationError):
            await memory.record("question", "answer", outputs, {"joy": 1.7})

        insights = await memory.insights()
        assert insights.total_events == 0
        assert insights.total_thoughts == 0

    @pytest.mark.asyncio
    async def test_capacity_trims_oldest_event(self, clock):
        """With room for two events, the first recorded is dropped."""
        memory = MemorySystem(MemorySystemConfig(max_events_in_memory=2), clock=clock)

        first = await memory.record("first question", "first answer")
        second = await memory.record("second question", "second answer")
        third = await memory.record("third question", "third answer")

        stored = [e.id for e in memory.store.events]
        assert stored == [second.id, third.id]
        assert first.id not in stored

    @pytest.mark.asyncio
    async def test_capacity_invariant(self, clock):
        config = MemorySystemConfig(max_events_in_memory=3, max_thoughts_in_memory=4)
        memory = MemorySystem(config, clock=clock)
        outputs = [AgentOutput(specialization=Specialization.CORTEX, content=SCENARIO_OUTPUT)]

        for n in range(10):
            await memory.record(f"question {n}", "answer", outputs)
            assert memory.store.event_count <= 3
            assert memory.store.thought_count <= 4


class TestQuery:
    """Tests for MemorySystem.query."""

    @pytest.mark.asyncio
    async def test_empty_store(self, memory):
        context = await memory.query(Specialization.CORTEX, "test query", 1000)

        assert context.events == []
        assert context.thoughts == []
        assert context.time_window == timedelta(hours=12)

    @pytest.mark.asyncio
    async def test_retrieval_filters_by_specialization(self, memory):
        outputs = [
            AgentOutput(
                specialization=Specialization.CORTEX,
                content="The user seems curious about emotional processing.",
            ),
            AgentOutput(
                specialization=Specialization.SEER,
                content="This pattern of questioning suggests learning intent.",
            ),
        ]
        await memory.record(
            "How do emotions work?",
            "Emotions are complex psychological states.",
            outputs,
        )

        context = await memory.query("cortex", "emotions", 1000)

        assert len(context.events) == 1
        assert len(context.thoughts) == 1
        for thought in context.thoughts:
            assert thought.specialization == Specialization.CORTEX or (
                thought.specialization is None
                and thought.category in Specialization.CORTEX.thought_categories
            )

    @pytest.mark.asyncio
    async def test_retrieval_bounds(self, memory):
        outputs = [
            AgentOutput(
                specialization=Specialization.ORACLE,
                content="Plan the next step carefully. Weigh each probable outcome.",
            )
        ]
        for n in range(12):
            await memory.record(f"question {n}", f"answer {n}", outputs)

        for budget in (10, 2000, 1_000_000):
            context = await memory.query(Specialization.ORACLE, "question plan", budget)
            assert len(context.events) == 5
            assert len(context.thoughts) == 10

    @pytest.mark.asyncio
    async def test_unknown_specialization(self, memory):
        with pytest.raises(ValidationError):
            await memory.query("cerebellum", "anything")


class TestMaintain:
    """Tests for MemorySystem.maintain."""

    @pytest.mark.asyncio
    async def test_recent_memories_survive(self, memory):
        for n in range(5):
            outputs = [
                AgentOutput(
                    specialization=Specialization.CORTEX,
                    content=f"Response {n} about emotions.",
                )
            ]
            await memory.record(f"Question {n}", f"Answer {n}", outputs)

        report = await memory.maintain()

        assert report.events_before == 5
        assert report.events_after == 5
        assert report.events_forgotten == 0
        assert memory.last_maintenance_at is not None

    @pytest.mark.asyncio
    async def test_forgetting_uses_injected_random(self, clock, scripted_random):
        rng = scripted_random([0.99, 0.01])
        memory = MemorySystem(
            MemorySystemConfig(forgetting_curve_decay=0.25, consolidation_enabled=False),
            clock=clock,
            rng=rng,
        )
        kept = await memory.record("old kept", "answer")
        await memory.record("old dropped", "answer")

        clock.advance(days=60)
        report = await memory.maintain()

        # p = 0.25 * 60 / 30 = 0.5 for both events
        assert [e.id for e in memory.store.events] == [kept.id]
        assert report.events_forgotten == 1
        assert rng.calls == 2

    @pytest.mark.asyncio
    async def test_zero_decay_removes_nothing(self, clock):
        memory = MemorySystem(
            MemorySystemConfig(forgetting_curve_decay=0.0, consolidation_enabled=False),
            clock=clock,
            rng=random.Random(3),
        )
        outputs = [AgentOutput(specialization=Specialization.HOUSE, content=SCENARIO_OUTPUT)]
        for n in range(10):
            await memory.record(f"question {n}", "answer", outputs)

        clock.advance(days=400)
        report = await memory.maintain()

        assert report.events_after == 10
        assert report.thoughts_after == report.thoughts_before

    @pytest.mark.asyncio
    async def test_consolidation_merges_duplicates(self, clock):
        memory = MemorySystem(MemorySystemConfig(thought_similarity_threshold=0.85), clock=clock)
        outputs = [
            AgentOutput(
                specialization=Specialization.PRUDENCE,
                content="Avoid overwhelming the user with detail",
            )
        ]
        await memory.record("first", "answer", outputs)
        await memory.record("second", "answer", outputs)

        report = await memory.maintain()

        assert report.thoughts_before == 2
        assert report.thoughts_after == 1
        assert report.consolidation_groups == 1
        merged = memory.store.thoughts[0]
        assert " | " in merged.content
        assert merged.confidence == pytest.approx(min(1.0, 0.8 * 1.1))

    @pytest.mark.asyncio
    async def test_consolidation_disabled(self, clock):
        memory = MemorySystem.lightweight(clock=clock)
        outputs = [
            AgentOutput(
                specialization=Specialization.PRUDENCE,
                content="Avoid overwhelming the user with detail",
            )
        ]
        await memory.record("first", "answer", outputs)
        await memory.record("second", "answer", outputs)

        report = await memory.maintain()

        assert report.thoughts_after == 2
        assert report.consolidation_groups == 0


class TestInsightsAndPersistence:
    """Tests for insights, presets and persistence hooks."""

    @pytest.mark.asyncio
    async def test_empty_insights(self, memory):
        insights = await memory.insights()

        assert insights.total_events == 0
        assert insights.total_thoughts == 0
        assert insights.memory_utilization == 0.0
        assert insights.recent_activity_summary == "no recent activity"

    @pytest.mark.asyncio
    async def test_presets(self):
        for memory in (
            MemorySystem.development(),
            MemorySystem.production(),
            MemorySystem.lightweight(),
        ):
            insights = await memory.insights()
            assert insights.total_events == 0

        assert MemorySystem.production().config.max_events_in_memory == 50_000
        assert MemorySystem.lightweight().config.consolidation_enabled is False

    @pytest.mark.asyncio
    async def test_initial_state_loaded_once(self, clock, now):
        events = [Event(timestamp=now, user_input="restored", system_response="yes")]
        thoughts = [Thought(timestamp=now, content="restored thought", category="risk")]
        persistence = RecordingPersistence(events, thoughts)

        memory = MemorySystem(clock=clock, persistence=persistence)

        assert persistence.load_calls == 1
        insights = await memory.insights()
        assert insights.total_events == 1
        assert insights.specialization_distribution == {"Unknown": 1}

    @pytest.mark.asyncio
    async def test_restored_naive_timestamps(self, clock, scripted_random):
        """Items restored without a timezone are read as UTC."""
        naive = datetime(2025, 5, 1, 12, 0)
        persistence = RecordingPersistence(
            [Event(timestamp=naive, user_input="restored question", system_response="yes")],
            [Thought(timestamp=naive, content="restored insight", category="emotional")],
        )
        memory = MemorySystem(
            MemorySystemConfig(consolidation_enabled=False),
            clock=clock,
            rng=scripted_random([0.99, 0.99]),
            persistence=persistence,
        )

        context = await memory.query(Specialization.CORTEX, "restored")
        assert len(context.events) == 1
        assert len(context.thoughts) == 1

        insights = await memory.insights()
        assert insights.recent_activity_summary == "no recent activity"

        report = await memory.maintain()
        assert report.events_after == 1
        assert report.thoughts_after == 1

    @pytest.mark.asyncio
    async def test_persist_snapshot(self, clock):
        persistence = RecordingPersistence()
        memory = MemorySystem(clock=clock, persistence=persistence)
        event = await memory.record("question", "answer")

        await memory.persist()

        assert len(persistence.snapshots) == 1
        assert persistence.snapshots[0][0][0].id == event.id


class TestConcurrency:
    """Tests for serialized access."""

    @pytest.mark.asyncio
    async def test_concurrent_operations_do_not_interleave(self, clock):
        config = MemorySystemConfig(max_events_in_memory=50, consolidation_enabled=False)
        memory = MemorySystem(config, clock=clock)
        outputs = [AgentOutput(specialization=Specialization.SEER, content=SCENARIO_OUTPUT)]

        async def writer(n):
            await memory.record(f"question {n}", "answer", outputs)

        async def reader():
            context = await memory.query(Specialization.SEER, "question")
            assert len(context.events) <= 5
            insights = await memory.insights()
            # every stored event contributed exactly its two thoughts
            assert insights.total_thoughts == 2 * insights.total_events

        await asyncio.gather(
            *(writer(n) for n in range(20)),
            *(reader() for _ in range(10)),
            memory.maintain(),
        )

        assert memory.store.event_count == 20
