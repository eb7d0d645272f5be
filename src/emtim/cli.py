"""
EMTiM CLI - Inspect configuration and exercise the memory engine.
"""

from __future__ import annotations

import asyncio
import logging
import random
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.table import Table

from emtim import PACKAGE_INFO, __version__
from emtim.memory import (
    AgentOutput,
    ConfigurationError,
    MemorySystem,
    MemorySystemConfig,
    Specialization,
    load_config,
)
from emtim.memory.config import PRESETS

console = Console()

# Canned agent replies used by `emtim demo` in place of a language model.
DEMO_RESPONSES = {
    Specialization.CORTEX: (
        "I sense curiosity and engagement in your question. "
        "The emotional undertone suggests genuine interest in learning."
    ),
    Specialization.SEER: (
        "This pattern of questioning indicates a learning mindset. "
        "I predict follow-up questions about implementation details."
    ),
    Specialization.ORACLE: (
        "Strategic recommendation: Provide comprehensive yet accessible information, "
        "building foundation for deeper exploration."
    ),
    Specialization.HOUSE: (
        "Implementation consideration: Structure response with clear examples "
        "and practical applications."
    ),
    Specialization.PRUDENCE: (
        "Risk assessment: Ensure accuracy and avoid overwhelming with too much technical detail."
    ),
    Specialization.DAY_DREAM: (
        "Creative connection: This reminds me of how knowledge builds like layers in a pearl, "
        "each question adding depth."
    ),
    Specialization.CONSCIENCE: (
        "Ethical consideration: Maintain honesty about limitations "
        "while encouraging continued learning."
    ),
}

DEMO_QUESTIONS = [
    "How does machine learning work?",
    "What patterns does machine learning find in data?",
    "Is it risky to trust machine learning predictions?",
]


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def _resolve_config(config_path: Path | None, preset: str | None) -> MemorySystemConfig:
    try:
        if preset:
            return MemorySystemConfig.preset(preset)
        return load_config(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=Path,
    envvar="EMTIM_CONFIG",
    help="Path to YAML config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Show engine log output")
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """EMTiM - Episodic memory for multi-agent systems."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    _configure_logging(verbose)


@main.command()
def info() -> None:
    """Show package information."""
    console.print(f"[bold]{PACKAGE_INFO['name']}[/bold] {PACKAGE_INFO['version']}")
    console.print(PACKAGE_INFO["description"])
    console.print(f"License: {PACKAGE_INFO['license']}")


@main.command()
def specializations() -> None:
    """List agent specializations and their thought categories."""
    table = Table(title="Specializations")
    table.add_column("", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Temp", justify="right")
    table.add_column("Focus")
    table.add_column("Categories", style="dim")

    for spec in Specialization:
        table.add_row(
            spec.icon,
            spec.label,
            f"{spec.default_temperature:.1f}",
            spec.memory_specialization,
            ", ".join(spec.thought_categories),
        )

    console.print(table)


@main.command("config")
@click.option("--preset", type=click.Choice(sorted(PRESETS)), help="Show a named preset")
@click.pass_context
def show_config(ctx: click.Context, preset: str | None) -> None:
    """Show the resolved memory configuration."""
    config = _resolve_config(ctx.obj["config_path"], preset)

    table = Table(title=f"Memory configuration ({preset or ctx.obj['config_path'] or 'default'})")
    table.add_column("Option", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in config.to_dict().items():
        table.add_row(key, str(value))

    console.print(table)


@main.command()
@click.option("--preset", type=click.Choice(sorted(PRESETS)), help="Use a named preset")
@click.option("--seed", type=int, default=None, help="Seed for the forgetting curve")
@click.pass_context
def demo(ctx: click.Context, preset: str | None, seed: int | None) -> None:
    """Record a few simulated exchanges, query each agent, then run maintenance."""
    config = _resolve_config(ctx.obj["config_path"], preset)
    memory = MemorySystem(config, rng=random.Random(seed))
    asyncio.run(_run_demo(memory))


async def _run_demo(memory: MemorySystem) -> None:
    for question in DEMO_QUESTIONS:
        outputs = [
            AgentOutput(
                specialization=spec,
                content=DEMO_RESPONSES[spec],
                temperature=spec.default_temperature,
            )
            for spec in Specialization
        ]
        await memory.record(
            question,
            DEMO_RESPONSES[Specialization.ORACLE],
            outputs,
            {"curiosity": 0.8, "analytical": 0.6},
        )
        console.print(f"[green]✓[/green] Recorded: {question}")

    table = Table(title=f"Retrieval for {DEMO_QUESTIONS[0]!r}")
    table.add_column("Agent", style="cyan")
    table.add_column("Events", justify="right")
    table.add_column("Thoughts", justify="right")
    table.add_column("Top thought", style="dim")
    for spec in Specialization:
        context = await memory.query(spec, DEMO_QUESTIONS[0])
        top = context.thoughts[0].content if context.thoughts else "-"
        table.add_row(spec.label, str(len(context.events)), str(len(context.thoughts)), top)
    console.print(table)

    report = await memory.maintain()
    console.print(
        f"Maintenance: events {report.events_before} → {report.events_after}, "
        f"thoughts {report.thoughts_before} → {report.thoughts_after} "
        f"({report.consolidation_groups} group(s) consolidated)"
    )

    insights = await memory.insights()
    console.print(
        f"Memory: {insights.total_events} events, {insights.total_thoughts} thoughts, "
        f"{insights.memory_utilization:.2f}% utilization"
    )
    console.print(insights.recent_activity_summary)


if __name__ == "__main__":
    main()
