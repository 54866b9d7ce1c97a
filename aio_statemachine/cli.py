"""CLI for driving state graphs from the command line."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Tuple

import click  # type: ignore[import-not-found]
import pydantic as pd
from rich.console import Console  # type: ignore[import-not-found]
from rich.table import Table  # type: ignore[import-not-found]

from aio_statemachine import __version__
from aio_statemachine.config import MachineSettings, load_settings
from aio_statemachine.console import TransitionConsoleLogger
from aio_statemachine.diagnostics import DebugMode
from aio_statemachine.fsm.errors import StateMachineError
from aio_statemachine.graph import GraphSpec, build_machine, load_graph
from aio_statemachine.logging_utils import setup_logging

console = Console()

logger = logging.getLogger(__name__)


def _load(graph_path: Path, config: Optional[Path]) -> Tuple[GraphSpec, MachineSettings]:
    try:
        graph = load_graph(graph_path)
    except StateMachineError as e:
        raise click.ClickException(str(e))

    try:
        settings = load_settings(config) if config is not None else MachineSettings()
    except pd.ValidationError as e:
        raise click.ClickException(f"Invalid [tool.aio-statemachine] settings: {e}")
    return graph, settings


def console_settings(settings: MachineSettings, enable_color: bool) -> MachineSettings:
    """Route diagnostics to the console unless debug_mode was configured.

    In color mode the default host-log diagnostics are switched to the event
    channel so rejections print alongside the lifecycle lines. An explicit
    ``debug_mode`` from [tool.aio-statemachine] is kept as is.
    """
    if (
        enable_color
        and settings.debug_mode == DebugMode.LOG
        and "debug_mode" not in settings.model_fields_set
    ):
        return settings.model_copy(update={"debug_mode": DebugMode.EVENT})
    return settings


async def play_events(
    graph: GraphSpec,
    events: Tuple[str, ...],
    settings: MachineSettings,
    enable_color: bool = True,
) -> Tuple[str, int]:
    """Enter the initial state, then process each event in order.

    Args:
        graph: Validated graph definition
        events: Event names to process
        settings: Machine settings
        enable_color: Render lifecycle lines with rich colors

    Returns:
        (final state, number of events that triggered a transition)
    """
    machine = build_machine(graph, settings)
    TransitionConsoleLogger(enable_color=enable_color, console=console).attach(machine)

    await machine.transition_to_state(graph.initial)

    handled = 0
    for event in events:
        if await machine.process_event(event):
            handled += 1
        else:
            console.print(
                f"[yellow]No transition for event '{event}' from '{machine.current_state}'[/yellow]"
            )
            logger.info(f"Event {event!r} ignored in state {machine.current_state!r}")

    return machine.current_state, handled


@click.group()
@click.version_option(__version__, prog_name="aio-statemachine")
def main() -> None:
    """Drive async state machines described in TOML graph files."""


@main.command()
@click.argument("graph_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--event",
    "-e",
    "events",
    multiple=True,
    help="Event to process after entering the initial state (repeatable, in order).",
)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="pyproject.toml (or its directory) holding [tool.aio-statemachine] settings",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Log lifecycle lines instead of printing them in color",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def run(
    graph_path: Path,
    events: Tuple[str, ...],
    config: Optional[Path],
    no_color: bool,
    verbose: bool,
) -> None:
    """Run a state graph, feeding it the given events.

    The initial state is entered first, then each --event is processed in
    order. Events with no transition from the current state are reported
    and skipped.
    """
    setup_logging(verbose, console=console)
    graph, settings = _load(graph_path, config)

    settings = console_settings(settings, enable_color=not no_color)

    console.print(f"[cyan]Running graph {graph_path.name} ({len(graph.states)} states)...[/cyan]")

    try:
        final_state, handled = asyncio.run(
            play_events(graph, events, settings, enable_color=not no_color)
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Run interrupted[/yellow]")
        return
    except StateMachineError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.ClickException(str(e))

    console.print()
    console.print(f"[green]✓ Final state: {final_state}[/green]")
    console.print(f"[dim]{handled}/{len(events)} event(s) triggered a transition[/dim]")


@main.command()
@click.argument("graph_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(graph_path: Path) -> None:
    """Print the states and event transitions of a graph."""
    graph, _ = _load(graph_path, None)

    table = Table(title=f"{graph_path.name} (initial: {graph.initial})")
    table.add_column("Source", style="cyan")
    table.add_column("Event", style="magenta")
    table.add_column("Target", style="green")
    for transition in graph.transitions:
        table.add_row(transition.source, transition.event, transition.target)

    console.print(table)

    reachable = set(graph.reachable_states())
    unreachable = [name for name in graph.state_names() if name not in reachable]
    if unreachable:
        console.print(f"[yellow]Unreachable states: {', '.join(unreachable)}[/yellow]")


if __name__ == "__main__":
    main()
