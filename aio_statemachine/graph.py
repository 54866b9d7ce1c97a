"""Declarative state graphs loaded from TOML.

A graph file lists states, the event transitions between them and the
state to enter first::

    initial = "idle"

    [[states]]
    name = "idle"

    [[states]]
    name = "loading"
    enter_delay = 0.5

    [[transitions]]
    source = "idle"
    event = "load"
    target = "loading"

Each state is backed by a DelayState whose enter/exit simply sleep for the
configured number of seconds, standing in for animations or I/O.
"""

from __future__ import annotations

import asyncio
import logging
import tomllib
from pathlib import Path
from typing import Dict, List, Optional, Union

import pydantic as pd

from aio_statemachine.config import MachineSettings
from aio_statemachine.fsm.errors import GraphDefinitionError
from aio_statemachine.fsm.machine import AsyncStateMachine

logger = logging.getLogger(__name__)


class StateSpec(pd.BaseModel):
    """A state declared in a graph file."""

    name: str = pd.Field(min_length=1)
    enter_delay: float = pd.Field(default=0.0, ge=0.0)
    exit_delay: float = pd.Field(default=0.0, ge=0.0)

    model_config = pd.ConfigDict(extra="forbid")


class TransitionSpec(pd.BaseModel):
    """An event transition declared in a graph file."""

    source: str
    event: str
    target: str

    model_config = pd.ConfigDict(extra="forbid")


class GraphSpec(pd.BaseModel):
    """A complete state graph.

    Attributes:
        initial: State entered by the first transition
        states: Declared states (names must be unique)
        transitions: Event transitions between declared states
    """

    initial: str
    states: List[StateSpec] = pd.Field(min_length=1)
    transitions: List[TransitionSpec] = pd.Field(default_factory=list)

    model_config = pd.ConfigDict(extra="forbid")

    def state_names(self) -> List[str]:
        return [state.name for state in self.states]

    def reachable_states(self) -> List[str]:
        """Return the states reachable from ``initial``, in declaration order."""
        successors: Dict[str, List[str]] = {}
        for transition in self.transitions:
            successors.setdefault(transition.source, []).append(transition.target)

        seen = {self.initial}
        pending = [self.initial]
        while pending:
            for target in successors.get(pending.pop(), []):
                if target not in seen:
                    seen.add(target)
                    pending.append(target)

        return [name for name in self.state_names() if name in seen]

    def validate_references(self) -> None:
        """Check that names are unique and every reference is declared.

        Raises:
            GraphDefinitionError: On duplicate or undeclared state names.
        """
        names = self.state_names()
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise GraphDefinitionError(f"Duplicate state names: {', '.join(duplicates)}")

        declared = set(names)
        if self.initial not in declared:
            raise GraphDefinitionError(f"Initial state {self.initial!r} is not declared")

        for transition in self.transitions:
            for endpoint in (transition.source, transition.target):
                if endpoint not in declared:
                    raise GraphDefinitionError(
                        f"Transition {transition.source!r} --{transition.event}--> "
                        f"{transition.target!r} references undeclared state {endpoint!r}"
                    )


class DelayState:
    """State behavior that sleeps on enter and exit."""

    def __init__(self, spec: StateSpec) -> None:
        self.spec = spec

    async def on_enter(self, from_state: Optional[str]) -> None:
        logger.debug(f"Entering {self.spec.name!r} from {from_state!r}")
        if self.spec.enter_delay:
            await asyncio.sleep(self.spec.enter_delay)

    async def on_exit(self, to_state: str) -> None:
        logger.debug(f"Exiting {self.spec.name!r} to {to_state!r}")
        if self.spec.exit_delay:
            await asyncio.sleep(self.spec.exit_delay)


def parse_graph(data: dict) -> GraphSpec:
    """Validate a graph definition held in a dict.

    Raises:
        GraphDefinitionError: If the data does not describe a valid graph.
    """
    try:
        graph = GraphSpec.model_validate(data)
    except pd.ValidationError as e:
        raise GraphDefinitionError(f"Invalid graph definition: {e}") from e
    graph.validate_references()
    return graph


def load_graph(path: Union[str, Path]) -> GraphSpec:
    """Read and validate a TOML graph file.

    Raises:
        GraphDefinitionError: If the file cannot be read or is invalid.
    """
    graph_path = Path(path)
    try:
        with open(graph_path, "rb") as f:
            data = tomllib.load(f)
    except (IOError, OSError, tomllib.TOMLDecodeError) as e:
        raise GraphDefinitionError(f"Failed to read graph file {graph_path}: {e}") from e

    graph = parse_graph(data)
    logger.debug(
        f"Loaded graph from {graph_path}: {len(graph.states)} states, "
        f"{len(graph.transitions)} transitions"
    )
    return graph


def build_machine(
    graph: GraphSpec, settings: Optional[MachineSettings] = None
) -> AsyncStateMachine[str, str]:
    """Create a machine with every state and transition of a graph registered.

    The machine is not started; await ``transition_to_state(graph.initial)``.
    """
    machine: AsyncStateMachine[str, str] = AsyncStateMachine(settings=settings)
    for state in graph.states:
        machine.add_state(state.name, DelayState(state))
    for transition in graph.transitions:
        machine.register_transition(transition.source, transition.event, transition.target)
    return machine
