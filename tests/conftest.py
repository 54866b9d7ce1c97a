"""Shared pytest fixtures for aio-statemachine tests."""

import asyncio
import logging
from typing import Any, List, Optional, Tuple

import pytest

from aio_statemachine.diagnostics import DebugMode
from aio_statemachine.fsm.machine import AsyncStateMachine

Call = Tuple[str, str, Any]


class RecordingState:
    """State behavior that records its calls into a shared log.

    Setting ``enter_gate`` / ``exit_gate`` to an asyncio.Event makes the
    corresponding operation suspend until the event is set, which lets a
    test act while a transition is in flight.
    """

    def __init__(self, name: str, log: List[Call]) -> None:
        self.name = name
        self.log = log
        self.enter_gate: Optional[asyncio.Event] = None
        self.exit_gate: Optional[asyncio.Event] = None
        self.enter_error: Optional[BaseException] = None

    async def on_enter(self, from_state: Any) -> None:
        self.log.append(("enter", self.name, from_state))
        if self.enter_gate is not None:
            await self.enter_gate.wait()
        if self.enter_error is not None:
            raise self.enter_error

    async def on_exit(self, to_state: Any) -> None:
        self.log.append(("exit", self.name, to_state))
        if self.exit_gate is not None:
            await self.exit_gate.wait()


@pytest.fixture
def call_log() -> List[Call]:
    """Ordered record of behavior calls and notifications."""
    return []


@pytest.fixture
def states(call_log: List[Call]) -> dict:
    """RecordingState behaviors for states A, B and C sharing call_log."""
    return {name: RecordingState(name, call_log) for name in ("A", "B", "C")}


@pytest.fixture
def machine(states: dict) -> AsyncStateMachine:
    """Machine with A, B and C registered and diagnostics on the event channel.

    Event transitions registered: A --go--> B, B --go--> C.
    """
    fsm: AsyncStateMachine = AsyncStateMachine()
    fsm.debug_mode = DebugMode.EVENT
    for name, behavior in states.items():
        fsm.add_state(name, behavior)
    fsm.register_transition("A", "go", "B")
    fsm.register_transition("B", "go", "C")
    return fsm


@pytest.fixture
def debug_messages(machine: AsyncStateMachine) -> List[str]:
    """Diagnostics emitted by the machine fixture."""
    messages: List[str] = []
    machine.on_debug_message.subscribe(messages.append)
    return messages


@pytest.fixture
def restore_root_logging():
    """Restore root logger handlers and level after a test reconfigures them."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
