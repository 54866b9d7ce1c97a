"""Finite state machine package for aio-statemachine.

This package provides the transition orchestrator and its building blocks:
phases, transition records, state behaviors, the state registry and the
event transition map.
"""

from aio_statemachine.fsm.errors import (
    DuplicateStateError,
    GraphDefinitionError,
    StateMachineError,
    UnknownStateError,
)
from aio_statemachine.fsm.event_map import EventTransitionMap
from aio_statemachine.fsm.machine import AsyncStateMachine
from aio_statemachine.fsm.phase import TransitionPhase
from aio_statemachine.fsm.registry import StateRegistry
from aio_statemachine.fsm.state import (
    CallbackState,
    StateBehavior,
    SyncStateBehavior,
    as_async_behavior,
    ensure_async,
)
from aio_statemachine.fsm.transition import Transition

__all__ = [
    "AsyncStateMachine",
    "CallbackState",
    "DuplicateStateError",
    "EventTransitionMap",
    "GraphDefinitionError",
    "StateBehavior",
    "StateMachineError",
    "StateRegistry",
    "SyncStateBehavior",
    "Transition",
    "TransitionPhase",
    "UnknownStateError",
    "as_async_behavior",
    "ensure_async",
]
