"""State machine orchestration for states with asynchronous enter/exit actions."""

__version__ = "0.1.0"

# Public API
from aio_statemachine.fsm import (
    AsyncStateMachine,
    CallbackState,
    DuplicateStateError,
    EventTransitionMap,
    GraphDefinitionError,
    StateBehavior,
    StateMachineError,
    StateRegistry,
    SyncStateBehavior,
    Transition,
    TransitionPhase,
    UnknownStateError,
    as_async_behavior,
    ensure_async,
)

# Ambient configuration
from aio_statemachine.config import MachineSettings, load_settings
from aio_statemachine.diagnostics import DebugMode, DiagnosticSink
from aio_statemachine.events import Channel

__all__ = [
    "AsyncStateMachine",
    "CallbackState",
    "Channel",
    "DebugMode",
    "DiagnosticSink",
    "DuplicateStateError",
    "EventTransitionMap",
    "GraphDefinitionError",
    "MachineSettings",
    "StateBehavior",
    "StateMachineError",
    "StateRegistry",
    "SyncStateBehavior",
    "Transition",
    "TransitionPhase",
    "UnknownStateError",
    "__version__",
    "as_async_behavior",
    "ensure_async",
    "load_settings",
]
