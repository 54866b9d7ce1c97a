"""Exceptions raised for misconfigured state graphs.

These are programmer errors and are never recovered by the state machine.
Routine rejections (busy machine, self-transition, unknown event) do not
raise; they return a falsy result and emit a diagnostic instead.
"""

from typing import Any


class StateMachineError(Exception):
    """Base class for state machine errors."""

    pass


class DuplicateStateError(StateMachineError):
    """Error raised when a state identifier is registered twice."""

    def __init__(self, state_id: Any) -> None:
        self.state_id = state_id
        super().__init__(f"StateMachine already contains the state {state_id!r}")


class UnknownStateError(StateMachineError, KeyError):
    """Error raised when a state identifier is not registered."""

    def __init__(self, state_id: Any) -> None:
        self.state_id = state_id
        super().__init__(f"StateMachine does not contain the state {state_id!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class GraphDefinitionError(StateMachineError):
    """Error raised when a state graph definition is invalid."""

    pass
