"""Transition record for async state machine orchestration.

This module provides Transition class describing a single move from one
state identifier to another, together with its current phase.
"""

from typing import Any, Generic, TypeVar

import pydantic as pd

from aio_statemachine.fsm.phase import TransitionPhase

S = TypeVar("S")


class Transition(pd.BaseModel, Generic[S]):
    """An in-progress move between two states.

    The endpoints are fixed for the lifetime of the record; only ``phase``
    changes as the orchestrator drives the exit and enter behaviors. A new
    record is created for every accepted transition and is never reused.

    Attributes:
        from_state: State being left (the machine's state when the move began)
        to_state: State being entered
        phase: Current step of the exit/enter sequence

    Phase Flow:
        not_started → exiting_from → exited_from → entering_to → entered_to
        not_started → entering_to → entered_to (first transition, no exit)
    """

    from_state: Any = pd.Field(frozen=True)
    to_state: Any = pd.Field(frozen=True)
    phase: TransitionPhase = TransitionPhase.NOT_STARTED

    model_config = pd.ConfigDict(
        arbitrary_types_allowed=True, validate_assignment=True, extra="forbid"
    )

    def snapshot(self) -> "Transition[S]":
        """Return an independent copy of this record.

        Notifications deliver snapshots so later phase writes on the live
        record are not visible to subscribers holding earlier payloads.
        """
        return self.model_copy()

    def __repr__(self) -> str:
        return (
            f"Transition(from_state={self.from_state!r}, to_state={self.to_state!r}, "
            f"phase={self.phase.value!r})"
        )
