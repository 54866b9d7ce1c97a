"""Transition phase enumeration for async state transitions.

This module provides TransitionPhase enum for tracking how far a single
in-flight transition has progressed through its exit/enter sequence.
"""

from enum import Enum


class TransitionPhase(Enum):
    """Phases of a single state transition.

    Phases advance strictly in declaration order:
    - NOT_STARTED: Transition record created, no behavior invoked yet
    - EXITING_FROM: Awaiting the source state's exit behavior
    - EXITED_FROM: Source state exit completed
    - ENTERING_TO: Awaiting the destination state's enter behavior
    - ENTERED_TO: Destination state enter completed
    - FINISHED: Reserved; never assigned by the transition flow

    Enum values are lowercase strings so phases serialize cleanly in logs.
    """

    NOT_STARTED = "not_started"
    EXITING_FROM = "exiting_from"
    EXITED_FROM = "exited_from"
    ENTERING_TO = "entering_to"
    ENTERED_TO = "entered_to"
    FINISHED = "finished"
