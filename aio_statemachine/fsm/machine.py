"""AsyncStateMachine: orchestrator for states with asynchronous enter/exit.

This module provides AsyncStateMachine, which owns the state registry, the
event transition map and the single active transition, and drives each
transition through its exit/enter phases while notifying subscribers.
"""

from __future__ import annotations

import logging
from typing import Generic, Hashable, Optional, TypeVar

from aio_statemachine.config import MachineSettings
from aio_statemachine.diagnostics import DebugMode, DiagnosticSink
from aio_statemachine.events import Channel
from aio_statemachine.fsm.errors import UnknownStateError
from aio_statemachine.fsm.event_map import EventTransitionMap
from aio_statemachine.fsm.phase import TransitionPhase
from aio_statemachine.fsm.registry import StateRegistry
from aio_statemachine.fsm.state import (
    CallbackState,
    EnterCallback,
    ExitCallback,
    StateBehavior,
    as_async_behavior,
)
from aio_statemachine.fsm.transition import Transition

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)
E = TypeVar("E", bound=Hashable)


class AsyncStateMachine(Generic[S, E]):
    """Finite state machine whose enter/exit behaviors are coroutines.

    At most one transition is in flight at a time. While a transition is
    active, further calls to transition_to_state() and process_event() are
    rejected with a diagnostic instead of being queued. The only suspension
    points are the awaited exit and enter behaviors; code running during
    those awaits (timers, other tasks, event handlers) always observes the
    active transition.

    Concurrency model:
        - Designed for a single asyncio event loop; no thread safety
        - The active-transition check guards against logical re-entrancy,
          not against parallel access from several threads
        - No queueing and no cancellation API: a rejected request is dropped

    Lifecycle channels (payload is a Transition snapshot):
        - on_state_exiting: phase set to EXITING_FROM, before on_exit
        - on_state_exited: phase set to EXITED_FROM, after on_exit
        - on_state_entering: phase set to ENTERING_TO, before on_enter
        - on_state_entered: phase set to ENTERED_TO, transition cleared

    Attributes:
        current_state: State the machine is in (or moving into).
        current_transition: Active transition, or None when idle.
        has_started: Whether a first transition has completed.
        debug_mode: Where soft-rejection diagnostics are delivered.

    Example:
        >>> machine = AsyncStateMachine()
        >>> machine.add_state_with_callbacks("idle", on_enter=print)
        >>> machine.add_state_with_callbacks("busy", on_enter=print)
        >>> machine.register_transition("idle", "start", "busy")
        >>> await machine.transition_to_state("idle")
        >>> await machine.process_event("start")
        True
        >>> machine.current_state
        'busy'
    """

    def __init__(
        self,
        initial_state: Optional[S] = None,
        settings: Optional[MachineSettings] = None,
        diagnostics: Optional[DiagnosticSink] = None,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: Value of current_state before the first transition
                (default: None). It does not need to be a registered state.
            settings: Optional MachineSettings. Defaults to MachineSettings().
            diagnostics: Optional sink for soft-rejection messages. When
                omitted one is built from settings.
        """
        self._settings = settings if settings is not None else MachineSettings()
        self._initial_state = initial_state
        self._current_state: Optional[S] = initial_state
        self._current_transition: Optional[Transition[S]] = None
        self._started = False

        self._states: StateRegistry[S] = StateRegistry()
        self._event_transitions: EventTransitionMap[S, E] = EventTransitionMap()

        self.on_state_exiting: Channel[Transition[S]] = Channel("state_exiting")
        self.on_state_exited: Channel[Transition[S]] = Channel("state_exited")
        self.on_state_entering: Channel[Transition[S]] = Channel("state_entering")
        self.on_state_entered: Channel[Transition[S]] = Channel("state_entered")

        if diagnostics is None:
            diagnostics = DiagnosticSink(
                mode=self._settings.debug_mode,
                level=self._settings.log_level_value,
            )
        self._diagnostics = diagnostics
        self.on_debug_message: Channel[str] = diagnostics.channel

    @property
    def current_state(self) -> Optional[S]:
        """Get the current state (read-only)."""
        return self._current_state

    @property
    def current_transition(self) -> Optional[Transition[S]]:
        """Get the active transition, or None when idle (read-only)."""
        return self._current_transition

    @property
    def has_started(self) -> bool:
        """Whether the first transition has completed (read-only)."""
        return self._started

    @property
    def states(self) -> StateRegistry[S]:
        """Get the state registry (read-only)."""
        return self._states

    @property
    def event_transitions(self) -> EventTransitionMap[S, E]:
        """Get the event transition map (read-only)."""
        return self._event_transitions

    @property
    def settings(self) -> MachineSettings:
        return self._settings

    @property
    def diagnostics(self) -> DiagnosticSink:
        return self._diagnostics

    @property
    def debug_mode(self) -> DebugMode:
        """Get the diagnostic delivery mode."""
        return self._diagnostics.mode

    @debug_mode.setter
    def debug_mode(self, mode: DebugMode) -> None:
        self._diagnostics.mode = DebugMode(mode)

    def is_in_transition(self) -> bool:
        """Return True while a transition is in flight."""
        return self._current_transition is not None

    async def transition_to_state(self, state: S) -> None:
        """Move to a state, awaiting the exit and enter behaviors.

        The call is rejected (diagnostic emitted, nothing changes) when a
        transition is already active, or when the machine has started and
        ``state`` is the current state. The very first transition skips the
        exit half because no state has been entered yet.

        Args:
            state: Destination state identifier.

        Raises:
            UnknownStateError: If the destination, or the source of a
                non-first transition, is not registered.

        Example:
            >>> await machine.transition_to_state("menu")
            >>> machine.current_state_is("menu")
            True
        """
        if self._current_transition is not None:
            self._debug_log(
                f"Warning: Statemachine already transitioning from "
                f"{self._current_transition.from_state!r} to {self._current_transition.to_state!r}"
            )
            return

        if self._started and state == self._current_state:
            self._debug_log(f"Warning: Statemachine is already in state {state!r}")
            return

        from_state = self._current_state
        exit_behavior = self._states.get(from_state) if self._started else None
        enter_behavior = self._states.get(state)

        transition: Transition[S] = Transition(from_state=from_state, to_state=state)
        self._current_transition = transition
        logger.debug(f"Transition started: {from_state!r} -> {state!r}")

        try:
            if exit_behavior is not None:
                self._advance(transition, TransitionPhase.EXITING_FROM, self.on_state_exiting)
                await exit_behavior.on_exit(state)
                self._advance(transition, TransitionPhase.EXITED_FROM, self.on_state_exited)

            self._current_state = state
            self._advance(transition, TransitionPhase.ENTERING_TO, self.on_state_entering)
            await enter_behavior.on_enter(from_state)
            transition.phase = TransitionPhase.ENTERED_TO
        except BaseException:
            logger.debug(
                f"Transition {from_state!r} -> {state!r} aborted during {transition.phase.value}"
            )
            self._current_transition = None
            raise

        self._current_transition = None
        logger.debug(f"Transition finished: {from_state!r} -> {state!r}")
        try:
            self.on_state_entered.emit(transition.snapshot())
        finally:
            # on_enter has completed, so the machine is in the destination
            self._started = True

    def _advance(
        self,
        transition: Transition[S],
        phase: TransitionPhase,
        channel: Channel[Transition[S]],
    ) -> None:
        """Write the next phase and notify its channel."""
        transition.phase = phase
        channel.emit(transition.snapshot())

    async def process_event(self, event: E) -> bool:
        """Trigger the transition registered for event from the current state.

        Args:
            event: Event identifier.

        Returns:
            True if a destination was registered for (current_state, event)
            and the transition ran; False if the machine is busy, has not
            started, or has no entry for the event.

        Raises:
            UnknownStateError: If the destination was removed after the
                transition was registered.
        """
        if self._current_transition is not None:
            self._debug_log("Warning: Cannot process event during transition")
            return False

        if not self._started:
            self._debug_log("Warning: Cannot process event before initial state is set")
            return False

        found, next_state = self._event_transitions.try_get_destination(
            self._current_state, event
        )
        if not found:
            logger.debug(f"No transition for event {event!r} from {self._current_state!r}")
            return False

        await self.transition_to_state(next_state)
        return True

    def current_state_is(self, state: S, include_transition: bool = False) -> bool:
        """Check whether the machine is in a state.

        When idle, compares against current_state. While a transition is
        active the answer is False unless include_transition is set, in
        which case the source matches during EXITING_FROM and the
        destination matches during ENTERING_TO. The EXITED_FROM and
        ENTERED_TO phases match neither endpoint.

        Args:
            state: State identifier to compare.
            include_transition: Consider the endpoints of an active transition.

        Returns:
            True if the machine is considered to be in ``state``.
        """
        transition = self._current_transition
        if transition is None:
            return state == self._current_state
        if include_transition:
            if transition.phase == TransitionPhase.EXITING_FROM:
                return state == transition.from_state
            if transition.phase == TransitionPhase.ENTERING_TO:
                return state == transition.to_state
        return False

    def add_state(self, state_id: S, behavior: object) -> StateBehavior:
        """Register a state behavior.

        Accepts any object exposing ``on_enter(from_state)`` and
        ``on_exit(to_state)``, whether those are coroutine functions or
        plain functions. Synchronous behaviors are adapted to the async
        contract.

        Args:
            state_id: Identifier of the state.
            behavior: StateBehavior or SyncStateBehavior implementation.

        Returns:
            The registered StateBehavior (the adapter for sync behaviors).

        Raises:
            DuplicateStateError: If state_id is already registered.
            TypeError: If behavior lacks on_enter or on_exit.
        """
        return self._states.add(state_id, as_async_behavior(state_id, behavior))

    def add_state_with_callbacks(
        self,
        state_id: S,
        on_enter: Optional[EnterCallback] = None,
        on_exit: Optional[ExitCallback] = None,
    ) -> CallbackState[S]:
        """Register a state from enter/exit callbacks.

        Each callback may be synchronous or a coroutine function; omitted
        callbacks are no-ops.

        Returns:
            The CallbackState that was registered.

        Raises:
            DuplicateStateError: If state_id is already registered.
        """
        state = CallbackState(state_id, on_enter, on_exit)
        self._states.add(state_id, state)
        return state

    def remove_state(self, state_id: S) -> None:
        """Unregister a state and every event transition leaving it.

        Event transitions that only target the state are kept.

        Raises:
            UnknownStateError: If state_id is not registered.
        """
        self._states.remove(state_id)
        self._event_transitions.remove_transitions_from(state_id)

    def remove_all_states(self) -> None:
        """Unregister every state and clear the event transition map."""
        self._states.clear()
        self._event_transitions.clear()

    def register_transition(self, from_state: S, on_event: E, to_state: S) -> None:
        """Register the destination reached from from_state on on_event.

        A later registration for the same (from_state, on_event) overwrites
        the earlier one.

        Raises:
            UnknownStateError: If from_state or to_state is not registered.
        """
        if from_state not in self._states:
            raise UnknownStateError(from_state)
        if to_state not in self._states:
            raise UnknownStateError(to_state)

        self._event_transitions.register(from_state, on_event, to_state)

    def reset(self) -> bool:
        """Return to the never-started state, keeping the registered graph.

        Returns:
            True if the machine was reset, False if a transition is active.
        """
        if self._current_transition is not None:
            self._debug_log("Warning: Cannot reset during transition")
            return False

        self._current_state = self._initial_state
        self._started = False
        logger.debug("State machine reset")
        return True

    def _debug_log(self, message: str) -> None:
        self._diagnostics.emit(message)

    def __repr__(self) -> str:
        """String representation showing current state."""
        transition = self._current_transition
        return (
            f"AsyncStateMachine(current_state={self._current_state!r}, "
            f"in_transition={transition is not None}, "
            f"states_count={len(self._states)})"
        )
