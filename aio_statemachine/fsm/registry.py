"""Registry mapping state identifiers to their behaviors."""

from __future__ import annotations

import logging
from typing import Dict, Generic, Hashable, Iterator, TypeVar

from aio_statemachine.fsm.errors import DuplicateStateError, UnknownStateError
from aio_statemachine.fsm.state import StateBehavior

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)


class StateRegistry(Generic[S]):
    """One-to-one mapping from state identifier to StateBehavior.

    Replacing the behavior of an existing identifier is not supported;
    remove the state first.
    """

    def __init__(self) -> None:
        self._states: Dict[S, StateBehavior] = {}

    def add(self, state_id: S, behavior: StateBehavior) -> StateBehavior:
        """Register a behavior for a state identifier.

        Args:
            state_id: Identifier of the state.
            behavior: Behavior implementing the async enter/exit contract.

        Returns:
            The registered behavior.

        Raises:
            DuplicateStateError: If state_id is already registered.
        """
        if state_id in self._states:
            raise DuplicateStateError(state_id)
        self._states[state_id] = behavior
        logger.debug(f"Registered state {state_id!r}")
        return behavior

    def remove(self, state_id: S) -> StateBehavior:
        """Unregister a state and return its behavior.

        Raises:
            UnknownStateError: If state_id is not registered.
        """
        if state_id not in self._states:
            raise UnknownStateError(state_id)
        behavior = self._states.pop(state_id)
        logger.debug(f"Removed state {state_id!r}")
        return behavior

    def get(self, state_id: S) -> StateBehavior:
        """Look up the behavior for a state identifier.

        Raises:
            UnknownStateError: If state_id is not registered.
        """
        try:
            return self._states[state_id]
        except KeyError:
            raise UnknownStateError(state_id) from None

    def clear(self) -> None:
        self._states.clear()

    def __contains__(self, state_id: object) -> bool:
        return state_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[S]:
        return iter(self._states)

    def __repr__(self) -> str:
        return f"StateRegistry(states={list(self._states)!r})"
