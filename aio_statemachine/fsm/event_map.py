"""Two-level lookup from (source state, event) to destination state."""

from __future__ import annotations

from typing import Dict, Generic, Hashable, Optional, Tuple, TypeVar

S = TypeVar("S", bound=Hashable)
E = TypeVar("E", bound=Hashable)


class EventTransitionMap(Generic[S, E]):
    """Event-triggered transition table.

    Entries are keyed by source state, then by event. Registering the same
    (source, event) pair twice overwrites the destination; the last
    registration wins. Endpoint validation is the caller's concern.

    Example:
        >>> table = EventTransitionMap()
        >>> table.register("idle", "start", "running")
        >>> table.lookup("idle", "start")
        'running'
        >>> table.lookup("running", "start") is None
        True
    """

    def __init__(self) -> None:
        self._transitions: Dict[S, Dict[E, S]] = {}

    def register(self, from_state: S, on_event: E, to_state: S) -> None:
        """Insert or overwrite the destination for (from_state, on_event)."""
        self._transitions.setdefault(from_state, {})[on_event] = to_state

    def try_get_destination(self, from_state: S, on_event: E) -> Tuple[bool, Optional[S]]:
        """Look up a destination, distinguishing a miss from a falsy destination.

        Returns:
            (True, destination) when an entry exists, (False, None) otherwise.
        """
        events = self._transitions.get(from_state)
        if events is None or on_event not in events:
            return False, None
        return True, events[on_event]

    def lookup(self, from_state: S, on_event: E) -> Optional[S]:
        """Return the destination for (from_state, on_event), or None on a miss."""
        _, destination = self.try_get_destination(from_state, on_event)
        return destination

    def events_from(self, from_state: S) -> Dict[E, S]:
        """Return a copy of the outgoing event table for a source state."""
        return dict(self._transitions.get(from_state, {}))

    def remove_transitions_from(self, from_state: S) -> None:
        """Drop every entry whose source is from_state.

        Entries that only name from_state as a destination are kept.
        """
        self._transitions.pop(from_state, None)

    def clear(self) -> None:
        self._transitions.clear()

    def __len__(self) -> int:
        return sum(len(events) for events in self._transitions.values())

    def __iter__(self):
        for from_state, events in self._transitions.items():
            for on_event, to_state in events.items():
                yield from_state, on_event, to_state
