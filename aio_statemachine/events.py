"""Synchronous observer channels for state machine lifecycle notifications."""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], None]


class Channel(Generic[T]):
    """Ordered list of subscribers for one notification kind.

    ``emit`` calls every subscriber synchronously, in registration order,
    before returning. Exceptions raised by a subscriber propagate to the
    emitter and stop delivery to later subscribers.

    Example:
        >>> channel = Channel("entered")
        >>> @channel.subscribe
        ... def on_entered(transition):
        ...     print(transition.to_state)
        >>> channel.unsubscribe(on_entered)
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Subscriber:
        """Add a subscriber. Subscribing the same callback twice is a no-op.

        Returns:
            The callback, so this method works as a decorator.
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Subscriber) -> None:
        """Remove a subscriber. Unknown callbacks are ignored."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, payload: T) -> None:
        """Deliver payload to every subscriber in registration order."""
        # Copy so subscribers may unsubscribe themselves during delivery
        for callback in list(self._subscribers):
            callback(payload)

    def clear(self) -> None:
        self._subscribers.clear()

    @property
    def subscribers(self) -> List[Subscriber]:
        """Get a copy of the subscriber list (read-only)."""
        return list(self._subscribers)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Channel(name={self.name!r}, subscribers={len(self._subscribers)})"
