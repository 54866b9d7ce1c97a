"""State behavior contracts and sync-to-async adapters.

A registered state exposes two asynchronous operations, ``on_enter`` and
``on_exit``. Behaviors written as plain synchronous functions are lifted
into the same contract by wrapping each call in a coroutine that completes
without suspending, so the orchestrator only ever deals with one shape.
"""

from __future__ import annotations

import functools
import inspect
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    Optional,
    Protocol,
    TypeVar,
    Union,
    runtime_checkable,
)

S = TypeVar("S")

AsyncEnterCallback = Callable[[Any], Awaitable[None]]
AsyncExitCallback = Callable[[Any], Awaitable[None]]
SyncEnterCallback = Callable[[Any], None]
SyncExitCallback = Callable[[Any], None]
EnterCallback = Union[AsyncEnterCallback, SyncEnterCallback]
ExitCallback = Union[AsyncExitCallback, SyncExitCallback]


@runtime_checkable
class StateBehavior(Protocol[S]):
    """Asynchronous enter/exit contract for a registered state."""

    async def on_enter(self, from_state: S) -> None:
        """Run when the state is entered from ``from_state``."""
        ...

    async def on_exit(self, to_state: S) -> None:
        """Run when the state is left for ``to_state``."""
        ...


@runtime_checkable
class SyncStateBehavior(Protocol[S]):
    """Synchronous variant of StateBehavior."""

    def on_enter(self, from_state: S) -> None:
        ...

    def on_exit(self, to_state: S) -> None:
        ...


def ensure_async(callback: Optional[Callable[[Any], Any]]) -> AsyncEnterCallback:
    """Lift a callback into a coroutine function.

    Coroutine functions are returned unchanged. Synchronous callables are
    wrapped so that awaiting the result runs the callable and completes
    immediately. If a synchronous callable happens to return an awaitable
    (for example a lambda returning a coroutine) that awaitable is awaited.
    ``None`` becomes a no-op.

    Args:
        callback: Sync or async callable taking one state identifier, or None.

    Returns:
        A coroutine function with the same single-argument signature.
    """
    if callback is None:

        async def _noop(_state: Any) -> None:
            return None

        return _noop

    if inspect.iscoroutinefunction(callback):
        return callback

    @functools.wraps(callback)
    async def _lifted(state: Any) -> None:
        result = callback(state)
        if inspect.isawaitable(result):
            await result

    return _lifted


class CallbackState(Generic[S]):
    """State behavior assembled from an enter callback and an exit callback.

    Either callback may be synchronous or asynchronous; both are normalized
    with ensure_async() at construction time.

    Attributes:
        state_id: Identifier the behavior is registered under.

    Example:
        >>> async def fade_in(from_state):
        ...     await asyncio.sleep(0.2)
        >>> state = CallbackState("menu", fade_in, lambda to_state: None)
    """

    def __init__(
        self,
        state_id: S,
        on_enter: Optional[EnterCallback] = None,
        on_exit: Optional[ExitCallback] = None,
    ) -> None:
        self.state_id = state_id
        self._on_enter = ensure_async(on_enter)
        self._on_exit = ensure_async(on_exit)

    async def on_enter(self, from_state: S) -> None:
        await self._on_enter(from_state)

    async def on_exit(self, to_state: S) -> None:
        await self._on_exit(to_state)

    def __repr__(self) -> str:
        return f"CallbackState(state_id={self.state_id!r})"


def as_async_behavior(state_id: Any, behavior: Any) -> StateBehavior:
    """Adapt a behavior object of either shape to StateBehavior.

    Objects whose ``on_enter`` and ``on_exit`` are both coroutine functions
    are returned as-is. Anything else exposing the two operations (sync or a
    mix) is wrapped in a CallbackState bound to the object's methods.

    Args:
        state_id: Identifier the behavior will be registered under.
        behavior: Object exposing ``on_enter`` and ``on_exit``.

    Returns:
        An object satisfying the StateBehavior contract.

    Raises:
        TypeError: If the object does not expose both operations.
    """
    on_enter = getattr(behavior, "on_enter", None)
    on_exit = getattr(behavior, "on_exit", None)
    if not callable(on_enter) or not callable(on_exit):
        raise TypeError(
            f"State behavior for {state_id!r} must define on_enter and on_exit, "
            f"got {type(behavior).__name__}"
        )

    if inspect.iscoroutinefunction(on_enter) and inspect.iscoroutinefunction(on_exit):
        return behavior

    return CallbackState(state_id, on_enter, on_exit)
