"""Tests for state behavior contracts and sync-to-async adapters."""

import asyncio
import inspect

import pytest

from aio_statemachine.fsm.state import (
    CallbackState,
    StateBehavior,
    SyncStateBehavior,
    as_async_behavior,
    ensure_async,
)


class AsyncDoor:
    async def on_enter(self, from_state):
        await asyncio.sleep(0)

    async def on_exit(self, to_state):
        await asyncio.sleep(0)


class SyncDoor:
    def __init__(self):
        self.calls = []

    def on_enter(self, from_state):
        self.calls.append(("enter", from_state))

    def on_exit(self, to_state):
        self.calls.append(("exit", to_state))


class TestEnsureAsync:
    """Test ensure_async() lifting."""

    def test_coroutine_function_passes_through(self):
        async def enter(from_state):
            return None

        assert ensure_async(enter) is enter

    def test_sync_function_becomes_coroutine_function(self):
        lifted = ensure_async(lambda state: None)
        assert inspect.iscoroutinefunction(lifted)

    def test_lifted_call_completes_without_suspending(self):
        """Verify the lifted coroutine finishes on its first step."""
        calls = []
        coro = ensure_async(calls.append)("menu")

        with pytest.raises(StopIteration):
            coro.send(None)

        assert calls == ["menu"]

    def test_none_is_noop(self):
        coro = ensure_async(None)("menu")
        with pytest.raises(StopIteration):
            coro.send(None)

    @pytest.mark.asyncio
    async def test_awaitable_result_is_awaited(self):
        """Verify a sync callable returning a coroutine has it awaited."""
        calls = []

        async def work(state):
            calls.append(state)

        await ensure_async(lambda state: work(state))("menu")

        assert calls == ["menu"]

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        def broken(state):
            raise ValueError(state)

        with pytest.raises(ValueError, match="menu"):
            await ensure_async(broken)("menu")


class TestCallbackState:
    """Test CallbackState."""

    @pytest.mark.asyncio
    async def test_calls_callbacks(self):
        calls = []

        async def on_exit(to_state):
            calls.append(("exit", to_state))

        state = CallbackState("menu", lambda s: calls.append(("enter", s)), on_exit)
        await state.on_enter("splash")
        await state.on_exit("game")

        assert calls == [("enter", "splash"), ("exit", "game")]

    @pytest.mark.asyncio
    async def test_missing_callbacks_are_noops(self):
        state = CallbackState("menu")
        await state.on_enter(None)
        await state.on_exit("game")

    def test_satisfies_protocol(self):
        assert isinstance(CallbackState("menu"), StateBehavior)

    def test_repr(self):
        assert repr(CallbackState("menu")) == "CallbackState(state_id='menu')"


class TestAsAsyncBehavior:
    """Test as_async_behavior() adaptation."""

    def test_async_behavior_returned_unchanged(self):
        door = AsyncDoor()
        assert as_async_behavior("door", door) is door

    @pytest.mark.asyncio
    async def test_sync_behavior_wrapped(self):
        door = SyncDoor()
        assert isinstance(door, SyncStateBehavior)

        adapted = as_async_behavior("door", door)

        assert isinstance(adapted, CallbackState)
        await adapted.on_enter("hall")
        await adapted.on_exit("room")
        assert door.calls == [("enter", "hall"), ("exit", "room")]

    def test_missing_operations_raise(self):
        class HalfDoor:
            async def on_enter(self, from_state):
                pass

        with pytest.raises(TypeError, match="on_enter and on_exit"):
            as_async_behavior("door", HalfDoor())
