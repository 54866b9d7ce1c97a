"""Tests for lifecycle Channels and the DiagnosticSink."""

import logging

import pytest

from aio_statemachine.diagnostics import DebugMode, DiagnosticSink
from aio_statemachine.events import Channel


class TestChannel:
    """Test subscriber management and delivery order."""

    def test_emit_in_registration_order(self):
        channel = Channel("entered")
        seen = []
        channel.subscribe(lambda p: seen.append(("first", p)))
        channel.subscribe(lambda p: seen.append(("second", p)))

        channel.emit("x")

        assert seen == [("first", "x"), ("second", "x")]

    def test_subscribe_works_as_decorator(self):
        channel = Channel("entered")
        seen = []

        @channel.subscribe
        def handler(payload):
            seen.append(payload)

        channel.emit(1)
        assert seen == [1]
        assert handler in channel.subscribers

    def test_duplicate_subscription_ignored(self):
        channel = Channel("entered")
        seen = []
        channel.subscribe(seen.append)
        channel.subscribe(seen.append)

        channel.emit(1)

        assert seen == [1]
        assert len(channel) == 1

    def test_unsubscribe(self):
        channel = Channel("entered")
        seen = []
        channel.subscribe(seen.append)
        channel.unsubscribe(seen.append)
        channel.unsubscribe(print)

        channel.emit(1)

        assert seen == []

    def test_subscriber_may_unsubscribe_during_emit(self):
        channel = Channel("entered")
        seen = []

        def once(payload):
            seen.append(("once", payload))
            channel.unsubscribe(once)

        channel.subscribe(once)
        channel.subscribe(lambda p: seen.append(("always", p)))

        channel.emit(1)
        channel.emit(2)

        assert seen == [("once", 1), ("always", 1), ("always", 2)]

    def test_subscriber_exception_propagates(self):
        channel = Channel("entered")
        seen = []

        def broken(payload):
            raise RuntimeError("boom")

        channel.subscribe(broken)
        channel.subscribe(seen.append)

        with pytest.raises(RuntimeError, match="boom"):
            channel.emit(1)
        assert seen == []

    def test_clear_and_repr(self):
        channel = Channel("entered")
        channel.subscribe(print)
        assert repr(channel) == "Channel(name='entered', subscribers=1)"
        channel.clear()
        assert len(channel) == 0


class TestDiagnosticSink:
    """Test routing of diagnostic messages by DebugMode."""

    def test_debug_mode_values(self):
        assert {mode.value for mode in DebugMode} == {"none", "log", "event"}

    def test_log_mode(self, caplog):
        caplog.set_level(logging.WARNING, logger="aio_statemachine.diagnostics")
        sink = DiagnosticSink(DebugMode.LOG)
        received = []
        sink.channel.subscribe(received.append)

        sink.emit("busy")

        assert received == []
        assert [r.getMessage() for r in caplog.records] == ["busy"]
        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.records[0].name == "aio_statemachine.diagnostics"

    def test_log_mode_custom_level(self, caplog):
        caplog.set_level(logging.DEBUG, logger="aio_statemachine.diagnostics")
        DiagnosticSink(DebugMode.LOG, level=logging.INFO).emit("busy")
        assert caplog.records[0].levelno == logging.INFO

    def test_event_mode(self, caplog):
        caplog.set_level(logging.DEBUG, logger="aio_statemachine.diagnostics")
        channel = Channel("debug_message")
        received = []
        channel.subscribe(received.append)

        DiagnosticSink("event", channel=channel).emit("busy")

        assert received == ["busy"]
        assert caplog.records == []

    def test_none_mode(self, caplog):
        caplog.set_level(logging.DEBUG, logger="aio_statemachine.diagnostics")
        sink = DiagnosticSink(DebugMode.NONE)
        received = []
        sink.channel.subscribe(received.append)

        sink.emit("busy")

        assert received == []
        assert caplog.records == []

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValueError):
            DiagnosticSink("loud")

    def test_injected_sink_is_used_by_machine(self):
        from aio_statemachine.fsm.machine import AsyncStateMachine

        sink = DiagnosticSink(DebugMode.EVENT)
        machine = AsyncStateMachine(diagnostics=sink)

        assert machine.diagnostics is sink
        assert machine.on_debug_message is sink.channel
        machine.debug_mode = DebugMode.NONE
        assert sink.mode == DebugMode.NONE
