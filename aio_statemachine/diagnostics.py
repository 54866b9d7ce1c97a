"""Diagnostic routing for soft rejections.

Rejected transitions and events are routine control flow, not errors. The
machine reports them through a DiagnosticSink whose DebugMode decides where
the message goes: nowhere, the standard logging hierarchy, or the machine's
``on_debug_message`` channel.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from aio_statemachine.events import Channel

logger = logging.getLogger("aio_statemachine.diagnostics")


class DebugMode(str, Enum):
    """Where diagnostic messages are delivered."""

    NONE = "none"
    LOG = "log"
    EVENT = "event"


class DiagnosticSink:
    """Route diagnostic messages according to a DebugMode.

    Attributes:
        mode: Current delivery mode; may be changed at any time.
        channel: Channel receiving messages in EVENT mode.
        level: Logging level used in LOG mode.
    """

    def __init__(
        self,
        mode: DebugMode = DebugMode.LOG,
        channel: Optional[Channel[str]] = None,
        level: int = logging.WARNING,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self.mode = DebugMode(mode)
        self.channel: Channel[str] = channel if channel is not None else Channel("debug_message")
        self.level = level
        self._logger = logger_ or logger

    def emit(self, message: str) -> None:
        """Deliver a diagnostic message.

        Args:
            message: Human-readable description of the rejection.
        """
        if self.mode == DebugMode.LOG:
            self._logger.log(self.level, message)
        elif self.mode == DebugMode.EVENT:
            self.channel.emit(message)

    def __repr__(self) -> str:
        return f"DiagnosticSink(mode={self.mode.value!r}, level={logging.getLevelName(self.level)})"
