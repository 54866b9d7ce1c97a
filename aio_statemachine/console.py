"""Colored console rendering of state machine lifecycle notifications."""

from __future__ import annotations

import logging
from typing import Any, Optional

from rich.console import Console
from rich.text import Text

from aio_statemachine.fsm.machine import AsyncStateMachine
from aio_statemachine.fsm.phase import TransitionPhase
from aio_statemachine.fsm.transition import Transition


class TransitionConsoleLogger:
    """Print each transition phase of a machine with phase-specific colors.

    With color disabled the same lines go to the ``aio_statemachine.console``
    logger at INFO level instead of the rich console.
    """

    PHASE_COLORS: dict[str, str] = {
        TransitionPhase.EXITING_FROM.value: "bold yellow",
        TransitionPhase.EXITED_FROM.value: "yellow",
        TransitionPhase.ENTERING_TO.value: "bold cyan",
        TransitionPhase.ENTERED_TO.value: "bold green",
        "DEBUG": "bold magenta",
    }

    def __init__(self, enable_color: bool = True, console: Optional[Console] = None) -> None:
        self._enable_color = enable_color
        self._console = console or Console(force_terminal=enable_color)
        self._logger = logging.getLogger("aio_statemachine.console")
        self._machine: Optional[AsyncStateMachine[Any, Any]] = None

    def attach(self, machine: AsyncStateMachine[Any, Any]) -> None:
        """Subscribe to every lifecycle channel of a machine."""
        machine.on_state_exiting.subscribe(self.log_transition)
        machine.on_state_exited.subscribe(self.log_transition)
        machine.on_state_entering.subscribe(self.log_transition)
        machine.on_state_entered.subscribe(self.log_transition)
        machine.on_debug_message.subscribe(self.log_debug_message)
        self._machine = machine

    def detach(self) -> None:
        """Unsubscribe from the attached machine, if any."""
        machine = self._machine
        if machine is None:
            return
        machine.on_state_exiting.unsubscribe(self.log_transition)
        machine.on_state_exited.unsubscribe(self.log_transition)
        machine.on_state_entering.unsubscribe(self.log_transition)
        machine.on_state_entered.unsubscribe(self.log_transition)
        machine.on_debug_message.unsubscribe(self.log_debug_message)
        self._machine = None

    def log_transition(self, transition: Transition[Any]) -> None:
        phase = transition.phase.value
        if self._enable_color:
            color = self.PHASE_COLORS.get(phase, "white")
            label = Text(f"[{phase.upper()}] ", style=color)
            from_text = Text(str(transition.from_state), style="dim")
            arrow = Text(" → ", style="bold dim")
            to_text = Text(str(transition.to_state), style="bold")
            self._console.print(label + from_text + arrow + to_text)
        else:
            self._logger.info(
                "[%s] %s → %s", phase.upper(), transition.from_state, transition.to_state
            )

    def log_debug_message(self, message: str) -> None:
        if self._enable_color:
            self._console.print(Text("[DEBUG] ", style=self.PHASE_COLORS["DEBUG"]) + Text(message))
        else:
            self._logger.info("[DEBUG] %s", message)
