"""
core/dispatcher.py - Actuation Dispatcher
==========================================
Routes resolved actions to the actuator.

    READY   Ignore      → report reason, no write
    READY   Actionable  → actuator.set(state), report applied state
    HALTED  anything    → drop, report "dispatcher halted"

READY → HALTED happens only through halt(), called by the lifecycle
manager at the start of shutdown.  The state check and the actuator write
run under one lock that halt() also takes, so once halt() has returned
nothing can reach the actuator any more.
"""

import threading

from alarm_light.core.actuator import Actuator
from alarm_light.core.command import Actionable, Ignore, ResolvedAction
from alarm_light.core.diagnostics import Reporter, guarded, report as _default_report
from alarm_light.core.state import DispatcherState, LogicalState

HALTED_REASON = "dispatcher halted"


class ActuationDispatcher:
    def __init__(self, actuator: Actuator, report: Reporter = _default_report) -> None:
        self._actuator = actuator
        self._report   = guarded(report)
        self._lock     = threading.Lock()
        self._state    = DispatcherState.READY

    @property
    def state(self) -> DispatcherState:
        return self._state

    def halt(self) -> None:
        with self._lock:
            if self._state is DispatcherState.HALTED:
                return
            self._state = DispatcherState.HALTED
        self._report("Dispatcher halted", icon="🛑")

    def dispatch(self, action: ResolvedAction) -> bool:
        """Apply `action`.  Returns True only when the actuator was written."""
        written, notes = False, []
        with self._lock:
            if self._state is DispatcherState.HALTED:
                message, icon = f"Dropped {action!r}: {HALTED_REASON}", "🛑"
            elif isinstance(action, Ignore):
                message, icon = f"Ignored: {action.reason}", "❓"
            elif not isinstance(action, Actionable):
                message, icon = f"Ignored: unexpected action {action!r}", "❓"
            else:
                notes = self._actuator.apply(action.state)
                written = True
                message = f"{action.target} {action.device.value} {action.state.value}"
                icon = "🚨" if action.state is LogicalState.ON else "🌑"

        # sink runs outside the lock; halt() never waits on it
        for note in notes:
            self._report(note, icon="💡")
        self._report(message, icon=icon)
        return written
