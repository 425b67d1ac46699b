"""
core/actuator.py - Alarm Light Relay Actuator
==============================================
Sole owner of the relay output pin.

Wiring note
-----------
The relay board is LOW-switching: pulling the pin LOW energises the coil
and turns the light ON; HIGH turns it OFF.  Callers only ever speak in
LogicalState; the translation happens here via LOGICAL_TO_LEVEL.

Contract
--------
    configure()  output mode at logical OFF (pin HIGH) before any command;
                 the pin is never an output at LOW in between
    set(state)   write the level for `state`; safe to repeat the same state
    apply(state) same as set(), but hands the diagnostics back to the caller
    release()    close the pin; second call is a no-op

Using set() after release() is an ordering bug in the caller and raises
ActuatorReleasedError instead of being silently ignored.
"""

import threading

from alarm_light.core.diagnostics import Reporter, guarded, report as _default_report
from alarm_light.core.state import LOGICAL_TO_LEVEL, LogicalState, PinLevel


class ActuatorReleasedError(RuntimeError):
    """Actuator.set() was called after the pin was released."""


class Actuator:
    def __init__(self, pin, report: Reporter = _default_report) -> None:
        self._pin        = pin
        self._report     = guarded(report)
        self._lock       = threading.Lock()
        self._configured = False
        self._released   = False
        self._state: LogicalState | None = None

    # ── Read-only view ─────────────────────────────────────────────────────────

    @property
    def pin_number(self) -> int:
        return self._pin.number

    @property
    def state(self) -> LogicalState | None:
        return self._state

    @property
    def level(self) -> PinLevel | None:
        return None if self._state is None else LOGICAL_TO_LEVEL[self._state]

    @property
    def released(self) -> bool:
        return self._released

    # ── Contract ───────────────────────────────────────────────────────────────

    def configure(self) -> None:
        with self._lock:
            self._ensure_live()
            notes = self._configure_locked()
        self._flush(notes)

    def set(self, state: LogicalState) -> None:
        self._flush(self.apply(state))

    def apply(self, state: LogicalState) -> list[str]:
        """set() without reporting; returns the diagnostics for the caller to emit."""
        with self._lock:
            self._ensure_live()
            notes = [] if self._configured else self._configure_locked()
            notes.append(self._write_locked(state))
            return notes

    def release(self) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
            self._pin.close()
        self._report(f"GPIO {self.pin_number} released", icon="🔌")

    # ── Internals ──────────────────────────────────────────────────────────────

    def _ensure_live(self) -> None:
        if self._released:
            raise ActuatorReleasedError(
                f"GPIO {self._pin.number} was released; cannot actuate"
            )

    def _configure_locked(self) -> list[str]:
        # output mode and OFF level in one step: no LOW blip on the relay
        self._pin.set_output(LOGICAL_TO_LEVEL[LogicalState.OFF])
        self._configured = True
        self._state = LogicalState.OFF
        return [f"GPIO {self._pin.number} configured as output, light OFF (pin HIGH)"]

    def _write_locked(self, state: LogicalState) -> str:
        level = LOGICAL_TO_LEVEL[state]
        self._pin.write(level)
        self._state = state
        return f"GPIO {self._pin.number} ← {level.name} (light {state.value})"

    def _flush(self, notes: list[str]) -> None:
        for note in notes:
            self._report(note, icon="💡")
